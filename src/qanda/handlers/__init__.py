"""
Module: handlers
Description: Package initialization for API endpoint handlers.

This package contains FastAPI route handlers for the Q&A API:
- events: Event creation, listing, asking and moderation endpoints
- questions: Question retrieval and voting endpoints
- errors: Storage failure to HTTP status mapping

All handlers receive the storage backend through dependency injection.
"""

__all__ = []
