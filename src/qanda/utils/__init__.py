"""
Module: utils
Description: Package initialization for utility functions.

This package contains shared utility functions and helpers used
throughout the Q&A API application.

Current utilities:
- logger: Structured logging configuration and helpers
- batch_helpers: Chunking for DynamoDB batch requests
"""

__all__ = []
