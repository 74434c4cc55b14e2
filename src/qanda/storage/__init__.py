"""
Module: storage
Description: Package initialization for data persistence layer.

This package contains the storage interface and its backends:
- base: QuestionStore interface shared by all backends
- dynamodb: DynamoDB backend for deployed environments
- local: In-process backend for development and tests
- errors: Failure kinds raised by every backend
- factory: Backend selection from settings

All storage implementations follow async interfaces for consistency.
"""

__all__ = []
