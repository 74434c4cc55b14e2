"""
Module: errors.py
Description: Failure taxonomy shared by every storage backend.

Each storage operation either returns its value or raises one of the
errors below. The kind is preserved verbatim from adapter to caller;
the HTTP layer maps kinds onto status codes.

Key Components:
- ErrorCode: Enum of failure kinds
- StoreError: Base error carrying a code and a user-safe message
- NotFoundError, ForbiddenError, InvalidPropertyError, StoreUnavailableError
"""

from enum import Enum


class ErrorCode(Enum):
    """Storage failure kinds."""

    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    INVALID_PROPERTY = "INVALID_PROPERTY"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


class StoreError(Exception):
    """Base storage error with code and user-safe message."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(StoreError):
    """Raised when a referenced event or question does not exist."""

    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=f"{kind.capitalize()} {entity_id} not found",
        )
        self.kind = kind
        self.entity_id = entity_id


class ForbiddenError(StoreError):
    """Raised when a supplied secret does not match the event's secret."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.FORBIDDEN,
            message="Secret does not match event",
        )
        self.event_id = event_id


class InvalidPropertyError(StoreError):
    """Raised when a toggle names a property other than hidden/answered."""

    def __init__(self, name: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_PROPERTY,
            message=f"Property '{name}' cannot be toggled",
        )
        self.name = name


class StoreUnavailableError(StoreError):
    """Raised when the backing store fails or cannot be reached."""

    def __init__(self, operation: str, detail: str = "") -> None:
        super().__init__(
            code=ErrorCode.STORE_UNAVAILABLE,
            message=f"Storage backend failed during {operation}",
        )
        self.operation = operation
        self.detail = detail
