"""
Module: request.py
Description: API request models for the Q&A API.

Key Components:
- AskRequest: Model for POST /event/{eid} requests

Dependencies: pydantic
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


MAX_QUESTION_LENGTH = 500


class AskRequest(BaseModel):
    """
    Request model for submitting a question to an event.

    Attributes:
        text: Question text (required, stripped, 1-500 characters)
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="forbid"
    )

    text: str = Field(
        ...,
        min_length=1,
        max_length=MAX_QUESTION_LENGTH,
        description="Question text"
    )

    @field_validator('text')
    @classmethod
    def validate_text(cls, v: str) -> str:
        """Reject text made only of control characters."""
        if not any(ch.isprintable() and not ch.isspace() for ch in v):
            raise ValueError("text must contain printable characters")
        return v
