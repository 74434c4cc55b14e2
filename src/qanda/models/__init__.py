"""
Module: models
Description: Package initialization for Pydantic data models.

This package contains all data models used by the Q&A API:
- Event, Authorization: Q&A session and secret-check outcome
- Question, VoteDirection, ToggleProperty: Question and its mutations
- Request/response models for the HTTP layer

All models are exported here for convenient importing.
"""

from .event import Authorization, Event
from .question import Question, ToggleProperty, VoteDirection
from .request import AskRequest
from .response import (
    AskResponse,
    NewEventResponse,
    QuestionResponse,
    ToggleResponse,
    VoteResponse,
)

__all__ = [
    "Authorization",
    "Event",
    "Question",
    "ToggleProperty",
    "VoteDirection",
    "AskRequest",
    "AskResponse",
    "NewEventResponse",
    "QuestionResponse",
    "ToggleResponse",
    "VoteResponse",
]
