"""
Module: event.py
Description: Event data model for the Q&A API.

An event is a Q&A session. It owns the set of questions asked under it
and a secret that gates moderation.

Dependencies: pydantic, typing
"""

from enum import Enum
from typing import Set

from pydantic import BaseModel, ConfigDict, Field


class Authorization(Enum):
    """Outcome of comparing a caller's secret to an event's secret."""

    AUTHORIZED = "authorized"
    FORBIDDEN = "forbidden"


class Event(BaseModel):
    """
    Event model representing a Q&A session.

    Attributes:
        id: Unique event identifier (generated, immutable)
        secret: Moderation secret (generated once, immutable)
        question_ids: Identifiers of the questions asked under this event
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Unique event identifier"
    )
    secret: str = Field(
        ...,
        min_length=1,
        repr=False,
        description="Moderation secret"
    )
    question_ids: Set[str] = Field(
        default_factory=set,
        description="Identifiers of questions belonging to this event"
    )
