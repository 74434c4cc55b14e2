"""
Module: question.py
Description: Question data model for the Q&A API.

Defines the Question model along with the two enums callers use to
mutate it: VoteDirection for votes and ToggleProperty for the
moderation flags.

Key Components:
- Question: Core question model with vote counter and moderation flags
- VoteDirection: up/down with the delta applied to the counter
- ToggleProperty: the two flippable flags, hidden and answered

Dependencies: pydantic, enum
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from qanda.storage.errors import InvalidPropertyError


class VoteDirection(str, Enum):
    """Direction of a vote."""

    UP = "up"
    DOWN = "down"

    @property
    def delta(self) -> int:
        return 1 if self is VoteDirection.UP else -1

    @classmethod
    def parse(cls, value: str) -> "VoteDirection":
        """Parse a vote direction, raising ValueError for anything but up/down."""
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"vote direction must be 'up' or 'down', got '{value}'")


class ToggleProperty(str, Enum):
    """Boolean moderation flags a moderator may flip."""

    HIDDEN = "hidden"
    ANSWERED = "answered"

    @classmethod
    def parse(cls, value: str) -> "ToggleProperty":
        """Parse a property name, raising InvalidPropertyError when unknown."""
        try:
            return cls(value)
        except ValueError:
            raise InvalidPropertyError(value)


class Question(BaseModel):
    """
    Question model representing an item submitted to an event.

    Only votes, hidden and answered ever change after creation; votes
    through apply_vote() and the flags through flip().

    Attributes:
        id: Unique question identifier (generated)
        event_id: Owning event identifier
        text: Submitted question text
        votes: Non-negative vote counter
        hidden: Hidden from the public listing by a moderator
        answered: Marked answered by a moderator
        created: Creation time in whole seconds since the epoch
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    id: str = Field(..., min_length=1, description="Unique question identifier")
    event_id: str = Field(..., min_length=1, description="Owning event identifier")
    text: str = Field(..., min_length=1, description="Question text")
    votes: int = Field(default=0, ge=0, description="Vote count")
    hidden: bool = Field(default=False, description="Hidden by a moderator")
    answered: bool = Field(default=False, description="Answered flag")
    created: int = Field(..., ge=0, description="Creation time (seconds since epoch)")

    def apply_vote(self, direction: VoteDirection) -> int:
        """Apply a vote, never letting the counter drop below zero."""
        self.votes = max(0, self.votes + direction.delta)
        return self.votes

    def flip(self, prop: ToggleProperty) -> bool:
        """Flip a moderation flag and return its new value."""
        value = not getattr(self, prop.value)
        setattr(self, prop.value, value)
        return value
