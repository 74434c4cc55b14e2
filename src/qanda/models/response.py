"""
Module: response.py
Description: API response models for the Q&A API.

Defines response models for outgoing API calls. These models structure
the JSON responses returned by API endpoints. The event secret appears
in NewEventResponse only.

Key Components:
- NewEventResponse: Event id and secret, returned once at creation
- AskResponse: Identifier of a newly asked question
- QuestionResponse: Public view of a question
- VoteResponse: Vote count after a vote
- ToggleResponse: Flag value after a toggle

Dependencies: pydantic
"""

from pydantic import BaseModel, Field

from qanda.models.question import Question, ToggleProperty


class NewEventResponse(BaseModel):
    """Response for event creation; the only place the secret is disclosed."""

    id: str = Field(..., description="Event identifier")
    secret: str = Field(..., description="Moderation secret, shown only once")


class AskResponse(BaseModel):
    """Response for question submission."""

    id: str = Field(..., description="Question identifier")


class QuestionResponse(BaseModel):
    """
    Response model for a single question.

    Attributes:
        id: Question identifier
        event_id: Owning event identifier
        text: Question text
        votes: Current vote count
        hidden: Whether a moderator hid the question
        answered: Whether a moderator marked the question answered
        created: Creation time in seconds since the epoch
    """

    id: str
    event_id: str
    text: str
    votes: int
    hidden: bool
    answered: bool
    created: int

    @classmethod
    def from_question(cls, question: Question) -> "QuestionResponse":
        return cls(**question.model_dump())


class VoteResponse(BaseModel):
    """Response for a vote."""

    id: str = Field(..., description="Question identifier")
    votes: int = Field(..., ge=0, description="Vote count after the vote")


class ToggleResponse(BaseModel):
    """Response for a moderation toggle."""

    id: str = Field(..., description="Question identifier")
    property: ToggleProperty = Field(..., description="Flag that was flipped")
    value: bool = Field(..., description="New value of the flag")
