"""
Module: base.py
Description: Storage interface shared by all backends.

Every backend exposes the same async operations over events and
questions and reports failures with the same error kinds, so nothing
outside qanda.storage needs to know which backend is active.

Key Components:
- QuestionStore: Abstract base class for storage backends
- new_id(): Default identifier source (UUID4 strings)
- sort_questions(): Stable listing order shared by backends
- require_id(): Empty identifiers are reported as not found

Dependencies: abc, time, uuid, typing
"""

import time
from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional, Tuple, Union
from uuid import uuid4

from qanda.models.event import Authorization
from qanda.models.question import Question, ToggleProperty, VoteDirection
from qanda.storage.errors import NotFoundError


def new_id() -> str:
    """Generate a fresh unique identifier."""
    return str(uuid4())


def require_id(kind: str, entity_id: str) -> str:
    """
    Return entity_id, or raise NotFoundError if it is empty.

    No entity is ever stored under an empty id, and some backends refuse
    empty keys outright instead of reporting a miss.
    """
    if not entity_id:
        raise NotFoundError(kind, entity_id)
    return entity_id


def sort_questions(questions: Iterable[Question]) -> List[Question]:
    """Order questions oldest first, ties broken by id."""
    return sorted(questions, key=lambda q: (q.created, q.id))


class QuestionStore(ABC):
    """
    Interface for event and question persistence.

    Implementations must make vote() and toggle() atomic per question:
    concurrent calls on the same question are all applied, none lost.

    Args:
        id_factory: Source of unique identifiers
        clock: Source of the current time in seconds since the epoch
    """

    backend_name = "abstract"

    def __init__(
        self,
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], float] = time.time
    ):
        self._id_factory = id_factory
        self._clock = clock

    def _now(self) -> int:
        return int(self._clock())

    @abstractmethod
    async def create_event(self) -> Tuple[str, str]:
        """Create an event with no questions. Returns (event_id, secret)."""

    @abstractmethod
    async def ask(self, event_id: str, text: str) -> str:
        """Add a question to an event. Returns the new question id."""

    @abstractmethod
    async def get_question(self, question_id: str) -> Question:
        """Return a question by id."""

    @abstractmethod
    async def list_visible(self, event_id: str) -> List[Question]:
        """Return the event's questions that are not hidden."""

    @abstractmethod
    async def list_all(self, event_id: str) -> List[Question]:
        """Return every question of the event. Callers must authorize first."""

    @abstractmethod
    async def vote(self, question_id: str, direction: Union[VoteDirection, str]) -> int:
        """Add +1/-1 to a question's votes, floored at 0. Returns the new count."""

    @abstractmethod
    async def toggle(
        self,
        question_id: str,
        prop: Union[ToggleProperty, str],
        event_id: Optional[str] = None
    ) -> bool:
        """
        Flip a moderation flag and return its new value.

        When event_id is given, a question belonging to another event is
        reported as not found.
        """

    @abstractmethod
    async def check_secret(self, event_id: str, secret: str) -> Authorization:
        """Compare secret with the event's stored secret."""
