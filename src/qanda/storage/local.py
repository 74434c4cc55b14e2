"""
Module: local.py
Description: In-process storage backend for development and tests.

Holds events and questions in dictionaries behind a single asyncio.Lock.
Every operation holds the lock from start to finish, so operations are
serialized and vote()/toggle() are trivially atomic. Callers always get
copies; stored entities never leave the store.

Key Components:
- LocalStore: QuestionStore over in-process dictionaries
- LocalStore.from_fixture(): Build a store seeded with a demo event
- load_fixture(): Parse the seed fixture JSON

Dependencies: asyncio, json, importlib.resources, pydantic
"""

import asyncio
import json
from pathlib import Path
from importlib import resources
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from qanda.auth.secret import generate_secret, secrets_match
from qanda.models.event import Authorization, Event
from qanda.models.question import Question, ToggleProperty, VoteDirection
from qanda.storage.base import QuestionStore, sort_questions
from qanda.storage.errors import NotFoundError
from qanda.utils.logger import get_logger

logger = get_logger(__name__)

SEED_EVENT_ID = "00000000-0000-0000-0000-000000000000"
SEED_SECRET = "secret"


class FixtureQuestion(BaseModel):
    """One question of the seed fixture."""

    model_config = ConfigDict(populate_by_name=True)

    likes: int = Field(..., ge=0)
    text: str = Field(..., min_length=1)
    hidden: bool = False
    answered: bool = False
    created: int = Field(..., ge=0, alias="createTimeUnix")


def load_fixture(path: Optional[Union[str, Path]] = None) -> List[FixtureQuestion]:
    """
    Load seed questions from a JSON fixture.

    Args:
        path: Fixture file; the packaged seed.json when omitted

    Returns:
        Parsed fixture questions in file order
    """
    if path is None:
        raw = resources.files("qanda.storage").joinpath("seed.json").read_text(encoding="utf-8")
    else:
        raw = Path(path).read_text(encoding="utf-8")

    return [FixtureQuestion.model_validate(entry) for entry in json.loads(raw)]


class LocalStore(QuestionStore):
    """
    In-process QuestionStore guarded by one lock.

    Example:
        >>> store = LocalStore()
        >>> event_id, secret = await store.create_event()
        >>> qid = await store.ask(event_id, "What is X?")
        >>> await store.vote(qid, VoteDirection.UP)
        1
    """

    backend_name = "local"

    def __init__(self, **kwargs: Any):
        super().__init__(**kwargs)
        self._lock = asyncio.Lock()
        self._events: Dict[str, Event] = {}
        self._questions: Dict[str, Question] = {}

    @classmethod
    def from_fixture(
        cls,
        fixture: Optional[Union[str, Path, List[FixtureQuestion]]] = None,
        **kwargs: Any
    ) -> "LocalStore":
        """
        Build a store holding the seed event and its fixture questions.

        The seed event has the all-zero id and the secret "secret". Vote
        counts, flags and creation times are copied from the fixture.

        Args:
            fixture: Parsed fixture questions, or a path to a fixture file;
                the packaged fixture when omitted
            **kwargs: Passed to the constructor (id_factory, clock)
        """
        if fixture is None or isinstance(fixture, (str, Path)):
            fixture = load_fixture(fixture)

        store = cls(**kwargs)
        question_ids = set()
        for entry in fixture:
            question = Question(
                id=store._id_factory(),
                event_id=SEED_EVENT_ID,
                text=entry.text,
                votes=entry.likes,
                hidden=entry.hidden,
                answered=entry.answered,
                created=entry.created
            )
            store._questions[question.id] = question
            question_ids.add(question.id)

        store._events[SEED_EVENT_ID] = Event(
            id=SEED_EVENT_ID,
            secret=SEED_SECRET,
            question_ids=question_ids
        )

        logger.info(
            "Local store seeded",
            event_id=SEED_EVENT_ID,
            question_count=len(question_ids)
        )

        return store

    def _question(self, question_id: str) -> Question:
        question = self._questions.get(question_id)
        if question is None:
            raise NotFoundError("question", question_id)
        return question

    def _event(self, event_id: str) -> Event:
        event = self._events.get(event_id)
        if event is None:
            raise NotFoundError("event", event_id)
        return event

    def _event_questions(self, event_id: str) -> List[Question]:
        event = self._event(event_id)
        return [
            self._questions[qid].model_copy()
            for qid in event.question_ids
            if qid in self._questions
        ]

    async def create_event(self) -> Tuple[str, str]:
        async with self._lock:
            event = Event(id=self._id_factory(), secret=generate_secret())
            self._events[event.id] = event

        logger.info("Event created", event_id=event.id, backend=self.backend_name)
        return event.id, event.secret

    async def ask(self, event_id: str, text: str) -> str:
        async with self._lock:
            event = self._event(event_id)
            question = Question(
                id=self._id_factory(),
                event_id=event_id,
                text=text,
                created=self._now()
            )
            self._questions[question.id] = question
            self._events[event_id] = event.model_copy(
                update={"question_ids": event.question_ids | {question.id}}
            )

        logger.info("Question asked", event_id=event_id, question_id=question.id)
        return question.id

    async def get_question(self, question_id: str) -> Question:
        async with self._lock:
            return self._question(question_id).model_copy()

    async def list_visible(self, event_id: str) -> List[Question]:
        async with self._lock:
            questions = self._event_questions(event_id)
        return sort_questions(q for q in questions if not q.hidden)

    async def list_all(self, event_id: str) -> List[Question]:
        async with self._lock:
            questions = self._event_questions(event_id)
        return sort_questions(questions)

    async def vote(self, question_id: str, direction: Union[VoteDirection, str]) -> int:
        direction = VoteDirection.parse(direction)
        async with self._lock:
            votes = self._question(question_id).apply_vote(direction)

        logger.debug(
            "Vote recorded",
            question_id=question_id,
            direction=direction.value,
            votes=votes
        )
        return votes

    async def toggle(
        self,
        question_id: str,
        prop: Union[ToggleProperty, str],
        event_id: Optional[str] = None
    ) -> bool:
        prop = ToggleProperty.parse(prop)
        async with self._lock:
            question = self._question(question_id)
            if event_id is not None and question.event_id != event_id:
                raise NotFoundError("question", question_id)
            value = question.flip(prop)

        logger.info(
            "Question flag toggled",
            question_id=question_id,
            property=prop.value,
            value=value
        )
        return value

    async def check_secret(self, event_id: str, secret: str) -> Authorization:
        async with self._lock:
            event = self._events.get(event_id)
            stored = event.secret if event is not None else None

        if secrets_match(stored, secret):
            return Authorization.AUTHORIZED
        return Authorization.FORBIDDEN
