"""
Module: events.py
Description: Event and moderation handlers.

Implements the event endpoints of the Q&A API:
- POST /event: Create an event, returning its id and secret
- GET /event/{eid}: List the event's visible questions
- POST /event/{eid}: Ask a question
- GET /event/{eid}/{secret}: List every question (moderator)
- POST /event/{eid}/{secret}/{qid}/toggle/{property}: Flip hidden/answered (moderator)

Moderator routes check the secret before reading or mutating anything.

Dependencies: FastAPI, typing
"""

from typing import List

from fastapi import APIRouter, Depends
from fastapi import status as status_codes

from qanda.auth.secret import authorize
from qanda.handlers.errors import to_http_exception
from qanda.models.request import AskRequest
from qanda.models.response import (
    AskResponse,
    NewEventResponse,
    QuestionResponse,
    ToggleResponse,
)
from qanda.models.question import ToggleProperty
from qanda.storage.base import QuestionStore
from qanda.storage.errors import StoreError
from qanda.storage.factory import get_store
from qanda.utils.logger import get_logger

router = APIRouter(prefix="/event", tags=["events"])
logger = get_logger(__name__)


@router.post("", status_code=status_codes.HTTP_201_CREATED, response_model=NewEventResponse)
async def create_event(
    store: QuestionStore = Depends(get_store)
) -> NewEventResponse:
    """
    Create a new event.

    The secret in the response is never returned again; the creator
    needs it for every moderation request.

    Example:
        POST /event

        Response (201 Created):
        {"id": "4f6c...", "secret": "Zq3v..."}
    """
    try:
        event_id, secret = await store.create_event()
    except StoreError as e:
        raise to_http_exception(e)

    return NewEventResponse(id=event_id, secret=secret)


@router.get("/{eid}", response_model=List[QuestionResponse])
async def list_questions(
    eid: str,
    store: QuestionStore = Depends(get_store)
) -> List[QuestionResponse]:
    """List an event's questions, excluding hidden ones."""
    try:
        questions = await store.list_visible(eid)
    except StoreError as e:
        raise to_http_exception(e)

    return [QuestionResponse.from_question(q) for q in questions]


@router.post("/{eid}", status_code=status_codes.HTTP_201_CREATED, response_model=AskResponse)
async def ask(
    eid: str,
    request: AskRequest,
    store: QuestionStore = Depends(get_store)
) -> AskResponse:
    """
    Ask a question under an event.

    Example:
        POST /event/4f6c...
        {"text": "What is X?"}

        Response (201 Created):
        {"id": "9b1e..."}
    """
    try:
        question_id = await store.ask(eid, request.text)
    except StoreError as e:
        raise to_http_exception(e)

    return AskResponse(id=question_id)


@router.get("/{eid}/{secret}", response_model=List[QuestionResponse])
async def list_all_questions(
    eid: str,
    secret: str,
    store: QuestionStore = Depends(get_store)
) -> List[QuestionResponse]:
    """List every question of an event, hidden ones included."""
    try:
        await authorize(store, eid, secret)
        questions = await store.list_all(eid)
    except StoreError as e:
        raise to_http_exception(e)

    return [QuestionResponse.from_question(q) for q in questions]


@router.post("/{eid}/{secret}/{qid}/toggle/{property}", response_model=ToggleResponse)
async def toggle(
    eid: str,
    secret: str,
    qid: str,
    property: str,
    store: QuestionStore = Depends(get_store)
) -> ToggleResponse:
    """
    Flip a question's hidden or answered flag.

    The secret is checked before the property name, so a wrong secret
    is always 403. Unknown property names are 400 and a question of
    another event is 404.
    """
    try:
        await authorize(store, eid, secret)
        prop = ToggleProperty.parse(property)
        value = await store.toggle(qid, prop, event_id=eid)
    except StoreError as e:
        raise to_http_exception(e)

    return ToggleResponse(id=qid, property=prop, value=value)
