"""
Module: questions.py
Description: Question retrieval and voting handlers.

- GET /question/{qid}: Fetch one question
- POST /vote/{qid}/{updown}: Vote a question up or down

Neither route needs the event secret.

Dependencies: FastAPI
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi import status as status_codes

from qanda.handlers.errors import to_http_exception
from qanda.models.question import VoteDirection
from qanda.models.response import QuestionResponse, VoteResponse
from qanda.storage.base import QuestionStore
from qanda.storage.errors import StoreError
from qanda.storage.factory import get_store

router = APIRouter(tags=["questions"])


@router.get("/question/{qid}", response_model=QuestionResponse)
async def get_question(
    qid: str,
    store: QuestionStore = Depends(get_store)
) -> QuestionResponse:
    """Return a single question, whether or not it is hidden."""
    try:
        question = await store.get_question(qid)
    except StoreError as e:
        raise to_http_exception(e)

    return QuestionResponse.from_question(question)


@router.post("/vote/{qid}/{updown}", response_model=VoteResponse)
async def vote(
    qid: str,
    updown: str,
    store: QuestionStore = Depends(get_store)
) -> VoteResponse:
    """
    Vote a question up or down.

    Down votes stop at zero; a down vote on a question with no votes
    succeeds and reports 0.

    Example:
        POST /vote/9b1e.../up

        Response (200):
        {"id": "9b1e...", "votes": 3}
    """
    try:
        direction = VoteDirection.parse(updown)
    except ValueError as e:
        raise HTTPException(status_code=status_codes.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        votes = await store.vote(qid, direction)
    except StoreError as e:
        raise to_http_exception(e)

    return VoteResponse(id=qid, votes=votes)
