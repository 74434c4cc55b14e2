"""
Module: dynamodb.py
Description: DynamoDB storage backend.

Stores events and questions in two DynamoDB tables keyed by "id".
Counter and flag mutations are single conditional update_item calls
evaluated by DynamoDB, so concurrent votes from many Lambda instances
never overwrite each other.

Key Components:
- DynamoDBStore: QuestionStore over the events and questions tables
- Vote: ADD on the counter, guarded against going below zero
- Toggle: compare-and-set on the flag, re-read on contention
- Error translation: every boto failure becomes StoreUnavailableError

Dependencies: boto3, botocore, pydantic, asyncio, typing
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from qanda.auth.secret import generate_secret, secrets_match
from qanda.models.event import Authorization
from qanda.models.question import Question, ToggleProperty, VoteDirection
from qanda.storage.base import QuestionStore, require_id, sort_questions
from qanda.storage.errors import NotFoundError, StoreUnavailableError
from qanda.utils.batch_helpers import chunk_list
from qanda.utils.logger import get_logger

logger = get_logger(__name__)

# DynamoDB batch_get_item accepts at most 100 keys per request
BATCH_GET_LIMIT = 100
BATCH_GET_MAX_ROUNDS = 5


class _ConditionFailed(Exception):
    """A ConditionExpression evaluated to false."""


def _item_to_question(item: Dict[str, Any]) -> Question:
    # Numbers come back from the resource API as Decimal
    return Question(
        id=item['id'],
        event_id=item['event_id'],
        text=item['text'],
        votes=int(item.get('votes', 0)),
        hidden=bool(item.get('hidden', False)),
        answered=bool(item.get('answered', False)),
        created=int(item['created'])
    )


class DynamoDBStore(QuestionStore):
    """
    DynamoDB-backed QuestionStore.

    Both tables use a string partition key named "id". Events hold their
    secret and a string set of question ids; questions hold the rest.

    Attributes:
        events_table_name: Name of the events table
        questions_table_name: Name of the questions table
        dynamodb: boto3 DynamoDB resource
        events: Events table resource
        questions: Questions table resource

    Example:
        >>> store = DynamoDBStore("events", "questions")
        >>> event_id, secret = await store.create_event()
        >>> qid = await store.ask(event_id, "What is X?")
    """

    backend_name = "dynamodb"

    def __init__(
        self,
        events_table_name: str,
        questions_table_name: str,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        toggle_max_attempts: int = 5,
        **kwargs: Any
    ):
        """
        Initialize DynamoDB store.

        Args:
            events_table_name: Name of the events table
            questions_table_name: Name of the questions table
            region_name: AWS region (boto3 default chain when omitted)
            endpoint_url: Endpoint override, e.g. DynamoDB Local
            toggle_max_attempts: Compare-and-set attempts per toggle
            **kwargs: Passed to QuestionStore (id_factory, clock)

        Raises:
            ValueError: If a table name is empty or toggle_max_attempts < 1
        """
        super().__init__(**kwargs)

        for name in (events_table_name, questions_table_name):
            if not name or not isinstance(name, str):
                raise ValueError("table names must be non-empty strings")
        if toggle_max_attempts < 1:
            raise ValueError("toggle_max_attempts must be at least 1")

        self.events_table_name = events_table_name
        self.questions_table_name = questions_table_name
        self.toggle_max_attempts = toggle_max_attempts
        self.dynamodb = boto3.resource(
            'dynamodb',
            region_name=region_name,
            endpoint_url=endpoint_url
        )
        self.events = self.dynamodb.Table(events_table_name)
        self.questions = self.dynamodb.Table(questions_table_name)

        logger.info(
            "DynamoDB store initialized",
            events_table=events_table_name,
            questions_table=questions_table_name,
            endpoint_url=endpoint_url
        )

    async def _call(
        self,
        operation: str,
        request: Callable[..., Dict[str, Any]],
        context: Dict[str, Any],
        **params: Any
    ) -> Dict[str, Any]:
        """
        Run one boto3 request off the event loop and translate failures.

        Raises:
            _ConditionFailed: If the request's ConditionExpression failed
            StoreUnavailableError: For any other client or transport error
        """
        try:
            return await asyncio.to_thread(request, **params)

        except ClientError as e:
            error_code = e.response['Error']['Code']
            if error_code == 'ConditionalCheckFailedException':
                raise _ConditionFailed() from e

            logger.error(
                "DynamoDB request failed",
                operation=operation,
                error_code=error_code,
                error_message=e.response['Error'].get('Message'),
                **context
            )
            raise StoreUnavailableError(operation, error_code) from e

        except BotoCoreError as e:
            logger.error(
                "DynamoDB unreachable",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
                **context
            )
            raise StoreUnavailableError(operation, type(e).__name__) from e

    async def create_event(self) -> Tuple[str, str]:
        """
        Create an event with a fresh id and secret.

        The event starts without a question_ids attribute; DynamoDB
        cannot store an empty set and ADD creates it on the first ask.
        """
        event_id = self._id_factory()
        secret = generate_secret()
        context = {"event_id": event_id}

        try:
            await self._call(
                "create_event",
                self.events.put_item,
                context,
                Item={'id': event_id, 'secret': secret},
                ConditionExpression='attribute_not_exists(#id)',
                ExpressionAttributeNames={'#id': 'id'}
            )
        except _ConditionFailed:
            logger.error("Event identifier collision", **context)
            raise StoreUnavailableError("create_event", "identifier collision")

        logger.info("Event created", backend=self.backend_name, **context)
        return event_id, secret

    async def ask(self, event_id: str, text: str) -> str:
        """
        Add a question to an event.

        The id is added to the event first; the condition on that update
        is what rejects unknown events, so no orphan question is written.
        If the question itself is then invalid, the id is taken back out.
        """
        require_id("event", event_id)
        question_id = self._id_factory()
        created = self._now()
        context = {"event_id": event_id, "question_id": question_id}

        try:
            await self._call(
                "ask",
                self.events.update_item,
                context,
                Key={'id': event_id},
                UpdateExpression='ADD #qids :qid',
                ConditionExpression='attribute_exists(#id)',
                ExpressionAttributeNames={'#qids': 'question_ids', '#id': 'id'},
                ExpressionAttributeValues={':qid': {question_id}}
            )
        except _ConditionFailed:
            logger.warning("Question asked on unknown event", **context)
            raise NotFoundError("event", event_id)

        try:
            question = Question(
                id=question_id,
                event_id=event_id,
                text=text,
                created=created
            )
        except ValidationError:
            await self._call(
                "ask",
                self.events.update_item,
                context,
                Key={'id': event_id},
                UpdateExpression='DELETE #qids :qid',
                ExpressionAttributeNames={'#qids': 'question_ids'},
                ExpressionAttributeValues={':qid': {question_id}}
            )
            raise

        await self._call(
            "ask",
            self.questions.put_item,
            context,
            Item=question.model_dump()
        )

        logger.info("Question asked", **context)
        return question.id

    async def get_question(self, question_id: str) -> Question:
        require_id("question", question_id)
        response = await self._call(
            "get_question",
            self.questions.get_item,
            {"question_id": question_id},
            Key={'id': question_id}
        )

        item = response.get('Item')
        if item is None:
            raise NotFoundError("question", question_id)
        return _item_to_question(item)

    async def _question_ids(self, operation: str, event_id: str) -> List[str]:
        require_id("event", event_id)
        response = await self._call(
            operation,
            self.events.get_item,
            {"event_id": event_id},
            Key={'id': event_id},
            ProjectionExpression='#id, #qids',
            ExpressionAttributeNames={'#id': 'id', '#qids': 'question_ids'}
        )

        item = response.get('Item')
        if item is None:
            raise NotFoundError("event", event_id)
        return sorted(item.get('question_ids', set()))

    async def _batch_get_questions(
        self,
        operation: str,
        event_id: str,
        question_ids: List[str]
    ) -> List[Question]:
        """Fetch questions in chunks, re-requesting any UnprocessedKeys."""
        context = {"event_id": event_id}
        questions = []

        for chunk in chunk_list(question_ids, BATCH_GET_LIMIT):
            request = {self.questions_table_name: {'Keys': [{'id': qid} for qid in chunk]}}

            for _ in range(BATCH_GET_MAX_ROUNDS):
                response = await self._call(
                    operation,
                    self.dynamodb.batch_get_item,
                    context,
                    RequestItems=request
                )
                items = response.get('Responses', {}).get(self.questions_table_name, [])
                questions.extend(_item_to_question(item) for item in items)

                request = response.get('UnprocessedKeys') or {}
                if not request:
                    break
            else:
                logger.error(
                    "Batch get left keys unprocessed",
                    operation=operation,
                    unprocessed=len(request[self.questions_table_name]['Keys']),
                    **context
                )
                raise StoreUnavailableError(operation, "unprocessed keys")

        logger.debug(
            "Questions fetched",
            operation=operation,
            requested=len(question_ids),
            found=len(questions),
            **context
        )
        return questions

    async def list_visible(self, event_id: str) -> List[Question]:
        question_ids = await self._question_ids("list_visible", event_id)
        questions = await self._batch_get_questions("list_visible", event_id, question_ids)
        return sort_questions(q for q in questions if not q.hidden)

    async def list_all(self, event_id: str) -> List[Question]:
        question_ids = await self._question_ids("list_all", event_id)
        questions = await self._batch_get_questions("list_all", event_id, question_ids)
        return sort_questions(questions)

    async def vote(self, question_id: str, direction: Union[VoteDirection, str]) -> int:
        """
        Atomically add the vote to the counter.

        A down vote on a question already at zero fails the condition and
        leaves the item untouched; a consistent read then tells a missing
        question apart from one sitting at the floor.
        """
        direction = VoteDirection.parse(direction)
        require_id("question", question_id)
        context = {"question_id": question_id, "direction": direction.value}

        values: Dict[str, Any] = {':delta': direction.delta}
        condition = 'attribute_exists(#id)'
        if direction is VoteDirection.DOWN:
            condition += ' AND #votes > :zero'
            values[':zero'] = 0

        try:
            response = await self._call(
                "vote",
                self.questions.update_item,
                context,
                Key={'id': question_id},
                UpdateExpression='ADD #votes :delta',
                ConditionExpression=condition,
                ExpressionAttributeNames={'#id': 'id', '#votes': 'votes'},
                ExpressionAttributeValues=values,
                ReturnValues='UPDATED_NEW'
            )
        except _ConditionFailed:
            response = await self._call(
                "vote",
                self.questions.get_item,
                context,
                Key={'id': question_id},
                ProjectionExpression='#id, #votes',
                ExpressionAttributeNames={'#id': 'id', '#votes': 'votes'},
                ConsistentRead=True
            )
            item = response.get('Item')
            if item is None:
                raise NotFoundError("question", question_id)
            return int(item.get('votes', 0))

        votes = int(response['Attributes']['votes'])
        logger.debug("Vote recorded", votes=votes, **context)
        return votes

    async def toggle(
        self,
        question_id: str,
        prop: Union[ToggleProperty, str],
        event_id: Optional[str] = None
    ) -> bool:
        """
        Flip a flag with compare-and-set.

        Each attempt reads the flag and writes its negation only if it
        still holds the value read. Losing a race means another toggle
        landed in between; re-reading and flipping again keeps both.
        """
        prop = ToggleProperty.parse(prop)
        require_id("question", question_id)
        context = {"question_id": question_id, "property": prop.value}

        for attempt in range(1, self.toggle_max_attempts + 1):
            response = await self._call(
                "toggle",
                self.questions.get_item,
                context,
                Key={'id': question_id},
                ProjectionExpression='#eid, #flag',
                ExpressionAttributeNames={'#eid': 'event_id', '#flag': prop.value},
                ConsistentRead=True
            )

            item = response.get('Item')
            if item is None or (event_id is not None and item.get('event_id') != event_id):
                raise NotFoundError("question", question_id)

            names = {'#flag': prop.value}
            values: Dict[str, Any] = {':new': not item.get(prop.value, False)}
            if prop.value in item:
                condition = '#flag = :old'
                values[':old'] = item[prop.value]
            else:
                condition = 'attribute_exists(#id) AND attribute_not_exists(#flag)'
                names['#id'] = 'id'

            try:
                response = await self._call(
                    "toggle",
                    self.questions.update_item,
                    context,
                    Key={'id': question_id},
                    UpdateExpression='SET #flag = :new',
                    ConditionExpression=condition,
                    ExpressionAttributeNames=names,
                    ExpressionAttributeValues=values,
                    ReturnValues='UPDATED_NEW'
                )
            except _ConditionFailed:
                logger.debug("Toggle lost a race, re-reading", attempt=attempt, **context)
                continue

            value = bool(response['Attributes'][prop.value])
            logger.info("Question flag toggled", value=value, **context)
            return value

        logger.error(
            "Toggle gave up under contention",
            attempts=self.toggle_max_attempts,
            **context
        )
        raise StoreUnavailableError("toggle", "contention")

    async def check_secret(self, event_id: str, secret: str) -> Authorization:
        """Read only the secret attribute of the event and compare it."""
        if not event_id:
            return Authorization.FORBIDDEN

        response = await self._call(
            "check_secret",
            self.events.get_item,
            {"event_id": event_id},
            Key={'id': event_id},
            ProjectionExpression='#secret',
            ExpressionAttributeNames={'#secret': 'secret'}
        )

        stored = response.get('Item', {}).get('secret')
        if secrets_match(stored, secret):
            return Authorization.AUTHORIZED
        return Authorization.FORBIDDEN
