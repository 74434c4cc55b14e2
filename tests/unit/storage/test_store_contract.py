"""
Module: test_store_contract.py
Description: Behaviour every storage backend must share.

Each test runs once against LocalStore and once against DynamoDBStore
(moto), through the parametrized `store` fixture.
"""

import asyncio

import pytest
from pydantic import ValidationError

from qanda.models.event import Authorization
from qanda.models.question import ToggleProperty, VoteDirection
from qanda.storage.errors import InvalidPropertyError, NotFoundError


class TestEvents:
    """Event creation and secret checks."""

    @pytest.mark.asyncio
    async def test_create_event_returns_distinct_ids_and_secrets(self, store):
        first = await store.create_event()
        second = await store.create_event()

        assert first[0] != second[0]
        assert first[1] != second[1]
        assert all(first) and all(second)

    @pytest.mark.asyncio
    async def test_check_secret_accepts_only_the_creation_secret(self, store):
        event_id, secret = await store.create_event()

        assert await store.check_secret(event_id, secret) is Authorization.AUTHORIZED
        assert await store.check_secret(event_id, "wrong") is Authorization.FORBIDDEN
        assert await store.check_secret(event_id, "") is Authorization.FORBIDDEN
        assert await store.check_secret(event_id, secret + " ") is Authorization.FORBIDDEN

    @pytest.mark.asyncio
    async def test_check_secret_of_other_event_is_forbidden(self, store):
        event_a, secret_a = await store.create_event()
        event_b, _ = await store.create_event()

        assert await store.check_secret(event_b, secret_a) is Authorization.FORBIDDEN

    @pytest.mark.asyncio
    async def test_check_secret_unknown_event_is_forbidden(self, store):
        assert await store.check_secret("no-such-event", "secret") is Authorization.FORBIDDEN

    @pytest.mark.asyncio
    async def test_new_event_has_no_questions(self, store):
        event_id, _ = await store.create_event()

        assert await store.list_visible(event_id) == []
        assert await store.list_all(event_id) == []


class TestAsk:
    """Question submission and retrieval."""

    @pytest.mark.asyncio
    async def test_new_question_defaults(self, store):
        event_id, _ = await store.create_event()

        question_id = await store.ask(event_id, "What is X?")
        question = await store.get_question(question_id)

        assert question.id == question_id
        assert question.event_id == event_id
        assert question.text == "What is X?"
        assert question.votes == 0
        assert question.hidden is False
        assert question.answered is False
        assert question.created >= 1_700_000_000

    @pytest.mark.asyncio
    async def test_ask_unknown_event_is_not_found(self, store):
        with pytest.raises(NotFoundError) as exc_info:
            await store.ask("no-such-event", "Anyone there?")

        assert exc_info.value.kind == "event"

    @pytest.mark.asyncio
    async def test_get_unknown_question_is_not_found(self, store):
        with pytest.raises(NotFoundError):
            await store.get_question("no-such-question")

    @pytest.mark.asyncio
    async def test_questions_are_listed_oldest_first(self, store):
        event_id, _ = await store.create_event()
        ids = [await store.ask(event_id, f"Question {i}") for i in range(3)]

        listed = await store.list_visible(event_id)

        assert [q.id for q in listed] == ids

    @pytest.mark.asyncio
    async def test_questions_are_scoped_to_their_event(self, store):
        event_a, _ = await store.create_event()
        event_b, _ = await store.create_event()
        qa = await store.ask(event_a, "For A")
        qb = await store.ask(event_b, "For B")

        assert [q.id for q in await store.list_all(event_a)] == [qa]
        assert [q.id for q in await store.list_all(event_b)] == [qb]

    @pytest.mark.asyncio
    async def test_list_unknown_event_is_not_found(self, store):
        with pytest.raises(NotFoundError):
            await store.list_visible("no-such-event")
        with pytest.raises(NotFoundError):
            await store.list_all("no-such-event")


class TestVote:
    """Vote counter semantics."""

    @pytest.mark.asyncio
    async def test_up_then_down_restores_count(self, store):
        event_id, _ = await store.create_event()
        question_id = await store.ask(event_id, "Q")
        await store.vote(question_id, VoteDirection.UP)
        await store.vote(question_id, VoteDirection.UP)

        assert await store.vote(question_id, VoteDirection.UP) == 3
        assert await store.vote(question_id, VoteDirection.DOWN) == 2

    @pytest.mark.asyncio
    async def test_down_vote_at_zero_stays_at_zero(self, store):
        event_id, _ = await store.create_event()
        question_id = await store.ask(event_id, "Q")

        assert await store.vote(question_id, VoteDirection.DOWN) == 0
        assert (await store.get_question(question_id)).votes == 0
        assert await store.vote(question_id, VoteDirection.UP) == 1
        assert await store.vote(question_id, VoteDirection.DOWN) == 0
        assert await store.vote(question_id, VoteDirection.DOWN) == 0

    @pytest.mark.asyncio
    async def test_vote_accepts_direction_names(self, store):
        event_id, _ = await store.create_event()
        question_id = await store.ask(event_id, "Q")

        assert await store.vote(question_id, "up") == 1
        assert await store.vote(question_id, "down") == 0

    @pytest.mark.asyncio
    async def test_vote_unknown_question_is_not_found(self, store):
        with pytest.raises(NotFoundError):
            await store.vote("no-such-question", VoteDirection.UP)
        with pytest.raises(NotFoundError):
            await store.vote("no-such-question", VoteDirection.DOWN)

    @pytest.mark.asyncio
    async def test_concurrent_up_votes_all_count(self, store):
        event_id, _ = await store.create_event()
        question_id = await store.ask(event_id, "Q")

        await asyncio.gather(
            *(store.vote(question_id, VoteDirection.UP) for _ in range(20))
        )

        assert (await store.get_question(question_id)).votes == 20

    @pytest.mark.asyncio
    async def test_concurrent_mixed_votes_never_go_negative(self, store):
        event_id, _ = await store.create_event()
        question_id = await store.ask(event_id, "Q")
        await store.vote(question_id, VoteDirection.UP)

        results = await asyncio.gather(
            *(store.vote(question_id, VoteDirection.DOWN) for _ in range(5))
        )

        assert min(results) == 0
        assert (await store.get_question(question_id)).votes == 0


class TestToggle:
    """Moderation flag semantics."""

    @pytest.mark.asyncio
    async def test_toggle_twice_restores_flag(self, store):
        event_id, _ = await store.create_event()
        question_id = await store.ask(event_id, "Q")

        assert await store.toggle(question_id, ToggleProperty.HIDDEN) is True
        assert (await store.get_question(question_id)).hidden is True
        assert await store.toggle(question_id, ToggleProperty.HIDDEN) is False
        assert (await store.get_question(question_id)).hidden is False

    @pytest.mark.asyncio
    async def test_toggle_flags_are_independent(self, store):
        event_id, _ = await store.create_event()
        question_id = await store.ask(event_id, "Q")

        assert await store.toggle(question_id, "answered") is True
        question = await store.get_question(question_id)

        assert question.answered is True
        assert question.hidden is False

    @pytest.mark.asyncio
    async def test_toggle_invalid_property(self, store):
        event_id, _ = await store.create_event()
        question_id = await store.ask(event_id, "Q")

        with pytest.raises(InvalidPropertyError):
            await store.toggle(question_id, "votes")

    @pytest.mark.asyncio
    async def test_toggle_unknown_question_is_not_found(self, store):
        with pytest.raises(NotFoundError):
            await store.toggle("no-such-question", ToggleProperty.ANSWERED)

    @pytest.mark.asyncio
    async def test_toggle_scoped_to_other_event_is_not_found(self, store):
        event_a, _ = await store.create_event()
        event_b, _ = await store.create_event()
        question_id = await store.ask(event_a, "Q")

        with pytest.raises(NotFoundError):
            await store.toggle(question_id, ToggleProperty.HIDDEN, event_id=event_b)

        assert (await store.get_question(question_id)).hidden is False
        assert await store.toggle(question_id, ToggleProperty.HIDDEN, event_id=event_a) is True

    @pytest.mark.asyncio
    async def test_hidden_questions_only_in_full_listing(self, store):
        event_id, _ = await store.create_event()
        shown = await store.ask(event_id, "Shown")
        hidden = await store.ask(event_id, "Hidden")
        await store.toggle(hidden, ToggleProperty.HIDDEN)

        visible = await store.list_visible(event_id)
        everything = await store.list_all(event_id)

        assert [q.id for q in visible] == [shown]
        assert {q.id for q in everything} == {shown, hidden}
        assert all(not q.hidden for q in visible)


class TestScenario:
    """End-to-end walk through a short session."""

    @pytest.mark.asyncio
    async def test_session(self, store):
        event_id, secret = await store.create_event()
        q1 = await store.ask(event_id, "What is X?")

        assert await store.vote(q1, VoteDirection.UP) == 1
        assert await store.vote(q1, VoteDirection.UP) == 2
        assert await store.check_secret(event_id, secret) is Authorization.AUTHORIZED
        assert await store.toggle(q1, ToggleProperty.ANSWERED, event_id=event_id) is True

        listed = await store.list_visible(event_id)
        assert len(listed) == 1
        assert listed[0].id == q1
        assert listed[0].votes == 2
        assert listed[0].answered is True
        assert listed[0].hidden is False

        assert await store.check_secret(event_id, "wrong") is Authorization.FORBIDDEN


class TestEmptyIdentifiers:
    """An empty id names nothing, on every backend."""

    @pytest.mark.asyncio
    async def test_empty_question_id_is_not_found(self, store):
        with pytest.raises(NotFoundError):
            await store.get_question("")
        with pytest.raises(NotFoundError):
            await store.vote("", VoteDirection.UP)
        with pytest.raises(NotFoundError):
            await store.toggle("", ToggleProperty.HIDDEN)

    @pytest.mark.asyncio
    async def test_empty_event_id_is_not_found(self, store):
        with pytest.raises(NotFoundError):
            await store.ask("", "Orphan?")
        with pytest.raises(NotFoundError):
            await store.list_visible("")
        with pytest.raises(NotFoundError):
            await store.list_all("")

    @pytest.mark.asyncio
    async def test_empty_event_id_is_forbidden(self, store):
        assert await store.check_secret("", "secret") is Authorization.FORBIDDEN

    @pytest.mark.asyncio
    async def test_invalid_text_leaves_event_unchanged(self, store):
        event_id, _ = await store.create_event()

        with pytest.raises(ValidationError):
            await store.ask(event_id, "   ")

        assert await store.list_all(event_id) == []
