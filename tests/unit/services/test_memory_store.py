"""
Unit tests for the in-memory reference stores

Tests cover:
- Trigram similarity scoring
- NotFound behaviour of every store
- Scheduling persistence
- Share token and category lookups
- User get-or-create
"""

from datetime import timedelta
from uuid import uuid4

import pytest

from retention.core.exceptions import NotFoundError
from retention.models import QuizDifficulty, QuizResult, SchedulingState, UserProgress
from retention.services import (
    MemoryCardStore,
    MemoryDeckStore,
    MemoryResultLog,
    MemoryUserStore,
    similarity,
    trigrams,
)


class TestTrigrams:
    def test_word_padding(self):
        assert trigrams("cat") == {"  c", " ca", "cat", "at "}

    def test_case_and_punctuation_ignored(self):
        assert trigrams("Cat!") == trigrams("cat")

    def test_identical_strings(self):
        assert similarity("What is the capital of France?", "what is the capital of france") == 1.0

    def test_disjoint_strings(self):
        assert similarity("abc", "xyz") == 0.0

    def test_partial_overlap(self):
        # cat: {"  c"," ca","cat","at "}, cap: {"  c"," ca","cap","ap "}
        assert similarity("cat", "cap") == 2 / 6

    def test_empty_strings_score_zero(self):
        assert similarity("", "anything") == 0.0
        assert similarity("?!", "?!") == 0.0


class TestMemoryCardStore:
    @pytest.mark.asyncio
    async def test_get_unknown_card(self, card_store):
        with pytest.raises(NotFoundError) as exc_info:
            await card_store.get(uuid4())
        assert exc_info.value.entity == "Card"

    @pytest.mark.asyncio
    async def test_list_by_deck(self, card_store, history_deck, history_cards):
        cards = await card_store.list_by_deck(history_deck.id)
        assert {c.id for c in cards} == {c.id for c in history_cards}

    @pytest.mark.asyncio
    async def test_list_due_across_decks(self, card_store, now):
        due = await card_store.list_due(now)

        assert len(due) == 3
        assert due == sorted(due, key=lambda c: c.scheduling.next_review_at)

    @pytest.mark.asyncio
    async def test_save_scheduling(self, card_store, history_cards, now):
        card = history_cards[0]
        state = SchedulingState(next_review_at=now + timedelta(days=15), interval=15, repetitions=3)

        updated = await card_store.save_scheduling(card.id, state, now)

        assert updated.scheduling.interval == 15
        assert (await card_store.get(card.id)).scheduling.interval == 15
        assert updated.updated_at == now

    @pytest.mark.asyncio
    async def test_save_scheduling_unknown_card(self, card_store):
        with pytest.raises(NotFoundError):
            await card_store.save_scheduling(uuid4(), SchedulingState())

    @pytest.mark.asyncio
    async def test_find_similar_scoped_to_deck(self, card_store, history_deck, chemistry_deck):
        matches = await card_store.find_similar(
            history_deck.id, "When did World War 2 end?", 0.5, 5
        )
        assert [c.answer for c in matches] == ["1945"]

        none = await card_store.find_similar(
            chemistry_deck.id, "When did World War 2 end?", 0.5, 5
        )
        assert none == []

    @pytest.mark.asyncio
    async def test_find_similar_orders_and_limits(self, card_factory):
        deck_id = uuid4()
        store = MemoryCardStore([
            card_factory(deck_id, question="photosynthesis in plants", answer="a"),
            card_factory(deck_id, question="photosynthesis", answer="b"),
            card_factory(deck_id, question="photosynthesis in green plants", answer="c"),
        ])

        matches = await store.find_similar(deck_id, "photosynthesis in plants", 0.3, 2)
        assert [c.answer for c in matches] == ["a", "c"]


class TestMemoryDeckStore:
    @pytest.mark.asyncio
    async def test_get_unknown_deck(self, deck_store):
        with pytest.raises(NotFoundError):
            await deck_store.get(uuid4())

    @pytest.mark.asyncio
    async def test_list_by_category_case_insensitive(self, deck_store):
        decks = await deck_store.list_by_category("science")
        assert {d.name for d in decks} == {"Organic Chemistry", "Mechanics"}

    @pytest.mark.asyncio
    async def test_get_by_share_token(self, deck_store, history_deck):
        token = history_deck.generate_share_token()
        await deck_store.save(history_deck)

        assert (await deck_store.get_by_share_token(token)).id == history_deck.id

        history_deck.revoke_share_token()
        await deck_store.save(history_deck)
        with pytest.raises(NotFoundError):
            await deck_store.get_by_share_token(token)


class TestMemoryUserStore:
    @pytest.mark.asyncio
    async def test_get_or_create_is_stable(self):
        store = MemoryUserStore()
        first = await store.get_or_create("Ada", "ada@example.com")
        second = await store.get_or_create("Ada")

        assert first.user_id == second.user_id
        assert (await store.get(first.user_id)).email == "ada@example.com"

    @pytest.mark.asyncio
    async def test_save_unknown_user(self):
        with pytest.raises(NotFoundError):
            await MemoryUserStore().save(UserProgress(display_name="Ghost"))


class TestMemoryResultLog:
    @pytest.mark.asyncio
    async def test_append_and_query(self):
        log = MemoryResultLog()
        deck_id = uuid4()
        await log.append(QuizResult(user_id="u1", deck_id=deck_id, card_id=uuid4(),
                                    is_correct=True, difficulty=QuizDifficulty.EASY))
        await log.append(QuizResult(user_id="u2", deck_id=uuid4(), card_id=uuid4(),
                                    is_correct=False, difficulty=QuizDifficulty.HARD))

        assert len(log) == 2
        assert len(await log.list_by_user("u1")) == 1
        assert len(await log.list_by_deck(deck_id)) == 1
