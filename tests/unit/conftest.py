"""
Unit test configuration and fixtures.

Unit tests validate isolated components without external dependencies.
Every randomized component gets a seeded random source.
"""

import os

# Settings are read at import time
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import random
from datetime import datetime, timedelta, timezone

import pytest

from retention.models import Card, Deck, SchedulingState, UserProgress
from retention.services import (
    MemoryCardStore,
    MemoryDeckStore,
    MemoryResultLog,
    MemoryUserStore,
    QuizService,
)


NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


def make_card(deck_id, question="What is 2 + 2?", answer="4", ease=2.5,
              interval=0, repetitions=0, due_in_days=0, now=NOW):
    """Card with an explicit scheduling state relative to `now`"""
    return Card(
        deck_id=deck_id,
        question=question,
        answer=answer,
        scheduling=SchedulingState(
            next_review_at=now + timedelta(days=due_in_days),
            interval=interval,
            repetitions=repetitions,
            ease_factor=ease,
        ),
    )


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def now():
    """Fixed reference time (UTC)"""
    return NOW


@pytest.fixture
def rng():
    """Seeded random source"""
    return random.Random(42)


# ============================================================================
# Data Fixtures
# ============================================================================

@pytest.fixture
def history_deck():
    return Deck(name="World History", category="History", subcategory="Modern")


@pytest.fixture
def chemistry_deck():
    return Deck(name="Organic Chemistry", category="Science")


@pytest.fixture
def physics_deck():
    return Deck(name="Mechanics", category="Science")


@pytest.fixture
def history_cards(history_deck):
    return [
        make_card(history_deck.id, "When did World War II end?", "1945",
                  ease=2.5, interval=6, repetitions=2, due_in_days=-1),
        make_card(history_deck.id, "Who was the first US president?", "George Washington",
                  ease=1.3, interval=1, repetitions=0, due_in_days=-3),
        make_card(history_deck.id, "When did the Berlin Wall fall?", "1989",
                  ease=2.8, interval=15, repetitions=4, due_in_days=10),
    ]


@pytest.fixture
def chemistry_cards(chemistry_deck):
    return [
        make_card(chemistry_deck.id, "What is the formula of benzene?", "C6H6",
                  ease=2.1, interval=3, repetitions=3, due_in_days=-2),
        make_card(chemistry_deck.id, "What functional group defines an alcohol?", "Hydroxyl",
                  ease=1.7, interval=25, repetitions=5, due_in_days=4),
    ]


@pytest.fixture
def user():
    return UserProgress(display_name="Ada")


# ============================================================================
# Store / Service Fixtures
# ============================================================================

@pytest.fixture
def card_store(history_cards, chemistry_cards):
    return MemoryCardStore(history_cards + chemistry_cards)


@pytest.fixture
def deck_store(history_deck, chemistry_deck, physics_deck):
    return MemoryDeckStore([history_deck, chemistry_deck, physics_deck])


@pytest.fixture
def user_store():
    return MemoryUserStore()


@pytest.fixture
def result_log():
    return MemoryResultLog()


@pytest.fixture
def quiz_service(card_store, deck_store, user_store, result_log, rng):
    return QuizService(
        card_store=card_store,
        deck_store=deck_store,
        user_store=user_store,
        result_log=result_log,
        rng=rng,
    )


@pytest.fixture
def card_factory():
    """Build cards with explicit scheduling (see make_card)"""
    return make_card
