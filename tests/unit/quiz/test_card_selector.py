"""
Unit tests for CardSelector

Tests cover:
- Ordering for each difficulty policy
- Saturation (fewer candidates than requested)
- Empty pools
- Reproducibility with a seeded random source
- Input validation
"""

import random
from uuid import uuid4

import pytest

from retention.core.exceptions import InvalidRequestError
from retention.models import QuizDifficulty
from retention.quiz import CardSelector, POLICIES


@pytest.fixture
def deck_id():
    return uuid4()


@pytest.fixture
def pool(deck_id, card_factory):
    """Six cards, three due and three not yet due (q2 and q6 share an ease factor)"""
    rows = [
        ("q1", 2.5, 6, -1),
        ("q2", 1.3, 1, -2),
        ("q3", 2.9, 30, 5),
        ("q4", 1.8, 10, 3),
        ("q5", 2.1, 2, -4),
        ("q6", 1.3, 0, 7),
    ]
    return [
        card_factory(deck_id, question=q, answer="a", ease=ease,
                     interval=interval, due_in_days=due)
        for q, ease, interval, due in rows
    ]


def questions(cards):
    return [c.question for c in cards]


class TestPolicies:
    """Tests for the ordering of each policy"""

    @pytest.fixture
    def selector(self, rng):
        return CardSelector(rng)

    def test_every_difficulty_has_a_policy(self):
        assert set(POLICIES) == set(QuizDifficulty)

    def test_easy_prefers_high_ease(self, selector, pool, now):
        selected = selector.select(pool, QuizDifficulty.EASY, 3, now=now)
        assert questions(selected) == ["q3", "q1", "q5"]

    def test_hard_prefers_low_ease(self, selector, pool, now):
        selected = selector.select(pool, QuizDifficulty.HARD, 3, now=now)
        # Stable sort keeps q2 ahead of q6 (equal ease)
        assert questions(selected) == ["q2", "q6", "q4"]

    def test_difficult_alias(self, selector, pool, now):
        selected = selector.select(pool, "difficult", 3, now=now)
        assert questions(selected) == ["q2", "q6", "q4"]

    def test_expert_breaks_ties_by_interval(self, selector, pool, now):
        selected = selector.select(pool, QuizDifficulty.EXPERT, 3, now=now)
        assert questions(selected) == ["q6", "q2", "q4"]

    def test_medium_puts_due_cards_first(self, selector, pool, now):
        selected = selector.select(pool, QuizDifficulty.MEDIUM, 6, now=now)

        assert set(questions(selected[:3])) == {"q1", "q2", "q5"}
        assert set(questions(selected[3:])) == {"q3", "q4", "q6"}

    def test_medium_truncates_within_due_bucket(self, selector, pool, now):
        selected = selector.select(pool, QuizDifficulty.MEDIUM, 2, now=now)
        assert set(questions(selected)) <= {"q1", "q2", "q5"}

    def test_medium_is_reproducible_with_seed(self, pool, now):
        first = CardSelector().select(pool, "medium", 6, rng=random.Random(7), now=now)
        second = CardSelector().select(pool, "medium", 6, rng=random.Random(7), now=now)
        assert questions(first) == questions(second)

    def test_candidates_not_reordered(self, selector, pool, now):
        before = questions(pool)
        selector.select(pool, QuizDifficulty.MEDIUM, 6, now=now)
        assert questions(pool) == before


class TestSaturation:
    """Tests for small or empty pools"""

    @pytest.fixture
    def selector(self, rng):
        return CardSelector(rng)

    @pytest.mark.parametrize("difficulty", list(QuizDifficulty))
    def test_returns_all_when_count_exceeds_pool(self, selector, pool, now, difficulty):
        selected = selector.select(pool, difficulty, 50, now=now)

        assert len(selected) == len(pool)
        assert {c.id for c in selected} == {c.id for c in pool}

    @pytest.mark.parametrize("difficulty", list(QuizDifficulty))
    def test_empty_pool_gives_empty_selection(self, selector, now, difficulty):
        assert selector.select([], difficulty, 10, now=now) == []


class TestValidation:
    def test_zero_count_rejected(self, pool):
        with pytest.raises(InvalidRequestError):
            CardSelector().select(pool, QuizDifficulty.EASY, 0)

    def test_unknown_difficulty_rejected(self, pool):
        with pytest.raises(InvalidRequestError):
            CardSelector().select(pool, "impossible", 3)
