"""
Card Selection Policies

Orders and truncates a pool of candidate cards for one deck according to the
requested quiz difficulty:

- EASY: highest ease factor first (cards the learner already finds easy)
- MEDIUM: due cards ahead of not-yet-due cards, random order within each bucket
- HARD: lowest ease factor first
- EXPERT: lowest ease factor first, ties broken by shortest interval

Sorting is stable, so equal keys keep their candidate order. Randomness only
enters through the MEDIUM policy and always comes from the supplied rng.
"""
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Union
import logging
import random

from retention.core.exceptions import InvalidRequestError
from retention.models import Card, QuizDifficulty
from retention.models.base import ensure_utc, utc_now

logger = logging.getLogger(__name__)

Policy = Callable[[List[Card], random.Random, datetime], List[Card]]


def _easy(cards: List[Card], rng: random.Random, now: datetime) -> List[Card]:
    return sorted(cards, key=lambda c: c.scheduling.ease_factor, reverse=True)


def _medium(cards: List[Card], rng: random.Random, now: datetime) -> List[Card]:
    due = [c for c in cards if c.scheduling.is_due(now)]
    later = [c for c in cards if not c.scheduling.is_due(now)]
    rng.shuffle(due)
    rng.shuffle(later)
    return due + later


def _hard(cards: List[Card], rng: random.Random, now: datetime) -> List[Card]:
    return sorted(cards, key=lambda c: c.scheduling.ease_factor)


def _expert(cards: List[Card], rng: random.Random, now: datetime) -> List[Card]:
    return sorted(
        cards,
        key=lambda c: (c.scheduling.ease_factor, c.scheduling.interval),
    )


POLICIES: Dict[QuizDifficulty, Policy] = {
    QuizDifficulty.EASY: _easy,
    QuizDifficulty.MEDIUM: _medium,
    QuizDifficulty.HARD: _hard,
    QuizDifficulty.EXPERT: _expert,
}

_missing = set(QuizDifficulty) - set(POLICIES)
if _missing:
    raise RuntimeError(f"No selection policy for: {sorted(d.value for d in _missing)}")


class CardSelector:
    """
    Picks the cards for a single-deck quiz session

    Holds no state between calls apart from the default random source.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def select(
        self,
        candidates: Iterable[Card],
        difficulty: Union[QuizDifficulty, str],
        count: int,
        rng: Optional[random.Random] = None,
        now: Optional[datetime] = None,
    ) -> List[Card]:
        """
        Order candidates by the difficulty policy and take the first `count`

        Args:
            candidates: Candidate cards (not modified)
            difficulty: Selection policy
            count: Maximum number of cards to return (>= 1)
            rng: Random source for the MEDIUM policy (default: selector's own)
            now: Reference time for due checks (default: now, UTC)

        Returns:
            Up to `count` cards; fewer when fewer are available, never padded

        Raises:
            InvalidRequestError: unknown difficulty or count < 1
        """
        difficulty = QuizDifficulty.parse(difficulty)
        if count < 1:
            raise InvalidRequestError(f"count must be at least 1, got {count}")

        cards = list(candidates)
        if not cards:
            return []

        now = ensure_utc(now) or utc_now()
        ordered = POLICIES[difficulty](cards, rng or self.rng, now)
        selected = ordered[:count]

        logger.debug(
            "Selected %d of %d candidates (difficulty=%s, requested=%d)",
            len(selected), len(cards), difficulty.value, count,
        )
        return selected
