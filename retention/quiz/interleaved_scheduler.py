"""
Interleaved Session Scheduler

Merges per-deck card selections into one sequence that mixes subjects.
Interleaving beats massed (blocked) practice for discrimination and long-term
retention, so the merge never serves two cards from the same deck in a row
unless only that deck has cards left.

Each deck gets a lane: a pre-shuffled list with a read cursor. At every step
the eligible lanes are the non-empty ones other than the lane used last; one
is picked uniformly at random. When the only non-empty lane is the one just
used, the constraint is relaxed and the forced tail drains in order.
"""
from typing import Dict, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar
import logging
import random

from retention.core.exceptions import InvalidRequestError

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")


class InterleavingScheduler:
    """
    Produces interleaved orderings of per-deck contributions

    Guarantees:
    1. No two adjacent entries share a deck unless the tail is forced
    2. Every contributed item appears exactly once
    3. Output length equals the sum of the lane lengths
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    @staticmethod
    def normalize_deck_ids(deck_ids: Iterable[K]) -> List[K]:
        """
        Drop repeated deck ids, keeping first-seen order

        Raises:
            InvalidRequestError: if no deck id is supplied
        """
        unique: List[K] = []
        for deck_id in deck_ids or []:
            if deck_id is None:
                raise InvalidRequestError("deck id must not be empty")
            if deck_id not in unique:
                unique.append(deck_id)
        if not unique:
            raise InvalidRequestError("at least one deck id is required for interleaving")
        return unique

    def interleave(
        self,
        lanes: Mapping[K, Sequence[T]],
        rng: Optional[random.Random] = None,
    ) -> List[Tuple[K, T]]:
        """
        Merge per-deck lanes into one ordered sequence

        Args:
            lanes: Items contributed by each deck, keyed by deck id
            rng: Random source for lane shuffles and picks (default: scheduler's own)

        Returns:
            (deck id, item) pairs in session order

        Raises:
            InvalidRequestError: if no lanes are supplied
        """
        if not lanes:
            raise InvalidRequestError("at least one deck is required for interleaving")
        rng = rng or self.rng

        order = list(lanes)
        shuffled: Dict[K, List[T]] = {}
        for key in order:
            items = list(lanes[key])
            rng.shuffle(items)
            shuffled[key] = items
        cursors = {key: 0 for key in order}

        total = sum(len(items) for items in shuffled.values())
        result: List[Tuple[K, T]] = []
        last: Optional[K] = None
        forced = 0

        while len(result) < total:
            remaining = [k for k in order if cursors[k] < len(shuffled[k])]
            eligible = [k for k in remaining if k != last]
            if not eligible:
                # Only the deck just used has cards left
                eligible = remaining
                forced += 1

            key = rng.choice(eligible)
            result.append((key, shuffled[key][cursors[key]]))
            cursors[key] += 1
            last = key

        logger.debug(
            "Interleaved %d items from %d decks (%d forced repeats)",
            total, len(order), forced,
        )
        return result

    @staticmethod
    def interleaving_ratio(deck_sequence: Sequence[Hashable]) -> float:
        """
        Fraction of adjacent pairs that switch deck

        Returns 0 for fully blocked (or fewer than two entries), 1 for
        a deck change at every step
        """
        if len(deck_sequence) < 2:
            return 0.0

        transitions = sum(
            1 for i in range(1, len(deck_sequence))
            if deck_sequence[i] != deck_sequence[i - 1]
        )
        return transitions / (len(deck_sequence) - 1)
