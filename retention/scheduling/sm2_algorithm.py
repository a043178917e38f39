"""
SM-2 Spaced Repetition Scheduling
Reference: https://super-memory.com/english/ol/sm2.htm

Maps (current scheduling state, rating) to the next scheduling state. Pure:
no I/O, no shared state, the review time is an explicit input.

Key Concepts:
- Quality (q): rating on the 0-5 scale (AGAIN=2, HARD=3, GOOD=4, EASY=5)
- Ease factor (EF): multiplier for interval growth, never below the floor
- Interval (I): days until the next review

Successive successes grow the interval geometrically; any failure collapses
it to one day and depresses future growth through a lower ease factor.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional, Union
import logging
import math

from retention.core.config import Settings, settings
from retention.models import Rating, SchedulingState
from retention.models.base import ensure_utc, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SM2Parameters:
    """
    Tunable SM-2 policy

    Rating qualities are defined on Rating.quality.
    """
    default_ease_factor: float = 2.5
    min_ease_factor: float = 1.3  # Hard floor
    max_ease_factor: Optional[float] = None  # None = no ceiling
    again_ease_penalty: float = 0.2  # Fixed EF step on AGAIN

    first_interval: int = 1  # Days after the first successful repetition
    second_interval: int = 6  # Days after the second
    again_interval: int = 1  # Days after a lapse

    def __post_init__(self):
        if self.min_ease_factor <= 0:
            raise ValueError("min_ease_factor must be positive")
        if self.max_ease_factor is not None and self.max_ease_factor < self.min_ease_factor:
            raise ValueError("max_ease_factor must not be below min_ease_factor")
        if min(self.first_interval, self.second_interval, self.again_interval) < 1:
            raise ValueError("intervals must be at least one day")

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "SM2Parameters":
        config = config or settings
        return cls(
            default_ease_factor=config.SM2_DEFAULT_EASE_FACTOR,
            min_ease_factor=config.SM2_MIN_EASE_FACTOR,
            max_ease_factor=config.SM2_MAX_EASE_FACTOR,
            again_ease_penalty=config.SM2_AGAIN_EASE_PENALTY,
            first_interval=config.SM2_FIRST_INTERVAL,
            second_interval=config.SM2_SECOND_INTERVAL,
        )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class SchedulingEngine:
    """
    SM-2 scheduler

    Total over every rating: AGAIN resets the card, HARD/GOOD/EASY advance it.
    Never mutates the state it is given.
    """

    def __init__(self, parameters: Optional[SM2Parameters] = None):
        self.params = parameters or SM2Parameters()

    def adjust_ease_factor(self, ease_factor: float, quality: int) -> float:
        """
        EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)), floored

        q=5 adds 0.1, q=4 leaves EF unchanged, q=3 subtracts 0.14.
        """
        miss = 5 - quality
        new_ease = ease_factor + (0.1 - miss * (0.08 + miss * 0.02))
        return self._clamp_ease(new_ease)

    def _clamp_ease(self, ease_factor: float) -> float:
        ease_factor = max(self.params.min_ease_factor, ease_factor)
        if self.params.max_ease_factor is not None:
            ease_factor = min(self.params.max_ease_factor, ease_factor)
        return ease_factor

    def next_interval(self, previous_interval: int, repetitions: int, ease_factor: float) -> int:
        """
        Interval after a successful review

        Args:
            previous_interval: Interval before this review (days)
            repetitions: Repetition count including this review
            ease_factor: Ease factor after this review

        Returns:
            Interval in days (at least 1)
        """
        if repetitions <= 1:
            return self.params.first_interval
        if repetitions == 2:
            return self.params.second_interval
        return max(1, _round_half_up(previous_interval * ease_factor))

    def next_state(
        self,
        current: SchedulingState,
        rating: Union[Rating, str, int],
        review_time: Optional[datetime] = None,
    ) -> SchedulingState:
        """
        Compute the scheduling state that follows a review

        Args:
            current: State before the review
            rating: AGAIN / HARD / GOOD / EASY (names and 1-4 accepted)
            review_time: When the review happened (default: now, UTC)

        Returns:
            New SchedulingState

        Raises:
            InvalidRequestError: if rating is not a known rating
        """
        rating = Rating.parse(rating)
        review_time = ensure_utc(review_time) or utc_now()

        if rating is Rating.AGAIN:
            ease_factor = max(
                self.params.min_ease_factor,
                current.ease_factor - self.params.again_ease_penalty,
            )
            repetitions = 0
            interval = self.params.again_interval
        else:
            ease_factor = self.adjust_ease_factor(current.ease_factor, rating.quality)
            repetitions = current.repetitions + 1
            interval = self.next_interval(current.interval, repetitions, ease_factor)

        logger.debug(
            "SM-2 %s: interval %d -> %d, reps %d -> %d, ease %.2f -> %.2f",
            rating.name, current.interval, interval,
            current.repetitions, repetitions,
            current.ease_factor, ease_factor,
        )

        return SchedulingState(
            next_review_at=review_time + timedelta(days=interval),
            interval=interval,
            repetitions=repetitions,
            ease_factor=ease_factor,
            last_reviewed_at=review_time,
        )

    def preview_intervals(self, current: SchedulingState) -> Dict[Rating, int]:
        """
        Preview intervals for all possible ratings
        Useful for showing the learner what each answer button does
        """
        return {
            rating: self.next_state(current, rating).interval
            for rating in Rating
        }

    def new_state(self, now: Optional[datetime] = None) -> SchedulingState:
        """Scheduling state for a card that has never been reviewed"""
        return SchedulingState.new(now=now, ease_factor=self.params.default_ease_factor)
