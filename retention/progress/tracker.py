"""
Progress Tracker
Lifetime counters and day-resolution activity streaks

Every operation returns a new UserProgress; the input is never modified.
Dates are compared in UTC.
"""
from datetime import date, datetime, timedelta
from typing import Optional, Tuple
import logging

from retention.core.exceptions import InvalidRequestError
from retention.models import UserProgress
from retention.models.base import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class ProgressTracker:
    """Sole mutator of per-user counters and streaks"""

    @staticmethod
    def advance_streak(
        current_streak: int,
        longest_streak: int,
        last_activity: Optional[date],
        today: date,
    ) -> Tuple[int, int]:
        """
        Streak after an activity on `today`

        Returns:
            (current_streak, longest_streak)
        """
        if last_activity is None:
            return 1, max(longest_streak, 1)

        # Same day (or a clock behind the stored date): no change
        if last_activity >= today:
            return current_streak, longest_streak

        # Yesterday: streak continues
        if last_activity == today - timedelta(days=1):
            current = current_streak + 1
            return current, max(longest_streak, current)

        # Streak broken
        return 1, max(longest_streak, 1)

    def record_activity(
        self, user: UserProgress, now: Optional[datetime] = None
    ) -> UserProgress:
        """Register activity at `now` and update the streak"""
        now = ensure_utc(now) or utc_now()
        today = now.date()

        current, longest = self.advance_streak(
            user.current_streak,
            user.longest_streak,
            user.last_activity_date,
            today,
        )
        last_date = today
        if user.last_activity_date is not None and user.last_activity_date > today:
            last_date = user.last_activity_date

        if current != user.current_streak:
            logger.debug("User %s streak %d -> %d", user.user_id, user.current_streak, current)

        return user.model_copy(update={
            "current_streak": current,
            "longest_streak": longest,
            "last_activity_date": last_date,
            "last_active_at": now,
        })

    def record_quiz_completion(
        self,
        user: UserProgress,
        cards_reviewed: int,
        correct_answers: int,
        now: Optional[datetime] = None,
    ) -> UserProgress:
        """
        Add a finished quiz to the lifetime counters and record activity

        Raises:
            InvalidRequestError: negative counts or more correct answers than reviews
        """
        self._check_counts(cards_reviewed, correct_answers)

        updated = user.model_copy(update={
            "total_quizzes_taken": user.total_quizzes_taken + 1,
            "total_cards_reviewed": user.total_cards_reviewed + cards_reviewed,
            "total_correct_answers": user.total_correct_answers + correct_answers,
        })
        return self.record_activity(updated, now)

    def record_card_review(
        self,
        user: UserProgress,
        is_correct: bool,
        now: Optional[datetime] = None,
    ) -> UserProgress:
        updated = user.model_copy(update={
            "total_cards_reviewed": user.total_cards_reviewed + 1,
            "total_correct_answers": user.total_correct_answers + (1 if is_correct else 0),
        })
        return self.record_activity(updated, now)

    @staticmethod
    def _check_counts(cards_reviewed: int, correct_answers: int) -> None:
        if cards_reviewed < 0:
            raise InvalidRequestError(f"cards_reviewed must not be negative, got {cards_reviewed}")
        if correct_answers < 0:
            raise InvalidRequestError(f"correct_answers must not be negative, got {correct_answers}")
        if correct_answers > cards_reviewed:
            raise InvalidRequestError(
                f"correct_answers ({correct_answers}) exceeds cards_reviewed ({cards_reviewed})"
            )
