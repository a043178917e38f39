"""
User progress model

Counters and streaks are only ever replaced with the output of the
progress tracker.
"""
from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from retention.models.base import utc_now


class UserProgress(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: UUID = Field(default_factory=uuid4)
    display_name: str
    email: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    last_active_at: Optional[datetime] = None

    # Lifetime counters
    total_quizzes_taken: int = Field(0, ge=0)
    total_cards_reviewed: int = Field(0, ge=0)
    total_correct_answers: int = Field(0, ge=0)

    # Streaks (day resolution, UTC)
    current_streak: int = Field(0, ge=0)
    longest_streak: int = Field(0, ge=0)
    last_activity_date: Optional[date] = None

    @field_validator("display_name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("display name must not be empty")
        return value

    def accuracy_percentage(self) -> float:
        """Correct answers as a percentage of cards reviewed (0 when none reviewed)"""
        if self.total_cards_reviewed == 0:
            return 0.0
        return self.total_correct_answers / self.total_cards_reviewed * 100
