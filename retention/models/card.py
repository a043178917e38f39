"""
Card and Scheduling State models

A card belongs to exactly one deck. Its scheduling state is only ever
replaced with the output of the scheduling engine.
"""
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from retention.models.base import ensure_utc, utc_now
from retention.models.enums import QuestionType


DEFAULT_EASE_FACTOR = 2.5


class SchedulingState(BaseModel):
    """
    Per-card SM-2 memory parameters

    interval == 0 marks a new card that has never been scheduled.
    """
    model_config = ConfigDict(frozen=True)

    next_review_at: datetime = Field(default_factory=utc_now)
    interval: int = Field(0, ge=0)  # days
    repetitions: int = Field(0, ge=0)  # consecutive successful reviews
    ease_factor: float = Field(DEFAULT_EASE_FACTOR, gt=0)
    last_reviewed_at: Optional[datetime] = None

    @field_validator("next_review_at", "last_reviewed_at")
    @classmethod
    def _as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)

    @classmethod
    def new(
        cls,
        now: Optional[datetime] = None,
        ease_factor: float = DEFAULT_EASE_FACTOR,
    ) -> "SchedulingState":
        """Unscheduled state for a freshly created card (due immediately)"""
        return cls(next_review_at=now or utc_now(), ease_factor=ease_factor)

    @property
    def is_new(self) -> bool:
        return self.repetitions == 0 and self.interval == 0

    def is_due(self, now: Optional[datetime] = None) -> bool:
        """A card is due when its next review is at or before now"""
        return self.next_review_at <= ensure_utc(now or utc_now())

    def overdue_by(self, now: Optional[datetime] = None) -> timedelta:
        return ensure_utc(now or utc_now()) - self.next_review_at


class QuestionMetadata(BaseModel):
    """Type tag plus the payload the question type needs"""
    model_config = ConfigDict(frozen=True)

    question_type: QuestionType = QuestionType.SIMPLE
    options: List[str] = Field(default_factory=list)
    correct_answers: List[str] = Field(default_factory=list)
    scenario: Optional[str] = None
    parts: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_payload(self) -> "QuestionMetadata":
        if self.question_type == QuestionType.MULTIPLE_CHOICE:
            if len(self.options) < 2:
                raise ValueError("multiple choice questions need at least two options")
            unknown = [a for a in self.correct_answers if a not in self.options]
            if unknown:
                raise ValueError(f"correct answers not among options: {unknown}")
        elif self.question_type == QuestionType.SCENARIO_BASED:
            if not self.scenario or not self.scenario.strip():
                raise ValueError("scenario based questions need scenario text")
        elif self.question_type == QuestionType.MULTI_PART:
            if not self.parts:
                raise ValueError("multi part questions need at least one part")
        return self

    @classmethod
    def simple(cls) -> "QuestionMetadata":
        return cls()

    @classmethod
    def multiple_choice(
        cls, options: List[str], correct_answers: List[str]
    ) -> "QuestionMetadata":
        return cls(
            question_type=QuestionType.MULTIPLE_CHOICE,
            options=list(options),
            correct_answers=list(correct_answers),
        )


class Card(BaseModel):
    """A question/answer pair owned by a deck"""
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    deck_id: UUID
    question: str
    answer: str
    metadata: QuestionMetadata = Field(default_factory=QuestionMetadata)
    scheduling: SchedulingState = Field(default_factory=SchedulingState)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("question", "answer")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value

    def with_scheduling(
        self, scheduling: SchedulingState, now: Optional[datetime] = None
    ) -> "Card":
        """Copy of this card carrying a new scheduling state"""
        return self.model_copy(
            update={"scheduling": scheduling, "updated_at": now or utc_now()}
        )
