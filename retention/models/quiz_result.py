from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from retention.models.base import utc_now
from retention.models.enums import QuizDifficulty


class QuizResult(BaseModel):
    """Append-only log entry for one answered card"""
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    user_id: str = Field(..., min_length=1)
    deck_id: UUID
    card_id: UUID
    is_correct: bool
    difficulty: QuizDifficulty
    raw_answer: Optional[str] = None
    answered_at: datetime = Field(default_factory=utc_now)
