"""
Deck model

Decks own their cards (cards are fetched through the card store). A deck may
carry an opaque share token granting read-only access to its cards.
"""
import secrets
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

from retention.models.base import utc_now
from retention.models.enums import DifficultyLevel


SHARE_TOKEN_LENGTH = 12


class Deck(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    description: str = ""
    category: str = ""
    subcategory: str = ""
    difficulty_level: DifficultyLevel = DifficultyLevel.INTERMEDIATE
    share_token: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("deck name must not be empty")
        return value

    @property
    def is_shared(self) -> bool:
        return self.share_token is not None

    def generate_share_token(self) -> str:
        """Issue a new URL-safe share token, replacing any previous one"""
        self.share_token = secrets.token_urlsafe(SHARE_TOKEN_LENGTH)[:SHARE_TOKEN_LENGTH]
        self.updated_at = utc_now()
        return self.share_token

    def revoke_share_token(self) -> None:
        self.share_token = None
        self.updated_at = utc_now()
