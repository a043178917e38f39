from pydantic import BaseModel, Field
from typing import List, Optional, Dict
from datetime import datetime
from uuid import UUID, uuid4

from retention.models import Card, Deck, QuizDifficulty, utc_now


class QuizSession(BaseModel):
    """Single-deck answering plan"""
    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=utc_now)
    difficulty: QuizDifficulty
    deck_id: Optional[UUID] = None  # None = due cards from every deck
    card_ids: List[UUID] = Field(default_factory=list)

    @property
    def total_cards(self) -> int:
        return len(self.card_ids)


class InterleavedCard(BaseModel):
    card_id: UUID
    deck_id: UUID
    deck_name: str
    deck_category: str = ""
    position: int = Field(..., ge=0)


class DeckSummary(BaseModel):
    deck_id: UUID
    name: str
    category: str = ""
    card_count: int = Field(0, ge=0)


class InterleavedQuizSession(BaseModel):
    """Multi-deck answering plan with per-deck contribution summary"""
    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=utc_now)
    difficulty: QuizDifficulty
    cards: List[InterleavedCard] = Field(default_factory=list)
    decks: Dict[UUID, DeckSummary] = Field(default_factory=dict)
    interleaving_ratio: float = 0.0  # 0=fully blocked, 1=deck changes at every step

    @property
    def total_cards(self) -> int:
        return len(self.cards)


class SimilarCard(BaseModel):
    card_id: UUID
    deck_id: UUID
    question: str
    answer: str


class DuplicateCheckResult(BaseModel):
    has_similar: bool
    similar_cards: List[SimilarCard] = Field(default_factory=list)


class DeckStatistics(BaseModel):
    total_cards: int = 0
    due_cards: int = 0
    new_cards: int = 0
    mature_cards: int = 0
    average_ease_factor: float = 0.0
    retention_rate: float = 0.0


class SharedDeck(BaseModel):
    """Read-only view of a deck reached through its share token"""
    deck: Deck
    cards: List[Card] = Field(default_factory=list)
