"""
Collaborator store interfaces

The engine never performs I/O itself; every fetch and persist goes through
one of these stores. Implementations raise NotFoundError for unknown ids.

Concurrent ratings of the same card are a store concern: a persistent
implementation must serialize the read-modify-write of a card's scheduling
state (optimistic concurrency or row locking).
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from retention.models import Card, Deck, QuizResult, SchedulingState, UserProgress


class CardStore(ABC):
    """Cards, their scheduling state and fuzzy question search"""

    @abstractmethod
    async def get(self, card_id: UUID) -> Card:
        """Fetch a card; raises NotFoundError if missing"""
        pass

    @abstractmethod
    async def list_by_deck(self, deck_id: UUID) -> List[Card]:
        pass

    @abstractmethod
    async def list_due(self, now: datetime) -> List[Card]:
        """Cards from every deck whose next review is at or before now"""
        pass

    @abstractmethod
    async def save_scheduling(
        self,
        card_id: UUID,
        scheduling: SchedulingState,
        now: Optional[datetime] = None,
    ) -> Card:
        """Persist a new scheduling state and return the updated card"""
        pass

    @abstractmethod
    async def find_similar(
        self,
        deck_id: UUID,
        question: str,
        threshold: float,
        limit: int,
    ) -> List[Card]:
        """
        Cards in the deck whose question scores at least `threshold`
        against `question`, best match first, at most `limit`
        """
        pass


class DeckStore(ABC):
    @abstractmethod
    async def get(self, deck_id: UUID) -> Deck:
        """Fetch a deck; raises NotFoundError if missing"""
        pass

    @abstractmethod
    async def get_by_share_token(self, token: str) -> Deck:
        """Fetch the deck carrying `token`; raises NotFoundError if none does"""
        pass

    @abstractmethod
    async def list_by_category(self, category: str) -> List[Deck]:
        pass

    @abstractmethod
    async def save(self, deck: Deck) -> Deck:
        pass


class UserStore(ABC):
    @abstractmethod
    async def get(self, user_id: UUID) -> UserProgress:
        """Fetch a user; raises NotFoundError if missing"""
        pass

    @abstractmethod
    async def get_or_create(
        self, display_name: str, email: Optional[str] = None
    ) -> UserProgress:
        """Fetch the user with this display name, creating it if needed"""
        pass

    @abstractmethod
    async def save(self, user: UserProgress) -> UserProgress:
        """Persist updated progress counters"""
        pass


class ResultLog(ABC):
    """Append-only quiz result log"""

    @abstractmethod
    async def append(self, result: QuizResult) -> None:
        pass
