"""
In-process reference stores

Dict-backed implementations of every collaborator store. Suitable for tests,
demos and single-process use; nothing is persisted.

Question similarity follows PostgreSQL pg_trgm: each word is lower-cased and
padded with two leading blanks and one trailing blank, split into trigrams,
and two strings score |shared trigrams| / |all trigrams|.
"""
from datetime import datetime
from typing import Dict, List, Optional, Set
from uuid import UUID
import asyncio
import logging
import re

from retention.core.exceptions import NotFoundError
from retention.models import Card, Deck, QuizResult, SchedulingState, UserProgress
from retention.models.base import ensure_utc, utc_now
from retention.services.repositories import CardStore, DeckStore, ResultLog, UserStore

logger = logging.getLogger(__name__)

_WORD = re.compile(r"[^\W_]+")


def trigrams(text: str) -> Set[str]:
    """pg_trgm-style trigram set of `text`"""
    grams: Set[str] = set()
    for word in _WORD.findall(text.lower()):
        padded = f"  {word} "
        grams.update(padded[i:i + 3] for i in range(len(padded) - 2))
    return grams


def similarity(a: str, b: str) -> float:
    """Trigram similarity in [0, 1]; 0 when either side has no words"""
    left, right = trigrams(a), trigrams(b)
    if not left or not right:
        return 0.0
    return len(left & right) / len(left | right)


class MemoryCardStore(CardStore):
    def __init__(self, cards: Optional[List[Card]] = None):
        self._cards: Dict[UUID, Card] = {}
        self._lock = asyncio.Lock()
        for card in cards or []:
            self.add(card)

    def add(self, card: Card) -> Card:
        self._cards[card.id] = card
        return card

    async def get(self, card_id: UUID) -> Card:
        card = self._cards.get(card_id)
        if card is None:
            raise NotFoundError("Card", card_id)
        return card

    async def list_by_deck(self, deck_id: UUID) -> List[Card]:
        return [c for c in self._cards.values() if c.deck_id == deck_id]

    async def list_due(self, now: datetime) -> List[Card]:
        now = ensure_utc(now)
        due = [c for c in self._cards.values() if c.scheduling.is_due(now)]
        due.sort(key=lambda c: c.scheduling.next_review_at)
        return due

    async def save_scheduling(
        self,
        card_id: UUID,
        scheduling: SchedulingState,
        now: Optional[datetime] = None,
    ) -> Card:
        async with self._lock:
            card = await self.get(card_id)
            updated = card.with_scheduling(scheduling, ensure_utc(now) or utc_now())
            self._cards[card_id] = updated
        return updated

    async def find_similar(
        self,
        deck_id: UUID,
        question: str,
        threshold: float,
        limit: int,
    ) -> List[Card]:
        scored = []
        for card in self._cards.values():
            if card.deck_id != deck_id:
                continue
            score = similarity(question, card.question)
            if score >= threshold:
                scored.append((score, card))

        scored.sort(key=lambda pair: pair[0], reverse=True)
        logger.debug(f"Trigram search in deck {deck_id}: {len(scored)} matches >= {threshold}")
        return [card for _, card in scored[:limit]]


class MemoryDeckStore(DeckStore):
    def __init__(self, decks: Optional[List[Deck]] = None):
        self._decks: Dict[UUID, Deck] = {}
        for deck in decks or []:
            self._decks[deck.id] = deck

    async def get(self, deck_id: UUID) -> Deck:
        deck = self._decks.get(deck_id)
        if deck is None:
            raise NotFoundError("Deck", deck_id)
        return deck

    async def get_by_share_token(self, token: str) -> Deck:
        for deck in self._decks.values():
            if deck.share_token is not None and deck.share_token == token:
                return deck
        raise NotFoundError("Shared deck", token)

    async def list_by_category(self, category: str) -> List[Deck]:
        wanted = category.strip().lower()
        return [d for d in self._decks.values() if d.category.strip().lower() == wanted]

    async def save(self, deck: Deck) -> Deck:
        self._decks[deck.id] = deck
        return deck


class MemoryUserStore(UserStore):
    def __init__(self):
        self._users: Dict[UUID, UserProgress] = {}

    async def get(self, user_id: UUID) -> UserProgress:
        user = self._users.get(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def get_or_create(
        self, display_name: str, email: Optional[str] = None
    ) -> UserProgress:
        name = display_name.strip()
        for user in self._users.values():
            if user.display_name == name:
                return user

        user = UserProgress(display_name=name, email=email)
        self._users[user.user_id] = user
        logger.info(f"Created user {user.user_id} ({name})")
        return user

    async def save(self, user: UserProgress) -> UserProgress:
        if user.user_id not in self._users:
            raise NotFoundError("User", user.user_id)
        self._users[user.user_id] = user
        return user


class MemoryResultLog(ResultLog):
    def __init__(self):
        self._results: List[QuizResult] = []

    async def append(self, result: QuizResult) -> None:
        self._results.append(result)

    async def list_by_user(self, user_id: str) -> List[QuizResult]:
        return [r for r in self._results if r.user_id == user_id]

    async def list_by_deck(self, deck_id: UUID) -> List[QuizResult]:
        return [r for r in self._results if r.deck_id == deck_id]

    def __len__(self) -> int:
        return len(self._results)
