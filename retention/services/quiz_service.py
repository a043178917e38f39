"""
Quiz Service
Exposed operations of the retention engine

Orchestrates the pure components (scheduling, selection, interleaving,
progress tracking) over the collaborator stores. Input is validated before
any store write. NotFoundError raised by a store propagates unchanged, except
that unknown decks are skipped when building an interleaved session.
"""
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Union
from uuid import UUID
import logging
import random

from retention.core.config import settings
from retention.core.exceptions import InvalidRequestError, NotFoundError
from retention.models import (
    Card,
    Deck,
    QuizDifficulty,
    QuizResult,
    Rating,
    UserProgress,
)
from retention.models.base import ensure_utc, utc_now
from retention.progress import ProgressTracker
from retention.quiz import CardSelector, InterleavingScheduler
from retention.scheduling import SchedulingEngine, SM2Parameters, calculate_deck_statistics
from retention.schemas import (
    DeckStatistics,
    DeckSummary,
    DuplicateCheckResult,
    InterleavedCard,
    InterleavedQuizSession,
    QuizSession,
    SharedDeck,
)
from retention.services.duplicate_detection import DuplicateDetector
from retention.services.repositories import CardStore, DeckStore, ResultLog, UserStore

logger = logging.getLogger(__name__)


def _check_count(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRequestError(f"{name} must be an integer, got {value!r}")
    if not 1 <= value <= settings.MAX_QUIZ_CARD_COUNT:
        raise InvalidRequestError(
            f"{name} must be between 1 and {settings.MAX_QUIZ_CARD_COUNT}, got {value}"
        )
    return value


class QuizService:
    """
    Quiz generation, rating submission and progress bookkeeping

    Stateless apart from its collaborators and the random source, so one
    instance can serve concurrent requests.
    """

    def __init__(
        self,
        card_store: CardStore,
        deck_store: DeckStore,
        user_store: UserStore,
        result_log: ResultLog,
        engine: Optional[SchedulingEngine] = None,
        selector: Optional[CardSelector] = None,
        interleaver: Optional[InterleavingScheduler] = None,
        tracker: Optional[ProgressTracker] = None,
        rng: Optional[random.Random] = None,
    ):
        self.card_store = card_store
        self.deck_store = deck_store
        self.user_store = user_store
        self.result_log = result_log

        self.rng = rng or random.Random(settings.RANDOM_SEED)
        self.engine = engine or SchedulingEngine(SM2Parameters.from_settings())
        self.selector = selector or CardSelector(self.rng)
        self.interleaver = interleaver or InterleavingScheduler(self.rng)
        self.tracker = tracker or ProgressTracker()
        self.duplicates = DuplicateDetector(card_store)

    # ==================== Sessions ====================

    async def generate_quiz(
        self,
        difficulty: Union[QuizDifficulty, str],
        count: Optional[int] = None,
        deck_id: Optional[UUID] = None,
        now: Optional[datetime] = None,
    ) -> QuizSession:
        """
        Build a single-deck quiz session

        Without a deck id the candidates are the due cards of every deck.
        An empty candidate pool yields an empty session.
        """
        difficulty = QuizDifficulty.parse(difficulty)
        count = _check_count("count", settings.DEFAULT_QUIZ_CARD_COUNT if count is None else count)
        now = ensure_utc(now) or utc_now()

        if deck_id is not None:
            await self.deck_store.get(deck_id)
            candidates = await self.card_store.list_by_deck(deck_id)
        else:
            candidates = await self.card_store.list_due(now)

        cards = self.selector.select(candidates, difficulty, count, rng=self.rng, now=now)
        session = QuizSession(
            created_at=now,
            difficulty=difficulty,
            deck_id=deck_id,
            card_ids=[c.id for c in cards],
        )

        logger.info(
            f"Generated {difficulty.value} quiz {session.id}: "
            f"{session.total_cards} of {len(candidates)} candidates "
            f"(deck={deck_id or 'all due'})"
        )
        return session

    async def create_interleaved_session(
        self,
        deck_ids: Iterable[UUID],
        cards_per_deck: Optional[int] = None,
        difficulty: Union[QuizDifficulty, str] = QuizDifficulty.MEDIUM,
        now: Optional[datetime] = None,
    ) -> InterleavedQuizSession:
        """
        Build a multi-deck session with no back-to-back cards from one deck

        Unknown deck ids are skipped with a warning; when none of the decks
        exist the session is empty.

        Raises:
            InvalidRequestError: no deck ids, bad count or difficulty
        """
        deck_ids = self.interleaver.normalize_deck_ids(deck_ids)
        difficulty = QuizDifficulty.parse(difficulty)
        cards_per_deck = _check_count(
            "cards_per_deck",
            settings.DEFAULT_CARDS_PER_DECK if cards_per_deck is None else cards_per_deck,
        )

        decks: List[Deck] = []
        for deck_id in deck_ids:
            try:
                decks.append(await self.deck_store.get(deck_id))
            except NotFoundError:
                logger.warning(f"Deck {deck_id} not found, skipping it in interleaved session")

        return await self._build_interleaved(decks, cards_per_deck, difficulty, now)

    async def create_category_session(
        self,
        category: str,
        cards_per_deck: Optional[int] = None,
        difficulty: Union[QuizDifficulty, str] = QuizDifficulty.MEDIUM,
        now: Optional[datetime] = None,
    ) -> InterleavedQuizSession:
        """Interleaved session over every deck in a category"""
        if not category or not category.strip():
            raise InvalidRequestError("category must not be empty")
        difficulty = QuizDifficulty.parse(difficulty)
        cards_per_deck = _check_count(
            "cards_per_deck",
            settings.DEFAULT_CARDS_PER_DECK if cards_per_deck is None else cards_per_deck,
        )

        decks = await self.deck_store.list_by_category(category.strip())
        if not decks:
            logger.warning(f"No decks in category '{category}'")
        return await self._build_interleaved(decks, cards_per_deck, difficulty, now)

    async def _build_interleaved(
        self,
        decks: List[Deck],
        cards_per_deck: int,
        difficulty: QuizDifficulty,
        now: Optional[datetime],
    ) -> InterleavedQuizSession:
        now = ensure_utc(now) or utc_now()
        if not decks:
            return InterleavedQuizSession(created_at=now, difficulty=difficulty)

        lanes: Dict[UUID, List[Card]] = {}
        for deck in decks:
            candidates = await self.card_store.list_by_deck(deck.id)
            lanes[deck.id] = self.selector.select(
                candidates, difficulty, cards_per_deck, rng=self.rng, now=now
            )

        merged = self.interleaver.interleave(lanes, rng=self.rng)
        by_id = {deck.id: deck for deck in decks}

        cards = [
            InterleavedCard(
                card_id=card.id,
                deck_id=deck_id,
                deck_name=by_id[deck_id].name,
                deck_category=by_id[deck_id].category,
                position=position,
            )
            for position, (deck_id, card) in enumerate(merged)
        ]
        summaries = {
            deck.id: DeckSummary(
                deck_id=deck.id,
                name=deck.name,
                category=deck.category,
                card_count=len(lanes[deck.id]),
            )
            for deck in decks
        }

        session = InterleavedQuizSession(
            created_at=now,
            difficulty=difficulty,
            cards=cards,
            decks=summaries,
            interleaving_ratio=self.interleaver.interleaving_ratio([c.deck_id for c in cards]),
        )

        logger.info(
            f"Created interleaved session {session.id}: {session.total_cards} cards "
            f"from {len(decks)} decks (ratio={session.interleaving_ratio:.2f})"
        )
        return session

    # ==================== Reviews ====================

    async def submit_rating(
        self,
        card_id: UUID,
        rating: Union[Rating, str, int],
        now: Optional[datetime] = None,
    ) -> Card:
        """Apply a rating to a card's schedule and persist the new state"""
        rating = Rating.parse(rating)
        now = ensure_utc(now) or utc_now()

        card = await self.card_store.get(card_id)
        new_state = self.engine.next_state(card.scheduling, rating, now)
        updated = await self.card_store.save_scheduling(card_id, new_state, now)

        logger.info(
            f"Card {card_id} rated {rating.name}: next review in "
            f"{new_state.interval} days (ease {new_state.ease_factor:.2f})"
        )
        return updated

    async def record_result(
        self,
        user_id: Union[UUID, str],
        deck_id: UUID,
        card_id: UUID,
        is_correct: bool,
        difficulty: Union[QuizDifficulty, str],
        raw_answer: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> None:
        """Append one answered card to the result log"""
        if user_id is None or not str(user_id).strip():
            raise InvalidRequestError("user id is required")
        if deck_id is None or card_id is None:
            raise InvalidRequestError("deck id and card id are required")

        result = QuizResult(
            user_id=str(user_id),
            deck_id=deck_id,
            card_id=card_id,
            is_correct=is_correct,
            difficulty=QuizDifficulty.parse(difficulty),
            raw_answer=raw_answer,
            answered_at=ensure_utc(now) or utc_now(),
        )
        await self.result_log.append(result)
        logger.info(
            f"Recorded {'correct' if is_correct else 'incorrect'} answer "
            f"for card {card_id} by user {user_id}"
        )

    async def check_duplicates(
        self,
        deck_id: UUID,
        question: str,
        threshold: Optional[float] = None,
    ) -> DuplicateCheckResult:
        return await self.duplicates.check(deck_id, question, threshold)

    async def get_deck_statistics(
        self, deck_id: UUID, now: Optional[datetime] = None
    ) -> DeckStatistics:
        await self.deck_store.get(deck_id)
        cards = await self.card_store.list_by_deck(deck_id)
        return calculate_deck_statistics(cards, now)

    # ==================== Users ====================

    async def identify_user(
        self, display_name: str, email: Optional[str] = None
    ) -> UserProgress:
        """Fetch or create the user with this display name"""
        if not display_name or not display_name.strip():
            raise InvalidRequestError("display name must not be empty")
        return await self.user_store.get_or_create(display_name.strip(), email)

    async def complete_quiz(
        self,
        user_id: UUID,
        cards_reviewed: int,
        correct_answers: int,
        now: Optional[datetime] = None,
    ) -> UserProgress:
        """Add a finished quiz to the user's counters and streak"""
        user = await self.user_store.get(user_id)
        updated = self.tracker.record_quiz_completion(user, cards_reviewed, correct_answers, now)
        saved = await self.user_store.save(updated)

        logger.info(
            f"User {user_id} completed quiz: {correct_answers}/{cards_reviewed} correct, "
            f"streak {saved.current_streak}"
        )
        return saved

    async def record_activity(
        self, user_id: UUID, now: Optional[datetime] = None
    ) -> UserProgress:
        user = await self.user_store.get(user_id)
        return await self.user_store.save(self.tracker.record_activity(user, now))

    # ==================== Sharing ====================

    async def share_deck(self, deck_id: UUID) -> str:
        """Issue a new share token for a deck, replacing any previous one"""
        deck = await self.deck_store.get(deck_id)
        token = deck.generate_share_token()
        await self.deck_store.save(deck)
        logger.info(f"Deck {deck_id} shared")
        return token

    async def revoke_share(self, deck_id: UUID) -> None:
        deck = await self.deck_store.get(deck_id)
        if not deck.is_shared:
            return
        deck.revoke_share_token()
        await self.deck_store.save(deck)
        logger.info(f"Deck {deck_id} share revoked")

    async def get_shared_deck(self, token: str) -> SharedDeck:
        """Read-only view of the deck carrying `token`"""
        if not token or not token.strip():
            raise InvalidRequestError("share token must not be empty")
        deck = await self.deck_store.get_by_share_token(token.strip())
        cards = await self.card_store.list_by_deck(deck.id)
        return SharedDeck(deck=deck.model_copy(), cards=cards)
