"""
Duplicate card detection

Pre-create check for a proposed question. Scoring is delegated to the card
store's fuzzy search; this module validates the request and shapes the result.
"""
from typing import List, Optional
from uuid import UUID
import logging
import math

from retention.core.config import settings
from retention.core.exceptions import InvalidRequestError
from retention.models import Card
from retention.schemas import DuplicateCheckResult, SimilarCard
from retention.services.repositories import CardStore

logger = logging.getLogger(__name__)


def validate_threshold(threshold: float) -> float:
    """Similarity thresholds must lie in (0, 1]"""
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
        raise InvalidRequestError(f"similarity threshold must be a number, got {threshold!r}")
    if math.isnan(threshold) or not 0 < threshold <= 1:
        raise InvalidRequestError(f"similarity threshold must be in (0, 1], got {threshold}")
    return float(threshold)


class DuplicateDetector:
    def __init__(
        self,
        card_store: CardStore,
        default_threshold: Optional[float] = None,
        limit: Optional[int] = None,
    ):
        self.card_store = card_store
        self.default_threshold = validate_threshold(
            default_threshold if default_threshold is not None
            else settings.DEFAULT_SIMILARITY_THRESHOLD
        )
        self.limit = limit or settings.SIMILAR_CARDS_LIMIT

    async def find_similar(
        self,
        deck_id: UUID,
        question: str,
        threshold: Optional[float] = None,
    ) -> List[Card]:
        """
        Cards in the deck whose question resembles `question`

        Raises:
            InvalidRequestError: blank question or threshold outside (0, 1]
        """
        if deck_id is None:
            raise InvalidRequestError("deck id is required")
        if not question or not question.strip():
            raise InvalidRequestError("question must not be empty")
        threshold = self.default_threshold if threshold is None else validate_threshold(threshold)

        return await self.card_store.find_similar(deck_id, question.strip(), threshold, self.limit)

    async def check(
        self,
        deck_id: UUID,
        question: str,
        threshold: Optional[float] = None,
    ) -> DuplicateCheckResult:
        matches = await self.find_similar(deck_id, question, threshold)
        if matches:
            logger.info(f"Found {len(matches)} similar cards in deck {deck_id}")

        return DuplicateCheckResult(
            has_similar=bool(matches),
            similar_cards=[
                SimilarCard(
                    card_id=card.id,
                    deck_id=card.deck_id,
                    question=card.question,
                    answer=card.answer,
                )
                for card in matches
            ],
        )
