from .session import (
    QuizSession,
    InterleavedCard,
    DeckSummary,
    InterleavedQuizSession,
    SimilarCard,
    DuplicateCheckResult,
    DeckStatistics,
    SharedDeck,
)

__all__ = [
    "QuizSession",
    "InterleavedCard",
    "DeckSummary",
    "InterleavedQuizSession",
    "SimilarCard",
    "DuplicateCheckResult",
    "DeckStatistics",
    "SharedDeck",
]
