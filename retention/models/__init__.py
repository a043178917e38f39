"""
Domain models for decks, cards, quiz results and learner progress
"""
from .enums import Rating, QuizDifficulty, QuestionType, DifficultyLevel
from .card import Card, SchedulingState, QuestionMetadata, DEFAULT_EASE_FACTOR
from .deck import Deck
from .quiz_result import QuizResult
from .user import UserProgress
from .base import utc_now

__all__ = [
    # Enums
    "Rating",
    "QuizDifficulty",
    "QuestionType",
    "DifficultyLevel",
    # Entities
    "Card",
    "SchedulingState",
    "QuestionMetadata",
    "DEFAULT_EASE_FACTOR",
    "Deck",
    "QuizResult",
    "UserProgress",
    "utc_now",
]
