"""
Engine services and collaborator stores

Includes:
- QuizService: the exposed operations
- DuplicateDetector: pre-create similar-question check
- Store interfaces and in-memory reference implementations
"""
from .repositories import CardStore, DeckStore, UserStore, ResultLog
from .memory_store import (
    MemoryCardStore,
    MemoryDeckStore,
    MemoryUserStore,
    MemoryResultLog,
    similarity,
    trigrams,
)
from .duplicate_detection import DuplicateDetector, validate_threshold
from .quiz_service import QuizService

__all__ = [
    "CardStore",
    "DeckStore",
    "UserStore",
    "ResultLog",
    "MemoryCardStore",
    "MemoryDeckStore",
    "MemoryUserStore",
    "MemoryResultLog",
    "similarity",
    "trigrams",
    "DuplicateDetector",
    "validate_threshold",
    "QuizService",
]
