"""
Closed vocabularies shared by the engine components
"""
from enum import Enum
from typing import Union

from retention.core.exceptions import InvalidRequestError


class Rating(Enum):
    """Learner's self-reported recall quality for one review"""
    AGAIN = 1  # Complete failure
    HARD = 2   # Correct but difficult
    GOOD = 3   # Correct with moderate effort
    EASY = 4   # Correct with no effort

    @property
    def quality(self) -> int:
        """SM-2 quality score on the 0-5 scale"""
        return _QUALITY[self]

    @property
    def is_success(self) -> bool:
        return self is not Rating.AGAIN

    @classmethod
    def parse(cls, value: Union["Rating", str, int]) -> "Rating":
        """
        Parse a rating from an enum member, its name ("good") or value (3)

        Raises:
            InvalidRequestError: for anything that is not one of the four ratings
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                pass
        elif isinstance(value, str):
            member = cls.__members__.get(value.strip().upper())
            if member is not None:
                return member
        raise InvalidRequestError(f"Unknown rating: {value!r}")


_QUALITY = {
    Rating.AGAIN: 2,
    Rating.HARD: 3,
    Rating.GOOD: 4,
    Rating.EASY: 5,
}


class QuizDifficulty(str, Enum):
    """Card selection policy requested for a quiz session"""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"

    @classmethod
    def parse(cls, value: Union["QuizDifficulty", str]) -> "QuizDifficulty":
        """Parse a difficulty label; "difficult" is accepted for HARD"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            label = value.strip().lower()
            if label == "difficult":
                return cls.HARD
            try:
                return cls(label)
            except ValueError:
                pass
        raise InvalidRequestError(f"Unknown quiz difficulty: {value!r}")


class QuestionType(str, Enum):
    """Card question formats"""
    SIMPLE = "simple"
    MULTIPLE_CHOICE = "multiple_choice"
    SCENARIO_BASED = "scenario_based"
    MULTI_PART = "multi_part"


class DifficultyLevel(str, Enum):
    """Author-assigned deck difficulty label"""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"
