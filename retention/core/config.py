"""
Engine configuration settings
"""
import os
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings with environment variable support"""

    # App
    APP_NAME: str = "Retention Engine"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")  # development, staging, production

    # Monitoring
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # SM-2 scheduling policy
    SM2_DEFAULT_EASE_FACTOR: float = 2.5
    SM2_MIN_EASE_FACTOR: float = 1.3
    SM2_MAX_EASE_FACTOR: Optional[float] = None  # None = no ceiling
    SM2_AGAIN_EASE_PENALTY: float = 0.2
    SM2_FIRST_INTERVAL: int = 1
    SM2_SECOND_INTERVAL: int = 6

    # Quiz generation
    DEFAULT_QUIZ_CARD_COUNT: int = 10
    DEFAULT_CARDS_PER_DECK: int = 5
    MAX_QUIZ_CARD_COUNT: int = 200

    # Duplicate detection
    DEFAULT_SIMILARITY_THRESHOLD: float = 0.7
    SIMILAR_CARDS_LIMIT: int = 5

    # Randomness (seed for reproducible sessions, None = system entropy)
    RANDOM_SEED: Optional[int] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )


settings = Settings()
