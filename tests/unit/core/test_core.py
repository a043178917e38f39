"""
Unit tests for configuration, errors and logging setup
"""

import logging

import pytest
from loguru import logger

from retention.core import (
    InvalidRequestError,
    NotFoundError,
    RetentionError,
    Settings,
    settings,
)
from retention.core.logging import InterceptHandler, setup_logging


class TestSettings:
    def test_defaults(self):
        config = Settings()

        assert config.SM2_DEFAULT_EASE_FACTOR == 2.5
        assert config.SM2_MIN_EASE_FACTOR == 1.3
        assert config.SM2_MAX_EASE_FACTOR is None
        assert config.DEFAULT_SIMILARITY_THRESHOLD == 0.7
        assert config.SIMILAR_CARDS_LIMIT == 5
        assert config.RANDOM_SEED is None

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_QUIZ_CARD_COUNT", "25")
        monkeypatch.setenv("RANDOM_SEED", "1234")

        config = Settings()
        assert config.DEFAULT_QUIZ_CARD_COUNT == 25
        assert config.RANDOM_SEED == 1234

    def test_module_settings_instance(self):
        assert isinstance(settings, Settings)


class TestErrors:
    def test_hierarchy(self):
        assert issubclass(InvalidRequestError, RetentionError)
        assert issubclass(InvalidRequestError, ValueError)
        assert issubclass(NotFoundError, RetentionError)
        assert issubclass(NotFoundError, LookupError)

    def test_not_found_details(self):
        error = NotFoundError("Deck", "abc")

        assert error.entity == "Deck"
        assert error.identifier == "abc"
        assert str(error) == "Deck abc not found"


class TestLogging:
    @pytest.fixture
    def captured(self):
        root_handlers = list(logging.root.handlers)
        root_level = logging.root.level
        messages = []

        setup_logging("DEBUG")
        sink_id = logger.add(messages.append, level="DEBUG", format="{message}")
        yield messages

        logger.remove(sink_id)
        logging.root.handlers = root_handlers
        logging.root.setLevel(root_level)

    def test_root_logger_is_intercepted(self, captured):
        assert any(isinstance(h, InterceptHandler) for h in logging.root.handlers)

    def test_stdlib_records_reach_loguru(self, captured):
        logging.getLogger("retention.tests").warning("deck skipped")
        assert any("deck skipped" in str(m) for m in captured)
