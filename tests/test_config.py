"""
Tests for settings validation and logging setup.
"""

import logging

import pytest

from culinary_search.config import Settings
from culinary_search.logging_config import HANDLER_NAME, configure_logging


def test_defaults():
    config = Settings(embedding_provider="ollama", search_cache_ttl=300)

    assert config.search_cache_ttl == 300
    assert config.is_local_provider is False


@pytest.mark.parametrize(
    "overrides",
    [
        {"embedding_provider": "openai"},
        {"embedding_timeout": 0},
        {"catalog_timeout": -1},
        {"search_cache_ttl": -5},
    ],
)
def test_invalid_settings(overrides):
    with pytest.raises(ValueError):
        Settings(**overrides)


def test_configure_logging_is_idempotent():
    logger = configure_logging("DEBUG")
    configure_logging("warning")

    installed = [h for h in logger.handlers if h.get_name() == HANDLER_NAME]
    assert logger.name == "culinary_search"
    assert len(installed) == 1
    assert installed[0].level == logging.WARNING
    assert logger.level == logging.WARNING
    assert logger.propagate is False


def test_configure_logging_keeps_foreign_handlers():
    logger = logging.getLogger("culinary_search")
    foreign = logging.NullHandler()
    logger.addHandler(foreign)

    configure_logging("INFO")

    assert foreign in logger.handlers
    assert [h.get_name() for h in logger.handlers].count(HANDLER_NAME) == 1


def test_configure_logging_unknown_level():
    assert configure_logging("LOUD").level == logging.INFO
