"""Logging setup for the search service.

Modules log through ``logging.getLogger(__name__)``; this module attaches a
single stdout handler to the package logger so every ``culinary_search.*``
logger shares one format.

Usage:
    from culinary_search.logging_config import configure_logging
    configure_logging("DEBUG")
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOGGER_NAME = "culinary_search"
HANDLER_NAME = "culinary_search.stdout"


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Configure the ``culinary_search`` package logger.

    Args:
        level: Level name (e.g. ``"INFO"``) or numeric logging level.

    Returns:
        The configured package logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Handlers installed by others (e.g. pytest's caplog) are left alone
    handler = next((h for h in logger.handlers if h.get_name() == HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    handler.setLevel(level)

    return logger
