"""Tests for logging configuration."""

import logging

from nutrition_insights.app_logging import LOGGER_NAME, configure_logging


def test_configure_logging_is_idempotent() -> None:
    logger = logging.getLogger(LOGGER_NAME)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    logger.handlers.clear()

    try:
        configure_logging(logging.DEBUG)
        first_count = len(logger.handlers)

        configure_logging(logging.DEBUG)
        second_count = len(logger.handlers)

        assert first_count == 1
        assert second_count == 1
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
    finally:
        handlers, level, propagate = saved
        logger.handlers[:] = handlers
        logger.setLevel(level)
        logger.propagate = propagate
