"""Tests for logging configuration."""

import logging

from nutrient_scanner.app_logging import configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("nutrient_scanner")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging()
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1
    assert logger.level == logging.INFO


def test_configure_logging_debug_level() -> None:
    logger = logging.getLogger("nutrient_scanner")

    configure_logging(debug=True)

    assert logger.level == logging.DEBUG
    configure_logging()
