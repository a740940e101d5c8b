"""Tests for logging configuration."""

import logging

from fastapi.testclient import TestClient

from pantry_insights.api.app import create_app
from pantry_insights.app_logging import configure_logging


def test_configure_logging_keeps_single_handler() -> None:
    logger = logging.getLogger("pantry_insights")
    logger.handlers.clear()

    configure_logging()
    configure_logging("debug")

    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert not logger.propagate


def test_app_uses_configured_log_level(container) -> None:
    logger = logging.getLogger("pantry_insights")
    container.settings.log_level = "warning"

    TestClient(create_app(container))

    assert logger.level == logging.WARNING
    logger.setLevel(logging.INFO)
