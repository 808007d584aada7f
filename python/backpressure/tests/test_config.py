"""Tests for logging configuration."""

import logging
from collections.abc import Iterator

import pytest
import reactivex as rx
from reactivex.subject import Subject

from backpressure import LoggingConfig, LogLevel, buffer_while_running, configure_logging
from backpressure.config import LOG_TRACE


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    yield
    configure_logging()


def test_log_level_mirrors_logging() -> None:
    assert LogLevel.DEBUG == logging.DEBUG
    assert LogLevel.WARNING == logging.WARNING


def test_configure_logging_defaults_to_warning() -> None:
    logger = configure_logging()

    assert logger.name == "backpressure"
    assert logger.level == logging.WARNING


def test_configure_logging_does_not_stack_handlers() -> None:
    """Reconfiguring replaces the stream handler instead of adding another."""
    logger = logging.getLogger("backpressure")
    before = len(logger.handlers)

    configure_logging(LOG_TRACE)
    configure_logging(LoggingConfig(level=LogLevel.INFO, fmt="%(message)s"))
    assert len(logger.handlers) == before + 1
    assert logger.level == logging.INFO

    configure_logging()
    assert len(logger.handlers) == before


def test_selection_start_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    """Operator reports selection starts on the module logger."""
    configure_logging(LoggingConfig(level=LogLevel.DEBUG))
    source: Subject[int] = Subject()

    with caplog.at_level(logging.DEBUG, logger="backpressure"):
        source.pipe(buffer_while_running(lambda batch: rx.of(*batch))).subscribe()
        source.on_next(1)
        source.on_completed()

    assert "Starting selection of 1 values" in caplog.text
    assert "Source completed" in caplog.text


def test_skipped_selection_logged(caplog: pytest.LogCaptureFixture) -> None:
    configure_logging(LoggingConfig(level=LogLevel.DEBUG))
    source: Subject[int] = Subject()

    with caplog.at_level(logging.DEBUG, logger="backpressure"):
        source.pipe(buffer_while_running(lambda batch: rx.of(*batch)))
        source.on_next(1)

    assert "No observers, skipping selection of 1 values" in caplog.text
