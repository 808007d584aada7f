"""Logging configuration for backpressure operators."""

import logging
from dataclasses import dataclass
from enum import IntEnum

PACKAGE_LOGGER = "backpressure"

# Handler installed by configure_logging, replaced on reconfiguration
_handler: logging.Handler | None = None


class LogLevel(IntEnum):
    """Log levels mirroring Python's logging module."""

    NOTSET = logging.NOTSET
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


@dataclass(frozen=True)
class LoggingConfig:
    """Logging options for the backpressure package.

    Attributes:
        level: Level applied to the package logger
        fmt: Format string for a stream handler, None = leave handlers to the application
    """

    level: LogLevel = LogLevel.WARNING
    fmt: str | None = None


# Presets for common use cases
LOG_QUIET = LoggingConfig()
LOG_TRACE = LoggingConfig(level=LogLevel.DEBUG, fmt="%(asctime)s %(name)s %(levelname)s %(message)s")


def configure_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Apply config to the package logger and return it.

    Calling again replaces the handler installed by the previous call.
    """
    global _handler
    config = config or LOG_QUIET
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(config.level)

    if _handler is not None:
        logger.removeHandler(_handler)
        _handler = None

    if config.fmt is not None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(config.fmt))
        logger.addHandler(_handler)

    return logger
