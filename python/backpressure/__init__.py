"""Backpressure-aware operators for RxPy pipelines."""

import logging

from backpressure.buffer_while_running import BufferWhileRunning, SelectionState, buffer_while_running
from backpressure.config import LogLevel, LoggingConfig, configure_logging
from backpressure.exceptions import AlreadyAttachedError, BackpressureError, InvalidSelectionError
from backpressure.utils import Operator, Selector

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AlreadyAttachedError",
    "BackpressureError",
    "BufferWhileRunning",
    "InvalidSelectionError",
    "LogLevel",
    "LoggingConfig",
    "Operator",
    "SelectionState",
    "Selector",
    "buffer_while_running",
    "configure_logging",
]
