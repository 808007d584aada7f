"""Exceptions raised by backpressure operators."""


class BackpressureError(Exception):
    """Base exception for backpressure operator errors."""


class AlreadyAttachedError(BackpressureError):
    """Operator instance was attached to its source more than once."""


class InvalidSelectionError(BackpressureError, TypeError):
    """Selector returned something that is not an Observable."""
