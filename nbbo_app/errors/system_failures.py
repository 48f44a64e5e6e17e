"""
System failure error classifications for unrecoverable errors.

Any of these aborts the whole batch; the transform is deterministic and
single-pass, so there is nothing to retry.
"""

from typing import Any, Optional


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class OrderingViolationError(SystemFailureError):
    """Input stream is not sorted by (date, symbol, time)."""

    def __init__(self, message: str, stream: Optional[str] = None,
                 previous_key: Optional[tuple] = None,
                 current_key: Optional[tuple] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.stream = stream
        self.previous_key = previous_key
        self.current_key = current_key


class SourceReadError(SystemFailureError):
    """A quote or trade source could not be read."""

    def __init__(self, message: str, source: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.source = source


class ConfigurationError(SystemFailureError):
    """Run configuration failed validation."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []


class BookStateError(SystemFailureError):
    """Exchange book was addressed outside its slot range."""

    def __init__(self, message: str, slot: Optional[int] = None,
                 slot_count: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.slot = slot
        self.slot_count = slot_count
