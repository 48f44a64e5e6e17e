"""
Data quality error classifications for quote and trade records.

These exceptions describe individual records that fail the selection
predicates. They are always handled by dropping the record.
"""

from typing import Any, Optional


class DataQualityError(Exception):
    """Base class for data quality issues that can be handled gracefully."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class MalformedRecordError(DataQualityError):
    """Record has a price, size or code outside its valid domain."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
