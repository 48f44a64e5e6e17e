"""
Error classification system for the NBBO reconstruction pipeline.

Record-level problems are recoverable and lead to silent filtering; ordering
and I/O problems are fatal and abort the batch.
"""

from .data_quality import (
    DataQualityError,
    MalformedRecordError,
)
from .system_failures import (
    SystemFailureError,
    OrderingViolationError,
    SourceReadError,
    ConfigurationError,
    BookStateError,
)
from .recovery import (
    GracefulDegradationError,
    CrossedMarketError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "MalformedRecordError",
    # System Failures
    "SystemFailureError",
    "OrderingViolationError",
    "SourceReadError",
    "ConfigurationError",
    "BookStateError",
    # Recovery Categories
    "GracefulDegradationError",
    "CrossedMarketError",
]
