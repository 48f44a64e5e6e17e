"""
Recovery strategy classifications for error handling.

Errors in this module signal conditions the pipeline recovers from by
falling back to previously accepted state.
"""

from typing import Optional


class GracefulDegradationError(Exception):
    """Mixin for errors that allow continued operation with reduced functionality."""

    def __init__(self, message: str, degraded_functionality: Optional[str] = None,
                 fallback_strategy: Optional[str] = None, **kwargs):
        super().__init__(message)
        self.degraded_functionality = degraded_functionality
        self.fallback_strategy = fallback_strategy
        self.allows_degradation = True


class CrossedMarketError(GracefulDegradationError):
    """Consolidated bid is at or through the consolidated offer."""

    def __init__(self, message: str, best_bid: Optional[float] = None,
                 best_offer: Optional[float] = None, **kwargs):
        super().__init__(
            message,
            degraded_functionality="nbbo_update",
            fallback_strategy="carry_forward",
            **kwargs
        )
        self.best_bid = best_bid
        self.best_offer = best_offer

    @property
    def locked(self) -> bool:
        """True when bid equals offer rather than crossing it."""
        return self.best_bid is not None and self.best_bid == self.best_offer
