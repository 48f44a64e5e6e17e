"""Liquidity and implied-price metrics derived from the consolidated quote"""

from .implied_price import (
    NBBOMetrics,
    calculate_implied_price,
    calculate_nbbo_metrics,
    implied_price_bin,
    implied_price_fraction,
)

__all__ = [
    "NBBOMetrics",
    "calculate_implied_price",
    "calculate_nbbo_metrics",
    "implied_price_bin",
    "implied_price_fraction",
]
