"""
Consolidated quote (NBBO) reconstruction module.

Maps venue labels to book slots and aggregates per-exchange quotes into one
consolidated snapshot per second per symbol.
"""

from .aggregator import AggregatorPhase, AggregatorStats, QuoteAggregator
from .codec import ExchangeCodec

__all__ = [
    "AggregatorPhase",
    "AggregatorStats",
    "ExchangeCodec",
    "QuoteAggregator",
]
