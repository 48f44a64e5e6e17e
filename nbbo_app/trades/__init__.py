"""
Trade selection module.

Applies eligibility predicates to the ordered trade stream and keeps one
trade per (date, symbol, second).
"""

from .filter import TradeFilter, TradeFilterStats

__all__ = ["TradeFilter", "TradeFilterStats"]
