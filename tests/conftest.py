"""Pytest configuration and shared fixtures."""

import pytest
from datetime import date
from typing import Any, Callable

from nbbo_app.config.defaults import NBBOParams, QuoteFilterParams, SessionParams
from nbbo_app.data.models import QuoteRecord, TradeRecord


TRADE_DATE = date(2023, 3, 1)


def make_quote(symbol: str = "AAA", time: int = 100, exchange: str = "N",
               bid: float = 10.00, bid_size: int = 100,
               offer: float = 10.05, offer_size: int = 100,
               mode: int = 12, trade_date: date = TRADE_DATE) -> QuoteRecord:
    """Build a quote record with sensible defaults."""
    return QuoteRecord(
        date=trade_date,
        symbol=symbol,
        time=time,
        exchange=exchange,
        bid=bid,
        bid_size=bid_size,
        offer=offer,
        offer_size=offer_size,
        mode=mode,
    )


def make_trade(symbol: str = "AAA", time: int = 100, price: float = 10.02,
               size: int = 100, correction_code: int = 0,
               trade_date: date = TRADE_DATE) -> TradeRecord:
    """Build a trade record with sensible defaults."""
    return TradeRecord(
        date=trade_date,
        symbol=symbol,
        time=time,
        price=price,
        size=size,
        correction_code=correction_code,
    )


@pytest.fixture
def quote_factory() -> Callable[..., QuoteRecord]:
    """Factory for quote records."""
    return make_quote


@pytest.fixture
def trade_factory() -> Callable[..., TradeRecord]:
    """Factory for trade records."""
    return make_trade


@pytest.fixture
def short_session() -> SessionParams:
    """A 101-second trading window starting at t=100 with no lag."""
    return SessionParams(start_time=100, end_time=200, lag_seconds=0)


@pytest.fixture
def nbbo_params() -> NBBOParams:
    """Default NBBO derivation parameters."""
    return NBBOParams()


@pytest.fixture
def quote_params() -> QuoteFilterParams:
    """Default quote filter parameters."""
    return QuoteFilterParams()


@pytest.fixture
def sample_quote_rows() -> list[dict[str, Any]]:
    """Quote rows in TAQ-style column layout."""
    return [
        {"DATE": "20230301", "SYMBOL": "AAA", "TIME": "09:30:00", "EX": "N",
         "BID": "10.00", "BIDSIZ": "100", "OFR": "10.05", "OFRSIZ": "200", "MODE": "12"},
        {"DATE": "20230301", "SYMBOL": "AAA", "TIME": "09:30:00", "EX": "P",
         "BID": "10.01", "BIDSIZ": "50", "OFR": "10.06", "OFRSIZ": "100", "MODE": "12"},
        {"DATE": "20230301", "SYMBOL": "AAA", "TIME": "09:30:03", "EX": "N",
         "BID": "10.02", "BIDSIZ": "300", "OFR": "10.05", "OFRSIZ": "200", "MODE": "12"},
    ]


@pytest.fixture
def sample_trade_rows() -> list[dict[str, Any]]:
    """Trade rows in TAQ-style column layout."""
    return [
        {"DATE": "20230301", "SYMBOL": "AAA", "TIME": "09:30:01",
         "PRICE": "10.03", "SIZE": "100", "CORR": "0"},
        {"DATE": "20230301", "SYMBOL": "AAA", "TIME": "09:30:04",
         "PRICE": "10.04", "SIZE": "200", "CORR": "0"},
    ]
