"""
Parsers converting raw source rows into quote and trade records.

Rows are dictionaries keyed by column name, as produced by pandas
``DataFrame.to_dict("records")`` in data.sources.
Both snake_case names and TAQ-style upper-case headers are accepted.
"""

from datetime import date, datetime
from typing import Any, Callable, Union

from ..errors import MalformedRecordError
from ..utils.time import parse_clock
from .models import QuoteRecord, TradeRecord

QUOTE_COLUMNS: dict[str, tuple[str, ...]] = {
    "date": ("date", "DATE"),
    "symbol": ("symbol", "SYMBOL", "SYM_ROOT"),
    "time": ("time", "TIME", "TIME_M"),
    "exchange": ("exchange", "EX"),
    "bid": ("bid", "BID"),
    "bid_size": ("bid_size", "BIDSIZ"),
    "offer": ("offer", "OFR", "ASK"),
    "offer_size": ("offer_size", "OFRSIZ", "ASKSIZ"),
    "mode": ("mode", "MODE"),
}

TRADE_COLUMNS: dict[str, tuple[str, ...]] = {
    "date": ("date", "DATE"),
    "symbol": ("symbol", "SYMBOL", "SYM_ROOT"),
    "time": ("time", "TIME", "TIME_M"),
    "price": ("price", "PRICE"),
    "size": ("size", "SIZE"),
    "correction_code": ("correction_code", "CORR"),
}


def parse_date(value: Union[str, date]) -> date:
    """
    Parse a trading date.

    Args:
        value: date object, "YYYYMMDD" or "YYYY-MM-DD"

    Returns:
        datetime.date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    for fmt in ("%Y%m%d", "%Y-%m-%d"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    raise MalformedRecordError(f"Unparseable date: {value!r}", field="date", value=value)


def parse_time(value: Any) -> int:
    """Parse a record time into whole seconds since midnight."""
    text = str(value).strip()
    # Sub-second timestamps are truncated to the containing second
    if "." in text:
        text = text.split(".", 1)[0]
    try:
        return parse_clock(text)
    except ValueError:
        raise MalformedRecordError(f"Unparseable time: {value!r}", field="time", value=value)


def _lookup(row: dict[str, Any], aliases: tuple[str, ...], name: str) -> Any:
    for alias in aliases:
        if alias in row and row[alias] not in (None, ""):
            return row[alias]
    raise MalformedRecordError(f"Missing column {name}", field=name)


def _convert(value: Any, converter: Callable[[Any], Any], name: str) -> Any:
    try:
        return converter(value)
    except (TypeError, ValueError):
        raise MalformedRecordError(f"Invalid {name}: {value!r}", field=name, value=value)


def _to_int(value: Any) -> int:
    return int(float(value))


def parse_quote_row(row: dict[str, Any]) -> QuoteRecord:
    """
    Parse one quote row.

    Raises:
        MalformedRecordError: If a column is missing or unparseable
    """
    get = lambda name: _lookup(row, QUOTE_COLUMNS[name], name)  # noqa: E731

    return QuoteRecord(
        date=parse_date(get("date")),
        symbol=str(get("symbol")).strip().upper(),
        time=parse_time(get("time")),
        exchange=str(get("exchange")).strip().upper(),
        bid=_convert(get("bid"), float, "bid"),
        bid_size=_convert(get("bid_size"), _to_int, "bid_size"),
        offer=_convert(get("offer"), float, "offer"),
        offer_size=_convert(get("offer_size"), _to_int, "offer_size"),
        mode=_convert(get("mode"), _to_int, "mode"),
    )


def parse_trade_row(row: dict[str, Any]) -> TradeRecord:
    """
    Parse one trade row.

    Raises:
        MalformedRecordError: If a column is missing or unparseable
    """
    get = lambda name: _lookup(row, TRADE_COLUMNS[name], name)  # noqa: E731

    return TradeRecord(
        date=parse_date(get("date")),
        symbol=str(get("symbol")).strip().upper(),
        time=parse_time(get("time")),
        price=_convert(get("price"), float, "price"),
        size=_convert(get("size"), _to_int, "size"),
        correction_code=_convert(get("correction_code"), _to_int, "correction_code"),
    )
