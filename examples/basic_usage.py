#!/usr/bin/env python3
"""
Basic Usage Example - NBBO Sync Engine

This script demonstrates the NBBO sync engine on a small simulated session.
It shows how to:
- Configure the trading window and quote-to-trade lag
- Build the per-second NBBO series from exchange quotes
- Merge trades with the lagged NBBO
- Inspect the runtime counters

Run: python examples/basic_usage.py
"""

import json
from datetime import date
from typing import List

from nbbo_app.data.models import MergedRecord, QuoteRecord, TradeRecord
from nbbo_app.engine import NBBOSyncEngine
from nbbo_app.logging import configure_logging
from nbbo_app.utils.time import format_clock, parse_clock

SESSION_DATE = date(2023, 3, 1)
OPEN = parse_clock("09:30:00")


def create_quote(symbol: str, offset: int, exchange: str, bid: float, bid_size: int,
                 offer: float, offer_size: int) -> QuoteRecord:
    """Create an eligible exchange quote offset seconds after the open."""
    return QuoteRecord(
        date=SESSION_DATE,
        symbol=symbol,
        time=OPEN + offset,
        exchange=exchange,
        bid=bid,
        bid_size=bid_size,
        offer=offer,
        offer_size=offer_size,
        mode=12,
    )


def create_trade(symbol: str, offset: int, price: float, size: int,
                 correction_code: int = 0) -> TradeRecord:
    """Create a trade offset seconds after the open."""
    return TradeRecord(
        date=SESSION_DATE,
        symbol=symbol,
        time=OPEN + offset,
        price=price,
        size=size,
        correction_code=correction_code,
    )


def sample_quotes() -> List[QuoteRecord]:
    """Quotes from three venues, one crossed second included."""
    return [
        # Pre-open quote seeds the book
        create_quote("AAA", -5, "N", 10.00, 100, 10.05, 200),
        create_quote("AAA", 0, "P", 10.01, 50, 10.06, 100),
        create_quote("AAA", 3, "N", 10.02, 300, 10.05, 200),
        # Q crosses the market; the previous NBBO is carried forward
        create_quote("AAA", 6, "Q", 10.07, 100, 10.10, 100),
        create_quote("AAA", 8, "N", 10.03, 400, 10.06, 100),
        create_quote("BBB", 2, "T", 50.00, 500, 50.04, 300),
    ]


def sample_trades() -> List[TradeRecord]:
    """Trades including a correction and a duplicate second."""
    return [
        create_trade("AAA", 1, 10.03, 100),
        create_trade("AAA", 4, 10.04, 200),
        create_trade("AAA", 4, 10.05, 100),        # Same second: last one wins
        create_trade("AAA", 7, 10.04, 100),
        create_trade("AAA", 9, 10.04, 100, 12),    # Corrected trade is ignored
        create_trade("BBB", 5, 50.02, 300),
    ]


def print_row(row: MergedRecord) -> None:
    """Print one merged row."""
    print(f"   {row.symbol} trade {format_clock(row.trade_time)} "
          f"@ {row.trade_price:.2f} x {row.trade_size} | "
          f"NBBO {format_clock(row.quote_time)} "
          f"{row.best_bid:.2f} x {row.best_bid_size} / "
          f"{row.best_offer:.2f} x {row.best_offer_size} | "
          f"implied {row.implied_price:.4f} bin {row.implied_price_bin}")


def main():
    """Main demo function."""
    print("=== NBBO Sync Engine - Basic Usage Example ===")
    print()

    configure_logging(level="WARNING")

    print("1. Initializing engine with a 1-second quote lag...")
    engine = NBBOSyncEngine(overrides={
        "session": {
            "start_time": "09:30:00",
            "end_time": "09:30:10",
            "lag_seconds": 1,
        }
    })
    print(f"   Window: {format_clock(engine.config.session.start_time)} - "
          f"{format_clock(engine.config.session.end_time)}")
    print(f"   Exchange slots: {engine.codec.slot_count}")
    print()

    print("2. Building the NBBO series for AAA...")
    for snapshot in engine.build_snapshots(q for q in sample_quotes() if q.symbol == "AAA"):
        print(f"   {format_clock(snapshot.time)} "
              f"{snapshot.best_bid:.2f} / {snapshot.best_offer:.2f} "
              f"({snapshot.best_bid_size} x {snapshot.best_offer_size})")
    print()

    print("3. Merging trades with the lagged NBBO...")
    rows = list(engine.run(sample_quotes(), sample_trades()))
    for row in rows:
        print_row(row)
    print()

    print("4. Runtime stats:")
    print(json.dumps(engine.get_runtime_stats(), indent=2))
    print()

    print("✅ Demo completed successfully!")
    print(f"   {len(rows)} trades matched to the NBBO in force one second earlier.")


if __name__ == "__main__":
    main()
