"""Integration tests for the full NBBO reconstruction and matching pipeline."""

import csv
import pytest
from pathlib import Path

from nbbo_app.engine import NBBOSyncEngine


def write_csv(path: Path, rows: list) -> Path:
    with open(path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(rows[0]))
        writer.writeheader()
        writer.writerows(rows)
    return path


@pytest.fixture
def source_files(tmp_path, sample_quote_rows, sample_trade_rows):
    """Quote and trade CSV files in TAQ layout."""
    return (
        write_csv(tmp_path / "quotes.csv", sample_quote_rows),
        write_csv(tmp_path / "trades.csv", sample_trade_rows),
    )


def make_engine(config_dir, lag_seconds=0, symbols=None):
    session = {"start_time": "09:30:00", "end_time": "09:30:10", "lag_seconds": lag_seconds}
    if symbols is not None:
        session["symbols"] = symbols
    return NBBOSyncEngine(config_dir=config_dir, overrides={"session": session})


@pytest.mark.integration
class TestFullPipeline:
    """Integration tests for the complete pipeline."""

    def test_files_with_lag(self, tmp_path, source_files) -> None:
        """Each trade meets the NBBO one second earlier."""
        engine = make_engine(tmp_path, lag_seconds=1)

        rows = list(engine.run_files(*source_files))

        assert [(r.quote_time, r.trade_time) for r in rows] == [(34200, 34201), (34203, 34204)]

        first, second = rows
        assert (first.best_bid, first.best_offer) == (10.01, 10.05)
        assert (first.best_bid_size, first.best_offer_size) == (50, 200)
        assert first.implied_price == pytest.approx(10.018)
        assert first.implied_price_bin == 16
        assert first.trade_price == 10.03

        # N improves its bid to 10.02; P's stale 10.01 no longer sets the best
        assert (second.best_bid, second.best_offer) == (10.02, 10.05)
        assert (second.best_bid_size, second.best_offer_size) == (300, 200)
        assert second.implied_price == pytest.approx(10.038)
        assert second.trade_size == 200

    def test_files_without_lag(self, tmp_path, source_files) -> None:
        """Without lag, gap-filled seconds serve the trades."""
        engine = make_engine(tmp_path)

        rows = list(engine.run_files(*source_files))

        assert [(r.quote_time, r.trade_time) for r in rows] == [(34201, 34201), (34204, 34204)]
        assert rows[0].best_bid == 10.01
        assert rows[1].best_bid == 10.02

    def test_runtime_stats(self, tmp_path, source_files) -> None:
        engine = make_engine(tmp_path, lag_seconds=1)
        list(engine.run_files(*source_files))

        stats = engine.get_runtime_stats()

        assert stats["quotes_source"] == {"rows_read": 3, "rows_skipped": 0}
        assert stats["trades_source"] == {"rows_read": 2, "rows_skipped": 0}
        # 09:30:00 through 09:30:10 inclusive
        assert stats["aggregation"]["snapshots_emitted"] == 11
        assert stats["sync"]["trades_matched"] == 2
        assert stats["sync"]["trades_after_exhaustion"] == 0

    def test_symbol_universe(self, tmp_path, source_files) -> None:
        """Symbols outside the universe produce no rows."""
        engine = make_engine(tmp_path, symbols=["ZZZ"])

        rows = list(engine.run_files(*source_files))

        assert rows == []
        stats = engine.get_runtime_stats()
        assert stats["aggregation"]["records_outside_universe"] == 3
        assert stats["trade_filter"]["trades_outside_universe"] == 2

    def test_multi_symbol_run(self, tmp_path, quote_factory, trade_factory) -> None:
        """Symbols are aggregated and matched independently."""
        engine = make_engine(tmp_path)
        quotes = [
            quote_factory(symbol="AAA", time=34200, bid=10.00, offer=10.05),
            quote_factory(symbol="BBB", time=34205, bid=20.00, offer=20.10),
            quote_factory(symbol="CCC", time=34200, bid=30.00, offer=30.10),
        ]
        trades = [
            trade_factory(symbol="AAA", time=34209),
            trade_factory(symbol="BBB", time=34202),
            trade_factory(symbol="BBB", time=34206),
            trade_factory(symbol="DDD", time=34206),
        ]

        rows = list(engine.run(quotes, trades))

        assert [(r.symbol, r.quote_time, r.best_bid) for r in rows] == [
            ("AAA", 34209, 10.00),
            ("BBB", 34206, 20.00),
        ]
        sync = engine.get_runtime_stats()["sync"]
        assert sync["trades_unmatched_time"] == 1
        assert sync["trades_without_quotes"] == 0
        assert sync["trades_after_exhaustion"] == 1

    def test_rows_serialize(self, tmp_path, source_files) -> None:
        engine = make_engine(tmp_path, lag_seconds=1)

        rows = [r.as_dict() for r in engine.run_files(*source_files)]

        assert rows[0]["date"] == "2023-03-01"
        assert rows[0]["symbol"] == "AAA"

    def test_deterministic(self, tmp_path, source_files) -> None:
        """Re-running the same inputs gives the same rows."""
        engine = make_engine(tmp_path, lag_seconds=1)

        assert list(engine.run_files(*source_files)) == list(engine.run_files(*source_files))
