"""
Lagged merge-join of NBBO snapshots and trades.

Both inputs are ordered by (date, symbol, time) but cover different symbols
and different active seconds, so a plain equi-merge does not work. The
synchronizer runs two catch-up loops over independent cursors:

- symbol catch-up: advance whichever cursor holds the smaller
  (date, symbol) until both agree;
- time catch-up: with diff = trade.time - (quote.time + lag), advance the
  quote cursor while diff > 0 and drop trades while diff < 0.

A MergedRecord is emitted only on diff == 0. Trades that never reach an
exact match are dropped. When either stream runs out, the other is drained
to its end so that ordering checks and upstream close-out still run.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Iterable, Iterator

from ..data.models import MergedRecord, NBBOSnapshot, TradeRecord
from ..logging.config import get_sync_logger, log_stream_summary
from .cursor import StreamCursor

logger = get_sync_logger(__name__)


class SyncState(str, Enum):
    """Position of the merge loop."""
    IDLE = "idle"
    SYMBOL_CATCH_UP = "symbol_catch_up"
    TIME_CATCH_UP = "time_catch_up"
    MATCHED = "matched"
    EXHAUSTED = "exhausted"


@dataclass
class SyncStats:
    """Counters accumulated over one merge pass."""
    trades_matched: int = 0
    trades_without_quotes: int = 0
    trades_unmatched_time: int = 0
    trades_after_exhaustion: int = 0
    snapshots_consumed: int = 0
    snapshots_skipped: int = 0

    @property
    def trades_unmatched(self) -> int:
        return (self.trades_without_quotes + self.trades_unmatched_time
                + self.trades_after_exhaustion)

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


class StreamSynchronizer:
    """
    Joins each trade with the snapshot whose lagged time equals the trade time.

    The snapshot stream may be produced live by QuoteAggregator.aggregate()
    or be any pre-materialized iterable of NBBOSnapshot; the lag is taken
    from each snapshot's ``effective_time``.
    """

    def __init__(self) -> None:
        self.state = SyncState.IDLE
        self.stats = SyncStats()

    def merge(self,
              snapshots: Iterable[NBBOSnapshot],
              trades: Iterable[TradeRecord]) -> Iterator[MergedRecord]:
        """
        Lazily merge the two streams.

        Args:
            snapshots: NBBO snapshots ordered by (date, symbol, time)
            trades: Filtered trades ordered by (date, symbol, time)

        Yields:
            MergedRecord for every trade with an exact lagged match

        Raises:
            OrderingViolationError: If either stream is out of order
        """
        quote_cursor: StreamCursor[NBBOSnapshot] = StreamCursor(snapshots, "nbbo")
        trade_cursor: StreamCursor[TradeRecord] = StreamCursor(trades, "trades")

        quote = quote_cursor.advance()
        trade = trade_cursor.advance()
        self.state = SyncState.SYMBOL_CATCH_UP

        while quote is not None and trade is not None:
            quote_group = (quote.date, quote.symbol)
            trade_group = (trade.date, trade.symbol)

            if quote_group != trade_group:
                self.state = SyncState.SYMBOL_CATCH_UP
                if quote_group < trade_group:
                    self.stats.snapshots_skipped += 1
                    quote = quote_cursor.advance()
                else:
                    self.stats.trades_without_quotes += 1
                    logger.debug(
                        "No quotes for trade symbol",
                        symbol=trade.symbol,
                        trade_time=trade.time
                    )
                    trade = trade_cursor.advance()
                continue

            self.state = SyncState.TIME_CATCH_UP
            diff = trade.time - quote.effective_time

            if diff > 0:
                self.stats.snapshots_skipped += 1
                quote = quote_cursor.advance()
            elif diff < 0:
                self.stats.trades_unmatched_time += 1
                logger.debug(
                    "No lagged quote at trade time",
                    symbol=trade.symbol,
                    trade_time=trade.time,
                    next_quote_time=quote.time
                )
                trade = trade_cursor.advance()
            else:
                self.state = SyncState.MATCHED
                self.stats.trades_matched += 1
                yield MergedRecord.from_match(quote, trade)
                trade = trade_cursor.advance()

        self.state = SyncState.EXHAUSTED

        # Remaining records are dropped; both streams are still read to the end
        while trade is not None:
            self.stats.trades_after_exhaustion += 1
            trade = trade_cursor.advance()

        if quote is not None:
            quote = quote_cursor.advance()
        while quote is not None:
            self.stats.snapshots_skipped += 1
            quote = quote_cursor.advance()

        self.stats.snapshots_consumed = quote_cursor.consumed
        log_stream_summary(logger, "sync", self.stats.as_dict())
