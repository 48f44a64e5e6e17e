"""Trade eligibility filtering and same-second collapsing."""

from dataclasses import asdict, dataclass
from datetime import date
from typing import Iterable, Iterator, Optional

import structlog

from ..config.defaults import SessionParams, TradeFilterParams
from ..data.models import TradeRecord
from ..data.validators import TradeValidator, in_universe
from ..errors import MalformedRecordError, OrderingViolationError
from ..logging.config import log_stream_summary

logger = structlog.get_logger(__name__)


@dataclass
class TradeFilterStats:
    """Counters accumulated over one filtering pass."""
    trades_seen: int = 0
    trades_rejected: int = 0
    trades_outside_universe: int = 0
    duplicates_collapsed: int = 0
    trades_emitted: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


class TradeFilter:
    """
    Selects eligible trades from an ordered trade stream.

    A trade is kept when its price and size are positive, its correction
    code is eligible, its symbol is in the universe and its time lies in
    [start_time + lag, end_time]. Of several eligible trades in the same
    second only the last is kept, matching the one-NBBO-per-second grid.
    """

    def __init__(self,
                 params: Optional[TradeFilterParams] = None,
                 session: Optional[SessionParams] = None) -> None:
        self.session = session or SessionParams()
        self.validator = TradeValidator(params, self.session)
        self.universe = frozenset(s.strip().upper() for s in self.session.symbols)
        self.stats = TradeFilterStats()
        self._last_key: Optional[tuple[date, str, int]] = None

    def filter(self, trades: Iterable[TradeRecord]) -> Iterator[TradeRecord]:
        """
        Lazily filter and collapse an ordered trade stream.

        Raises:
            OrderingViolationError: If the input is not sorted
        """
        pending: Optional[TradeRecord] = None

        for trade in trades:
            self._check_order(trade.key)
            self.stats.trades_seen += 1

            if not in_universe(trade.symbol, self.universe):
                self.stats.trades_outside_universe += 1
                continue

            try:
                self.validator.validate(trade)
            except MalformedRecordError as e:
                self.stats.trades_rejected += 1
                logger.debug(
                    "Dropping ineligible trade",
                    symbol=trade.symbol,
                    trade_time=trade.time,
                    field=e.field,
                    value=e.value
                )
                continue

            if pending is not None:
                if pending.key == trade.key:
                    self.stats.duplicates_collapsed += 1
                else:
                    self.stats.trades_emitted += 1
                    yield pending
            pending = trade

        if pending is not None:
            self.stats.trades_emitted += 1
            yield pending

        log_stream_summary(logger, "trade_filter", self.stats.as_dict())

    def _check_order(self, key: tuple[date, str, int]) -> None:
        if self._last_key is not None and key < self._last_key:
            logger.error(
                "Trade stream out of order",
                previous_key=str(self._last_key),
                current_key=str(key)
            )
            raise OrderingViolationError(
                f"Trade key {key} sorts before previous {self._last_key}",
                stream="trades",
                previous_key=self._last_key,
                current_key=key
            )
        self._last_key = key
