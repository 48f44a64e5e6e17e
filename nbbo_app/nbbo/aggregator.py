"""
Consolidated best bid and offer aggregation.

Consumes per-exchange quotes ordered by (date, symbol, time) and produces one
NBBOSnapshot per second per symbol. Each symbol runs through its own
lifecycle:

    INIT -> ACCUMULATING -> EMIT (loop) -> reset at the next (date, symbol)

An ExchangeBook holds the last quote of every exchange for the current
symbol. A second whose consolidated quote would be crossed or locked is
discarded, the book is cleared, and the last accepted NBBO is carried
forward.
"""

from dataclasses import asdict, dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Iterator, Optional, Sequence

from ..config.defaults import NBBOParams, QuoteFilterParams, SessionParams
from ..data.models import ExchangeBook, NBBOSnapshot, QuoteRecord
from ..data.validators import QuoteValidator, in_universe
from ..errors import CrossedMarketError, MalformedRecordError, OrderingViolationError
from ..logging.config import get_aggregation_logger, log_market_recovery, log_stream_summary
from ..metrics.implied_price import calculate_nbbo_metrics
from .codec import ExchangeCodec

logger = get_aggregation_logger(__name__)


class AggregatorPhase(str, Enum):
    """Lifecycle of the per-symbol aggregation state."""
    INIT = "init"
    ACCUMULATING = "accumulating"
    EMIT = "emit"


@dataclass
class AggregatorStats:
    """Counters accumulated over one aggregation pass."""
    records_seen: int = 0
    records_dropped: int = 0
    records_outside_universe: int = 0
    records_after_close: int = 0
    seconds_processed: int = 0
    crossed_seconds: int = 0
    one_sided_seconds: int = 0
    snapshots_emitted: int = 0
    snapshots_filled: int = 0
    symbols_processed: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


class QuoteAggregator:
    """Builds the gapless per-second NBBO series from exchange quotes."""

    def __init__(
        self,
        codec: Optional[ExchangeCodec] = None,
        quote_params: Optional[QuoteFilterParams] = None,
        nbbo_params: Optional[NBBOParams] = None,
        session: Optional[SessionParams] = None,
    ) -> None:
        self.codec = codec or ExchangeCodec()
        self.validator = QuoteValidator(quote_params)
        self.nbbo_params = nbbo_params or NBBOParams()
        self.session = session or SessionParams()
        self.universe = frozenset(s.strip().upper() for s in self.session.symbols)

        self.stats = AggregatorStats()
        self.phase = AggregatorPhase.INIT

        # Per-symbol state, rebuilt at every (date, symbol) boundary
        self.book: Optional[ExchangeBook] = None
        self._last_accepted: Optional[NBBOSnapshot] = None
        self._last_emitted_time: Optional[int] = None

        self._last_key: Optional[tuple[date, str, int]] = None

    @property
    def last_accepted(self) -> Optional[NBBOSnapshot]:
        """Most recent consolidated quote accepted for the current symbol."""
        return self._last_accepted

    def aggregate(self, records: Iterable[QuoteRecord]) -> Iterator[NBBOSnapshot]:
        """
        Aggregate a whole ordered quote stream.

        Args:
            records: Quotes sorted by (date, symbol, time)

        Yields:
            NBBOSnapshot per symbol per second, ordered by (date, symbol, time)

        Raises:
            OrderingViolationError: If the input is not sorted
        """
        group: list[QuoteRecord] = []

        for record in records:
            if group and record.key != group[0].key:
                yield from self.ingest_second_group(group)
                group = []
            group.append(record)

        if group:
            yield from self.ingest_second_group(group)

        yield from self.finish()

        log_stream_summary(logger, "aggregation", self.stats.as_dict())

    def ingest_second_group(self, records: Sequence[QuoteRecord]) -> list[NBBOSnapshot]:
        """
        Apply all quotes sharing one (date, symbol, time).

        Returns the snapshots this group makes final: the previous symbol's
        close-out fill when the group starts a new symbol, gap-fill copies
        for skipped seconds, and the snapshot for this second.

        Raises:
            OrderingViolationError: If the group is mixed or out of order
        """
        if not records:
            return []

        key = records[0].key
        for record in records[1:]:
            if record.key != key:
                raise OrderingViolationError(
                    f"Quote group mixes keys {key} and {record.key}",
                    stream="quotes",
                    previous_key=key,
                    current_key=record.key
                )
        self._check_order(key)

        record_date, symbol, time = key
        self.stats.records_seen += len(records)

        if not in_universe(symbol, self.universe):
            self.stats.records_outside_universe += len(records)
            return []

        emitted: list[NBBOSnapshot] = []

        if self.book is None or (self.book.date, self.book.symbol) != (record_date, symbol):
            emitted.extend(self.finish())
            self._start_symbol(record_date, symbol)

        if time > self.session.end_time:
            self.stats.records_after_close += len(records)
            return emitted

        self.phase = AggregatorPhase.ACCUMULATING
        self.stats.seconds_processed += 1

        emitted.extend(self._fill_until(time))
        self._apply(records)

        snapshot = self._consolidate(record_date, symbol, time)
        if snapshot is not None:
            self._last_accepted = snapshot
            if time >= self.session.start_time:
                emitted.append(self._emit(snapshot))

        return emitted

    def finish(self) -> list[NBBOSnapshot]:
        """
        Close out the current symbol.

        Fills through the end of the trading window when fill_to_close is
        set, then resets the per-symbol state.
        """
        if self.book is None:
            return []

        emitted: list[NBBOSnapshot] = []
        if self.nbbo_params.fill_to_close:
            emitted = self._fill_until(self.session.end_time + 1)

        self.stats.symbols_processed += 1
        self.book = None
        self._last_accepted = None
        self._last_emitted_time = None
        self.phase = AggregatorPhase.INIT

        return emitted

    def _check_order(self, key: tuple[date, str, int]) -> None:
        if self._last_key is not None and key < self._last_key:
            logger.error(
                "Quote stream out of order",
                previous_key=str(self._last_key),
                current_key=str(key)
            )
            raise OrderingViolationError(
                f"Quote key {key} sorts before previous {self._last_key}",
                stream="quotes",
                previous_key=self._last_key,
                current_key=key
            )
        self._last_key = key

    def _start_symbol(self, record_date: date, symbol: str) -> None:
        self.book = ExchangeBook(
            date=record_date,
            symbol=symbol,
            slot_count=self.codec.slot_count
        )
        self._last_accepted = None
        self._last_emitted_time = None
        self.phase = AggregatorPhase.INIT

    def _apply(self, records: Sequence[QuoteRecord]) -> None:
        """Write the last valid quote of each exchange into the book."""
        latest: dict[int, QuoteRecord] = {}

        for record in records:
            try:
                self.validator.validate(record)
            except MalformedRecordError as e:
                self.stats.records_dropped += 1
                logger.debug(
                    "Dropping invalid quote",
                    symbol=record.symbol,
                    quote_time=record.time,
                    exchange=record.exchange,
                    field=e.field,
                    value=e.value
                )
                continue
            latest[self.codec.map(record.exchange)] = record

        for slot, record in latest.items():
            self.book.update(slot, record.bid, record.bid_size,
                             record.offer, record.offer_size)

    def _consolidate(self, record_date: date, symbol: str, time: int) -> Optional[NBBOSnapshot]:
        """Resolve the book into this second's NBBO, recovering if needed."""
        try:
            snapshot = self._resolve_book(record_date, symbol, time)
        except CrossedMarketError as e:
            self.stats.crossed_seconds += 1
            self.book.reset()
            log_market_recovery(
                logger,
                symbol=symbol,
                time=time,
                best_bid=e.best_bid,
                best_offer=e.best_offer,
                reason="locked" if e.locked else "crossed",
            )
            return self._carry_forward(time)

        if snapshot is None:
            self.stats.one_sided_seconds += 1
            return self._carry_forward(time)

        return snapshot

    def _resolve_book(self, record_date: date, symbol: str, time: int) -> Optional[NBBOSnapshot]:
        """
        Compute the consolidated quote from the book.

        Returns None when either side of the book is empty.

        Raises:
            CrossedMarketError: If best bid >= best offer
        """
        best_bid = self.book.best_bid
        best_offer = self.book.best_offer

        if best_bid is None or best_offer is None:
            return None

        if best_bid >= best_offer:
            raise CrossedMarketError(
                f"{symbol} bid {best_bid} >= offer {best_offer} at {time}",
                best_bid=best_bid,
                best_offer=best_offer
            )

        bid_size = self.book.size_at_bid(best_bid)
        offer_size = self.book.size_at_offer(best_offer)
        metrics = calculate_nbbo_metrics(
            best_bid, best_offer, bid_size, offer_size,
            tick_unit=self.nbbo_params.tick_unit,
            bin_count=self.nbbo_params.implied_price_bin_count,
        )

        return NBBOSnapshot(
            date=record_date,
            symbol=symbol,
            time=time,
            best_bid=best_bid,
            best_offer=best_offer,
            best_bid_size=bid_size,
            best_offer_size=offer_size,
            total_size=metrics.total_size,
            total_log_size=metrics.total_log_size,
            min_best_size=metrics.min_best_size,
            implied_price=metrics.implied_price,
            implied_price_frac=metrics.implied_price_frac,
            implied_price_bin=metrics.implied_price_bin,
            lag=self.session.lag_seconds,
        )

    def _carry_forward(self, time: int) -> Optional[NBBOSnapshot]:
        if self._last_accepted is None:
            return None
        return self._last_accepted.carried_to(time)

    def _fill_until(self, time: int) -> list[NBBOSnapshot]:
        """Replicate the last accepted NBBO for every unemitted second before time."""
        if self._last_accepted is None:
            return []

        if self._last_emitted_time is not None:
            begin = self._last_emitted_time + 1
        else:
            # Book carried in from before the open
            begin = self.session.start_time
        stop = min(time, self.session.end_time + 1)

        filled = []
        for t in range(begin, stop):
            filled.append(self._emit(self._last_accepted.carried_to(t)))
        self.stats.snapshots_filled += len(filled)
        return filled

    def _emit(self, snapshot: NBBOSnapshot) -> NBBOSnapshot:
        self._last_emitted_time = snapshot.time
        self.stats.snapshots_emitted += 1
        self.phase = AggregatorPhase.EMIT
        return snapshot
