"""
Canonical data models for quote, trade and consolidated records.

Raw records and derived rows are immutable; the per-symbol exchange book is
the only mutable structure and is owned by the quote aggregator.
"""

from dataclasses import asdict, dataclass, field, replace
from datetime import date
from typing import Any, Optional

from ..errors import BookStateError


@dataclass(frozen=True)
class QuoteRecord:
    """Single exchange quote update, sorted by (date, symbol, time)."""
    date: date
    symbol: str
    time: int           # Seconds since midnight
    exchange: str       # Venue label
    bid: float
    bid_size: int
    offer: float
    offer_size: int
    mode: int           # Eligibility mode code

    @property
    def key(self) -> tuple[date, str, int]:
        return (self.date, self.symbol, self.time)


@dataclass(frozen=True)
class TradeRecord:
    """Single reported trade, sorted by (date, symbol, time)."""
    date: date
    symbol: str
    time: int
    price: float
    size: int
    correction_code: int

    @property
    def key(self) -> tuple[date, str, int]:
        return (self.date, self.symbol, self.time)


@dataclass(frozen=True)
class NBBOSnapshot:
    """Consolidated best bid and offer for one symbol at one second."""
    date: date
    symbol: str
    time: int                   # Raw quote second
    best_bid: float
    best_offer: float
    best_bid_size: int
    best_offer_size: int
    total_size: int
    total_log_size: float
    min_best_size: int
    implied_price: float
    implied_price_frac: float
    implied_price_bin: int
    lag: int = 0

    @property
    def key(self) -> tuple[date, str, int]:
        return (self.date, self.symbol, self.time)

    @property
    def effective_time(self) -> int:
        """Second at which trades are matched against this quote state."""
        return self.time + self.lag

    def carried_to(self, time: int) -> "NBBOSnapshot":
        """Replicate this snapshot at a later second."""
        return replace(self, time=time)


@dataclass(frozen=True)
class MergedRecord:
    """Trade joined with the lagged NBBO in force at its time."""
    date: date
    symbol: str
    quote_time: int
    trade_time: int
    best_bid: float
    best_offer: float
    best_bid_size: int
    best_offer_size: int
    trade_price: float
    trade_size: int
    implied_price: float
    implied_price_dec: float
    implied_price_bin: int

    @classmethod
    def from_match(cls, snapshot: NBBOSnapshot, trade: TradeRecord) -> "MergedRecord":
        """Create a merged row from a snapshot and the trade it matched."""
        return cls(
            date=trade.date,
            symbol=trade.symbol,
            quote_time=snapshot.time,
            trade_time=trade.time,
            best_bid=snapshot.best_bid,
            best_offer=snapshot.best_offer,
            best_bid_size=snapshot.best_bid_size,
            best_offer_size=snapshot.best_offer_size,
            trade_price=trade.price,
            trade_size=trade.size,
            implied_price=snapshot.implied_price,
            implied_price_dec=snapshot.implied_price_frac,
            implied_price_bin=snapshot.implied_price_bin,
        )

    def as_dict(self) -> dict[str, Any]:
        """Plain dictionary view with the date in ISO format."""
        row = asdict(self)
        row["date"] = self.date.isoformat()
        return row


@dataclass
class ExchangeBook:
    """
    Last-seen quote per exchange slot for one (date, symbol).

    Slots are numbered 1..slot_count; slot_count itself is the overflow slot
    for unrecognized venues.
    """

    date: date
    symbol: str
    slot_count: int
    bids: list = field(default_factory=list)         # list[Optional[float]]
    bid_sizes: list = field(default_factory=list)    # list[int]
    offers: list = field(default_factory=list)       # list[Optional[float]]
    offer_sizes: list = field(default_factory=list)  # list[int]

    def __post_init__(self):
        """Allocate the slot arrays."""
        if self.slot_count < 1:
            raise BookStateError(
                f"Exchange book needs at least one slot, got {self.slot_count}",
                slot_count=self.slot_count
            )
        self.reset()

    def _index(self, slot: int) -> int:
        if not 1 <= slot <= self.slot_count:
            raise BookStateError(
                f"Exchange slot {slot} outside 1..{self.slot_count}",
                slot=slot,
                slot_count=self.slot_count
            )
        return slot - 1

    def reset(self) -> None:
        """Mark every slot as unknown."""
        self.bids = [None] * self.slot_count
        self.bid_sizes = [0] * self.slot_count
        self.offers = [None] * self.slot_count
        self.offer_sizes = [0] * self.slot_count

    def update(self, slot: int, bid: float, bid_size: int,
               offer: float, offer_size: int) -> None:
        """Overwrite one exchange's quote."""
        i = self._index(slot)
        self.bids[i] = bid
        self.bid_sizes[i] = bid_size
        self.offers[i] = offer
        self.offer_sizes[i] = offer_size

    @property
    def best_bid(self) -> Optional[float]:
        """Highest known bid, None if no slot has a bid."""
        known = [b for b in self.bids if b is not None]
        return max(known) if known else None

    @property
    def best_offer(self) -> Optional[float]:
        """Lowest known offer, None if no slot has an offer."""
        known = [o for o in self.offers if o is not None]
        return min(known) if known else None

    def size_at_bid(self, price: float) -> int:
        """Total bid size across exchanges quoting exactly this bid."""
        return sum(s for b, s in zip(self.bids, self.bid_sizes) if b == price)

    def size_at_offer(self, price: float) -> int:
        """Total offer size across exchanges quoting exactly this offer."""
        return sum(s for o, s in zip(self.offers, self.offer_sizes) if o == price)
