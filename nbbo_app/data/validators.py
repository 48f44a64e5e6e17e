"""
Record validation for quote and trade selection predicates.

Validators raise MalformedRecordError for any record outside its valid
domain; callers decide to drop the record.
"""

from typing import Optional

from ..config.defaults import QuoteFilterParams, SessionParams, TradeFilterParams
from ..errors import MalformedRecordError
from ..utils.time import in_window
from .models import QuoteRecord, TradeRecord


class QuoteValidator:
    """Validates exchange quotes before they enter the book."""

    def __init__(self, params: Optional[QuoteFilterParams] = None):
        """
        Initialize validator with quote filter parameters.

        Args:
            params: Quote filter parameters, defaults if omitted
        """
        self.params = params or QuoteFilterParams()
        self.allowed_modes = frozenset(self.params.allowed_modes)

    def validate(self, quote: QuoteRecord) -> None:
        """
        Validate a single quote.

        Raises:
            MalformedRecordError: If any predicate fails
        """
        if not quote.bid > self.params.min_bid:
            raise MalformedRecordError(
                f"Bid {quote.bid} not above {self.params.min_bid}",
                field="bid", value=quote.bid
            )

        if not quote.offer > quote.bid:
            raise MalformedRecordError(
                f"Offer {quote.offer} not above bid {quote.bid}",
                field="offer", value=quote.offer
            )

        if quote.bid_size <= 0:
            raise MalformedRecordError(
                f"Bid size {quote.bid_size} must be positive",
                field="bid_size", value=quote.bid_size
            )

        if quote.offer_size <= 0:
            raise MalformedRecordError(
                f"Offer size {quote.offer_size} must be positive",
                field="offer_size", value=quote.offer_size
            )

        if quote.mode not in self.allowed_modes:
            raise MalformedRecordError(
                f"Quote mode {quote.mode} not eligible",
                field="mode", value=quote.mode
            )

        if self.params.spread_filter:
            mid = (quote.bid + quote.offer) / 2.0
            spread = quote.offer - quote.bid
            if spread >= self.params.max_spread_pct * mid:
                raise MalformedRecordError(
                    f"Spread {spread:.4f} exceeds {self.params.max_spread_pct:.0%} of mid {mid:.4f}",
                    field="spread", value=spread
                )


class TradeValidator:
    """Validates trades against the eligibility predicate."""

    def __init__(self,
                 params: Optional[TradeFilterParams] = None,
                 session: Optional[SessionParams] = None):
        """
        Initialize validator.

        Args:
            params: Trade filter parameters
            session: Trading window and lag
        """
        self.params = params or TradeFilterParams()
        self.session = session or SessionParams()
        self.allowed_codes = frozenset(self.params.allowed_correction_codes)

        # The first lagged quote second is start_time + lag
        self.window_start = self.session.start_time + self.session.lag_seconds
        self.window_end = self.session.end_time

    def validate(self, trade: TradeRecord) -> None:
        """
        Validate a single trade.

        Raises:
            MalformedRecordError: If any predicate fails
        """
        if not trade.price > 0:
            raise MalformedRecordError(
                f"Trade price {trade.price} must be positive",
                field="price", value=trade.price
            )

        if trade.size <= 0:
            raise MalformedRecordError(
                f"Trade size {trade.size} must be positive",
                field="size", value=trade.size
            )

        if trade.correction_code not in self.allowed_codes:
            raise MalformedRecordError(
                f"Correction code {trade.correction_code} not eligible",
                field="correction_code", value=trade.correction_code
            )

        if not in_window(trade.time, self.window_start, self.window_end):
            raise MalformedRecordError(
                f"Trade time {trade.time} outside [{self.window_start}, {self.window_end}]",
                field="time", value=trade.time
            )


def in_universe(symbol: str, universe: frozenset) -> bool:
    """
    True if the symbol is allowed; an empty universe allows every symbol.

    The universe holds upper-case tickers, so the symbol is normalized the
    same way before the lookup.
    """
    return not universe or symbol.strip().upper() in universe
