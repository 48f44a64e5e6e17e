"""Default configuration parameters for NBBO reconstruction and trade matching."""

from dataclasses import dataclass

# Consolidated-tape participant letters
DEFAULT_EXCHANGE_LABELS: tuple[str, ...] = (
    "A", "B", "C", "D", "I", "J", "K", "M",
    "N", "P", "Q", "T", "W", "X", "Y", "Z",
)


@dataclass(frozen=True)
class SessionParams:
    """Trading window, lag and symbol universe."""
    start_time: int = 34200                          # 09:30:00
    end_time: int = 57600                            # 16:00:00, inclusive
    lag_seconds: int = 0                             # Quote-to-trade latency
    symbols: tuple[str, ...] = ()                    # Empty means all symbols


@dataclass(frozen=True)
class QuoteFilterParams:
    """Quote validity predicates."""
    min_bid: float = 0.01                            # Bid must be strictly above
    allowed_modes: tuple[int, ...] = (1, 2, 6, 10, 12, 23)
    spread_filter: bool = True                       # Reject wide quotes
    max_spread_pct: float = 0.10                     # Spread / midprice ceiling


@dataclass(frozen=True)
class TradeFilterParams:
    """Trade eligibility predicates."""
    allowed_correction_codes: tuple[int, ...] = (0, 1, 2)


@dataclass(frozen=True)
class NBBOParams:
    """Consolidated quote derivation parameters."""
    tick_unit: float = 0.01
    implied_price_bin_count: int = 20
    fill_to_close: bool = True                       # Grid-fill through end_time


@dataclass(frozen=True)
class ExchangeParams:
    """Venue label table for the exchange codec."""
    labels: tuple[str, ...] = DEFAULT_EXCHANGE_LABELS


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    session: SessionParams
    quotes: QuoteFilterParams
    trades: TradeFilterParams
    nbbo: NBBOParams
    exchanges: ExchangeParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        session=SessionParams(),
        quotes=QuoteFilterParams(),
        trades=TradeFilterParams(),
        nbbo=NBBOParams(),
        exchanges=ExchangeParams(),
    )
