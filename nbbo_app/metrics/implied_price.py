"""Size-weighted implied price and depth metrics for a consolidated quote"""

import math
from dataclasses import dataclass

# Tolerance when snapping a price onto the tick grid
_GRID_EPSILON = 1e-9


@dataclass(frozen=True)
class NBBOMetrics:
    """Depth and implied-price metrics for one consolidated quote"""
    total_size: int
    total_log_size: float
    min_best_size: int
    implied_price: float
    implied_price_frac: float
    implied_price_bin: int


def calculate_implied_price(best_bid: float, best_offer: float,
                            bid_size: int, offer_size: int) -> float:
    """
    Size-weighted price between bid and offer

    Weights each side by the opposite side's size, so a deep bid pulls the
    implied price toward the offer.

    Args:
        best_bid: Consolidated best bid
        best_offer: Consolidated best offer
        bid_size: Aggregate size at the best bid
        offer_size: Aggregate size at the best offer

    Returns:
        Implied price
    """
    total = bid_size + offer_size
    if total <= 0:
        return (best_bid + best_offer) / 2.0
    return (best_offer * bid_size + best_bid * offer_size) / total


def implied_price_fraction(price: float, tick_unit: float = 0.01) -> float:
    """
    Position of a price inside its tick, in price units

    Returns:
        Value in [0, tick_unit)
    """
    scaled = price / tick_unit
    whole = math.floor(scaled + _GRID_EPSILON)
    frac_ticks = scaled - whole
    if frac_ticks < 0.0:
        frac_ticks = 0.0
    frac = frac_ticks * tick_unit
    if frac >= tick_unit:
        return 0.0
    return frac


def implied_price_bin(frac: float, tick_unit: float = 0.01, bin_count: int = 20) -> int:
    """
    Equal-width bin of a sub-tick fraction

    Returns:
        Bin index in [0, bin_count - 1]
    """
    index = int(math.floor(frac / tick_unit * bin_count + _GRID_EPSILON))
    return min(max(index, 0), bin_count - 1)


def calculate_nbbo_metrics(best_bid: float, best_offer: float,
                           bid_size: int, offer_size: int,
                           tick_unit: float = 0.01,
                           bin_count: int = 20) -> NBBOMetrics:
    """Compute all derived fields of a consolidated quote"""
    implied = calculate_implied_price(best_bid, best_offer, bid_size, offer_size)
    frac = implied_price_fraction(implied, tick_unit)

    return NBBOMetrics(
        total_size=bid_size + offer_size,
        total_log_size=math.log(bid_size) + math.log(offer_size),
        min_best_size=min(bid_size, offer_size),
        implied_price=implied,
        implied_price_frac=frac,
        implied_price_bin=implied_price_bin(frac, tick_unit, bin_count),
    )
