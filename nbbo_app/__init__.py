"""
NBBO Sync - Consolidated Quote Reconstruction and Lagged Trade Matching

Rebuilds a per-second National Best Bid and Offer series from raw
per-exchange quotes and aligns it, under a configurable lag, with a filtered
trade stream for market-microstructure analysis.
"""

__version__ = "0.1.0"
__author__ = "NBBO Sync Team"
