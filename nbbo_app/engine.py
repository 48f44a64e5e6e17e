"""
Main pipeline coordinator.

Wires the exchange codec, quote aggregator, trade filter and stream
synchronizer from one validated run configuration:

    quotes -> QuoteAggregator -> NBBOSnapshot --+
                                                +-> StreamSynchronizer -> MergedRecord
    trades -> TradeFilter ----> TradeRecord ----+
"""

from dataclasses import asdict
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Union

import structlog

from .config.defaults import DefaultConfig
from .config.loader import ConfigLoader
from .config.validation import ConfigValidator
from .data.models import MergedRecord, NBBOSnapshot, QuoteRecord, TradeRecord
from .data.sources import SourceStats, read_quotes, read_trades
from .errors import ConfigurationError
from .nbbo.aggregator import QuoteAggregator
from .nbbo.codec import ExchangeCodec
from .sync.synchronizer import StreamSynchronizer
from .trades.filter import TradeFilter
from .utils.time import format_clock

logger = structlog.get_logger(__name__)


class NBBOSyncEngine:
    """
    Coordinator for NBBO reconstruction and lagged trade matching.

    Every run method builds fresh component instances, so an engine can be
    reused across batches; the components of the latest run stay available
    for inspection through get_runtime_stats().
    """

    def __init__(
        self,
        config: Optional[DefaultConfig] = None,
        config_dir: Optional[Union[str, Path]] = None,
        overrides: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            config: Ready-made run configuration; bypasses file loading
            config_dir: Directory holding nbbo.yaml
            overrides: Highest-precedence configuration overrides

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.logger = logger

        if config is None:
            loader = ConfigLoader.create(Path(config_dir) if config_dir else None)
            config = loader.build_run_config(overrides)
        else:
            self._validate(config)

        self.config = config
        self.codec = ExchangeCodec(config.exchanges.labels)

        self.aggregator: Optional[QuoteAggregator] = None
        self.trade_filter: Optional[TradeFilter] = None
        self.synchronizer: Optional[StreamSynchronizer] = None
        self.source_stats: dict[str, SourceStats] = {}

        self.logger.info(
            "NBBO sync engine initialized",
            window_start=format_clock(config.session.start_time),
            window_end=format_clock(config.session.end_time),
            lag_seconds=config.session.lag_seconds,
            symbols=len(config.session.symbols) or "all",
            exchange_slots=self.codec.slot_count,
            exchanges=",".join(self.codec.labels)
        )

    @staticmethod
    def _validate(config: DefaultConfig) -> None:
        errors = ConfigValidator.validate_config(asdict(config))
        if errors:
            error_msgs = [f"{err.field}: {err.message} (got: {err.value})" for err in errors]
            raise ConfigurationError(
                "Invalid run configuration: " + "; ".join(error_msgs),
                errors=errors
            )

    def build_snapshots(self, quotes: Iterable[QuoteRecord]) -> Iterator[NBBOSnapshot]:
        """Aggregate quotes into the lazy NBBO snapshot stream."""
        self.aggregator = QuoteAggregator(
            codec=self.codec,
            quote_params=self.config.quotes,
            nbbo_params=self.config.nbbo,
            session=self.config.session,
        )
        return self.aggregator.aggregate(quotes)

    def filter_trades(self, trades: Iterable[TradeRecord]) -> Iterator[TradeRecord]:
        """Filter trades into the lazy eligible-trade stream."""
        self.trade_filter = TradeFilter(
            params=self.config.trades,
            session=self.config.session,
        )
        return self.trade_filter.filter(trades)

    def run(self,
            quotes: Iterable[QuoteRecord],
            trades: Iterable[TradeRecord]) -> Iterator[MergedRecord]:
        """
        Run the full pipeline with a live snapshot stream.

        Returns:
            Lazy iterator of MergedRecord rows
        """
        return self.run_materialized(self.build_snapshots(quotes), trades)

    def run_materialized(self,
                         snapshots: Iterable[NBBOSnapshot],
                         trades: Iterable[TradeRecord]) -> Iterator[MergedRecord]:
        """
        Merge an existing snapshot stream with raw trades.

        The snapshots may come from build_snapshots() or from any
        precomputed, correctly ordered sequence.
        """
        self.synchronizer = StreamSynchronizer()
        return self.synchronizer.merge(snapshots, self.filter_trades(trades))

    def run_files(self,
                  quote_path: Union[str, Path],
                  trade_path: Union[str, Path]) -> Iterator[MergedRecord]:
        """Run the pipeline over CSV quote and trade files."""
        self.source_stats = {"quotes": SourceStats(), "trades": SourceStats()}
        self.logger.info(
            "Reading record sources",
            quote_path=str(quote_path),
            trade_path=str(trade_path)
        )
        return self.run(
            read_quotes(quote_path, self.source_stats["quotes"]),
            read_trades(trade_path, self.source_stats["trades"]),
        )

    def get_runtime_stats(self) -> dict[str, Any]:
        """Counters from the most recent run."""
        stats: dict[str, Any] = {}
        if self.aggregator is not None:
            stats["aggregation"] = self.aggregator.stats.as_dict()
        if self.trade_filter is not None:
            stats["trade_filter"] = self.trade_filter.stats.as_dict()
        if self.synchronizer is not None:
            stats["sync"] = self.synchronizer.stats.as_dict()
        for name, source in self.source_stats.items():
            stats[f"{name}_source"] = {
                "rows_read": source.rows_read,
                "rows_skipped": source.rows_skipped,
            }
        return stats
