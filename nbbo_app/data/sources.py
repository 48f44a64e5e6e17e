"""
CSV record sources for quotes and trades.

Sources are lazy: files are read in chunks with pandas and rows are parsed
as the consumer pulls them. Rows that fail to parse are skipped and counted;
failing to read the file is fatal.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, Optional, TypeVar, Union

import pandas as pd
import structlog

from ..errors import MalformedRecordError, SourceReadError
from .models import QuoteRecord, TradeRecord
from .parsers import parse_quote_row, parse_trade_row

logger = structlog.get_logger(__name__)

RecordT = TypeVar("RecordT")

DEFAULT_CHUNK_SIZE = 100_000


@dataclass
class SourceStats:
    """Row counters for one source."""
    rows_read: int = 0
    rows_skipped: int = 0


def _read_records(
    path: Union[str, Path],
    parse_row: Callable[[dict], RecordT],
    stats: Optional[SourceStats],
    chunk_size: int,
) -> Iterator[RecordT]:
    stats = stats if stats is not None else SourceStats()
    source = str(path)

    try:
        # Raw strings only; the row parsers own type conversion
        chunks = pd.read_csv(path, dtype=str, keep_default_na=False,
                             chunksize=chunk_size)
        line_no = 1
        for chunk in chunks:
            for row in chunk.to_dict("records"):
                line_no += 1
                stats.rows_read += 1
                try:
                    record = parse_row(row)
                except MalformedRecordError as e:
                    stats.rows_skipped += 1
                    logger.debug(
                        "Skipping unparseable row",
                        source=source,
                        line=line_no,
                        field=e.field,
                        error=str(e)
                    )
                    continue
                yield record
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        logger.error("Failed to read record source", source=source, error=str(e))
        raise SourceReadError(f"Cannot read {source}: {e}", source=source) from e


def read_quotes(path: Union[str, Path],
                stats: Optional[SourceStats] = None,
                chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[QuoteRecord]:
    """Lazily read quote records from a CSV file."""
    return _read_records(path, parse_quote_row, stats, chunk_size)


def read_trades(path: Union[str, Path],
                stats: Optional[SourceStats] = None,
                chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[TradeRecord]:
    """Lazily read trade records from a CSV file."""
    return _read_records(path, parse_trade_row, stats, chunk_size)
