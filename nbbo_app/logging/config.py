"""
Centralized logging configuration for the NBBO pipeline.

All components log through structlog so that aggregation and
synchronization events carry structured key/value context.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_aggregation_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for NBBO aggregation events.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger bound to the aggregation subsystem
    """
    return get_logger(name).bind(subsystem="nbbo_aggregation")


def get_sync_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for stream synchronization events.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger bound to the synchronization subsystem
    """
    return get_logger(name).bind(subsystem="stream_sync")


def log_market_recovery(
    logger: FilteringBoundLogger,
    symbol: str,
    time: int,
    best_bid: Optional[float],
    best_offer: Optional[float],
    reason: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a carry-forward recovery of the consolidated quote.

    Args:
        logger: Structlog logger instance
        symbol: Symbol being aggregated
        time: Quote second at which the recovery happened
        best_bid: Rejected consolidated bid, if any
        best_offer: Rejected consolidated offer, if any
        reason: Why the second's update was rejected (crossed, locked, one_sided)
        context: Additional context data
    """
    bound_logger = logger.bind(
        symbol=symbol,
        quote_time=time,
        rejected_bid=best_bid,
        rejected_offer=best_offer,
        reason=reason,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("NBBO carried forward")


def log_stream_summary(
    logger: FilteringBoundLogger,
    stage: str,
    counters: dict[str, int],
) -> None:
    """
    Log end-of-pass counters for a pipeline stage.

    Args:
        logger: Structlog logger instance
        stage: Name of the stage (aggregation, trade_filter, sync)
        counters: Counter name to value
    """
    logger.info("Stream pass complete", stage=stage, **counters)
