"""Forward-only cursor over a (date, symbol, time) ordered stream."""

from typing import Any, Generic, Iterable, Optional, TypeVar

import structlog

from ..errors import OrderingViolationError

logger = structlog.get_logger(__name__)

RecordT = TypeVar("RecordT")


class StreamCursor(Generic[RecordT]):
    """
    Pulls records one at a time and enforces non-decreasing keys.

    Records must expose a ``key`` property returning (date, symbol, time).
    """

    def __init__(self, records: Iterable[RecordT], name: str) -> None:
        self.name = name
        self._iterator = iter(records)
        self.current: Optional[RecordT] = None
        self.consumed = 0
        self.exhausted = False
        self._last_key: Optional[tuple[Any, ...]] = None

    def advance(self) -> Optional[RecordT]:
        """Move to the next record; None once the stream is exhausted."""
        if self.exhausted:
            return None

        record = next(self._iterator, None)
        if record is None:
            self.exhausted = True
            self.current = None
            return None

        key = record.key
        if self._last_key is not None and key < self._last_key:
            logger.error(
                "Stream out of order",
                stream=self.name,
                previous_key=str(self._last_key),
                current_key=str(key)
            )
            raise OrderingViolationError(
                f"{self.name} key {key} sorts before previous {self._last_key}",
                stream=self.name,
                previous_key=self._last_key,
                current_key=key
            )

        self._last_key = key
        self.current = record
        self.consumed += 1
        return record
