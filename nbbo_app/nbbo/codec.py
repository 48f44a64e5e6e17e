"""Venue label to exchange book slot mapping."""

from typing import Iterable, Optional

import structlog

from ..config.defaults import DEFAULT_EXCHANGE_LABELS

logger = structlog.get_logger(__name__)


class ExchangeCodec:
    """
    Maps venue labels to dense slot indices.

    Known labels get slots 1..len(labels) in table order; anything else maps
    to the overflow slot, which is always the last one.
    """

    def __init__(self, labels: Optional[Iterable[str]] = None):
        table = tuple(labels) if labels is not None else DEFAULT_EXCHANGE_LABELS
        self._slots: dict[str, int] = {}
        for label in table:
            key = label.strip().upper()
            if key in self._slots:
                raise ValueError(f"Duplicate venue label: {label!r}")
            self._slots[key] = len(self._slots) + 1

        self.overflow_slot = len(self._slots) + 1
        self._unknown_seen: set[str] = set()

    @property
    def slot_count(self) -> int:
        """Total slots including the overflow slot."""
        return self.overflow_slot

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(self._slots)

    def map(self, label: str) -> int:
        """Return the slot for a venue label, the overflow slot if unknown."""
        key = (label or "").strip().upper()
        slot = self._slots.get(key)
        if slot is not None:
            return slot

        if key not in self._unknown_seen:
            self._unknown_seen.add(key)
            logger.debug("Unknown venue label mapped to overflow slot",
                         label=key, slot=self.overflow_slot)
        return self.overflow_slot
