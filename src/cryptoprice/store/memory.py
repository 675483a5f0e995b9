"""In-memory price store."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from datetime import datetime

from cryptoprice.data.price_point import PricePoint
from cryptoprice.store.base import PriceStore

logger = logging.getLogger(__name__)


class InMemoryPriceStore(PriceStore):
    """
    Keeps price records in a process-local list.

    Records are append-only; duplicates are kept as separate records.
    """

    def __init__(self, points: Iterable[PricePoint] = ()):
        self._points: list[PricePoint] = list(points)
        self._lock = threading.Lock()

    def find_by_symbol(self, symbol: str) -> list[PricePoint]:
        with self._lock:
            return [p for p in self._points if p.symbol == symbol]

    def find_by_time_range(self, start: datetime, end: datetime) -> list[PricePoint]:
        with self._lock:
            return [p for p in self._points if start <= p.timestamp <= end]

    def find_known_symbols(self) -> set[str]:
        with self._lock:
            return {p.symbol for p in self._points}

    def save_batch(self, points: Iterable[PricePoint]) -> None:
        batch = list(points)
        with self._lock:
            self._points.extend(batch)
        logger.debug(f"Stored {len(batch)} price records")

    def __len__(self) -> int:
        with self._lock:
            return len(self._points)
