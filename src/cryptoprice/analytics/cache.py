"""Aggregate Cache - memoized oldest/newest/min/max records per symbol.

Each aggregate is computed at most once per symbol and kept for the life of
the cache. Records ingested after a slot is populated are not reflected in
it: the cache is append-blind.

Usage:
    cache = AggregateCache(store)
    cache.min("BTC")     # scans the store once
    cache.min("BTC")     # served from memory
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from cryptoprice.constants import AggregateKind
from cryptoprice.data.price_point import PricePoint
from cryptoprice.store.base import PriceStore

logger = logging.getLogger(__name__)

Loader = Callable[[str], list[PricePoint]]


class ExtremumCache:
    """
    Compute-once cache of the extreme record per symbol.

    Args:
        key: Attribute the records are compared by.
        pick: ``min`` or ``max``. Among equal keys the first record in
            storage order wins.
    """

    def __init__(
        self,
        name: str,
        key: Callable[[PricePoint], Any],
        pick: Callable[..., PricePoint],
    ):
        self.name = name
        self.key = key
        self.pick = pick
        self._values: dict[str, PricePoint] = {}
        self._slot_locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _slot_lock(self, symbol: str) -> threading.Lock:
        with self._guard:
            return self._slot_locks.setdefault(symbol, threading.Lock())

    def get(self, symbol: str, loader: Loader) -> PricePoint | None:
        """Get the cached extreme, computing it from ``loader`` on first use."""
        cached = self._values.get(symbol)
        if cached is not None:
            return cached

        with self._slot_lock(symbol):
            cached = self._values.get(symbol)
            if cached is not None:
                return cached

            points = loader(symbol)
            if not points:
                # Nothing to cache; a later call may see ingested data
                return None

            winner = self.pick(points, key=self.key)
            self._values[symbol] = winner
            logger.debug(f"Cached {self.name} for {symbol}: {winner.price} @ {winner.timestamp}")
            return winner

    def peek(self, symbol: str) -> PricePoint | None:
        """Get the cached value without computing it."""
        return self._values.get(symbol)

    def __len__(self) -> int:
        return len(self._values)


def _by_timestamp(point: PricePoint) -> Any:
    return point.timestamp


def _by_price(point: PricePoint) -> Any:
    return point.price


class AggregateCache:
    """Memoized per-symbol aggregates backed by a price store."""

    def __init__(self, store: PriceStore):
        self.store = store
        self._caches: dict[AggregateKind, ExtremumCache] = {
            AggregateKind.OLDEST: ExtremumCache("oldest", _by_timestamp, min),
            AggregateKind.NEWEST: ExtremumCache("newest", _by_timestamp, max),
            AggregateKind.MIN: ExtremumCache("min", _by_price, min),
            AggregateKind.MAX: ExtremumCache("max", _by_price, max),
        }

    def get(self, kind: AggregateKind, symbol: str) -> PricePoint | None:
        """Get one aggregate for a symbol, or None if it has no records."""
        return self._caches[AggregateKind(kind)].get(symbol, self.store.find_by_symbol)

    def oldest(self, symbol: str) -> PricePoint | None:
        return self.get(AggregateKind.OLDEST, symbol)

    def newest(self, symbol: str) -> PricePoint | None:
        return self.get(AggregateKind.NEWEST, symbol)

    def min(self, symbol: str) -> PricePoint | None:
        return self.get(AggregateKind.MIN, symbol)

    def max(self, symbol: str) -> PricePoint | None:
        return self.get(AggregateKind.MAX, symbol)

    def is_cached(self, kind: AggregateKind, symbol: str) -> bool:
        return self._caches[AggregateKind(kind)].peek(symbol) is not None
