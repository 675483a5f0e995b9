"""Price Analytics Engine.

Owns the symbol registry and the aggregate cache, and answers the ranking
queries:

- ``ranked_by_symbol``: every known symbol by normalized range, descending.
  Computed once from the lifetime aggregates and cached until
  ``invalidate_ranking`` is called.
- ``highest_normalized_range_on_day``: the symbol with the highest
  normalized range inside one UTC calendar day. Always recomputed from that
  day's records.

Tie-break for both queries: symbols are visited in name order, sorted
ascending by a stable sort and the order is then reversed. Among equal
values the symbol with the later name comes first.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any

from cryptoprice.analytics.cache import AggregateCache
from cryptoprice.analytics.normalized import NormalizedValue, normalized_range, normalized_range_of
from cryptoprice.constants import HEADER_TOKEN, PRICE_FILE_SUFFIX
from cryptoprice.data.ingestion import IngestionReport, PriceFileIngestor
from cryptoprice.data.price_point import PricePoint
from cryptoprice.store.base import PriceStore
from cryptoprice.symbols import SymbolRegistry

logger = logging.getLogger(__name__)

DAY_SPAN = timedelta(hours=23, minutes=59, seconds=59)


def day_window(day: date) -> tuple[datetime, datetime]:
    """Inclusive UTC window [00:00:00, 23:59:59] of a calendar day."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + DAY_SPAN


@dataclass(frozen=True)
class Stats:
    """Oldest/newest/min/max records of one symbol."""

    oldest: PricePoint | None
    newest: PricePoint | None
    min: PricePoint | None
    max: PricePoint | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "oldest": self.oldest.to_dict() if self.oldest else None,
            "newest": self.newest.to_dict() if self.newest else None,
            "min": self.min.to_dict() if self.min else None,
            "max": self.max.to_dict() if self.max else None,
        }


def _rank(values: list[NormalizedValue]) -> list[NormalizedValue]:
    ranked = sorted(values, key=lambda v: v.value)
    ranked.reverse()
    return ranked


class PriceAnalyticsEngine:
    """
    Price analytics over a price store.

    One instance is built at startup and passed to its callers. The symbol
    registry is seeded from the store on construction.
    """

    def __init__(
        self,
        store: PriceStore,
        file_suffix: str = PRICE_FILE_SUFFIX,
        header_token: str = HEADER_TOKEN,
    ):
        self.store = store
        self.registry = SymbolRegistry(store.find_known_symbols())
        self.aggregates = AggregateCache(store)
        self.ingestor = PriceFileIngestor(
            store, self.registry, file_suffix=file_suffix, header_token=header_token
        )

        self._ranking: list[NormalizedValue] | None = None
        self._ranking_lock = threading.Lock()

        logger.info(f"Analytics engine ready with {len(self.registry)} known symbols")

    # ============================================
    # Ingestion
    # ============================================

    def ingest(self, directory: str | Path) -> IngestionReport:
        """Ingest every price file in a directory. Never raises for a bad directory."""
        return self.ingestor.ingest(directory)

    def is_supported(self, symbol: str) -> bool:
        return symbol in self.registry

    def known_symbols(self) -> list[str]:
        return self.registry.snapshot()

    # ============================================
    # Aggregates
    # ============================================

    def oldest(self, symbol: str) -> PricePoint | None:
        return self.aggregates.oldest(symbol)

    def newest(self, symbol: str) -> PricePoint | None:
        return self.aggregates.newest(symbol)

    def min(self, symbol: str) -> PricePoint | None:
        return self.aggregates.min(symbol)

    def max(self, symbol: str) -> PricePoint | None:
        return self.aggregates.max(symbol)

    def stats(self, symbol: str) -> Stats:
        return Stats(
            oldest=self.oldest(symbol),
            newest=self.newest(symbol),
            min=self.min(symbol),
            max=self.max(symbol),
        )

    def normalized_range(self, symbol: str) -> Decimal:
        """Normalized range from the cached min/max, -1 if the symbol has no records."""
        min_point = self.min(symbol)
        max_point = self.max(symbol)
        return normalized_range(
            min_point.price if min_point else None,
            max_point.price if max_point else None,
        )

    # ============================================
    # Rankings
    # ============================================

    def ranked_by_symbol(self) -> list[NormalizedValue]:
        """Get all known symbols ordered by normalized range, highest first."""
        ranking = self._ranking
        if ranking is not None:
            return list(ranking)

        with self._ranking_lock:
            if self._ranking is None:
                values = [
                    NormalizedValue(symbol, self.normalized_range(symbol))
                    for symbol in self.registry.snapshot()
                ]
                self._ranking = _rank(values)
                logger.info(f"Computed normalized range ranking for {len(values)} symbols")
            return list(self._ranking)

    def invalidate_ranking(self) -> None:
        """Drop the cached ranking so the next call recomputes it."""
        with self._ranking_lock:
            self._ranking = None
        logger.info("Normalized range ranking invalidated")

    def highest_normalized_range_on_day(self, day: date) -> str | None:
        """
        Get the symbol with the highest normalized range on a UTC calendar day.

        Min and max are taken from that day's records only.

        Returns:
            The winning symbol, or None if the day has no records.
        """
        start, end = day_window(day)
        by_symbol: dict[str, list[PricePoint]] = defaultdict(list)
        for point in self.store.find_by_time_range(start, end):
            by_symbol[point.symbol].append(point)

        if not by_symbol:
            logger.info(f"No price records on {day.isoformat()}")
            return None

        values = [
            NormalizedValue(symbol, normalized_range_of(by_symbol[symbol]))
            for symbol in sorted(by_symbol)
        ]
        winner = _rank(values)[0]
        logger.debug(f"Highest normalized range on {day.isoformat()}: {winner.symbol} ({winner.value})")
        return winner.symbol
