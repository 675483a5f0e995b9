"""Base price store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime

from cryptoprice.data.price_point import PricePoint


class PriceStore(ABC):
    """Abstract storage collaborator for price records."""

    @abstractmethod
    def find_by_symbol(self, symbol: str) -> list[PricePoint]:
        """Get all records for a symbol, in insertion order."""
        pass

    @abstractmethod
    def find_by_time_range(self, start: datetime, end: datetime) -> list[PricePoint]:
        """Get all records with start <= timestamp <= end, in insertion order."""
        pass

    @abstractmethod
    def find_known_symbols(self) -> set[str]:
        """Get the distinct symbols that have at least one record."""
        pass

    @abstractmethod
    def save_batch(self, points: Iterable[PricePoint]) -> None:
        """Append a batch of records."""
        pass
