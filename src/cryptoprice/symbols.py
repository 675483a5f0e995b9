"""Registry of known price symbols."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

logger = logging.getLogger(__name__)


class SymbolRegistry:
    """Thread-safe set of symbols that have at least one stored record."""

    def __init__(self, symbols: Iterable[str] = ()):
        self._symbols: set[str] = set(symbols)
        self._lock = threading.Lock()

    def add(self, symbol: str) -> bool:
        """Register a symbol. Returns True if it was not known before."""
        with self._lock:
            if symbol in self._symbols:
                return False
            self._symbols.add(symbol)
        logger.info(f"Registered new symbol: {symbol}")
        return True

    def __contains__(self, symbol: object) -> bool:
        with self._lock:
            return symbol in self._symbols

    def __len__(self) -> int:
        with self._lock:
            return len(self._symbols)

    def snapshot(self) -> list[str]:
        """Get known symbols sorted by name."""
        with self._lock:
            return sorted(self._symbols)
