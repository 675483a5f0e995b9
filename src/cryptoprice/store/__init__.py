"""Price Storage Module."""

from cryptoprice.store.base import PriceStore
from cryptoprice.store.memory import InMemoryPriceStore
from cryptoprice.store.sqlite import SQLitePriceStore

__all__ = [
    "PriceStore",
    "InMemoryPriceStore",
    "SQLitePriceStore",
]
