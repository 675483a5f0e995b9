"""Price Analytics Module.

Memoized per-symbol aggregates, normalized ranges and rankings.
"""

from cryptoprice.analytics.cache import AggregateCache, ExtremumCache
from cryptoprice.analytics.engine import PriceAnalyticsEngine, Stats
from cryptoprice.analytics.normalized import NormalizedValue, normalized_range

__all__ = [
    "AggregateCache",
    "ExtremumCache",
    "PriceAnalyticsEngine",
    "Stats",
    "NormalizedValue",
    "normalized_range",
]
