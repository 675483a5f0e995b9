"""Query API Module."""

from cryptoprice.api.queries import PriceQueryService, parse_day

__all__ = [
    "PriceQueryService",
    "parse_day",
]
