"""Price Data Module.

Price records and the line parser. The file ingestion pipeline lives in
``cryptoprice.data.ingestion``.
"""

from cryptoprice.data.parser import parse_price_line
from cryptoprice.data.price_point import PricePoint

__all__ = [
    "PricePoint",
    "parse_price_line",
]
