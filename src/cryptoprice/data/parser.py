"""Price line parser.

Turns one ``epochMillis,SYMBOL,price`` line into a PricePoint.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from cryptoprice.constants import (
    FIELD_COUNT,
    FIELD_SEPARATOR,
    MAX_EPOCH_MILLIS,
    MIN_EPOCH_MILLIS,
)
from cryptoprice.data.price_point import PricePoint
from cryptoprice.errors import FormatError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Plain ASCII forms only: no underscores, padding or non-ASCII digits
TIMESTAMP_PATTERN = re.compile(r"[+-]?[0-9]+")
PRICE_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def millis_to_datetime(epoch_millis: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime without float rounding."""
    return EPOCH + timedelta(milliseconds=epoch_millis)


def datetime_to_millis(value: datetime) -> int:
    """Convert an aware datetime back to epoch milliseconds."""
    delta = value - EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000


def parse_price_line(line: str) -> PricePoint:
    """
    Parse a single price line.

    Args:
        line: Raw text line, e.g. ``1641009600000,BTC,46813.21``.

    Returns:
        The parsed PricePoint with a UTC timestamp and exact Decimal price.

    Raises:
        FormatError: If the field count is not 3, the timestamp is not a
            64-bit integer, the symbol is empty or the price is not a number.
    """
    text = line.rstrip("\r\n")
    values = text.split(FIELD_SEPARATOR)
    if len(values) != FIELD_COUNT:
        raise FormatError(text, f"expected {FIELD_COUNT} fields, got {len(values)}")

    raw_timestamp, symbol, raw_price = values

    if not TIMESTAMP_PATTERN.fullmatch(raw_timestamp):
        raise FormatError(text, f"timestamp {raw_timestamp!r} is not an integer")
    try:
        epoch_millis = int(raw_timestamp)
    except ValueError:
        # More digits than int() converts
        raise FormatError(text, f"timestamp {raw_timestamp!r} is out of range") from None
    if not MIN_EPOCH_MILLIS <= epoch_millis <= MAX_EPOCH_MILLIS:
        raise FormatError(text, f"timestamp {epoch_millis} is out of range")
    try:
        timestamp = millis_to_datetime(epoch_millis)
    except OverflowError:
        raise FormatError(text, f"timestamp {epoch_millis} is out of range") from None

    if not symbol:
        raise FormatError(text, "symbol is empty")

    if not PRICE_PATTERN.fullmatch(raw_price):
        raise FormatError(text, f"price {raw_price!r} is not a number")
    price = Decimal(raw_price)

    return PricePoint(timestamp=timestamp, symbol=symbol, price=price)
