"""Normalized range calculation.

normalized range = (max - min) / min, a scale-free volatility proxy.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_UP, Decimal, localcontext
from typing import Any

from cryptoprice.constants import (
    NORMALIZED_RANGE_QUANTUM,
    NORMALIZED_RANGE_SCALE,
    UNDEFINED_RANGE,
)
from cryptoprice.data.price_point import PricePoint


@dataclass(frozen=True)
class NormalizedValue:
    """Normalized range of one symbol."""

    symbol: str
    value: Decimal

    @property
    def is_defined(self) -> bool:
        return self.value != UNDEFINED_RANGE

    def to_dict(self) -> dict[str, Any]:
        return {"symbol": self.symbol, "value": str(self.value)}


def _exact_difference(a: Decimal, b: Decimal) -> Decimal:
    """a - b without rounding, whatever the digit count of the operands."""
    with localcontext() as ctx:
        lowest_exponent = min(a.as_tuple().exponent, b.as_tuple().exponent)
        ctx.prec = max(ctx.prec, max(a.adjusted(), b.adjusted()) - lowest_exponent + 2)
        return a - b


def normalized_range(min_price: Decimal | None, max_price: Decimal | None) -> Decimal:
    """
    Compute (max - min) / min to 10 decimal places, rounding up.

    Returns -1 when either price is missing or the minimum is zero.
    Prices are never negative, so -1 always means "undefined".
    """
    if min_price is None or max_price is None or min_price == 0:
        return UNDEFINED_RANGE

    spread = _exact_difference(max_price, min_price)
    # Headroom so the final quantize is the only rounding that matters
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, spread.adjusted() - min_price.adjusted() + NORMALIZED_RANGE_SCALE + 12)
        ctx.rounding = ROUND_UP
        quotient = spread / min_price
        return quotient.quantize(NORMALIZED_RANGE_QUANTUM, rounding=ROUND_UP)


def normalized_range_of(points: Iterable[PricePoint]) -> Decimal:
    """Normalized range over an arbitrary set of records (-1 if empty)."""
    prices = [p.price for p in points]
    if not prices:
        return UNDEFINED_RANGE
    return normalized_range(min(prices), max(prices))
