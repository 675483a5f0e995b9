"""Query boundary over the analytics engine.

Validates caller input and turns "no data" answers into QueryError
subclasses that carry the status code a transport layer responds with.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from cryptoprice.analytics.engine import PriceAnalyticsEngine, Stats
from cryptoprice.analytics.normalized import NormalizedValue
from cryptoprice.constants import DAY_FORMAT
from cryptoprice.errors import InvalidDayError, NoDataError, UnsupportedSymbolError

logger = logging.getLogger(__name__)


def parse_day(day: str, today: date | None = None) -> date:
    """
    Parse a YYYYMMDD day parameter.

    Args:
        day: Day in basic ISO format, e.g. ``20220101``.
        today: Reference date for the future check (defaults to today in UTC).

    Raises:
        InvalidDayError: If the format is wrong or the day is in the future.
    """
    if len(day) != 8 or not day.isdigit():
        raise InvalidDayError(f"{day} is not in YYYYMMDD format")
    try:
        parsed = datetime.strptime(day, DAY_FORMAT).date()
    except ValueError as e:
        raise InvalidDayError(f"{day} is not in YYYYMMDD format") from e

    if today is None:
        today = datetime.now(timezone.utc).date()
    if parsed > today:
        raise InvalidDayError(f"The given day {day} is in the future")
    return parsed


class PriceQueryService:
    """Caller-facing price queries."""

    def __init__(self, engine: PriceAnalyticsEngine):
        self.engine = engine

    def normalized_ranking(self) -> list[NormalizedValue]:
        """All symbols by normalized range, highest first."""
        return self.engine.ranked_by_symbol()

    def stats(self, symbol: str) -> Stats:
        """
        Oldest/newest/min/max of a symbol.

        Raises:
            UnsupportedSymbolError: If the symbol was never ingested.
        """
        if not self.engine.is_supported(symbol):
            logger.warning(f"Stats requested for unsupported symbol {symbol}")
            raise UnsupportedSymbolError(symbol)
        return self.engine.stats(symbol)

    def highest_for_day(self, day: str, today: date | None = None) -> str:
        """
        Symbol with the highest normalized range on a day.

        Raises:
            InvalidDayError: If the day is malformed or in the future.
            NoDataError: If there are no records for that day.
        """
        parsed = parse_day(day, today=today)
        symbol = self.engine.highest_normalized_range_on_day(parsed)
        if symbol is None:
            raise NoDataError(f"No price records for {day}")
        return symbol
