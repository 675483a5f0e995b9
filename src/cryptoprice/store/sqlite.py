"""SQLite price store."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterable, Iterator
from contextlib import closing, contextmanager
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from cryptoprice.data.parser import datetime_to_millis, millis_to_datetime
from cryptoprice.data.price_point import PricePoint
from cryptoprice.store.base import PriceStore
from cryptoprice.store.schema import SCHEMA_STATEMENTS

logger = logging.getLogger(__name__)


class SQLitePriceStore(PriceStore):
    """
    Persists price records to a SQLite database.

    Prices are stored as TEXT so Decimal values round-trip exactly.
    Timestamps are stored as integer epoch milliseconds (UTC).
    A connection is opened per operation, so one instance can be shared
    across threads.
    """

    def __init__(self, db_path: str | Path):
        self.db_path = str(db_path)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        with closing(sqlite3.connect(self.db_path)) as conn:
            with conn:
                yield conn

    def initialize(self) -> None:
        """Create the database file and schema."""
        try:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

            with self._connect() as conn:
                for stmt in SCHEMA_STATEMENTS:
                    conn.execute(stmt)
        except sqlite3.Error as e:
            logger.error(f"Failed to initialize price DB: {e}", exc_info=True)
            raise

    @staticmethod
    def _to_point(row: tuple[int, str, str]) -> PricePoint:
        return PricePoint(
            timestamp=millis_to_datetime(row[0]),
            symbol=row[1],
            price=Decimal(row[2]),
        )

    def find_by_symbol(self, symbol: str) -> list[PricePoint]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT price_timestamp, crypto_symbol, usd_price
                FROM crypto_price WHERE crypto_symbol = ? ORDER BY id
                """,
                (symbol,),
            ).fetchall()
        return [self._to_point(r) for r in rows]

    def find_by_time_range(self, start: datetime, end: datetime) -> list[PricePoint]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT price_timestamp, crypto_symbol, usd_price
                FROM crypto_price
                WHERE price_timestamp >= ? AND price_timestamp <= ?
                ORDER BY id
                """,
                (datetime_to_millis(start), datetime_to_millis(end)),
            ).fetchall()
        return [self._to_point(r) for r in rows]

    def find_known_symbols(self) -> set[str]:
        with self._connect() as conn:
            rows = conn.execute("SELECT DISTINCT crypto_symbol FROM crypto_price").fetchall()
        return {r[0] for r in rows}

    def save_batch(self, points: Iterable[PricePoint]) -> None:
        rows = [(datetime_to_millis(p.timestamp), p.symbol, str(p.price)) for p in points]
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO crypto_price (price_timestamp, crypto_symbol, usd_price)
                VALUES (?, ?, ?)
                """,
                rows,
            )
        logger.debug(f"Stored {len(rows)} price records in {self.db_path}")
