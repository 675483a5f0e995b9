"""Tests for SQLitePriceStore."""

import sqlite3
from datetime import date
from decimal import Decimal

import pytest

from cryptoprice.analytics.engine import PriceAnalyticsEngine, day_window
from cryptoprice.data.parser import parse_price_line
from cryptoprice.store.sqlite import SQLitePriceStore

from conftest import BTC_ROWS, ETH_ROWS


@pytest.fixture
def store(tmp_path):
    store = SQLitePriceStore(tmp_path / "db" / "prices.db")
    store.initialize()
    return store


def test_store_lifecycle(store, tmp_path):
    db_path = tmp_path / "db" / "prices.db"
    assert db_path.exists()

    store.save_batch(parse_price_line(row) for row in BTC_ROWS + ETH_ROWS)

    btc = store.find_by_symbol("BTC")
    assert btc == [parse_price_line(row) for row in BTC_ROWS]
    assert store.find_known_symbols() == {"BTC", "ETH"}

    start, end = day_window(date(2022, 1, 1))
    on_day = store.find_by_time_range(start, end)
    assert {p.symbol for p in on_day} == {"BTC", "ETH"}
    assert len(on_day) == 5

    # Prices are stored as exact text
    conn = sqlite3.connect(db_path)
    rows = conn.execute("SELECT usd_price FROM crypto_price WHERE crypto_symbol = 'BTC'").fetchall()
    conn.close()
    assert rows[0][0] == "46813.21"


def test_decimal_precision_survives(store):
    store.save_batch([parse_price_line("1641009600000,SHIB,0.0000330000000000000001")])
    assert store.find_by_symbol("SHIB")[0].price == Decimal("0.0000330000000000000001")


def test_initialize_is_idempotent(store):
    store.save_batch([parse_price_line(BTC_ROWS[0])])
    store.initialize()
    assert len(store.find_by_symbol("BTC")) == 1


def test_engine_restart_sees_persisted_symbols(store, prices_dir):
    first = PriceAnalyticsEngine(store)
    first.ingest(prices_dir)

    # New engine over the same database
    second = PriceAnalyticsEngine(SQLitePriceStore(store.db_path))
    assert second.is_supported("BTC")
    assert second.max("BTC").price == Decimal("46979.61")
    assert second.highest_normalized_range_on_day(date(2022, 1, 1)) == "ETH"
