"""Tests for the aggregate cache."""

from __future__ import annotations

import threading
from decimal import Decimal

import pytest

from cryptoprice.analytics.cache import AggregateCache, ExtremumCache
from cryptoprice.constants import AggregateKind
from cryptoprice.data.parser import parse_price_line
from cryptoprice.store.memory import InMemoryPriceStore

from conftest import BTC_ROWS


class CountingStore(InMemoryPriceStore):
    """In-memory store that counts symbol scans."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.scans = 0

    def find_by_symbol(self, symbol):
        self.scans += 1
        return super().find_by_symbol(symbol)


@pytest.fixture
def store() -> CountingStore:
    return CountingStore(parse_price_line(row) for row in BTC_ROWS)


@pytest.fixture
def cache(store) -> AggregateCache:
    return AggregateCache(store)


class TestAggregates:
    def test_btc_extremes(self, cache) -> None:
        assert cache.min("BTC").price == Decimal("37300.31")
        assert cache.max("BTC").price == Decimal("46979.61")
        assert cache.oldest("BTC").price == Decimal("46813.21")
        assert cache.newest("BTC").price == Decimal("38415.79")

    def test_oldest_and_newest_are_whole_records(self, cache) -> None:
        assert cache.oldest("BTC") == parse_price_line(BTC_ROWS[0])
        assert cache.newest("BTC") == parse_price_line(BTC_ROWS[3])

    def test_unknown_symbol_has_no_data(self, cache) -> None:
        for kind in AggregateKind:
            assert cache.get(kind, "DOGE") is None
            assert not cache.is_cached(kind, "DOGE")

    def test_min_max_compare_decimals_exactly(self) -> None:
        store = InMemoryPriceStore(
            [
                parse_price_line("1,XRP,0.30000000000000000001"),
                parse_price_line("2,XRP,0.3"),
                parse_price_line("3,XRP,0.30000000000000000002"),
            ]
        )
        cache = AggregateCache(store)
        assert cache.min("XRP").price == Decimal("0.3")
        assert cache.max("XRP").price == Decimal("0.30000000000000000002")

    def test_equal_timestamps_resolve_consistently(self) -> None:
        store = InMemoryPriceStore(
            [parse_price_line("5,ETH,1.0"), parse_price_line("5,ETH,2.0")]
        )
        first = AggregateCache(store).oldest("ETH")
        second = AggregateCache(store).oldest("ETH")
        assert first == second
        assert first.price == Decimal("1.0")


class TestMemoization:
    def test_each_aggregate_scans_once(self, cache, store) -> None:
        for _ in range(3):
            cache.min("BTC")
        assert store.scans == 1

        cache.max("BTC")
        cache.max("BTC")
        assert store.scans == 2

    def test_cache_ignores_later_ingestion(self, cache, store) -> None:
        assert cache.max("BTC").price == Decimal("46979.61")

        store.save_batch([parse_price_line("1700000000000,BTC,99999.99")])

        assert cache.max("BTC").price == Decimal("46979.61")
        # Aggregates not yet computed do see the new record
        assert cache.newest("BTC").price == Decimal("99999.99")

    def test_empty_result_is_not_cached(self, cache, store) -> None:
        assert cache.min("SOL") is None
        store.save_batch([parse_price_line("1641009600000,SOL,170.5")])
        assert cache.min("SOL").price == Decimal("170.5")

    def test_concurrent_first_calls_compute_once(self) -> None:
        calls = []
        barrier = threading.Barrier(8)
        points = [parse_price_line(row) for row in BTC_ROWS]

        def loader(symbol):
            calls.append(symbol)
            return points

        extremum = ExtremumCache("max", lambda p: p.price, max)
        results = []

        def worker():
            barrier.wait()
            results.append(extremum.get("BTC", loader))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert calls == ["BTC"]
        assert len({id(r) for r in results}) == 1
        assert len(extremum) == 1
