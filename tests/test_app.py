"""Tests for application wiring and the CLI."""

from __future__ import annotations

import importlib
import sqlite3
from contextlib import closing
from pathlib import Path

from click.testing import CliRunner

from cryptoprice.app import PriceApp, create_store
from cryptoprice.cli import EXIT_BAD_REQUEST, EXIT_NOT_FOUND, cli
from cryptoprice.config_loader import load_config_with_overrides
from cryptoprice.store.memory import InMemoryPriceStore
from cryptoprice.store.sqlite import SQLitePriceStore


class TestPriceApp:
    def test_startup_ingests_prices_dir(self, prices_dir: Path) -> None:
        config = load_config_with_overrides(None, prices_dir=str(prices_dir))
        app = PriceApp(config).start()

        assert isinstance(app.store, InMemoryPriceStore)
        assert app.startup_report.record_count == 8
        assert app.engine.known_symbols() == ["BTC", "ETH"]

    def test_startup_without_ingestion(self, prices_dir: Path) -> None:
        config = load_config_with_overrides(None, prices_dir=str(prices_dir))
        config.ingestion.ingest_on_startup = False
        app = PriceApp(config).start()

        assert app.startup_report is None
        assert app.engine.known_symbols() == []

    def test_missing_prices_dir_still_starts(self, tmp_path: Path) -> None:
        config = load_config_with_overrides(None, prices_dir=str(tmp_path / "nope"))
        app = PriceApp(config).start()

        assert app.startup_report.error is not None
        assert app.engine.known_symbols() == []

    def test_persistent_store_is_not_reingested(self, prices_dir: Path, tmp_path: Path) -> None:
        config = load_config_with_overrides(
            None,
            prices_dir=str(prices_dir),
            backend="sqlite",
            database_path=str(tmp_path / "prices.db"),
        )

        first = PriceApp(config).start()
        assert first.startup_report.record_count == 8

        second = PriceApp(config).start()
        assert second.startup_report is None
        assert len(second.store.find_by_symbol("BTC")) == 4
        assert second.engine.known_symbols() == ["BTC", "ETH"]

    def test_memory_store_always_ingests(self, prices_dir: Path) -> None:
        config = load_config_with_overrides(None, prices_dir=str(prices_dir))
        store = InMemoryPriceStore()
        PriceApp(config, store=store).start()
        PriceApp(config, store=store).start()

        assert len(store) == 16

    def test_create_sqlite_store(self, tmp_path: Path) -> None:
        config = load_config_with_overrides(
            None, backend="sqlite", database_path=str(tmp_path / "prices.db")
        )
        store = create_store(config)

        assert isinstance(store, SQLitePriceStore)
        assert (tmp_path / "prices.db").exists()


class TestCli:
    def test_stats(self, prices_dir: Path) -> None:
        result = CliRunner().invoke(cli, ["--prices-dir", str(prices_dir), "stats", "BTC"])

        assert result.exit_code == 0, result.output
        assert '"price": "37300.31"' in result.output
        assert '"price": "46979.61"' in result.output

    def test_stats_unsupported_symbol(self, prices_dir: Path) -> None:
        result = CliRunner().invoke(cli, ["--prices-dir", str(prices_dir), "stats", "DOGE"])

        assert result.exit_code == EXIT_NOT_FOUND
        assert "Unsupported symbol: DOGE" in result.output

    def test_ranking(self, prices_dir: Path) -> None:
        result = CliRunner().invoke(cli, ["--prices-dir", str(prices_dir), "ranking"])

        assert result.exit_code == 0, result.output
        assert result.output.index('"ETH"') < result.output.index('"BTC"')

    def test_highest(self, prices_dir: Path) -> None:
        result = CliRunner().invoke(
            cli, ["--prices-dir", str(prices_dir), "highest", "--day", "20220101"]
        )

        assert result.exit_code == 0, result.output
        assert "ETH" in result.output

    def test_highest_no_data(self, prices_dir: Path) -> None:
        result = CliRunner().invoke(
            cli, ["--prices-dir", str(prices_dir), "highest", "--day", "20230101"]
        )
        assert result.exit_code == EXIT_NOT_FOUND

    def test_highest_bad_day(self, prices_dir: Path) -> None:
        result = CliRunner().invoke(
            cli, ["--prices-dir", str(prices_dir), "highest", "--day", "2022-01-01"]
        )
        assert result.exit_code == EXIT_BAD_REQUEST
        assert "YYYYMMDD" in result.output

    def test_ingest_into_sqlite(self, prices_dir: Path, tmp_path: Path) -> None:
        db_path = tmp_path / "prices.db"
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            f"storage:\n  backend: sqlite\n  database_path: {db_path}\n"
            f"ingestion:\n  prices_dir: {tmp_path / 'empty'}\n"
        )

        result = CliRunner().invoke(cli, ["--config", str(config_file), "ingest", str(prices_dir)])
        assert result.exit_code == 0, result.output
        assert '"records": 8' in result.output

        # The records persist for the next invocation
        result = CliRunner().invoke(cli, ["--config", str(config_file), "stats", "ETH"])
        assert result.exit_code == 0, result.output
        assert '"price": "2672.5"' in result.output

    def test_repeated_queries_keep_sqlite_row_count(self, prices_dir: Path, tmp_path: Path) -> None:
        db_path = tmp_path / "prices.db"
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            f"storage:\n  backend: sqlite\n  database_path: {db_path}\n"
            f"ingestion:\n  prices_dir: {prices_dir}\n  ingest_on_startup: true\n"
        )

        for _ in range(3):
            result = CliRunner().invoke(cli, ["--config", str(config_file), "stats", "BTC"])
            assert result.exit_code == 0, result.output

        with closing(sqlite3.connect(db_path)) as conn:
            (rows,) = conn.execute("SELECT COUNT(*) FROM crypto_price").fetchone()
        assert rows == 8


def test_main_module_import_does_not_run_cli() -> None:
    module = importlib.import_module("cryptoprice.__main__")
    assert module.main is cli
