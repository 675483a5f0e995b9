"""Shared fixtures for price tests."""

from __future__ import annotations

from pathlib import Path

import pytest

BTC_ROWS = [
    "1641009600000,BTC,46813.21",
    "1641020400000,BTC,46979.61",
    "1643626800000,BTC,37300.31",
    "1643659200000,BTC,38415.79",
]

# Three rows on 2022-01-01 and one on 2022-02-01
ETH_ROWS = [
    "1641013200000,ETH,3715.32",
    "1641031200000,ETH,3718.67",
    "1641052800000,ETH,3697.04",
    "1643673600000,ETH,2672.5",
]


def write_price_file(directory: Path, name: str, rows: list[str], header: bool = True) -> Path:
    lines = (["timestamp,symbol,price"] if header else []) + rows
    path = directory / name
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def prices_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "prices"
    directory.mkdir()
    write_price_file(directory, "BTC_values.csv", BTC_ROWS)
    write_price_file(directory, "ETH_values.csv", ETH_ROWS)
    return directory
