"""cryptoprice CLI."""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from typing import Any

import click

from cryptoprice.app import PriceApp, setup_logging
from cryptoprice.config_loader import load_config_with_overrides
from cryptoprice.constants import StorageBackend
from cryptoprice.errors import QueryError

EXIT_BAD_REQUEST = 1
EXIT_NOT_FOUND = 2


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    return str(obj)


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, default=_json_default))


def _fail(ctx: click.Context, error: QueryError) -> None:
    click.echo(f"Error: {error}", err=True)
    ctx.exit(EXIT_NOT_FOUND if error.status_code == 404 else EXIT_BAD_REQUEST)


def _build_app(ctx: click.Context, ingest_on_startup: bool = True) -> PriceApp:
    config = ctx.obj["config"]
    if not ingest_on_startup:
        config = config.model_copy(
            update={"ingestion": config.ingestion.model_copy(update={"ingest_on_startup": False})}
        )
    return PriceApp(config).start()


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    envvar="CRYPTOPRICE_CONFIG",
    help="Path to configuration file",
)
@click.option("--prices-dir", type=click.Path(), help="Override the price files directory")
@click.option(
    "--backend",
    type=click.Choice([b.value for b in StorageBackend]),
    help="Override the storage backend",
)
@click.pass_context
def cli(ctx, config_path, prices_dir, backend):
    """Crypto price analytics."""
    config = load_config_with_overrides(config_path, prices_dir=prices_dir, backend=backend)
    setup_logging(config)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command()
@click.argument("directory", required=False, type=click.Path())
@click.pass_context
def ingest(ctx, directory):
    """Ingest price files from DIRECTORY (defaults to the configured prices dir)."""
    app = _build_app(ctx, ingest_on_startup=False)
    report = app.engine.ingest(directory or app.config.ingestion.prices_dir)
    _echo_json(report.to_dict())


@cli.command()
@click.argument("symbol")
@click.pass_context
def stats(ctx, symbol):
    """Show oldest/newest/min/max prices for SYMBOL."""
    app = _build_app(ctx)
    try:
        result = app.queries.stats(symbol)
    except QueryError as e:
        _fail(ctx, e)
    _echo_json(result.to_dict())


@cli.command()
@click.pass_context
def ranking(ctx):
    """List all symbols by normalized range, highest first."""
    app = _build_app(ctx)
    _echo_json([v.to_dict() for v in app.queries.normalized_ranking()])


@cli.command()
@click.option("--day", required=True, help="Day in YYYYMMDD format")
@click.pass_context
def highest(ctx, day):
    """Show the symbol with the highest normalized range on a day."""
    app = _build_app(ctx)
    try:
        symbol = app.queries.highest_for_day(day)
    except QueryError as e:
        _fail(ctx, e)
    click.echo(symbol)


if __name__ == "__main__":
    cli()

# Alias for __main__.py
main = cli
