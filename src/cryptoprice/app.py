"""cryptoprice application wiring."""

from __future__ import annotations

import logging

from cryptoprice.analytics.engine import PriceAnalyticsEngine
from cryptoprice.api.queries import PriceQueryService
from cryptoprice.config_loader import AppConfig
from cryptoprice.constants import LOG_FORMAT, StorageBackend
from cryptoprice.data.ingestion import IngestionReport
from cryptoprice.store.base import PriceStore
from cryptoprice.store.memory import InMemoryPriceStore
from cryptoprice.store.sqlite import SQLitePriceStore

logger = logging.getLogger(__name__)


def setup_logging(config: AppConfig) -> None:
    logging.basicConfig(level=config.environment.log_level.value, format=LOG_FORMAT)


def create_store(config: AppConfig) -> PriceStore:
    """Build the configured price store."""
    if config.storage.backend == StorageBackend.SQLITE:
        store = SQLitePriceStore(config.storage.database_path)
        store.initialize()
        logger.info(f"Using SQLite price store at {config.storage.database_path}")
        return store

    logger.info("Using in-memory price store")
    return InMemoryPriceStore()


class PriceApp:
    """Builds the engine and query service from configuration."""

    def __init__(self, config: AppConfig, store: PriceStore | None = None):
        self.config = config
        self.store = store if store is not None else create_store(config)
        self.engine = PriceAnalyticsEngine(
            self.store,
            file_suffix=config.ingestion.file_suffix,
            header_token=config.ingestion.header_token,
        )
        self.queries = PriceQueryService(self.engine)
        self.startup_report: IngestionReport | None = None

    def start(self) -> PriceApp:
        """
        Ingest the configured prices directory if enabled.

        A persistent store that already holds records is not re-ingested,
        so repeated runs against the same database don't duplicate them.
        """
        if not self.config.ingestion.ingest_on_startup:
            return self
        if self.config.is_persistent and self.engine.known_symbols():
            logger.info(
                f"Skipping startup ingestion: {self.config.storage.database_path} already holds "
                f"{len(self.engine.known_symbols())} symbols"
            )
            return self
        logger.info(f"Reading price files from {self.config.ingestion.prices_dir}")
        self.startup_report = self.engine.ingest(self.config.ingestion.prices_dir)
        return self
