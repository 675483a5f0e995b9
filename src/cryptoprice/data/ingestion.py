"""Price File Ingestion.

Reads a directory of ``SYMBOL_values.csv`` files, parses every line and
stores each file's records as one batch.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path

from cryptoprice.constants import HEADER_TOKEN, PRICE_FILE_SUFFIX
from cryptoprice.data.parser import parse_price_line
from cryptoprice.data.price_point import PricePoint
from cryptoprice.errors import (
    DirectoryError,
    EmptyOrMissingFileError,
    FormatError,
    NamingError,
    PriceDataError,
)
from cryptoprice.store.base import PriceStore
from cryptoprice.symbols import SymbolRegistry

logger = logging.getLogger(__name__)


@dataclass
class IngestionReport:
    """Outcome of one ingestion run."""

    directory: Path
    ingested: dict[str, int] = field(default_factory=dict)  # file name -> record count
    rejected: dict[str, str] = field(default_factory=dict)  # file name -> reason
    error: str | None = None  # set when the whole directory was skipped

    @property
    def record_count(self) -> int:
        return sum(self.ingested.values())

    def to_dict(self) -> dict:
        return {
            "directory": str(self.directory),
            "ingested": dict(self.ingested),
            "rejected": dict(self.rejected),
            "records": self.record_count,
            "error": self.error,
        }


class PriceFileIngestor:
    """
    Load price files into a price store.

    Errors are contained per file: a bad name, an empty file or a single
    malformed line skips that file and the run continues with the next one.
    Re-ingesting the same directory appends the records again.
    """

    def __init__(
        self,
        store: PriceStore,
        registry: SymbolRegistry,
        file_suffix: str = PRICE_FILE_SUFFIX,
        header_token: str = HEADER_TOKEN,
    ):
        self.store = store
        self.registry = registry
        self.file_suffix = file_suffix
        self.header_token = header_token
        self._name_pattern = re.compile(rf"^.+{re.escape(file_suffix)}$")

    def _list_directory(self, directory: Path) -> list[Path]:
        if not directory.exists():
            raise DirectoryError(f"Path {directory} doesn't exist")
        if not directory.is_dir():
            raise DirectoryError(f"Path {directory} is not a directory")
        try:
            return sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise DirectoryError(f"Cannot list price files in {directory}: {e}") from e

    def ingest(self, directory: str | Path) -> IngestionReport:
        """
        Ingest every price file in a directory.

        Args:
            directory: Directory holding SYMBOL_values.csv files.

        Returns:
            Report of ingested and rejected files. A missing or unlistable
            directory yields an empty report with ``error`` set.
        """
        root = Path(directory)
        report = IngestionReport(directory=root)

        try:
            price_files = self._list_directory(root)
        except DirectoryError as e:
            logger.error(str(e))
            report.error = str(e)
            return report

        for price_file in price_files:
            try:
                points = self.read_price_file(price_file)
            except PriceDataError as e:
                logger.error(f"Error when reading file {price_file.name}: {e}")
                report.rejected[price_file.name] = str(e)
                continue

            if not points:
                logger.warning(f"No price records in {price_file.name}")
                report.ingested[price_file.name] = 0
                continue

            self.store.save_batch(points)
            for symbol in dict.fromkeys(p.symbol for p in points):
                self.registry.add(symbol)
            report.ingested[price_file.name] = len(points)
            logger.info(f"Loaded {len(points)} price records from {price_file.name}")

        logger.info(
            f"Ingestion of {root} finished: {len(report.ingested)} files, "
            f"{report.record_count} records, {len(report.rejected)} rejected"
        )
        return report

    def read_price_file(self, price_file: str | Path) -> list[PricePoint]:
        """
        Read one price file.

        Raises:
            EmptyOrMissingFileError: If the file does not exist, cannot be read or is empty.
            NamingError: If the name doesn't follow SYMBOL_values.csv.
            FormatError: If any line is malformed. The whole file is rejected.
        """
        path = Path(price_file)
        if not path.is_file() or not os.access(path, os.R_OK) or path.stat().st_size == 0:
            raise EmptyOrMissingFileError(path.name)
        if not self._name_pattern.match(path.name):
            raise NamingError(path.name, self.file_suffix)

        points = []
        try:
            with open(path, encoding="utf-8-sig") as f:
                for line_no, line in enumerate(f, start=1):
                    if line.startswith(self.header_token) or not line.strip():
                        continue
                    try:
                        points.append(parse_price_line(line))
                    except FormatError as e:
                        logger.error(f"{path.name}:{line_no}: {e.reason}")
                        raise
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {path.name}: {e}")
            raise EmptyOrMissingFileError(path.name) from e

        return points
