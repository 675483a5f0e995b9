"""Error taxonomy for price ingestion and queries.

Ingestion errors are contained by the ingestion pipeline: line and file
errors skip a single file, directory errors end the run early. Query errors
are raised by the query boundary and carry the status code a transport
layer would answer with.
"""

from __future__ import annotations


class PriceDataError(Exception):
    """Base class for price ingestion failures."""


class FormatError(PriceDataError):
    """A price line does not follow TIMESTAMP,SYMBOL,PRICE."""

    def __init__(self, line: str, reason: str):
        self.line = line
        self.reason = reason
        super().__init__(f"{line!r} doesn't follow the expected line format TIMESTAMP,SYMBOL,PRICE: {reason}")


class NamingError(PriceDataError):
    """A price file name doesn't follow SYMBOL_values.csv."""

    def __init__(self, file_name: str, suffix: str):
        self.file_name = file_name
        super().__init__(f"File name {file_name!r} doesn't match pattern SYMBOL{suffix}")


class EmptyOrMissingFileError(PriceDataError):
    """A price file is missing, unreadable or empty."""

    def __init__(self, file_name: str):
        self.file_name = file_name
        super().__init__(f"File {file_name} does not exist or is empty")


class DirectoryError(PriceDataError):
    """The ingestion root is missing, not a directory, or cannot be listed."""


class QueryError(Exception):
    """Base class for query boundary failures."""

    status_code = 500


class InvalidDayError(QueryError):
    """Day parameter is malformed or in the future."""

    status_code = 400


class UnsupportedSymbolError(QueryError):
    """Symbol has never been ingested."""

    status_code = 404

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"Unsupported symbol: {symbol}")


class NoDataError(QueryError):
    """No price records exist for the requested day."""

    status_code = 404
