"""Core constants for cryptoprice."""

from decimal import Decimal
from enum import Enum


class StorageBackend(str, Enum):
    """Price store backend selection."""

    MEMORY = "memory"
    SQLITE = "sqlite"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class AggregateKind(str, Enum):
    """Per-symbol aggregate slots held by the aggregate cache."""

    OLDEST = "oldest"
    NEWEST = "newest"
    MIN = "min"
    MAX = "max"


# ============================================
# Price File Format
# ============================================

PRICE_FILE_SUFFIX = "_values.csv"
HEADER_TOKEN = "timestamp"
FIELD_SEPARATOR = ","
FIELD_COUNT = 3

# Epoch milliseconds must fit a signed 64-bit integer
MAX_EPOCH_MILLIS = 2**63 - 1
MIN_EPOCH_MILLIS = -(2**63)

# ============================================
# Normalized Range
# ============================================

NORMALIZED_RANGE_SCALE = 10
NORMALIZED_RANGE_QUANTUM = Decimal(1).scaleb(-NORMALIZED_RANGE_SCALE)
UNDEFINED_RANGE = Decimal(-1)

DAY_FORMAT = "%Y%m%d"

# ============================================
# Application Constants
# ============================================

APP_NAME = "cryptoprice"
DEFAULT_PRICES_DIR = "./prices"
DEFAULT_DATABASE_PATH = "./data/prices.db"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
