"""Price Database Schema."""

SCHEMA_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS crypto_price (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        price_timestamp INTEGER NOT NULL,
        crypto_symbol TEXT NOT NULL,
        usd_price TEXT NOT NULL
    );
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_crypto_price_symbol
        ON crypto_price (crypto_symbol);
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_crypto_price_timestamp
        ON crypto_price (price_timestamp);
    """,
]
