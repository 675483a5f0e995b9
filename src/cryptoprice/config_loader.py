"""Configuration loader with Pydantic validation and environment variable interpolation."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables at module level
load_dotenv(find_dotenv(usecwd=True))

from cryptoprice.constants import (
    DEFAULT_DATABASE_PATH,
    DEFAULT_PRICES_DIR,
    HEADER_TOKEN,
    PRICE_FILE_SUFFIX,
    LogLevel,
    StorageBackend,
)


def interpolate_env_vars(value: Any) -> Any:
    """
    Interpolate environment variables in string values.

    Supports formats:
    - ${VAR_NAME} - replaced by the variable, empty string if not set
    - ${VAR_NAME:default} - optional with default value
    """
    if not isinstance(value, str):
        return value

    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)

        env_value = os.environ.get(var_name)

        if env_value is not None:
            return env_value
        elif default is not None:
            return default
        else:
            return ""

    return re.sub(pattern, replacer, value)


def process_config_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively process config dict to interpolate env vars."""
    result = {}
    for key, value in data.items():
        if isinstance(value, dict):
            result[key] = process_config_dict(value)
        elif isinstance(value, list):
            result[key] = [
                process_config_dict(item) if isinstance(item, dict) else interpolate_env_vars(item)
                for item in value
            ]
        else:
            result[key] = interpolate_env_vars(value)
    return result


# ============================================
# Pydantic Configuration Models
# ============================================


class EnvironmentConfig(BaseModel):
    """Environment and runtime settings."""

    log_level: LogLevel = LogLevel.INFO


class IngestionConfig(BaseModel):
    """Price file ingestion settings."""

    prices_dir: str = DEFAULT_PRICES_DIR
    file_suffix: str = PRICE_FILE_SUFFIX
    header_token: str = HEADER_TOKEN
    ingest_on_startup: bool = True

    @field_validator("file_suffix")
    @classmethod
    def validate_file_suffix(cls, v: str) -> str:
        """Price files are CSV files named SYMBOL<suffix>."""
        if not v.endswith(".csv") or len(v) <= len(".csv"):
            raise ValueError(f"File suffix must look like '_values.csv', got: {v}")
        return v

    @field_validator("header_token")
    @classmethod
    def validate_header_token(cls, v: str) -> str:
        if not v:
            raise ValueError("Header token must not be empty")
        return v


class StorageConfig(BaseModel):
    """Price store configuration."""

    backend: StorageBackend = StorageBackend.MEMORY
    database_path: str = DEFAULT_DATABASE_PATH


class AppConfig(BaseModel):
    """Root application configuration."""

    environment: EnvironmentConfig = Field(default_factory=EnvironmentConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    @property
    def is_persistent(self) -> bool:
        """Check if prices survive a restart."""
        return self.storage.backend == StorageBackend.SQLITE


# ============================================
# Configuration Loader
# ============================================


class ConfigLoader:
    """Load and validate configuration from YAML files with env var interpolation."""

    def __init__(self, config_path: str | Path) -> None:
        """
        Initialize config loader.

        Args:
            config_path: Path to the YAML configuration file.
        """
        self.config_path = Path(config_path)
        self._config: AppConfig | None = None

    def load(self) -> AppConfig:
        """
        Load and validate configuration.

        Returns:
            Validated AppConfig instance.

        Raises:
            FileNotFoundError: If config file doesn't exist.
            yaml.YAMLError: If YAML is invalid.
            pydantic.ValidationError: If config validation fails.
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)

        if raw_config is None:
            raw_config = {}

        processed_config = process_config_dict(raw_config)

        self._config = AppConfig.model_validate(processed_config)

        return self._config

    @property
    def config(self) -> AppConfig:
        """Get loaded config, loading if necessary."""
        if self._config is None:
            return self.load()
        return self._config

    def reload(self) -> AppConfig:
        """Force reload configuration from disk."""
        self._config = None
        return self.load()


def load_config(config_path: str | Path) -> AppConfig:
    """
    Convenience function to load configuration.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Validated AppConfig instance.
    """
    loader = ConfigLoader(config_path)
    return loader.load()


def load_config_with_overrides(
    config_path: str | Path | None,
    *,
    prices_dir: str | None = None,
    backend: str | None = None,
    database_path: str | None = None,
) -> AppConfig:
    """
    Load configuration with CLI overrides.

    Args:
        config_path: Path to the YAML configuration file, or None for defaults.
        prices_dir: Override the price files directory.
        backend: Override the storage backend.
        database_path: Override the SQLite database path.

    Returns:
        Validated AppConfig instance with overrides applied.
    """
    config = load_config(config_path) if config_path is not None else AppConfig()

    updates: dict[str, Any] = {}

    if prices_dir is not None:
        updates["ingestion"] = config.ingestion.model_copy(update={"prices_dir": prices_dir})

    storage_updates: dict[str, Any] = {}
    if backend is not None:
        storage_updates["backend"] = StorageBackend(backend.lower())
    if database_path is not None:
        storage_updates["database_path"] = database_path
    if storage_updates:
        updates["storage"] = config.storage.model_copy(update=storage_updates)

    if updates:
        return config.model_copy(update=updates)

    return config
