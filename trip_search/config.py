"""Centralized configuration using Pydantic Settings.

This module is the single source of truth for runtime settings: the
semantic oracle, the catalog location and logging.

Configuration can be overridden via environment variables:
- TRIPS_ORACLE_MODEL=gpt-4o-mini
- TRIPS_ORACLE_ENABLED=false
- TRIPS_CATALOG_DATA_DIR=/path/to/data
- TRIPS_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.errors import ConfigurationError


class OracleConfig(BaseSettings):
    """Semantic oracle (chat completion) configuration.

    Environment variables prefixed with TRIPS_ORACLE_.
    """

    model_config = SettingsConfigDict(env_prefix="TRIPS_ORACLE_")

    enabled: bool = True
    model: str = "gpt-3.5-turbo"
    api_key: Optional[str] = None  # falls back to OPENAI_API_KEY
    base_url: Optional[str] = None
    temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    max_tokens: int = Field(default=500, gt=0)
    timeout_seconds: float = Field(default=30.0, gt=0)


class CatalogConfig(BaseSettings):
    """Trip catalog configuration.

    Environment variables prefixed with TRIPS_CATALOG_.
    """

    model_config = SettingsConfigDict(env_prefix="TRIPS_CATALOG_")

    data_dir: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parent / "data"
    )
    catalog_file: str = "trips.csv"

    @property
    def catalog_path(self) -> Path:
        """Full path to the catalog CSV file."""
        return self.data_dir / self.catalog_file


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Environment variables prefixed with TRIPS_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="TRIPS_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

        config = get_config()
        print(config.oracle.model)
        print(config.catalog.catalog_path)

    Environment variables prefixed with TRIPS_.
    """

    model_config = SettingsConfigDict(env_prefix="TRIPS_")

    oracle: OracleConfig = Field(default_factory=OracleConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.

    Returns:
        The application configuration instance.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache.

    Call this in tests to ensure a fresh configuration is loaded.
    """
    get_config.cache_clear()


def configure_logging(config: Optional[ObservabilityConfig] = None) -> None:
    """Apply the observability settings to the root logger.

    Intended for application entry points; library code only creates
    module loggers.

    Raises:
        ConfigurationError: If the configured level is not a logging level.
    """
    config = config or get_config().observability
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        raise ConfigurationError(
            f"Unknown log level: {config.level}",
            setting_name="TRIPS_LOG_LEVEL",
        )
    logging.basicConfig(level=level, format=config.format)
