"""Configuration builder with explicit layering.

This module provides ConfigBuilder for building CatalogConfig by composing
configuration sources with explicit precedence handling.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from foltia_catalog.config.env import EnvReader
from foltia_catalog.config.models import (
    CacheConfig,
    CatalogConfig,
    DatabaseConfig,
    LoggingConfig,
    QueryConfig,
)


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None values indicate "not specified in this source" and will not
    override values from lower-precedence sources.
    """

    # Database
    database_path: Path | None = None
    database_timeout: float | None = None

    # Cache
    cache_enabled: bool | None = None
    cache_ttl_seconds: int | None = None
    cache_max_entries: int | None = None

    # Query
    default_page_rows: int | None = None

    # Logging
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None


class ConfigBuilder:
    """Builds CatalogConfig by layering ConfigSources with precedence.

    Later sources override earlier ones (for non-None values).

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config))
        builder.apply(source_from_env(reader))
        builder.apply(cli_source)
        config = builder.build()
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def apply(self, source: ConfigSource) -> None:
        """Apply a configuration source, overriding existing values."""
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self) -> CatalogConfig:
        """Build the final CatalogConfig with defaults for unset values.

        Raises:
            ValueError: If a resulting value fails validation.
        """
        database_defaults = DatabaseConfig()
        cache_defaults = CacheConfig()
        logging_defaults = LoggingConfig()
        return CatalogConfig(
            database=DatabaseConfig(
                path=self._get("database_path", database_defaults.path),
                timeout=self._get("database_timeout", database_defaults.timeout),
            ),
            cache=CacheConfig(
                enabled=self._get("cache_enabled", cache_defaults.enabled),
                ttl_seconds=self._get("cache_ttl_seconds", cache_defaults.ttl_seconds),
                max_entries=self._get("cache_max_entries", cache_defaults.max_entries),
            ),
            query=QueryConfig(
                default_page_rows=self._get(
                    "default_page_rows", QueryConfig().default_page_rows
                ),
            ),
            logging=LoggingConfig(
                level=self._get("logging_level", logging_defaults.level),
                file=self._get("logging_file", logging_defaults.file),
                format=self._get("logging_format", logging_defaults.format),
                include_stderr=self._get(
                    "logging_include_stderr", logging_defaults.include_stderr
                ),
                max_bytes=self._get("logging_max_bytes", logging_defaults.max_bytes),
                backup_count=self._get(
                    "logging_backup_count", logging_defaults.backup_count
                ),
            ),
        )


def _optional_path(value: Any) -> Path | None:
    return Path(value).expanduser() if value else None


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create ConfigSource from a parsed TOML config file.

    Expected layout:

        [database]
        path = "~/.foltia-catalog/catalog.db"
        timeout = 30

        [cache]
        enabled = true
        ttl_seconds = 300
        max_entries = 4096

        [query]
        default_page_rows = 100

        [logging]
        level = "info"
        file = "~/.foltia-catalog/catalog.log"
        format = "text"
    """
    database = file_config.get("database", {})
    cache = file_config.get("cache", {})
    query = file_config.get("query", {})
    logging_conf = file_config.get("logging", {})

    return ConfigSource(
        database_path=_optional_path(database.get("path")),
        database_timeout=database.get("timeout"),
        cache_enabled=cache.get("enabled"),
        cache_ttl_seconds=cache.get("ttl_seconds"),
        cache_max_entries=cache.get("max_entries"),
        default_page_rows=query.get("default_page_rows"),
        logging_level=logging_conf.get("level"),
        logging_file=_optional_path(logging_conf.get("file")),
        logging_format=logging_conf.get("format"),
        logging_include_stderr=logging_conf.get("include_stderr"),
        logging_max_bytes=logging_conf.get("max_bytes"),
        logging_backup_count=logging_conf.get("backup_count"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create ConfigSource from FOLTIA_CATALOG_* environment variables."""
    return ConfigSource(
        database_path=reader.get_path("FOLTIA_CATALOG_DATABASE_PATH"),
        cache_enabled=reader.get_bool("FOLTIA_CATALOG_CACHE_ENABLED"),
        cache_ttl_seconds=reader.get_int("FOLTIA_CATALOG_CACHE_TTL"),
        cache_max_entries=reader.get_int("FOLTIA_CATALOG_CACHE_MAX_ENTRIES"),
        default_page_rows=reader.get_int("FOLTIA_CATALOG_PAGE_ROWS"),
        logging_level=reader.get_str("FOLTIA_CATALOG_LOG_LEVEL"),
        logging_file=reader.get_path("FOLTIA_CATALOG_LOG_FILE"),
        logging_format=reader.get_str("FOLTIA_CATALOG_LOG_FORMAT"),
    )
