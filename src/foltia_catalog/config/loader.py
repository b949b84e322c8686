"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to get_config)
2. Environment variables (FOLTIA_CATALOG_*)
3. Config file (~/.foltia-catalog/config.toml)
4. Default values

Environment variables:
- FOLTIA_CATALOG_CONFIG_PATH: Path to config file (overrides default location)
- FOLTIA_CATALOG_DATA_DIR: Path to data directory (overrides ~/.foltia-catalog/)
- FOLTIA_CATALOG_DATABASE_PATH: Path to database file
- FOLTIA_CATALOG_CACHE_ENABLED: Enable the lookup cache (true/false)
- FOLTIA_CATALOG_CACHE_TTL: Cache entry lifetime in seconds
- FOLTIA_CATALOG_CACHE_MAX_ENTRIES: Maximum entries per cache region
- FOLTIA_CATALOG_PAGE_ROWS: Default search page size
- FOLTIA_CATALOG_LOG_LEVEL / _LOG_FILE / _LOG_FORMAT: Logging overrides
"""

from __future__ import annotations

import logging
import os
import threading
import tomllib
from pathlib import Path
from typing import Any

from foltia_catalog.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from foltia_catalog.config.env import EnvReader
from foltia_catalog.config.models import CatalogConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".foltia-catalog"
DATABASE_FILENAME = "catalog.db"
CONFIG_FILENAME = "config.toml"

# Cache for loaded config files (path -> (parsed dict, mtime))
_config_cache: dict[Path, tuple[dict[str, Any], float]] = {}
_config_cache_lock = threading.Lock()


class ConfigFileError(ValueError):
    """Raised when a config file exists but cannot be parsed."""


def get_data_dir() -> Path:
    """Get the data directory (~/.foltia-catalog/ by default).

    Can be overridden by FOLTIA_CATALOG_DATA_DIR environment variable.
    """
    env_path = os.environ.get("FOLTIA_CATALOG_DATA_DIR")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_DIR


def get_default_config_path() -> Path:
    """Get the default config file path.

    Can be overridden by FOLTIA_CATALOG_CONFIG_PATH environment variable.
    """
    env_path = os.environ.get("FOLTIA_CATALOG_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return get_data_dir() / CONFIG_FILENAME


def load_config_file(path: Path | None = None, *, strict: bool = False) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Results are cached with mtime-based invalidation. Use
    clear_config_cache() to force a reload.

    Args:
        path: Path to config file. If None, uses default location.
        strict: If True, raise ConfigFileError on parse failures.
            If False (default), log a warning and return an empty dict.

    Returns:
        Parsed configuration dict. Empty dict if file doesn't exist.

    Raises:
        ConfigFileError: When strict=True and the file cannot be parsed.
    """
    if path is None:
        path = get_default_config_path()

    try:
        current_mtime = path.stat().st_mtime
    except FileNotFoundError:
        return {}

    with _config_cache_lock:
        cached = _config_cache.get(path)
        if cached is not None and cached[1] == current_mtime:
            return cached[0]

        try:
            with path.open("rb") as f:
                result = tomllib.load(f)
        except (tomllib.TOMLDecodeError, OSError) as e:
            if strict:
                raise ConfigFileError(f"Cannot parse config file {path}: {e}") from e
            logger.warning("Ignoring unreadable config file %s: %s", path, e)
            result = {}

        _config_cache[path] = (result, current_mtime)
        return result


def clear_config_cache() -> None:
    """Forget all cached config files."""
    with _config_cache_lock:
        _config_cache.clear()


def get_config(
    config_path: Path | None = None,
    # CLI overrides (highest precedence)
    database_path: Path | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> CatalogConfig:
    """Get configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides FOLTIA_CATALOG_CONFIG_PATH).
        database_path: CLI override for database path.
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, raise ConfigFileError on config file parse failures.

    Returns:
        CatalogConfig with merged configuration. When no database path is
        configured anywhere, it defaults to <data dir>/catalog.db.
    """
    reader = env_reader or EnvReader()

    builder = ConfigBuilder()
    builder.apply(source_from_file(load_config_file(config_path, strict=strict)))
    builder.apply(source_from_env(reader))
    builder.apply(ConfigSource(database_path=database_path))
    config = builder.build()

    if config.database.path is None:
        config.database.path = get_data_dir() / DATABASE_FILENAME
    return config
