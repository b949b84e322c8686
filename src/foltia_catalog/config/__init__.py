"""Configuration management for the subtitle catalog.

This module provides configuration loading with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (FOLTIA_CATALOG_*)
3. Config file (~/.foltia-catalog/config.toml)
4. Default values (lowest priority)
"""

from foltia_catalog.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from foltia_catalog.config.env import EnvReader
from foltia_catalog.config.loader import (
    ConfigFileError,
    clear_config_cache,
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
)
from foltia_catalog.config.models import (
    CacheConfig,
    CatalogConfig,
    DatabaseConfig,
    LoggingConfig,
    QueryConfig,
)

__all__ = [
    # Models
    "CacheConfig",
    "CatalogConfig",
    "DatabaseConfig",
    "LoggingConfig",
    "QueryConfig",
    # Loader
    "ConfigFileError",
    "clear_config_cache",
    "get_config",
    "get_data_dir",
    "get_default_config_path",
    "load_config_file",
    # Builder
    "EnvReader",
    "ConfigBuilder",
    "ConfigSource",
    "source_from_env",
    "source_from_file",
]
