"""Tests for ConfigBuilder and the config sources."""

from __future__ import annotations

from pathlib import Path

import pytest

from foltia_catalog.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from foltia_catalog.config.env import EnvReader
from foltia_catalog.config.models import CatalogConfig


class TestConfigBuilder:
    """Tests for ConfigBuilder layering."""

    def test_defaults_when_nothing_applied(self) -> None:
        config = ConfigBuilder().build()
        assert config == CatalogConfig()
        assert config.cache.ttl_seconds == 300
        assert config.query.default_page_rows == 100

    def test_later_source_overrides(self) -> None:
        builder = ConfigBuilder()
        builder.apply(ConfigSource(cache_ttl_seconds=60, default_page_rows=20))
        builder.apply(ConfigSource(cache_ttl_seconds=30))

        config = builder.build()

        assert config.cache.ttl_seconds == 30
        assert config.query.default_page_rows == 20

    def test_none_does_not_override(self) -> None:
        builder = ConfigBuilder()
        builder.apply(ConfigSource(cache_enabled=False))
        builder.apply(ConfigSource(cache_enabled=None))

        assert builder.build().cache.enabled is False

    def test_invalid_value_raises(self) -> None:
        builder = ConfigBuilder()
        builder.apply(ConfigSource(default_page_rows=5000))
        with pytest.raises(ValueError, match="default_page_rows"):
            builder.build()


class TestSourceFromFile:
    """Tests for source_from_file()."""

    def test_reads_sections(self) -> None:
        source = source_from_file(
            {
                "database": {"path": "/data/catalog.db", "timeout": 5},
                "cache": {"enabled": False, "ttl_seconds": 60, "max_entries": 10},
                "query": {"default_page_rows": 25},
                "logging": {"level": "debug", "format": "json"},
            }
        )

        assert source.database_path == Path("/data/catalog.db")
        assert source.database_timeout == 5
        assert source.cache_enabled is False
        assert source.cache_ttl_seconds == 60
        assert source.cache_max_entries == 10
        assert source.default_page_rows == 25
        assert source.logging_level == "debug"
        assert source.logging_format == "json"

    def test_empty_file(self) -> None:
        assert source_from_file({}) == ConfigSource()


class TestSourceFromEnv:
    """Tests for source_from_env()."""

    def test_reads_variables(self) -> None:
        reader = EnvReader(
            env={
                "FOLTIA_CATALOG_DATABASE_PATH": "/tmp/catalog.db",
                "FOLTIA_CATALOG_CACHE_ENABLED": "false",
                "FOLTIA_CATALOG_CACHE_TTL": "15",
                "FOLTIA_CATALOG_CACHE_MAX_ENTRIES": "64",
                "FOLTIA_CATALOG_PAGE_ROWS": "50",
                "FOLTIA_CATALOG_LOG_LEVEL": "warning",
            }
        )

        source = source_from_env(reader)

        assert source.database_path == Path("/tmp/catalog.db")
        assert source.cache_enabled is False
        assert source.cache_ttl_seconds == 15
        assert source.cache_max_entries == 64
        assert source.default_page_rows == 50
        assert source.logging_level == "warning"

    def test_unset_variables_are_none(self) -> None:
        assert source_from_env(EnvReader(env={})) == ConfigSource()

    def test_env_overrides_file(self) -> None:
        builder = ConfigBuilder()
        builder.apply(source_from_file({"cache": {"ttl_seconds": 60}}))
        builder.apply(source_from_env(EnvReader(env={"FOLTIA_CATALOG_CACHE_TTL": "5"})))

        assert builder.build().cache.ttl_seconds == 5
