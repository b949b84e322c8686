"""Tests for config file loading and get_config()."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from foltia_catalog.config.env import EnvReader
from foltia_catalog.config.loader import (
    ConfigFileError,
    clear_config_cache,
    get_config,
    get_data_dir,
    get_default_config_path,
    load_config_file,
)


@pytest.fixture(autouse=True)
def _fresh_config_cache():
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(
        """
[database]
path = "/data/catalog.db"

[cache]
ttl_seconds = 60

[query]
default_page_rows = 20
"""
    )
    return path


class TestDataDir:
    def test_default(self, monkeypatch) -> None:
        monkeypatch.delenv("FOLTIA_CATALOG_DATA_DIR", raising=False)
        assert get_data_dir() == Path.home() / ".foltia-catalog"

    def test_env_override(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("FOLTIA_CATALOG_DATA_DIR", str(tmp_path))
        assert get_data_dir() == tmp_path

    def test_config_path_follows_data_dir(self, monkeypatch, tmp_path) -> None:
        monkeypatch.delenv("FOLTIA_CATALOG_CONFIG_PATH", raising=False)
        monkeypatch.setenv("FOLTIA_CATALOG_DATA_DIR", str(tmp_path))
        assert get_default_config_path() == tmp_path / "config.toml"

    def test_config_path_env_override(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("FOLTIA_CATALOG_CONFIG_PATH", str(tmp_path / "other.toml"))
        assert get_default_config_path() == tmp_path / "other.toml"


class TestLoadConfigFile:
    """Tests for load_config_file()."""

    def test_missing_file_is_empty(self, tmp_path) -> None:
        assert load_config_file(tmp_path / "absent.toml") == {}

    def test_parses_toml(self, config_file) -> None:
        result = load_config_file(config_file)
        assert result["cache"]["ttl_seconds"] == 60

    def test_invalid_toml_returns_empty(self, tmp_path, caplog) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[cache\nttl = ")
        assert load_config_file(path) == {}
        assert "Ignoring unreadable config file" in caplog.text

    def test_invalid_toml_strict_raises(self, tmp_path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[cache\nttl = ")
        with pytest.raises(ConfigFileError):
            load_config_file(path, strict=True)

    def test_reloads_when_modified(self, config_file) -> None:
        load_config_file(config_file)
        config_file.write_text("[cache]\nttl_seconds = 90\n")
        stat = config_file.stat()
        os.utime(config_file, (stat.st_atime, stat.st_mtime + 10))

        assert load_config_file(config_file)["cache"]["ttl_seconds"] == 90


class TestGetConfig:
    """Tests for get_config() precedence."""

    def test_file_values(self, config_file) -> None:
        config = get_config(config_file, env_reader=EnvReader(env={}))
        assert config.database.path == Path("/data/catalog.db")
        assert config.cache.ttl_seconds == 60
        assert config.query.default_page_rows == 20

    def test_env_overrides_file(self, config_file) -> None:
        reader = EnvReader(env={"FOLTIA_CATALOG_PAGE_ROWS": "7"})
        config = get_config(config_file, env_reader=reader)
        assert config.query.default_page_rows == 7

    def test_cli_overrides_env(self, config_file, tmp_path) -> None:
        reader = EnvReader(env={"FOLTIA_CATALOG_DATABASE_PATH": "/env/catalog.db"})
        config = get_config(
            config_file, database_path=tmp_path / "cli.db", env_reader=reader
        )
        assert config.database.path == tmp_path / "cli.db"

    def test_default_database_path(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("FOLTIA_CATALOG_DATA_DIR", str(tmp_path))
        config = get_config(tmp_path / "absent.toml", env_reader=EnvReader(env={}))
        assert config.database.path == tmp_path / "catalog.db"

    def test_strict_propagates_parse_errors(self, tmp_path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("not toml at all [")
        with pytest.raises(ConfigFileError):
            get_config(path, env_reader=EnvReader(env={}), strict=True)
