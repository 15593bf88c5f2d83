"""Tests for pokedex.config -- XDG paths, atomic writes, precedence."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pokedex.config import (
    _atomic_write,
    get_config_dir,
    get_data_dir,
    load_global_config,
    reset_global_config,
    resolve_config,
    save_global_config,
)
from pokedex.exceptions import ConfigError
from pokedex.models import DEFAULT_BASE_URL, CacheConfig, GlobalConfig


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


class TestPaths:
    def test_config_dir_xdg_custom(self, isolated_config: Path) -> None:
        result = get_config_dir()
        assert result == isolated_config
        assert result.is_dir()

    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("pokedex.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_config_dir() == tmp_path / ".config" / "pokedex"

    def test_non_xdg_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("pokedex.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_config_dir() == tmp_path / ".pokedex"
        assert get_data_dir() == tmp_path / ".pokedex" / "logs"

    def test_data_dir(self, isolated_config: Path, tmp_path: Path) -> None:
        assert get_data_dir() == tmp_path / "data" / "pokedex"


# ---------------------------------------------------------------------------
# Atomic write
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_writes_content(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "file.json"
        _atomic_write(target, '{"a": 1}\n')
        assert target.read_text() == '{"a": 1}\n'

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        target = tmp_path / "file.json"
        _atomic_write(target, "one")
        _atomic_write(target, "two")
        assert [p.name for p in tmp_path.iterdir()] == ["file.json"]
        assert target.read_text() == "two"


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_defaults_when_missing(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config == GlobalConfig()
        assert config.base_url == DEFAULT_BASE_URL
        assert config.cache.ttl_seconds == 300
        assert config.cache.check_on_read is True

    def test_round_trip(self, isolated_config: Path) -> None:
        config = GlobalConfig(cache=CacheConfig(ttl_seconds=42, sweep_interval_seconds=7))
        save_global_config(config)
        assert load_global_config() == config

    def test_invalid_json(self, isolated_config: Path) -> None:
        (isolated_config / "config.json").write_text("{nope")
        with pytest.raises(ConfigError, match="Invalid config"):
            load_global_config()

    def test_non_positive_ttl_in_file(self, isolated_config: Path) -> None:
        (isolated_config / "config.json").write_text(json.dumps({"cache": {"ttl_seconds": 0}}))
        with pytest.raises(ConfigError):
            load_global_config()

    def test_reset(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(base_url="http://localhost:8000/api/v2/"))
        reset_global_config()
        assert load_global_config() == GlobalConfig()
        reset_global_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_file_over_defaults(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(cache=CacheConfig(ttl_seconds=60)))
        assert resolve_config().cache.ttl_seconds == 60

    def test_env_over_file(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        save_global_config(GlobalConfig(cache=CacheConfig(ttl_seconds=60)))
        monkeypatch.setenv("POKEDEX_CACHE_TTL", "15")
        monkeypatch.setenv("POKEDEX_BASE_URL", "http://localhost:8000/api/v2/")
        config = resolve_config()
        assert config.cache.ttl_seconds == 15
        assert config.base_url == "http://localhost:8000/api/v2/"

    def test_cli_over_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("POKEDEX_CACHE_TTL", "15")
        monkeypatch.setenv("POKEDEX_BASE_URL", "http://env/")
        config = resolve_config(cli_base_url="http://cli/", cli_ttl=5)
        assert config.cache.ttl_seconds == 5
        assert config.base_url == "http://cli/"

    def test_ttl_override_keeps_other_cache_settings(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(cache=CacheConfig(check_on_read=False)))
        config = resolve_config(cli_ttl=5)
        assert config.cache.check_on_read is False

    @pytest.mark.parametrize("ttl", [0, -10, float("nan"), float("inf")])
    def test_invalid_cli_ttl(self, isolated_config: Path, ttl: float) -> None:
        with pytest.raises(ConfigError, match="must be a positive"):
            resolve_config(cli_ttl=ttl)

    def test_non_numeric_env_ttl(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("POKEDEX_CACHE_TTL", "five minutes")
        with pytest.raises(ConfigError, match="must be a number"):
            resolve_config()

    @pytest.mark.parametrize("value", ["inf", "nan", "-inf"])
    def test_non_finite_env_ttl(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch, value: str
    ) -> None:
        monkeypatch.setenv("POKEDEX_CACHE_TTL", value)
        with pytest.raises(ConfigError, match="finite"):
            resolve_config()

    def test_non_finite_ttl_in_file(self, isolated_config: Path) -> None:
        (isolated_config / "config.json").write_text('{"cache": {"ttl_seconds": Infinity}}')
        with pytest.raises(ConfigError):
            load_global_config()
