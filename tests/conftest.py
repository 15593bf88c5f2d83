"""Shared test fixtures for pokedex.

Provides a controllable clock for deterministic cache expiry tests, an
isolated XDG config environment, canned PokeAPI payloads, and automatic
reset of the global output state.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

import pytest

from pokedex.output import OutputManager, reset_output, set_output


BASE_URL = "https://pokeapi.co/api/v2/"


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Install a plain OutputManager and reset it after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; when CliRunner redirects those streams the cached
    references go stale, so each test starts fresh.
    """
    set_output(OutputManager(no_color=True))
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _reset_pokedex_logger() -> None:
    """Undo any handler/propagation changes made by ``configure_logging``."""
    yield
    logger = logging.getLogger("pokedex")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self._now = start
        self._lock = threading.Lock()

    def __call__(self) -> float:
        with self._lock:
            return self._now

    def advance(self, seconds: float) -> None:
        with self._lock:
            self._now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ---------------------------------------------------------------------------
# Config isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG config/data directories at *tmp_path* and clear env overrides.

    Returns:
        The pokedex config directory inside *tmp_path*.
    """
    monkeypatch.setattr("pokedex.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("POKEDEX_BASE_URL", raising=False)
    monkeypatch.delenv("POKEDEX_CACHE_TTL", raising=False)
    config_dir = tmp_path / "config" / "pokedex"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


# ---------------------------------------------------------------------------
# Canned PokeAPI payloads
# ---------------------------------------------------------------------------


def _location_page(offset: int, total: int = 60, limit: int = 20) -> dict[str, Any]:
    """Build a ``location-area`` page shaped like PokeAPI's."""
    def link(off: int) -> str:
        return f"{BASE_URL}location-area/?offset={off}&limit={limit}"

    return {
        "count": total,
        "next": link(offset + limit) if offset + limit < total else None,
        "previous": link(offset - limit) if offset > 0 else None,
        "results": [
            {"name": f"area-{i}", "url": f"{BASE_URL}location-area/{i + 1}/"}
            for i in range(offset, min(offset + limit, total))
        ],
    }


@pytest.fixture
def pikachu() -> dict[str, Any]:
    return {
        "id": 25,
        "name": "pikachu",
        "base_experience": 112,
        "height": 4,
        "weight": 60,
        "is_default": True,
        "stats": [
            {"base_stat": 35, "effort": 0, "stat": {"name": "hp", "url": ""}},
            {"base_stat": 55, "effort": 0, "stat": {"name": "attack", "url": ""}},
        ],
        "types": [{"slot": 1, "type": {"name": "electric", "url": ""}}],
    }


@pytest.fixture
def canalave() -> dict[str, Any]:
    return {
        "id": 1,
        "name": "canalave-city-area",
        "pokemon_encounters": [
            {"pokemon": {"name": "tentacool", "url": ""}, "version_details": []},
            {"pokemon": {"name": "staryu", "url": ""}, "version_details": []},
        ],
    }


@pytest.fixture
def location_page():
    """Factory for ``location-area`` pages: ``location_page(offset, total=60)``."""
    return _location_page
