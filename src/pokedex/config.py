"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for pokedex:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.pokedex/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~pokedex.models.GlobalConfig`
  JSON file storing defaults (API base URL, cache TTL, request settings).
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, and the config file into the effective
  configuration.

Writes use a temp-file-then-rename strategy (:func:`_atomic_write`) so a
crash mid-write never leaves a truncated config behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from pokedex.exceptions import ConfigError
from pokedex.models import CacheConfig, GlobalConfig

_APP_NAME = "pokedex"
_CONFIG_FILENAME = "config.json"

ENV_BASE_URL = "POKEDEX_BASE_URL"
ENV_CACHE_TTL = "POKEDEX_CACHE_TTL"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/pokedex/`` (default ``~/.config/pokedex/``).
    On macOS/Windows: ``~/.pokedex/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/pokedex/`` (default ``~/.local/share/pokedex/``).
    On macOS/Windows: ``~/.pokedex/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is cleaned up and the original error re-raised.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~pokedex.models.GlobalConfig`, or a default
        instance when the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


def reset_global_config() -> None:
    """Delete the config file so that defaults apply again. Missing file is fine."""
    path = _global_config_path()
    if path.is_file():
        path.unlink()


# --- Precedence resolution ---


def resolve_config(
    cli_base_url: Optional[str] = None,
    cli_ttl: Optional[float] = None,
) -> GlobalConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``--base-url``, ``--ttl``)
        2. Environment variables (``POKEDEX_BASE_URL``, ``POKEDEX_CACHE_TTL``)
        3. User config (``~/.config/pokedex/config.json``)
        4. Defaults

    Raises:
        ConfigError: If the config file is invalid or a TTL override is not
            a positive, finite number.
    """
    config = load_global_config()

    base_url = cli_base_url or os.environ.get(ENV_BASE_URL) or None
    if base_url:
        config.base_url = base_url

    ttl: Optional[float] = cli_ttl
    if ttl is None:
        env_ttl = os.environ.get(ENV_CACHE_TTL)
        if env_ttl:
            try:
                ttl = float(env_ttl)
            except ValueError as exc:
                raise ConfigError(f"{ENV_CACHE_TTL} must be a number, got {env_ttl!r}") from exc

    if ttl is not None:
        try:
            config.cache = CacheConfig.model_validate(
                {**config.cache.model_dump(), "ttl_seconds": ttl}
            )
        except ValidationError as exc:
            raise ConfigError(
                f"Invalid cache TTL {ttl}: must be a positive, finite number"
            ) from exc

    return config
