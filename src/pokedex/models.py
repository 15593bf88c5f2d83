"""Canonical Pydantic models shared across all pokedex modules.

The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`CacheConfig`, :class:`RequestConfig`, :class:`OutputConfig`, and
    :class:`GlobalConfig`.

**API record models** -- decoded from PokeAPI response bodies by
:class:`~pokedex.client.PokeAPIClient`:
    :class:`NamedResource`, :class:`LocationAreaPage`,
    :class:`PokemonEncounter`, :class:`LocationAreaDetails`,
    :class:`PokemonStat`, :class:`PokemonType`, and :class:`Pokemon`.

Record models ignore unknown fields, since PokeAPI payloads carry far more
data than the CLI uses.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BASE_URL = "https://pokeapi.co/api/v2/"


# --- Configuration ---


class CacheConfig(BaseModel):
    """Response cache settings stored in :class:`GlobalConfig`."""

    ttl_seconds: float = Field(
        default=300,
        gt=0,
        allow_inf_nan=False,
        description="Age after which a cached response expires",
    )
    sweep_interval_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        allow_inf_nan=False,
        description="How often the reaper sweeps; defaults to ttl_seconds",
    )
    check_on_read: bool = Field(
        default=True,
        description="Treat entries older than the TTL as misses even before a sweep",
    )


class RequestConfig(BaseModel):
    """HTTP request settings applied to every PokeAPI call."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    max_retries: int = Field(default=3, ge=0, description="Max retry attempts")


class OutputConfig(BaseModel):
    """Output preferences stored in :class:`GlobalConfig`."""

    no_color: bool = Field(default=False, description="Disable colour output")


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/pokedex/config.json``.

    Loaded and saved by :func:`~pokedex.config.load_global_config` and
    :func:`~pokedex.config.save_global_config`. Environment variables and
    CLI flags override these values; see
    :func:`~pokedex.config.resolve_config`.
    """

    base_url: str = DEFAULT_BASE_URL
    cache: CacheConfig = Field(default_factory=CacheConfig)
    request: RequestConfig = Field(default_factory=RequestConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- API records ---


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore")


class NamedResource(_Record):
    """A ``{"name", "url"}`` reference, PokeAPI's link to another resource."""

    name: str
    url: str = ""


class LocationAreaPage(_Record):
    """One page of the ``location-area`` collection.

    ``next`` and ``previous`` are absolute URLs (or ``None`` at either end)
    and are used verbatim as cache keys when paging.
    """

    count: int = 0
    next: Optional[str] = None
    previous: Optional[str] = None
    results: list[NamedResource] = Field(default_factory=list)


class PokemonEncounter(_Record):
    pokemon: NamedResource


class LocationAreaDetails(_Record):
    """A single location area with the Pokemon that can be encountered there."""

    name: str = ""
    pokemon_encounters: list[PokemonEncounter] = Field(default_factory=list)


class PokemonStat(_Record):
    base_stat: int
    stat: NamedResource


class PokemonType(_Record):
    slot: int = 0
    type: NamedResource


class Pokemon(_Record):
    """The subset of a PokeAPI ``pokemon`` record the CLI displays."""

    id: int
    name: str
    # Null for some alternate forms.
    base_experience: Optional[int] = 0
    height: int = 0
    weight: int = 0
    stats: list[PokemonStat] = Field(default_factory=list)
    types: list[PokemonType] = Field(default_factory=list)
