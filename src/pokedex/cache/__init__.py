"""In-memory response caching for pokedex.

This package provides :class:`TTLCache`, a thread-safe memoisation layer
for idempotent PokeAPI fetches. Entries are keyed by the full request URL
and removed by a background reaper once they reach the configured TTL.

The cache is consumed by :class:`~pokedex.client.PokeAPIClient` and sized
by the ``cache`` section of the global configuration
(:class:`~pokedex.models.CacheConfig`).
"""

from pokedex.cache.cache import MAX_DURATION, CacheEntry, TTLCache

__all__ = ["MAX_DURATION", "CacheEntry", "TTLCache"]
