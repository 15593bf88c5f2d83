"""HTTP client module for pokedex.

Provides :class:`PokeAPIClient`, a blocking client backed by
:class:`httpx.Client` that routes every GET through the shared
:class:`~pokedex.cache.TTLCache`.

Example::

    from pokedex.cache import TTLCache
    from pokedex.client import PokeAPIClient

    with PokeAPIClient(TTLCache(300)) as client:
        pikachu = client.get_pokemon("pikachu")
"""

from pokedex.client.sync_client import PokeAPIClient

__all__ = ["PokeAPIClient"]
