"""pokedex -- an interactive PokeAPI client with a self-expiring response cache.

The package exposes a small REPL that pages through PokeAPI location areas,
explores the Pokemon found in an area, and lets the user catch Pokemon into
an in-memory Pokedex. Every outbound GET is memoised by
:class:`~pokedex.cache.TTLCache`, which expires stale entries in a
background thread.

Typical workflow::

    pokedex                 # start the REPL
    pokedex --ttl 60        # shorter cache lifetime
    pokedex config show     # inspect persisted defaults

Modules:
    app: Typer application factory and CLI entry point.
    cache: Thread-safe TTL cache with a background reaper.
    client: PokeAPI HTTP client backed by the cache.
    models: Pydantic models for API records and configuration.
    config: XDG-aware configuration loading and precedence resolution.
    repl: Command registry and read-eval-print loop.
    catch: Catch probability calculation.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
