"""Exception hierarchy for pokedex.

All exceptions inherit from :class:`PokedexError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`pokedex.exit_codes`.
Inside the REPL a ``PokedexError`` raised by a command is printed and the
loop carries on; outside it, :func:`pokedex.app.main` exits with the
error's code.

Subclass hierarchy::

    PokedexError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- NotFoundError       (exit 4)
    +-- ServerError         (exit 5)
    +-- ConnectionError_    (exit 6)
    +-- ResponseDecodeError (exit 1)
    +-- ConfigError         (exit 1)
"""

from pokedex.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class PokedexError(Exception):
    """Base exception for all pokedex errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(PokedexError):
    """Raised for invalid command arguments (e.g. ``explore`` without an area)."""

    exit_code = EXIT_INVALID_USAGE


class NotFoundError(PokedexError):
    """Raised when the API returns HTTP 404 (unknown area or Pokemon)."""

    exit_code = EXIT_NOT_FOUND


class ServerError(PokedexError):
    """Raised when the API returns an HTTP 5xx server error or an unexpected 4xx."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(PokedexError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class ResponseDecodeError(PokedexError):
    """Raised when a response body is not valid JSON for the expected record shape."""


class ConfigError(PokedexError):
    """Raised for configuration problems (invalid JSON, non-positive TTL, bad keys)."""

    exit_code = EXIT_GENERIC_FAILURE
