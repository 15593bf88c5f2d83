"""Synchronous PokeAPI client with response caching and retry.

This module provides :class:`PokeAPIClient`, the blocking HTTP client used
by the REPL commands. It wraps :class:`httpx.Client` and layers on:

- **Response caching** -- every GET is keyed by its fully qualified URL in
  a :class:`~pokedex.cache.TTLCache`. A hit skips the network entirely;
  a successful miss stores the raw body for the next caller.
- **Retry with backoff** -- retries on 5xx and network errors with
  exponential delay (1 s, 2 s, 4 s, ...).
- **Error mapping** -- HTTP and transport failures become
  :class:`~pokedex.exceptions.PokedexError` subclasses.
- **Record decoding** -- bodies are validated into the Pydantic models in
  :mod:`pokedex.models`.
"""

from __future__ import annotations

import time
from typing import Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from pokedex.cache import TTLCache
from pokedex.exceptions import (
    ConnectionError_,
    NotFoundError,
    ResponseDecodeError,
    ServerError,
)
from pokedex.models import (
    DEFAULT_BASE_URL,
    LocationAreaDetails,
    LocationAreaPage,
    Pokemon,
    RequestConfig,
)
from pokedex.output import get_output

ModelT = TypeVar("ModelT", bound=BaseModel)


class PokeAPIClient:
    """Synchronous client for the PokeAPI REST endpoints.

    Must be used as a context manager so that the underlying transport is
    opened and closed properly. The cache is owned by the caller and
    outlives the client.

    Args:
        cache: Response cache consulted before every request.
        base_url: API root, e.g. ``https://pokeapi.co/api/v2/``.
        request: Timeout and retry settings.
        transport: Optional httpx transport (tests pass a
            :class:`httpx.MockTransport`).

    Example::

        with PokeAPIClient(cache) as client:
            page = client.list_location_areas()
    """

    def __init__(
        self,
        cache: TTLCache,
        base_url: str = DEFAULT_BASE_URL,
        request: Optional[RequestConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._cache = cache
        self._base_url = base_url.rstrip("/") + "/"
        self._request = request or RequestConfig()
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def cache(self) -> TTLCache:
        return self._cache

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> PokeAPIClient:
        self._client = httpx.Client(
            timeout=self._request.timeout,
            follow_redirects=True,
            headers={"Accept": "application/json"},
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Typed fetches
    # ------------------------------------------------------------------ #

    def url_for(self, path: str) -> str:
        """Return the fully qualified URL (and cache key) for an API *path*."""
        return self._base_url + path.lstrip("/")

    def list_location_areas(self, url: Optional[str] = None) -> LocationAreaPage:
        """Fetch one page of location areas.

        Args:
            url: A ``next``/``previous`` link from an earlier page. Defaults
                to the first page.
        """
        return self._fetch_model(url or self.url_for("location-area/"), LocationAreaPage)

    def get_location_area(self, name: str) -> LocationAreaDetails:
        """Fetch a single location area with its Pokemon encounters."""
        return self._fetch_model(self.url_for(f"location-area/{name}"), LocationAreaDetails)

    def get_pokemon(self, name: str) -> Pokemon:
        """Fetch a Pokemon by name or numeric id."""
        return self._fetch_model(self.url_for(f"pokemon/{name}"), Pokemon)

    # ------------------------------------------------------------------ #
    # Raw fetch
    # ------------------------------------------------------------------ #

    def fetch(self, url: str) -> bytes:
        """Return the body for *url*, from the cache when possible.

        Only 2xx bodies are stored in the cache, under *url* exactly.

        Raises:
            NotFoundError: On 404.
            ServerError: On 5xx after all retries, or any other 4xx.
            ConnectionError_: On network / timeout errors after all retries.
        """
        output = get_output()
        payload, found = self._cache.get(url)
        if found:
            output.debug(f"Cache hit: {url}")
            return payload

        output.debug(f"Cache miss: GET {url}")
        response = self._execute_with_retry(url)
        self._map_response_error(response)
        body = response.content
        self._cache.add(url, body)
        return body

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _fetch_model(self, url: str, model: type[ModelT]) -> ModelT:
        body = self.fetch(url)
        try:
            return model.model_validate_json(body)
        except ValidationError as exc:
            raise ResponseDecodeError(
                f"Unexpected response from {url}: {exc.error_count()} validation error(s)"
            ) from exc

    def _execute_with_retry(self, url: str) -> httpx.Response:
        """Execute the GET with exponential-backoff retry.

        Retries on 5xx status codes and connection / timeout errors up to
        ``max_retries`` times. The delay doubles each attempt: 1 s, 2 s, 4 s, ...
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        max_retries = self._request.max_retries
        output = get_output()

        for attempt in range(max_retries + 1):
            try:
                response = self._client.get(url)
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                if attempt < max_retries:
                    delay = 2 ** attempt
                    output.debug(
                        f"Connection error: {exc}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    time.sleep(delay)
                    continue
                raise ConnectionError_(
                    f"Connection failed after {max_retries + 1} attempts: {exc}"
                ) from exc

            if response.status_code >= 500 and attempt < max_retries:
                delay = 2 ** attempt
                output.debug(
                    f"Server error {response.status_code}, retrying in {delay}s "
                    f"(attempt {attempt + 1}/{max_retries})"
                )
                time.sleep(delay)
                continue
            return response

        raise ServerError("Request failed after all retries")  # pragma: no cover

    def _map_response_error(self, response: httpx.Response) -> None:
        """Raise a typed exception for error HTTP status codes."""
        status = response.status_code
        if status < 300:
            return

        detail = response.text[:200].strip() if response.text else ""
        prefix = f"bad response from server: {status} {response.reason_phrase}".rstrip()
        message = f"{prefix} ({detail})" if detail else prefix

        if status == 404:
            raise NotFoundError(message)
        raise ServerError(message)
