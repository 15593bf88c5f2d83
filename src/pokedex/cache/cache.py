"""In-memory response cache with time-based expiry.

:class:`TTLCache` maps a request key (the fully qualified URL) to the raw
response body plus the moment it was stored. A daemon thread wakes every
``sweep_interval`` seconds and removes every entry whose age has reached
``ttl``. Callers use the two-step protocol::

    body, found = cache.get(url)
    if not found:
        body = fetch(url)
        cache.add(url, body)

All access to the underlying dict, from callers and from the reaper alike,
goes through a single :class:`threading.Lock`. Contention is low (a CLI
issues one request at a time) so there is no per-key locking.

Freshness on read is controlled by ``check_on_read``. With the default
(``True``) an entry whose age has reached ``ttl`` is reported as a miss and
dropped even if the reaper has not swept it yet. With ``False`` the reaper
is the only thing that enforces expiry, so a stale entry can still be
returned for up to one extra sweep period.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Optional, Union

from pokedex.exceptions import ConfigError

logger = logging.getLogger(__name__)

Duration = Union[float, int, timedelta]

# Event.wait can overflow below threading.TIMEOUT_MAX; durations cap at a century.
MAX_DURATION = min(threading.TIMEOUT_MAX, 100 * 365 * 24 * 3600.0)


@dataclass(frozen=True)
class CacheEntry:
    """A cached payload and the clock reading taken when it was stored."""

    created_at: float
    payload: bytes


def _to_seconds(value: Duration, name: str) -> float:
    """Normalise a duration to seconds, rejecting values outside ``(0, MAX_DURATION]``."""
    if isinstance(value, timedelta):
        seconds = value.total_seconds()
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        seconds = float(value)
    else:
        raise ConfigError(f"{name} must be a number of seconds or a timedelta, got {value!r}")
    if not math.isfinite(seconds) or seconds <= 0:
        raise ConfigError(f"{name} must be a positive, finite number, got {seconds}")
    if seconds > MAX_DURATION:
        raise ConfigError(f"{name} must be at most {MAX_DURATION:.0f} seconds, got {seconds}")
    return seconds


class TTLCache:
    """Thread-safe cache whose entries expire a fixed time after insertion.

    Constructing the cache starts the reaper thread. The thread is a daemon,
    so a short-lived CLI can simply exit; long-lived owners should call
    :meth:`close` (or use the cache as a context manager) to stop it.

    Args:
        ttl: Age at which an entry expires, in seconds or as a
            :class:`~datetime.timedelta`. Must be positive.
        sweep_interval: How often the reaper runs. Defaults to ``ttl``.
        check_on_read: When ``True``, :meth:`get` treats expired entries
            as misses without waiting for the reaper.
        clock: Monotonic clock returning seconds. Injected by tests.

    Raises:
        ConfigError: If ``ttl`` or ``sweep_interval`` is not positive and finite,
            or exceeds :data:`MAX_DURATION`.

    Example::

        cache = TTLCache(timedelta(minutes=5))
        cache.add("https://pokeapi.co/api/v2/pokemon/pikachu", body)
        payload, found = cache.get("https://pokeapi.co/api/v2/pokemon/pikachu")
    """

    def __init__(
        self,
        ttl: Duration,
        sweep_interval: Optional[Duration] = None,
        check_on_read: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = _to_seconds(ttl, "ttl")
        self._sweep_interval = (
            self._ttl if sweep_interval is None else _to_seconds(sweep_interval, "sweep_interval")
        )
        self._check_on_read = check_on_read
        self._clock = clock

        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._sweeps = 0
        self._reaped = 0

        self._stop = threading.Event()
        self._reaper = threading.Thread(
            target=self._reap_loop, name="pokedex-cache-reaper", daemon=True
        )
        self._reaper.start()
        logger.debug(
            "Cache started (ttl=%ss, sweep_interval=%ss, check_on_read=%s)",
            self._ttl,
            self._sweep_interval,
            self._check_on_read,
        )

    @property
    def ttl(self) -> float:
        """Expiry threshold in seconds. Fixed for the cache's lifetime."""
        return self._ttl

    @property
    def sweep_interval(self) -> float:
        """Reaper period in seconds."""
        return self._sweep_interval

    @property
    def closed(self) -> bool:
        """Whether :meth:`close` has stopped the reaper."""
        return self._stop.is_set()

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def add(self, key: str, payload: bytes) -> None:
        """Insert or overwrite the entry for *key*, stamping it with the current time.

        Args:
            key: Request identity, normally the full URL. Must be non-empty.
            payload: Raw response body. Stored as immutable ``bytes``.

        Raises:
            ValueError: If *key* is empty.
            TypeError: If *payload* is not bytes-like.
        """
        if not isinstance(key, str) or not key:
            raise ValueError("cache key must be a non-empty string")
        if not isinstance(payload, (bytes, bytearray, memoryview)):
            raise TypeError(f"payload must be bytes, got {type(payload).__name__}")
        entry_payload = bytes(payload)
        with self._lock:
            self._store[key] = CacheEntry(created_at=self._clock(), payload=entry_payload)

    def get(self, key: str) -> tuple[bytes, bool]:
        """Look up *key*.

        Returns:
            ``(payload, True)`` on a hit, ``(b"", False)`` otherwise. A miss
            does not distinguish "never stored" from "expired".
        """
        with self._lock:
            entry = self._store.get(key)
            if entry is not None and self._check_on_read and self._is_expired(entry):
                del self._store[key]
                entry = None
            if entry is None:
                self._misses += 1
                return b"", False
            self._hits += 1
            return entry.payload, True

    def remove(self, key: str) -> bool:
        """Drop the entry for *key*. Returns ``True`` if one was present."""
        with self._lock:
            return self._store.pop(key, None) is not None

    def clear(self) -> None:
        """Remove all entries."""
        with self._lock:
            self._store.clear()

    def sweep(self) -> int:
        """Remove every entry whose age has reached the TTL.

        Called by the reaper on each tick; safe to call directly.

        Returns:
            The number of entries removed.
        """
        with self._lock:
            expired = [key for key, entry in self._store.items() if self._is_expired(entry)]
            for key in expired:
                del self._store[key]
            self._sweeps += 1
            self._reaped += len(expired)
        return len(expired)

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``size``, ``ttl_seconds``,
            ``sweep_interval_seconds``, ``check_on_read``, ``hits``,
            ``misses``, ``sweeps`` and ``reaped``.
        """
        with self._lock:
            return {
                "size": len(self._store),
                "ttl_seconds": self._ttl,
                "sweep_interval_seconds": self._sweep_interval,
                "check_on_read": self._check_on_read,
                "hits": self._hits,
                "misses": self._misses,
                "sweeps": self._sweeps,
                "reaped": self._reaped,
            }

    def close(self) -> None:
        """Stop the reaper thread. Entries stay readable; calling twice is safe."""
        if self._stop.is_set():
            return
        self._stop.set()
        if self._reaper is not threading.current_thread():
            self._reaper.join()
        logger.debug("Cache reaper stopped")

    # ------------------------------------------------------------------ #
    # Dunder helpers
    # ------------------------------------------------------------------ #

    def __enter__(self) -> TTLCache:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            entry = self._store.get(key)  # type: ignore[arg-type]
            if entry is None:
                return False
            return not (self._check_on_read and self._is_expired(entry))

    def __repr__(self) -> str:
        return (
            f"TTLCache(ttl={self._ttl}, sweep_interval={self._sweep_interval}, "
            f"size={len(self)})"
        )

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _is_expired(self, entry: CacheEntry) -> bool:
        """Caller must hold ``self._lock``."""
        return self._clock() - entry.created_at >= self._ttl

    def _reap_loop(self) -> None:
        """Sweep every ``sweep_interval`` seconds until :meth:`close` is called."""
        while not self._stop.wait(self._sweep_interval):
            try:
                removed = self.sweep()
            except Exception:
                # Keep the reaper alive; the next tick retries.
                logger.exception("Cache sweep failed")
                continue
            if removed:
                logger.debug("Reaped %d expired cache entries", removed)
