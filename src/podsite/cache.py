"""In-memory result cache with lazy TTL expiration and single-flight loads.

The cache belongs to one asyncio event loop and is not thread-safe. Under
uvicorn every worker process holds its own instance.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

SECONDS_PER_MINUTE = 60


@dataclass(frozen=True)
class CacheEntry:
    """A stored value and the clock reading at which it expires."""

    key: str
    value: Any
    expires_at: float


class ResultCache:
    """Key/value store with per-entry TTL in minutes.

    Expired entries are not purged in the background; a read that finds an
    expired entry drops it and reports a miss.

    Example:
        >>> cache = ResultCache()
        >>> cache.set("podcast-data", data, ttl_minutes=60)
        >>> cache.get("podcast-data")
    """

    DEFAULT_TTL_MINUTES = 60

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        default_ttl_minutes: float = DEFAULT_TTL_MINUTES,
    ) -> None:
        """Initialize cache.

        Args:
            clock: Returns the current time in seconds (monotonic by default)
            default_ttl_minutes: TTL used when ``set`` gets none
        """
        self.clock = clock
        self.default_ttl_minutes = default_ttl_minutes
        self._entries: dict[str, CacheEntry] = {}
        self._in_flight: dict[str, asyncio.Task] = {}

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self.clock() >= entry.expires_at:
            del self._entries[key]
            logger.debug(f"Cache entry '{key}' expired")
            return None

        return entry.value

    def set(self, key: str, value: Any, ttl_minutes: float | None = None) -> None:
        """Store a value for ``ttl_minutes`` (default: ``default_ttl_minutes``)."""
        if ttl_minutes is None:
            ttl_minutes = self.default_ttl_minutes
        expires_at = self.clock() + ttl_minutes * SECONDS_PER_MINUTE
        self._entries[key] = CacheEntry(key=key, value=value, expires_at=expires_at)

    async def get_or_load(
        self,
        key: str,
        loader: Callable[[], Awaitable[T]],
        ttl_minutes: float | None = None,
    ) -> T:
        """Return the cached value or load it, coalescing concurrent misses.

        Concurrent callers that miss on the same key share one in-flight
        ``loader`` call. A failed load raises in every waiter and stores
        nothing. Cancelling one waiter does not cancel the shared load.

        Args:
            key: Cache key
            loader: Coroutine function producing the value
            ttl_minutes: TTL for the stored value

        Returns:
            Cached or freshly loaded value
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load(key, loader, ttl_minutes))
            self._in_flight[key] = task
            task.add_done_callback(lambda done: self._finish_load(key, done))
        else:
            logger.debug(f"Joining in-flight load for '{key}'")

        return await asyncio.shield(task)

    async def _load(
        self,
        key: str,
        loader: Callable[[], Awaitable[T]],
        ttl_minutes: float | None,
    ) -> T:
        value = await loader()
        self.set(key, value, ttl_minutes)
        return value

    def _finish_load(self, key: str, task: asyncio.Task) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        # Mark the exception retrieved when every waiter was cancelled
        if not task.cancelled():
            task.exception()

    def is_loading(self, key: str) -> bool:
        """Whether a load for ``key`` is currently in flight."""
        return key in self._in_flight

    @property
    def size(self) -> int:
        """Number of stored entries, expired ones included until read."""
        return len(self._entries)
