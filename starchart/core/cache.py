"""
TTL cache for rendered chart images.

Maps a request fingerprint (owner, repo, theme) to PNG bytes. Entries expire
after a fixed TTL; an expired entry reads as absent even before the periodic
sweep removes it.

Concurrent misses for the same fingerprint share a single build: the first
caller starts it, later callers await the same future. A failed build is
reported to every waiter and nothing is stored.
"""

import asyncio
import logging
import threading
import time
from collections.abc import Awaitable, Callable

from cachetools import TTLCache  # type: ignore[import-untyped]

from starchart.config.themes import DEFAULT_THEME, ColorTheme

logger = logging.getLogger(__name__)


def chart_fingerprint(owner: str, repo: str, theme: ColorTheme | None = None) -> str:
    """
    Generate the cache key for a rendered chart.

    GitHub names are case-insensitive, so the key is lower-cased.

    Usage:
        key = chart_fingerprint("octocat", "hello-world", ColorTheme.BLUE)
    """
    theme_name = (theme or DEFAULT_THEME).value
    return ":".join(part.lower() for part in (owner, repo, theme_name))


class ResponseCache:
    """In-memory image cache with time-based expiry."""

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int = 1024,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._entries: TTLCache[str, bytes] = TTLCache(
            maxsize=max_entries, ttl=ttl_seconds, timer=timer
        )
        # TTLCache is not thread-safe; the sweep job may run off the event loop
        self._lock = threading.Lock()
        self._in_flight: dict[str, asyncio.Future[bytes]] = {}

    def get(self, fingerprint: str) -> bytes | None:
        """Get a cached image, or None if absent or expired."""
        with self._lock:
            return self._entries.get(fingerprint)

    def put(self, fingerprint: str, image: bytes) -> None:
        """Store an image, replacing any previous entry for the fingerprint."""
        with self._lock:
            self._entries[fingerprint] = image

    def sweep(self) -> int:
        """Remove expired entries. Returns the number removed."""
        with self._lock:
            expired = self._entries.expire() or []
        count = len(expired)
        if count:
            logger.debug(f"Swept {count} expired chart(s) from cache")
        return count

    def clear(self) -> None:
        """Drop every entry. Useful for testing."""
        with self._lock:
            self._entries.clear()

    async def get_or_build(
        self,
        fingerprint: str,
        build: Callable[[], Awaitable[bytes]],
    ) -> bytes:
        """
        Return the cached image for `fingerprint`, building it on a miss.

        At most one build per fingerprint runs at a time. The result is
        stored only if the build succeeds.
        """
        cached = self.get(fingerprint)
        if cached is not None:
            logger.debug(f"Cache HIT: {fingerprint}")
            return cached

        pending = self._in_flight.get(fingerprint)
        if pending is None:
            logger.debug(f"Cache MISS: {fingerprint}")
            pending = asyncio.ensure_future(self._build_and_store(fingerprint, build))
            self._in_flight[fingerprint] = pending
            pending.add_done_callback(lambda _: self._in_flight.pop(fingerprint, None))
        else:
            logger.debug(f"Cache WAIT: {fingerprint} (build already in flight)")

        # Shield so one cancelled request does not cancel the shared build
        return await asyncio.shield(pending)

    async def _build_and_store(
        self,
        fingerprint: str,
        build: Callable[[], Awaitable[bytes]],
    ) -> bytes:
        image = await build()
        self.put(fingerprint, image)
        return image

    def stats(self) -> dict[str, int]:
        """Get current cache statistics for monitoring."""
        with self._lock:
            return {
                "size": len(self._entries),
                "maxsize": int(self._entries.maxsize),
                "in_flight": len(self._in_flight),
            }
