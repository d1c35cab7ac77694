"""Unit tests for the rendered-chart response cache."""

from __future__ import annotations

import asyncio

import pytest

from starchart.config.themes import ColorTheme
from starchart.core.cache import ResponseCache, chart_fingerprint
from starchart.core.exceptions import RenderFailure


class FakeClock:
    """Manually advanced timer for TTL tests."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> ResponseCache:
    return ResponseCache(ttl_seconds=100, max_entries=8, timer=clock)


# ═══════════════════════════════════════════════════════════════════════════
# chart_fingerprint
# ═══════════════════════════════════════════════════════════════════════════


class TestChartFingerprint:
    """Tests for cache key construction."""

    def test_joins_parts(self):
        assert chart_fingerprint("octocat", "hello", ColorTheme.BLUE) == "octocat:hello:blue"

    def test_absent_theme_is_default(self):
        assert chart_fingerprint("octocat", "hello") == chart_fingerprint(
            "octocat", "hello", ColorTheme.VIOLET
        )

    def test_case_insensitive(self):
        assert chart_fingerprint("OctoCat", "Hello") == chart_fingerprint("octocat", "hello")

    def test_theme_distinguishes_entries(self):
        assert chart_fingerprint("a", "b", ColorTheme.RED) != chart_fingerprint(
            "a", "b", ColorTheme.GREEN
        )


# ═══════════════════════════════════════════════════════════════════════════
# get / put / sweep
# ═══════════════════════════════════════════════════════════════════════════


class TestGetPut:
    """Tests for basic storage and expiry."""

    def test_round_trip(self, cache: ResponseCache):
        cache.put("k", b"png")
        assert cache.get("k") == b"png"

    def test_missing_is_none(self, cache: ResponseCache):
        assert cache.get("missing") is None

    def test_put_replaces(self, cache: ResponseCache):
        cache.put("k", b"old")
        cache.put("k", b"new")
        assert cache.get("k") == b"new"

    def test_expired_entry_is_absent_before_sweep(self, cache: ResponseCache, clock: FakeClock):
        cache.put("k", b"png")
        clock.now = 100.5

        assert cache.get("k") is None

    def test_entry_alive_before_ttl(self, cache: ResponseCache, clock: FakeClock):
        cache.put("k", b"png")
        clock.now = 99

        assert cache.get("k") == b"png"

    def test_sweep_removes_expired(self, cache: ResponseCache, clock: FakeClock):
        cache.put("old", b"1")
        clock.now = 50
        cache.put("new", b"2")
        clock.now = 120

        assert cache.sweep() == 1
        assert cache.get("new") == b"2"
        assert cache.stats()["size"] == 1

    def test_sweep_nothing_expired(self, cache: ResponseCache):
        cache.put("k", b"png")
        assert cache.sweep() == 0

    def test_clear(self, cache: ResponseCache):
        cache.put("k", b"png")
        cache.clear()
        assert cache.get("k") is None

    def test_stats(self, cache: ResponseCache):
        cache.put("k", b"png")
        assert cache.stats() == {"size": 1, "maxsize": 8, "in_flight": 0}


# ═══════════════════════════════════════════════════════════════════════════
# get_or_build
# ═══════════════════════════════════════════════════════════════════════════


class TestGetOrBuild:
    """Tests for build-on-miss with in-flight deduplication."""

    @pytest.mark.anyio
    async def test_hit_skips_build(self, cache: ResponseCache):
        cache.put("k", b"cached")
        calls = 0

        async def build() -> bytes:
            nonlocal calls
            calls += 1
            return b"fresh"

        assert await cache.get_or_build("k", build) == b"cached"
        assert calls == 0

    @pytest.mark.anyio
    async def test_miss_builds_and_stores(self, cache: ResponseCache):
        async def build() -> bytes:
            return b"fresh"

        assert await cache.get_or_build("k", build) == b"fresh"
        assert cache.get("k") == b"fresh"

    @pytest.mark.anyio
    async def test_concurrent_misses_share_one_build(self, cache: ResponseCache):
        calls = 0
        release = asyncio.Event()

        async def build() -> bytes:
            nonlocal calls
            calls += 1
            await release.wait()
            return b"fresh"

        waiters = [asyncio.ensure_future(cache.get_or_build("k", build)) for _ in range(3)]
        await asyncio.sleep(0)
        assert cache.stats()["in_flight"] == 1

        release.set()
        results = await asyncio.gather(*waiters)

        assert results == [b"fresh"] * 3
        assert calls == 1
        assert cache.stats()["in_flight"] == 0

    @pytest.mark.anyio
    async def test_failure_is_not_cached(self, cache: ResponseCache):
        async def build() -> bytes:
            raise RenderFailure("boom")

        with pytest.raises(RenderFailure):
            await cache.get_or_build("k", build)

        assert cache.get("k") is None
        assert cache.stats()["in_flight"] == 0

    @pytest.mark.anyio
    async def test_rebuilds_after_failure(self, cache: ResponseCache):
        attempts = 0

        async def build() -> bytes:
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                raise RenderFailure("boom")
            return b"fresh"

        with pytest.raises(RenderFailure):
            await cache.get_or_build("k", build)
        assert await cache.get_or_build("k", build) == b"fresh"
