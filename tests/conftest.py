"""Root conftest - test infrastructure for all tests.

Provides:
- A fresh response cache per test
- A mocked chart pipeline (no GitHub calls, no rendering)
- API client with dependency overrides
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from starchart.core.cache import ResponseCache
from tests.helpers.fakes import PNG_BYTES


@pytest.fixture
def anyio_backend() -> str:
    """The app is asyncio-only (asyncio locks, futures, AsyncIOScheduler)."""
    return "asyncio"


@pytest.fixture
def response_cache() -> ResponseCache:
    """An empty cache with the production TTL."""
    return ResponseCache(ttl_seconds=86400, max_entries=16)


@pytest.fixture
def chart_service() -> MagicMock:
    """A StarChartService stand-in whose render returns PNG_BYTES."""
    service = MagicMock()
    service.render = AsyncMock(return_value=PNG_BYTES)
    return service


@pytest.fixture
async def api_client(response_cache: ResponseCache, chart_service: MagicMock):
    """HTTP client against the app with the cache and pipeline overridden.

    The lifespan does not run under ASGITransport, so app state is set here.
    """
    from starchart.api.deps import get_response_cache, get_star_chart_service
    from starchart.main import app

    app.state.response_cache = response_cache
    app.dependency_overrides[get_response_cache] = lambda: response_cache
    app.dependency_overrides[get_star_chart_service] = lambda: chart_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
