"""Unit tests for GitHub HTTP client and helpers.

Tests the pooled HTTP client factory, rate limit parsing, error response
processing and timestamp normalization.
"""

from __future__ import annotations

from datetime import date
from unittest.mock import patch

import httpx
import pytest

from starchart.services.github.exceptions import GitHubAPIError
from starchart.services.github.helpers import RateLimitInfo, handle_error_response, utc_date
from starchart.services.github.http_client import (
    POOL_HEADROOM,
    close_github_client,
    create_github_client,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_response(
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    """Build a fake httpx.Response."""
    return httpx.Response(status_code=status_code, headers=headers or {})


# ═══════════════════════════════════════════════════════════════════════════
# RateLimitInfo
# ═══════════════════════════════════════════════════════════════════════════


class TestRateLimitInfo:
    """Tests for rate limit header parsing."""

    def test_extracts_remaining_and_reset(self):
        info = RateLimitInfo(
            _make_response(
                headers={"X-RateLimit-Remaining": "42", "X-RateLimit-Reset": "1700000000"}
            )
        )

        assert info.remaining == "42"
        assert info.reset_timestamp == 1700000000
        assert info.is_exhausted is False

    def test_detects_exhausted(self):
        info = RateLimitInfo(_make_response(headers={"X-RateLimit-Remaining": "0"}))
        assert info.is_exhausted is True

    def test_missing_headers(self):
        info = RateLimitInfo(_make_response())

        assert info.remaining is None
        assert info.reset_timestamp is None
        assert info.is_exhausted is False


# ═══════════════════════════════════════════════════════════════════════════
# handle_error_response
# ═══════════════════════════════════════════════════════════════════════════


class TestHandleErrorResponse:
    """Tests for centralized GitHub API error handling."""

    def test_200_does_nothing(self):
        handle_error_response(_make_response(200), "owner/repo")  # should not raise

    def test_401_raises_auth_error(self):
        with pytest.raises(GitHubAPIError, match="Invalid or expired"):
            handle_error_response(_make_response(401), "owner/repo")

    def test_404_raises_not_found(self):
        with pytest.raises(GitHubAPIError, match="not found: owner/repo"):
            handle_error_response(_make_response(404), "owner/repo")

    def test_403_with_rate_limit_exhausted(self):
        resp = _make_response(
            403, headers={"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "1700000000"}
        )
        with pytest.raises(GitHubAPIError, match="rate limit") as exc_info:
            handle_error_response(resp, "owner/repo")

        assert exc_info.value.rate_limit_reset == 1700000000

    def test_403_without_rate_limit_raises_forbidden(self):
        resp = _make_response(403, headers={"X-RateLimit-Remaining": "50"})
        with pytest.raises(GitHubAPIError, match="forbidden"):
            handle_error_response(resp, "owner/repo")

    def test_500_raises_generic_error(self):
        with pytest.raises(GitHubAPIError, match="500") as exc_info:
            handle_error_response(_make_response(500), "owner/repo")

        assert exc_info.value.status_code == 500


# ═══════════════════════════════════════════════════════════════════════════
# utc_date
# ═══════════════════════════════════════════════════════════════════════════


class TestUtcDate:
    """Tests for reducing timestamps to UTC calendar days."""

    def test_zulu_timestamp(self):
        assert utc_date("2021-01-10T23:59:59Z") == date(2021, 1, 10)

    def test_offset_is_normalized_to_utc(self):
        # 22:00 at UTC-05:00 is 03:00 the next day in UTC
        assert utc_date("2021-01-10T22:00:00-05:00") == date(2021, 1, 11)

    def test_naive_is_taken_as_utc(self):
        assert utc_date("2021-01-10T12:00:00") == date(2021, 1, 10)


# ═══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ═══════════════════════════════════════════════════════════════════════════


class TestGitHubHttpClient:
    """Tests for the pooled client the application lifespan owns."""

    @pytest.mark.anyio
    async def test_creates_async_client(self):
        client = create_github_client(5)
        try:
            assert isinstance(client, httpx.AsyncClient)
            assert client.timeout.connect == 5.0
            assert client.timeout.read == 30.0
        finally:
            await client.aclose()

    def test_pool_sized_from_page_concurrency(self):
        with patch("starchart.services.github.http_client.httpx.AsyncClient") as client_cls:
            create_github_client(3)

        limits = client_cls.call_args.kwargs["limits"]
        assert limits.max_keepalive_connections == 3
        assert limits.max_connections == 3 * POOL_HEADROOM
        assert client_cls.call_args.kwargs["http2"] is True

    def test_pool_is_never_empty(self):
        with patch("starchart.services.github.http_client.httpx.AsyncClient") as client_cls:
            create_github_client(0)

        assert client_cls.call_args.kwargs["limits"].max_keepalive_connections == 1

    def test_each_call_builds_a_new_client(self):
        with patch("starchart.services.github.http_client.httpx.AsyncClient") as client_cls:
            create_github_client(5)
            create_github_client(5)

        assert client_cls.call_count == 2

    @pytest.mark.anyio
    async def test_close(self):
        client = create_github_client(5)
        await close_github_client(client)

        assert client.is_closed

    @pytest.mark.anyio
    async def test_close_twice_is_harmless(self):
        client = create_github_client(5)
        await close_github_client(client)
        await close_github_client(client)

        assert client.is_closed
