"""
GitHub API read operations.

Provides the read-only operations a star chart needs:
- Repository metadata (full name, creation date, stargazer count)
- Every "starred at" timestamp, across all stargazer pages
"""

import asyncio
import logging
import math
from typing import Any

import httpx

from starchart.config import settings
from starchart.services.github.exceptions import GitHubAPIError
from starchart.services.github.helpers import handle_error_response, utc_date
from starchart.services.github.types import GitHubRepo, StarEvent

logger = logging.getLogger(__name__)


class GitHubReadOperations:
    """
    Read-only operations for GitHub API.

    Requests go through the pooled client owned by the application lifespan.
    """

    API_VERSION = "2022-11-28"
    # Media type that adds `starred_at` to each stargazer item
    STAR_MEDIA_TYPE = "application/vnd.github.star+json"

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str,
        base_url: str = "https://api.github.com",
        per_page: int = 100,
        max_concurrent: int = 5,
        max_pages: int = 400,
    ):
        self._client = client
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.per_page = min(per_page, 100)
        self.max_concurrent = max_concurrent
        self.max_pages = max_pages
        self._headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.API_VERSION,
        }
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    @classmethod
    def from_settings(cls, client: httpx.AsyncClient) -> "GitHubReadOperations":
        """Build read operations on `client` from application settings."""
        return cls(
            client,
            token=settings.github_token,
            base_url=settings.github_api_url,
            per_page=settings.stargazers_per_page,
            max_concurrent=settings.max_concurrent_page_fetches,
            max_pages=settings.max_stargazer_pages,
        )

    def _normalize_repo(self, data: dict[str, Any]) -> GitHubRepo:
        """Convert GitHub API response to GitHubRepo dataclass."""
        created_at = data["created_at"]
        return GitHubRepo(
            github_id=data["id"],
            name=data["name"],
            full_name=data["full_name"],
            stars_count=data.get("stargazers_count", 0),
            created_at=created_at,
            created_on=utc_date(created_at),
        )

    async def _get(
        self,
        path: str,
        repo_name: str,
        headers: dict[str, str] | None = None,
        params: dict[str, str | int] | None = None,
    ) -> httpx.Response:
        """GET a GitHub API path, translating failures into GitHubAPIError."""
        try:
            response = await self._client.get(
                f"{self.base_url}{path}",
                headers=headers or self._headers,
                params=params,
            )
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"GitHub API request failed for {repo_name}: {e}") from e

        handle_error_response(response, repo_name)
        return response

    async def get_repo_details(self, owner: str, repo: str) -> GitHubRepo:
        """
        Fetch metadata for a specific repository.

        Args:
            owner: Repository owner (username or org)
            repo: Repository name

        Returns:
            GitHubRepo with name, creation date and stargazer count
        """
        response = await self._get(f"/repos/{owner}/{repo}", f"{owner}/{repo}")
        return self._normalize_repo(response.json())

    async def get_stargazer_page(self, owner: str, repo: str, page: int) -> list[StarEvent]:
        """
        Fetch one page of stargazers.

        Args:
            owner: Repository owner
            repo: Repository name
            page: Page number (1-indexed)

        Returns:
            StarEvent per item on the page (empty when past the last page)
        """
        response = await self._get(
            f"/repos/{owner}/{repo}/stargazers",
            f"{owner}/{repo}",
            headers={**self._headers, "Accept": self.STAR_MEDIA_TYPE},
            params={"per_page": self.per_page, "page": page},
        )
        return [
            StarEvent(occurred_on=utc_date(item["starred_at"]))
            for item in response.json()
            if item.get("starred_at")
        ]

    async def fetch_star_events(
        self,
        owner: str,
        repo: str,
        expected_total: int,
    ) -> list[StarEvent]:
        """
        Fetch every star event for a repository (parallel).

        The page count is derived from `expected_total` (the stargazer count
        from repository metadata). Pages are fetched concurrently with at most
        `max_concurrent` requests in flight and never more than `max_pages`
        pages (GitHub stops paginating stargazers at page 400, so the most
        popular repositories chart only their earliest stars). Result order is
        unspecified.

        Args:
            owner: Repository owner
            repo: Repository name
            expected_total: Number of stars to collect

        Returns:
            At most `expected_total` StarEvents

        Raises:
            GitHubAPIError: If any page request fails
        """
        if expected_total <= 0:
            return []

        page_count = math.ceil(expected_total / self.per_page)
        if page_count > self.max_pages:
            # GitHub answers 422 past its pagination limit; chart the earliest stars instead
            logger.warning(
                f"{owner}/{repo} has {expected_total} stars, "
                f"fetching only the first {self.max_pages} page(s)"
            )
            page_count = self.max_pages
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def fetch_with_limit(page: int) -> list[StarEvent]:
            async with semaphore:
                return await self.get_stargazer_page(owner, repo, page)

        pages = await asyncio.gather(*(fetch_with_limit(p) for p in range(1, page_count + 1)))

        events: list[StarEvent] = []
        for page_events in pages:
            # An empty page means GitHub has no more stargazers to give
            if not page_events:
                break
            events.extend(page_events)

        logger.info(
            f"Fetched {len(events)} star event(s) for {owner}/{repo} "
            f"across {page_count} page(s)"
        )
        return events[:expected_total]
