"""
GitHub service facade.

Composes the read operations behind a single entry point so callers (the
chart pipeline, the API dependencies) do not need to know how requests are
built or paginated.
"""

import logging

from starchart.services.github.read_operations import GitHubReadOperations
from starchart.services.github.types import GitHubRepo, StarEvent

logger = logging.getLogger(__name__)


class GitHubService:
    """Service for interacting with the GitHub API."""

    def __init__(self, read_ops: GitHubReadOperations):
        self._read = read_ops

    async def get_repo_details(self, owner: str, repo: str) -> GitHubRepo:
        """Fetch repository metadata."""
        return await self._read.get_repo_details(owner, repo)

    async def fetch_star_events(
        self,
        owner: str,
        repo: str,
        expected_total: int,
    ) -> list[StarEvent]:
        """Fetch every star event of a repository (unordered)."""
        return await self._read.fetch_star_events(owner, repo, expected_total)
