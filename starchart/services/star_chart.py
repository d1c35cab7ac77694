"""
Star chart pipeline.

Fetches a repository's star history from GitHub, turns it into a daily
cumulative series and renders it. Stateless: caching is the caller's job.
"""

import asyncio
import logging
from datetime import UTC, date, datetime

from starchart.config.themes import ColorTheme
from starchart.services.github import GitHubService
from starchart.services.renderer import render_chart
from starchart.services.timeline import Timeline, build_timeline

logger = logging.getLogger(__name__)


def utc_today() -> date:
    """Current UTC calendar day (the day the series is extended to)."""
    return datetime.now(UTC).date()


class StarChartService:
    """Builds star history charts for GitHub repositories."""

    def __init__(self, github: GitHubService):
        self.github = github

    async def build_timeline(
        self,
        owner: str,
        repo: str,
        today: date | None = None,
    ) -> tuple[str, Timeline]:
        """
        Fetch a repository's stars and build its daily series.

        Returns:
            (repository full name, timeline)

        Raises:
            GitHubAPIError: If repository metadata or any stargazer page can't be fetched
        """
        details = await self.github.get_repo_details(owner, repo)
        events = await self.github.fetch_star_events(owner, repo, details.stars_count)
        timeline = build_timeline(events, details.created_on, today or utc_today())
        logger.info(
            f"Built timeline for {details.full_name}: {len(events)} star(s) "
            f"over {len(timeline)} day(s)"
        )
        return details.full_name, timeline

    async def render(
        self,
        owner: str,
        repo: str,
        theme: ColorTheme,
        today: date | None = None,
    ) -> bytes:
        """
        Produce the PNG chart for a repository.

        Raises:
            GitHubAPIError: If GitHub data can't be fetched
            RenderFailure: If the chart can't be painted
        """
        full_name, timeline = await self.build_timeline(owner, repo, today)
        # matplotlib is CPU bound; keep it off the event loop
        return await asyncio.to_thread(render_chart, timeline, full_name, theme)
