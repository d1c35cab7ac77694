"""API dependencies - shared collaborators injected into route handlers."""

from typing import Annotated

import httpx
from fastapi import Depends, Request

from starchart.core.cache import ResponseCache
from starchart.services.github import GitHubReadOperations, GitHubService
from starchart.services.star_chart import StarChartService


def get_response_cache(request: Request) -> ResponseCache:
    """The response cache created in the application lifespan."""
    cache: ResponseCache = request.app.state.response_cache
    return cache


def get_github_http_client(request: Request) -> httpx.AsyncClient:
    """The pooled GitHub HTTP client created in the application lifespan."""
    client: httpx.AsyncClient = request.app.state.github_client
    return client


def get_github_service(
    client: Annotated[httpx.AsyncClient, Depends(get_github_http_client)],
) -> GitHubService:
    """GitHub service configured from settings, on the shared client."""
    return GitHubService(GitHubReadOperations.from_settings(client))


def get_star_chart_service(
    github: Annotated[GitHubService, Depends(get_github_service)],
) -> StarChartService:
    """Chart pipeline bound to the GitHub service."""
    return StarChartService(github)


ChartCache = Annotated[ResponseCache, Depends(get_response_cache)]
ChartService = Annotated[StarChartService, Depends(get_star_chart_service)]
