"""
Pooled HTTP client for GitHub API operations.

The application lifespan owns one client (see `starchart.main.lifespan`): it is
created at startup, kept on `app.state.github_client`, handed to
`GitHubReadOperations` through the API dependencies and closed at shutdown.
"""

import logging

import httpx

logger = logging.getLogger(__name__)

# Several chart requests may be paginating at once, each with its own fan-out
POOL_HEADROOM = 4


def create_github_client(max_concurrent_pages: int) -> httpx.AsyncClient:
    """
    Create the pooled HTTP client for GitHub API calls.

    Auth headers are passed per-request, not stored on the client.

    Args:
        max_concurrent_pages: Page fetches one chart keeps in flight; sizes the pool

    Returns:
        httpx.AsyncClient configured for the GitHub API
    """
    per_request = max(max_concurrent_pages, 1)
    client = httpx.AsyncClient(
        timeout=httpx.Timeout(30.0, connect=5.0),
        limits=httpx.Limits(
            max_connections=per_request * POOL_HEADROOM,
            max_keepalive_connections=per_request,
        ),
        http2=True,
    )
    logger.debug(f"Created GitHub HTTP client (keep-alive pool of {per_request})")
    return client


async def close_github_client(client: httpx.AsyncClient) -> None:
    """Close a GitHub HTTP client unless it is already closed."""
    if not client.is_closed:
        await client.aclose()
        logger.debug("Closed GitHub HTTP client")
