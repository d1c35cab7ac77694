"""Exceptions for GitHub service."""

from starchart.core.exceptions import UpstreamUnavailable


class GitHubAPIError(UpstreamUnavailable):
    """Error from GitHub API."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        rate_limit_reset: int | None = None,
    ):
        self.status_code = status_code  # Upstream status, None for network failures
        self.rate_limit_reset = rate_limit_reset  # Unix timestamp when rate limit resets
        super().__init__(message)
