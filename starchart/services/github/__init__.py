"""
GitHub service package.

Re-exports all public types and classes.
Usage: `from starchart.services.github import GitHubService, StarEvent`

Module structure:
- service.py: Main GitHubService facade
- read_operations.py: Repository metadata and stargazer pagination
- http_client.py: Pooled HTTP client factory (owned by the app lifespan)
- helpers.py: Rate limit handling, error utilities, timestamp parsing
- types.py: Data types
- exceptions.py: Custom exceptions
"""

from starchart.services.github.exceptions import GitHubAPIError
from starchart.services.github.helpers import RateLimitInfo, handle_error_response
from starchart.services.github.http_client import close_github_client, create_github_client
from starchart.services.github.read_operations import GitHubReadOperations
from starchart.services.github.service import GitHubService
from starchart.services.github.types import GitHubRepo, StarEvent

__all__ = [
    # Service (main entry point)
    "GitHubService",
    "GitHubReadOperations",
    # HTTP client lifecycle
    "create_github_client",
    "close_github_client",
    # Utilities
    "handle_error_response",
    "RateLimitInfo",
    # Exceptions
    "GitHubAPIError",
    # Types
    "GitHubRepo",
    "StarEvent",
]
