"""Data types for GitHub API responses."""

from dataclasses import dataclass
from datetime import date


@dataclass
class GitHubRepo:
    """Normalized GitHub repository data (the fields a star chart needs)."""

    github_id: int
    name: str
    full_name: str
    stars_count: int
    created_at: str  # ISO 8601
    created_on: date  # UTC calendar day of created_at


@dataclass(frozen=True)
class StarEvent:
    """One favoriting of a repository, reduced to its UTC calendar day."""

    occurred_on: date
