"""
Star history chart endpoint.

GET /chart?username=<owner>&repository=<repo>[&color=<theme>] returns a PNG.
Rendered charts are cached per (owner, repo, theme) for a day.
"""

import logging
import re

from fastapi import APIRouter, Query, Response

from starchart.api.deps import ChartCache, ChartService
from starchart.config import get_theme, settings
from starchart.config.themes import DEFAULT_THEME, ColorTheme
from starchart.core.cache import chart_fingerprint
from starchart.core.exceptions import InvalidRequestError

router = APIRouter(tags=["chart"])
logger = logging.getLogger(__name__)

# GitHub owner and repository names: letters, digits, '.', '-', '_'
NAME_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,100}$")

CACHE_CONTROL = "public, max-age=86400"


def _require_name(value: str | None, field: str) -> str:
    """Validate a required owner/repository query parameter."""
    if not value or not value.strip():
        raise InvalidRequestError("Username and repository are required")
    value = value.strip()
    if not NAME_PATTERN.match(value) or value in {".", ".."}:
        raise InvalidRequestError(f"Invalid {field}: {value!r}")
    return value


def _default_theme() -> ColorTheme:
    return get_theme(settings.default_color, default=DEFAULT_THEME)


@router.get(
    "/chart",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}},
)
async def get_chart(
    cache: ChartCache,
    charts: ChartService,
    username: str | None = Query(None, description="Repository owner"),
    repository: str | None = Query(None, description="Repository name"),
    color: str | None = Query(None, description="Color theme (unknown values use the default)"),
) -> Response:
    """Render (or serve from cache) the star history chart of a repository."""
    owner = _require_name(username, "username")
    repo = _require_name(repository, "repository")
    theme = get_theme(color, default=_default_theme())

    async def build() -> bytes:
        return await charts.render(owner, repo, theme)

    image = await cache.get_or_build(chart_fingerprint(owner, repo, theme), build)

    return Response(
        content=image,
        media_type="image/png",
        headers={"Cache-Control": CACHE_CONTROL},
    )
