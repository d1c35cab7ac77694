import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, RedirectResponse

from starchart.api.router import api_router
from starchart.config import settings
from starchart.core.cache import ResponseCache
from starchart.core.exceptions import (
    InvalidRequestError,
    RenderFailure,
    StarChartError,
    UpstreamUnavailable,
)
from starchart.services.github import close_github_client, create_github_client

CHART_ERROR_MESSAGE = "Error creating chart image"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "cross-origin",  # Charts are embedded in READMEs
}


def setup_logging() -> None:
    """Configure application logging."""
    # Format: timestamp - level - logger name - message
    log_format = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
    date_format = "%H:%M:%S"

    # Configure root logger
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format=log_format,
        datefmt=date_format,
        stream=sys.stdout,
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("hpack").setLevel(logging.WARNING)
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)

    # Quieten uvicorn access logs (we'll log requests ourselves)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    from starchart.services.scheduler import scheduler

    # Startup
    setup_logging()
    app.state.response_cache = ResponseCache(
        ttl_seconds=settings.cache_ttl_seconds,
        max_entries=settings.cache_max_entries,
    )
    app.state.github_client = create_github_client(settings.max_concurrent_page_fetches)
    if not settings.github_auth_enabled:
        logger.warning("GITHUB_TOKEN not set - GitHub requests are unauthenticated")
    scheduler.start(app.state.response_cache)
    logger.info(f"Star chart server running at http://{settings.host}:{settings.port}/chart")
    yield
    # Shutdown
    scheduler.stop()
    await close_github_client(app.state.github_client)
    logger.info("Star chart server shutting down")


app = FastAPI(
    title="Star Chart",
    description="GitHub star history charts as PNG images",
    version="0.1.0",
    lifespan=lifespan,
)


# --- Error handlers: plain-text bodies, no partial images ---


@app.exception_handler(InvalidRequestError)
async def invalid_request_handler(_request: Request, exc: InvalidRequestError):
    return PlainTextResponse(exc.message, status_code=exc.http_status)


@app.exception_handler(UpstreamUnavailable)
async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailable):
    logger.warning(f"Upstream failure for {request.url.path}?{request.url.query}: {exc.message}")
    return PlainTextResponse(CHART_ERROR_MESSAGE, status_code=exc.http_status)


@app.exception_handler(RenderFailure)
async def render_failure_handler(_request: Request, exc: RenderFailure):
    # Already logged with traceback by the renderer
    return PlainTextResponse(CHART_ERROR_MESSAGE, status_code=exc.http_status)


@app.exception_handler(StarChartError)
async def chart_error_handler(_request: Request, exc: StarChartError):
    logger.error(f"Unhandled chart error: {exc.message}")
    return PlainTextResponse(CHART_ERROR_MESSAGE, status_code=exc.http_status)


# --- Middleware (the one registered last runs outermost) ---


@app.middleware("http")
async def redirect_to_https(request: Request, call_next):
    """Redirect plain HTTP to HTTPS when running behind a TLS-terminating proxy."""
    if settings.force_https and request.url.path != "/health":
        if request.headers.get("x-forwarded-proto") != "https":
            return RedirectResponse(str(request.url.replace(scheme="https")), status_code=301)
    return await call_next(request)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    """Add basic hardening headers to every response."""
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log chart requests and any non-2xx response."""
    path = request.url.path
    if path == "/chart":
        query = f"?{request.url.query}" if request.url.query else ""
        logger.info(f"{request.method} {request.url.hostname}{path}{query}")

    response = await call_next(request)

    if response.status_code >= 400:
        logger.info(f"{request.method} {path} → {response.status_code}")

    return response


# Include API routes
app.include_router(api_router)


@app.get("/health")
async def health_check(request: Request):
    """Health check endpoint."""
    return {"status": "healthy", "cache": request.app.state.response_cache.stats()}


def run() -> None:
    """Run the server with uvicorn (console script entry point)."""
    uvicorn.run(
        "starchart.main:app",
        host=settings.host,
        port=settings.port,
        server_header=False,
    )
