"""Error taxonomy for the chart pipeline.

Each error carries the HTTP status the front door answers with. Handlers in
`starchart.main` turn them into plain-text responses.
"""

from fastapi import status


class StarChartError(Exception):
    """Base class for errors surfaced to HTTP clients."""

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidRequestError(StarChartError):
    """Raised when query parameters are missing or malformed."""

    http_status = status.HTTP_400_BAD_REQUEST


class UpstreamUnavailable(StarChartError):
    """Raised when repository data cannot be retrieved from the hosting API."""


class RenderFailure(StarChartError):
    """Raised when the chart cannot be built or painted."""
