"""Error taxonomy for the search pipeline.

Request-fatal errors carry the HTTP status they map to and render the
structured ``{error, details}`` body returned by the API.
"""
from __future__ import annotations

from typing import Any


class SearchPipelineError(Exception):
    status_code: int = 500
    message: str = "Failed to execute search"

    def __init__(self, details: str | None = None):
        super().__init__(details or self.message)
        self.details = details

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class InputError(SearchPipelineError):
    status_code = 400
    message = "Search query is required"


class ConfigurationError(SearchPipelineError):
    message = "Server configuration error: API credentials missing."


class UpstreamQuotaError(SearchPipelineError):
    message = "Upstream search quota exceeded"

    def __init__(self, status_code: int, upstream_message: str):
        super().__init__(f"Google API Error ({status_code}): {upstream_message}")
        self.upstream_status = status_code


# Local failures below are absorbed inside the pipeline and carry no HTTP mapping.


class UpstreamTransientError(Exception):
    """Non-quota upstream failure. Ends paging; never reaches the caller."""


class ProbeFailure(Exception):
    """Unexpected failure inside a single probe. Absorbed as a negative verdict."""

    def __init__(self, url: str, cause: BaseException):
        self.details = f"{type(cause).__name__}: {cause}"
        super().__init__(self.details)
        self.url = url
        self.cause = cause
