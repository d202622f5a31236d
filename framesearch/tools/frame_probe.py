from __future__ import annotations

import asyncio
import re
import time

import httpx

from framesearch.config import settings
from framesearch.models.interfaces import ProbeVerdict
from framesearch.services import logger as log_service
from framesearch.tools.web_utils import is_valid_url

BLOCKING_FRAME_OPTIONS = {"DENY", "SAMEORIGIN"}

# First source of the frame-ancestors directive. Not a CSP parser.
# Repeated policy headers may arrive comma-joined, so "," also ends a directive.
FRAME_ANCESTORS_BLOCK = re.compile(
    r"(?:^|[;,])\s*frame-ancestors\s+('none'|'self')(?=\s|[;,]|$)",
    re.IGNORECASE,
)


def blocking_header(headers: httpx.Headers) -> str | None:
    """Return a description of the header that forbids framing, if any."""
    for frame_options in headers.get_list("x-frame-options", split_commas=True):
        value = frame_options.strip().upper()
        if value in BLOCKING_FRAME_OPTIONS:
            return f"X-Frame-Options: {value}"

    for csp in headers.get_list("content-security-policy"):
        match = FRAME_ANCESTORS_BLOCK.search(csp)
        if match:
            return f"CSP frame-ancestors {match.group(1).lower()}"
    return None


def classify_response(response: httpx.Response) -> tuple[ProbeVerdict, str | None]:
    blocked = blocking_header(response.headers)
    if blocked:
        return ProbeVerdict.BLOCKED_BY_HEADER, blocked
    if response.status_code >= 400:
        return ProbeVerdict.HTTP_ERROR, f"status {response.status_code}"
    return ProbeVerdict.DISPLAYABLE, None


async def probe(
    url: str,
    *,
    client: httpx.AsyncClient,
    timeout: float | None = None,
) -> ProbeVerdict:
    """Check with a HEAD request whether ``url`` is likely to render in a frame.

    Redirects are followed so the headers come from the final destination.
    The whole exchange is bounded by ``timeout``; on expiry the request is
    cancelled and ``TIMED_OUT`` returned. Network-level failures never raise.
    """
    timeout = settings.probe_timeout_seconds if timeout is None else timeout
    started = time.monotonic()
    detail: str | None = None

    if not is_valid_url(url):
        log_service.log_probe(url=url, verdict=ProbeVerdict.NETWORK_FAILURE.value, detail="invalid url")
        return ProbeVerdict.NETWORK_FAILURE

    try:
        response = await asyncio.wait_for(
            client.head(
                url,
                headers={"User-Agent": settings.probe_user_agent},
                follow_redirects=True,
            ),
            timeout=timeout,
        )
    except (asyncio.TimeoutError, httpx.TimeoutException):
        verdict = ProbeVerdict.TIMED_OUT
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        verdict = ProbeVerdict.NETWORK_FAILURE
        detail = f"{type(e).__name__}: {e}"
    else:
        verdict, detail = classify_response(response)

    log_service.log_probe(
        url=url,
        verdict=verdict.value,
        duration_ms=int((time.monotonic() - started) * 1000),
        detail=detail,
    )
    return verdict
