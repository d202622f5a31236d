from __future__ import annotations

import time
from typing import Any

import httpx

from framesearch.config import settings
from framesearch.models.interfaces import CandidateItem
from framesearch.services import logger as log_service
from framesearch.services.errors import ConfigurationError, UpstreamQuotaError, UpstreamTransientError
from framesearch.services.logger import logger

PAGE_SIZE = 10
QUOTA_STATUS_CODES = (403, 429)


def _next_start_index(payload: dict[str, Any]) -> int | None:
    """Start offset of the next page, or None when upstream offers none."""
    queries = payload.get("queries")
    if not isinstance(queries, dict):
        return None
    next_page = queries.get("nextPage")
    if not isinstance(next_page, list) or not next_page or not isinstance(next_page[0], dict):
        return None
    start = next_page[0].get("startIndex")
    try:
        return int(start) if start is not None else None
    except (TypeError, ValueError):
        logger.warning(f"Ignoring malformed nextPage startIndex: {start!r}")
        return None


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200] or "Quota likely exceeded"
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return "Quota likely exceeded"


async def _fetch_page(
    client: httpx.AsyncClient,
    query: str,
    start: int,
    page: int,
) -> dict[str, Any]:
    params: dict[str, Any] = {
        "key": settings.google_custom_search_api_key,
        "cx": settings.google_custom_search_cx_id,
        "q": query,
        "start": start,
        "num": PAGE_SIZE,
    }
    started = time.monotonic()
    try:
        response = await client.get(settings.google_search_url, params=params)
    except httpx.HTTPError as e:
        raise UpstreamTransientError(f"{type(e).__name__}: {e}") from e
    finally:
        duration_ms = int((time.monotonic() - started) * 1000)

    if response.status_code in QUOTA_STATUS_CODES:
        message = _error_message(response)
        log_service.log_upstream_call(page, start, response.status_code, duration_ms=duration_ms, error=message)
        raise UpstreamQuotaError(response.status_code, message)

    if response.is_error:
        raise UpstreamTransientError(f"status {response.status_code}: {_error_message(response)}")

    try:
        payload = response.json()
    except ValueError as e:
        raise UpstreamTransientError("unparseable response body") from e
    if not isinstance(payload, dict):
        raise UpstreamTransientError("unexpected response shape")

    log_service.log_upstream_call(
        page,
        start,
        response.status_code,
        items=len(payload.get("items") or []),
        duration_ms=duration_ms,
    )
    return payload


async def fetch_candidates(
    query: str,
    target_count: int,
    max_fetches: int,
    *,
    client: httpx.AsyncClient,
) -> list[CandidateItem]:
    """Page through Google Custom Search until enough candidates are collected.

    Paging stops at ``target_count`` items, after ``max_fetches`` requests, on an
    empty page, or when no next page is advertised. Quota and rate-limit
    responses (403/429) abort with ``UpstreamQuotaError``; any other failure
    ends paging and returns what was gathered so far.
    """
    if not settings.has_search_credentials():
        raise ConfigurationError()

    candidates: list[CandidateItem] = []
    start = 1
    fetch_count = 0

    while len(candidates) < target_count and fetch_count < max_fetches:
        fetch_count += 1
        try:
            payload = await _fetch_page(client, query, start, fetch_count)
        except UpstreamTransientError as e:
            log_service.log_upstream_call(fetch_count, start, None, error=str(e))
            break

        items = payload.get("items") or []
        if not items:
            logger.info("No more search results found from Google API.")
            break

        candidates.extend(CandidateItem.from_upstream(item) for item in items if isinstance(item, dict))

        next_start = _next_start_index(payload)
        if next_start is None:
            break
        start = next_start

    logger.info(f"Received {len(candidates)} potential results from Google in {fetch_count} fetches.")
    return candidates
