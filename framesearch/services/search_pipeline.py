from __future__ import annotations

import time

import httpx

from framesearch.config import settings
from framesearch.models.interfaces import AnnotatedItem, SearchOutcome, SearchQuery
from framesearch.services import logger as log_service
from framesearch.services import probe_scheduler, result_combiner
from framesearch.services.errors import ConfigurationError, InputError
from framesearch.services.http_client import shared_client
from framesearch.services.logger import logger
from framesearch.tools import google_search, web_utils


def paging_policy(filter_embeddable: bool) -> tuple[int, int]:
    """(target_count, max_fetches) for the requested mode."""
    if filter_embeddable:
        return settings.filtered_target_count, settings.filtered_max_fetches
    return settings.unfiltered_target_count, settings.unfiltered_max_fetches


async def run_search(
    query: SearchQuery,
    *,
    client: httpx.AsyncClient | None = None,
) -> SearchOutcome:
    """Fetch, filter, probe and combine results for one query."""
    text = (query.text or "").strip()
    if not text:
        raise InputError()
    if not settings.has_search_credentials():
        logger.error("Missing Google API key or search engine id in server environment.")
        raise ConfigurationError()

    if client is None:
        client = await shared_client.acquire()

    started = time.monotonic()
    logger.info(f"Searching for: {text!r} with filter_embeddable={query.filter_embeddable}")

    target_count, max_fetches = paging_policy(query.filter_embeddable)
    candidates = await google_search.fetch_candidates(
        text,
        target_count,
        max_fetches,
        client=client,
    )

    if query.filter_embeddable:
        filtered = [item for item in candidates if item.link and web_utils.is_statically_embeddable(item.link)]
    else:
        filtered = candidates

    outcomes = await probe_scheduler.classify(
        filtered,
        settings.probe_concurrency_cap,
        client=client,
        timeout=settings.probe_timeout_seconds,
    )
    displayable = probe_scheduler.displayable_items(outcomes)
    combined = result_combiner.combine(displayable, filtered, settings.result_cap)

    verdicts = {id(outcome.item): outcome.displayable for outcome in outcomes}
    annotated = [AnnotatedItem(item=item, displayable=verdicts.get(id(item))) for item in combined]

    log_service.log_event(
        event_type="search_completed",
        message="Search pipeline finished",
        query=text[:100],
        filter_embeddable=query.filter_embeddable,
        candidates=len(candidates),
        after_static_filter=len(filtered),
        probed=len(outcomes),
        displayable=len(displayable),
        returned=len(annotated),
        runtime_ms=int((time.monotonic() - started) * 1000),
    )
    return SearchOutcome(
        items=annotated,
        candidates_fetched=len(candidates),
        candidates_probed=len(outcomes),
        displayable_count=len(displayable),
    )
