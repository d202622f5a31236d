from __future__ import annotations

import asyncio
from typing import Sequence

import httpx

from framesearch.models.interfaces import CandidateItem, ProbeOutcome, ProbeVerdict
from framesearch.services.errors import ProbeFailure
from framesearch.services.logger import logger
from framesearch.tools import frame_probe


async def classify(
    candidates: Sequence[CandidateItem],
    concurrency_cap: int,
    *,
    client: httpx.AsyncClient,
    timeout: float | None = None,
) -> list[ProbeOutcome]:
    """Probe the first ``concurrency_cap`` candidates concurrently.

    Every probe runs to completion on its own; a failing probe becomes a
    negative outcome instead of cancelling its siblings. Outcomes come back in
    candidate order. Candidates past the cap are left unclassified.
    """
    selected = list(candidates[: max(concurrency_cap, 0)])
    if not selected:
        return []

    raw_results = await asyncio.gather(
        *(frame_probe.probe(item.link, client=client, timeout=timeout) for item in selected),
        return_exceptions=True,
    )

    outcomes: list[ProbeOutcome] = []
    for item, result in zip(selected, raw_results):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            failure = ProbeFailure(item.link, result)
            logger.warning(f"Probe failed for {item.link}: {failure.details}")
            outcomes.append(ProbeOutcome(item=item, verdict=ProbeVerdict.NETWORK_FAILURE))
            continue
        outcomes.append(ProbeOutcome(item=item, verdict=result))
    return outcomes


def displayable_items(outcomes: Sequence[ProbeOutcome]) -> list[CandidateItem]:
    return [outcome.item for outcome in outcomes if outcome.displayable]
