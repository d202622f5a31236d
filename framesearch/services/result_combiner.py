from __future__ import annotations

from typing import Sequence

from framesearch.models.interfaces import CandidateItem


def combine(
    displayable: Sequence[CandidateItem],
    candidates: Sequence[CandidateItem],
    cap: int = 10,
) -> list[CandidateItem]:
    """Displayable items first, then backfill from ``candidates`` up to ``cap``.

    Both portions keep upstream order. Items are matched by identity, so a
    displayable item is never repeated in the backfill.
    """
    cap = max(cap, 0)
    combined = list(displayable[:cap])
    if len(combined) >= cap:
        return combined

    taken = {id(item) for item in combined}
    for item in candidates:
        if len(combined) >= cap:
            break
        if id(item) in taken:
            continue
        taken.add(id(item))
        combined.append(item)
    return combined
