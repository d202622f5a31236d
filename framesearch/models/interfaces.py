from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ProbeVerdict(str, Enum):
    DISPLAYABLE = "displayable"
    BLOCKED_BY_HEADER = "blocked_by_header"
    HTTP_ERROR = "http_error"
    NETWORK_FAILURE = "network_failure"
    TIMED_OUT = "timed_out"

    @property
    def displayable(self) -> bool:
        return self is ProbeVerdict.DISPLAYABLE


@dataclass(frozen=True, slots=True)
class SearchQuery:
    text: str
    filter_embeddable: bool = False


@dataclass(frozen=True, slots=True, eq=False)
class CandidateItem:
    """One upstream result, unmodified. Compared by identity."""

    link: str
    title: str
    snippet: str

    @classmethod
    def from_upstream(cls, item: dict) -> CandidateItem:
        return cls(
            link=item.get("link", "") or "",
            title=item.get("title", "") or "",
            snippet=item.get("snippet", "") or "",
        )


@dataclass(frozen=True, slots=True)
class ProbeOutcome:
    item: CandidateItem
    verdict: ProbeVerdict

    @property
    def displayable(self) -> bool:
        return self.verdict.displayable


@dataclass(frozen=True, slots=True)
class AnnotatedItem:
    item: CandidateItem
    displayable: bool | None


@dataclass(slots=True)
class SearchOutcome:
    items: list[AnnotatedItem]
    candidates_fetched: int = 0
    candidates_probed: int = 0
    displayable_count: int = 0
