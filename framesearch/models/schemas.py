from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


# --- Requests ---


class SearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str | None = None
    filter_embeddable: bool = Field(default=False, alias="filterEmbeddable")


# --- Responses ---


class SearchResultItem(BaseModel):
    link: str
    title: str
    snippet: str
    displayable: bool | None = None


class SearchResponse(BaseModel):
    items: list[SearchResultItem]


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
