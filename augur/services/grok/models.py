"""Pydantic models for Grok live-search requests and responses."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

SearchSource = Literal["web", "x", "news"]


class GrokSearchParams(BaseModel):
    """Parameters for a single live-search call."""

    query: str
    sources: list[SearchSource] = Field(default_factory=lambda: ["web", "x", "news"])
    from_date: date | None = None
    to_date: date | None = None
    max_results: int | None = None
    included_x_handles: list[str] = Field(default_factory=list)
    post_favorite_count: int | None = None
    post_view_count: int | None = None


class GrokSearchResult(BaseModel):
    """Search answer with citations."""

    content: str
    citations: list[str] = Field(default_factory=list)
    sources_used: int = 0
    model: str
