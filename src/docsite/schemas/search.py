"""Search result models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class MatchType(str, Enum):
    """Where a query matched a document."""

    BOTH = "both"
    TITLE = "title"
    CONTENT = "content"

    @property
    def rank(self) -> int:
        return _RANKS[self]


_RANKS = {MatchType.BOTH: 0, MatchType.TITLE: 1, MatchType.CONTENT: 2}


class SearchResult(BaseModel):
    """One document matched by a search query."""

    route: str
    label: str
    breadcrumb: str
    content_matches: list[str] = Field(default_factory=list)
    match_type: MatchType
