"""Shared schemas for docsite."""

from docsite.schemas.documents import Heading, RenderedDocument
from docsite.schemas.navigation import NavigationNode
from docsite.schemas.search import MatchType, SearchResult
from docsite.schemas.view import LinkTarget, TocSpyState, ViewState

__all__ = [
    "Heading",
    "LinkTarget",
    "MatchType",
    "NavigationNode",
    "RenderedDocument",
    "SearchResult",
    "TocSpyState",
    "ViewState",
]
