"""Local configuration for docsite."""

from __future__ import annotations

import os
from dataclasses import dataclass


DEFAULT_DOCS_BASE = "assets/docs"
DEFAULT_NAVIGATION_PATH = "assets/docs-navigation.json"
DEFAULT_FETCH_TIMEOUT_S = 10.0
DEFAULT_USER_AGENT = "docsite/0.1"
DEFAULT_SEARCH_MAX_SNIPPETS = 3
DEFAULT_SEARCH_SNIPPET_RADIUS = 80
DEFAULT_SEARCH_MIN_QUERY_LENGTH = 1
DEFAULT_TOC_ACTIVE_OFFSET_PX = 100.0
DEFAULT_TOC_SCROLL_MARGIN_PX = 80.0

# Base URL or directory holding `<route>.md` files.
DOCSITE_DOCS_BASE = os.getenv("DOCSITE_DOCS_BASE", DEFAULT_DOCS_BASE)
DOCSITE_NAVIGATION_PATH = os.getenv("DOCSITE_NAVIGATION_PATH", DEFAULT_NAVIGATION_PATH)
DOCSITE_FETCH_TIMEOUT_S = float(os.getenv("DOCSITE_FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S)))
DOCSITE_USER_AGENT = os.getenv("DOCSITE_USER_AGENT", DEFAULT_USER_AGENT)
DOCSITE_SEARCH_MAX_SNIPPETS = int(os.getenv("DOCSITE_SEARCH_MAX_SNIPPETS", str(DEFAULT_SEARCH_MAX_SNIPPETS)))
DOCSITE_SEARCH_SNIPPET_RADIUS = int(os.getenv("DOCSITE_SEARCH_SNIPPET_RADIUS", str(DEFAULT_SEARCH_SNIPPET_RADIUS)))
DOCSITE_SEARCH_MIN_QUERY_LENGTH = int(
    os.getenv("DOCSITE_SEARCH_MIN_QUERY_LENGTH", str(DEFAULT_SEARCH_MIN_QUERY_LENGTH))
)
DOCSITE_TOC_ACTIVE_OFFSET_PX = float(os.getenv("DOCSITE_TOC_ACTIVE_OFFSET_PX", str(DEFAULT_TOC_ACTIVE_OFFSET_PX)))
DOCSITE_TOC_SCROLL_MARGIN_PX = float(os.getenv("DOCSITE_TOC_SCROLL_MARGIN_PX", str(DEFAULT_TOC_SCROLL_MARGIN_PX)))


@dataclass
class Settings:
    """Per-site settings snapshot.

    Attributes:
        docs_base: Base URL (``http://``/``https://``) or directory for documents.
        navigation_path: URL or file path of the navigation JSON.
        fetch_timeout_s: Timeout applied to HTTP fetches.
        user_agent: User agent sent with HTTP fetches.
        search_max_snippets: Maximum snippets attached to one search result.
        search_snippet_radius: Characters of context kept on each side of a match.
        search_min_query_length: Stripped queries shorter than this match nothing.
        toc_active_offset_px: Viewport offset under which a heading counts as passed.
        toc_scroll_margin_px: Gap left above a heading after scrolling to it.
    """

    docs_base: str = DOCSITE_DOCS_BASE
    navigation_path: str = DOCSITE_NAVIGATION_PATH
    fetch_timeout_s: float = DOCSITE_FETCH_TIMEOUT_S
    user_agent: str = DOCSITE_USER_AGENT
    search_max_snippets: int = DOCSITE_SEARCH_MAX_SNIPPETS
    search_snippet_radius: int = DOCSITE_SEARCH_SNIPPET_RADIUS
    search_min_query_length: int = DOCSITE_SEARCH_MIN_QUERY_LENGTH
    toc_active_offset_px: float = DOCSITE_TOC_ACTIVE_OFFSET_PX
    toc_scroll_margin_px: float = DOCSITE_TOC_SCROLL_MARGIN_PX

    @property
    def docs_base_is_url(self) -> bool:
        return is_url(self.docs_base)


def is_url(location: str) -> bool:
    """Return True when a location should be fetched over HTTP."""
    return location.startswith(("http://", "https://"))
