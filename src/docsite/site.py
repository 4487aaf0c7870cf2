"""Wire navigation, rendering, search and the document view together."""

from __future__ import annotations

import logging
from typing import Sequence

import httpx

from docsite.config import Settings
from docsite.navigation import NavigationTree
from docsite.renderer import MarkdownRenderer
from docsite.schemas import NavigationNode, SearchResult, ViewState
from docsite.search import SearchIndex
from docsite.sources import DocumentSource, create_document_source, load_navigation
from docsite.toc import TocTracker, Viewport
from docsite.viewer import DocumentViewer

logger = logging.getLogger(__name__)


class DocSite:
    """One documentation site session.

    Args:
        settings: Site settings. Defaults to the environment configuration.
        source: Document source. Defaults to one chosen from ``settings.docs_base``.
        client: Optional shared httpx.AsyncClient for HTTP fetches.
        viewport: Viewport the document view scrolls in, if any.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        source: DocumentSource | None = None,
        client: httpx.AsyncClient | None = None,
        viewport: Viewport | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self._client = client
        self.source = source or create_document_source(self.settings, client=client)
        self.tree = NavigationTree()
        self.renderer = MarkdownRenderer(self.source)
        self.index = SearchIndex(
            max_snippets=self.settings.search_max_snippets,
            snippet_radius=self.settings.search_snippet_radius,
            min_query_length=self.settings.search_min_query_length,
        )
        self.toc = TocTracker(
            active_offset=self.settings.toc_active_offset_px,
            scroll_margin=self.settings.toc_scroll_margin_px,
        )
        self.viewer = DocumentViewer(self.tree, self.renderer, self.toc, viewport=viewport)

    async def load_navigation(self, nodes: Sequence[NavigationNode] | None = None) -> None:
        """Load the navigation tree and re-index its documents."""
        if nodes is None:
            nodes = await load_navigation(self.settings.navigation_path, client=self._client)
        self.tree.load(nodes)
        self.index.build_or_refresh(self.tree, self.renderer)
        logger.info("Loaded navigation with %d documents", len(self.index))

    async def open(self, route: str) -> ViewState:
        return await self.viewer.open(route)

    async def search(self, query: str) -> list[SearchResult]:
        return await self.index.search(query)

    def close(self) -> None:
        self.viewer.close()
