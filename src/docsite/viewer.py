"""Document view controller: navigate, render and publish HTML."""

from __future__ import annotations

import logging
from typing import Callable
from urllib.parse import unquote

from docsite.exceptions import DocsiteError
from docsite.navigation import NavigationTree
from docsite.renderer import MarkdownRenderer
from docsite.schemas import LinkTarget, ViewState
from docsite.state import Observable, Unsubscribe
from docsite.toc import TocTracker, Viewport

logger = logging.getLogger(__name__)

_EXTERNAL_PREFIXES = ("http://", "https://", "mailto:")


def normalize_route(url: str) -> str:
    """Strip query, fragment, leading slash and ``.md`` suffix from a path."""
    path = url.split("?", 1)[0].split("#", 1)[0].strip()
    path = unquote(path).strip("/")
    if path.endswith(".md"):
        path = path[: -len(".md")]
    return path


def resolve_link(href: str | None) -> LinkTarget | None:
    """Classify a link clicked inside a rendered document."""
    if not href:
        return None
    if href.lower().startswith(_EXTERNAL_PREFIXES):
        return LinkTarget(kind="external", target=href)
    if href.startswith("#"):
        return LinkTarget(kind="anchor", target=href[1:])
    return LinkTarget(kind="internal", target=normalize_route(href))


class DocumentViewer:
    """Show one document at a time.

    ``open`` changes the active route synchronously, then renders. A render
    that completes after the user has moved on is dropped. While a document
    is shown, the table of contents follows the viewport's scroll events;
    that subscription is released whenever the document is replaced or
    closed.
    """

    def __init__(
        self,
        tree: NavigationTree,
        renderer: MarkdownRenderer,
        toc: TocTracker,
        *,
        viewport: Viewport | None = None,
    ) -> None:
        self.tree = tree
        self.renderer = renderer
        self.toc = toc
        self.viewport = viewport
        self._state: Observable[ViewState] = Observable(ViewState())
        self._detach_toc: Unsubscribe | None = None

    @property
    def state(self) -> ViewState:
        return self._state.get()

    def subscribe(self, callback: Callable[[ViewState], None]) -> Unsubscribe:
        return self._state.subscribe(callback)

    async def open(self, url: str) -> ViewState:
        route = normalize_route(url)
        self._release_toc()
        self.tree.set_active_route(route)
        self.toc.clear()
        self._state.set(ViewState(route=route, loading=True))

        try:
            document = await self.renderer.get_document(route)
        except DocsiteError as exc:
            if not self._is_current(route):
                logger.debug("Dropping stale error for %s", route)
                return self.state
            logger.info("Document %s could not be loaded: %s", route, exc)
            self._state.set(ViewState(route=route, error=True, error_detail=str(exc)))
            return self.state

        if not self._is_current(route):
            logger.debug("Dropping stale render for %s", route)
            return self.state

        self.toc.set_headings(document.headings)
        if self.viewport is not None:
            self._detach_toc = self.toc.attach(self.viewport)
            self.viewport.scroll_to_top()
        self._state.set(ViewState(route=route, html=document.html))
        return self.state

    def follow_link(self, href: str | None) -> LinkTarget | None:
        """Handle in-page anchors directly; other targets are returned to the caller."""
        target = resolve_link(href)
        if target is not None and target.kind == "anchor":
            self.toc.scroll_to(target.target)
        return target

    def close(self) -> None:
        self._release_toc()
        self.toc.clear()
        self._state.set(ViewState())

    def _is_current(self, route: str) -> bool:
        return self.tree.active.current_route == route and self.state.route == route

    def _release_toc(self) -> None:
        if self._detach_toc is not None:
            self._detach_toc()
            self._detach_toc = None
