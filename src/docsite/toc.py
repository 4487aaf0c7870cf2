"""Table of contents outline and scroll-spy."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterable, Iterator, Protocol

from docsite.config import DOCSITE_TOC_ACTIVE_OFFSET_PX, DOCSITE_TOC_SCROLL_MARGIN_PX
from docsite.headings import extract_headings
from docsite.schemas import Heading, TocSpyState
from docsite.state import Observable, Unsubscribe

logger = logging.getLogger(__name__)

MAX_TOC_LEVEL = 4


class Viewport(Protocol):
    """The scrolling surface a document is displayed in."""

    def heading_offset(self, heading_id: str) -> float | None:
        """Distance from the top of the viewport to the heading, or None if absent."""
        ...

    def scroll_to_heading(self, heading_id: str, *, margin: float) -> bool:
        """Smooth-scroll so the heading sits ``margin`` below the top. False if absent."""
        ...

    def scroll_to_top(self) -> None: ...

    def add_scroll_listener(self, callback: Callable[[], None]) -> Unsubscribe: ...


class ScrollViewport:
    """In-memory viewport with headings at fixed positions in the page.

    Attributes:
        positions: Heading id to distance from the top of the page.
        height: Visible height; scrolling stops when the page bottom is reached.
        page_height: Total page height. Defaults to unbounded.
    """

    def __init__(
        self,
        positions: dict[str, float] | None = None,
        *,
        height: float = 800.0,
        page_height: float | None = None,
    ) -> None:
        self.positions = dict(positions or {})
        self.height = height
        self.page_height = page_height
        self.scroll_y = 0.0
        self._listeners: list[Callable[[], None]] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def heading_offset(self, heading_id: str) -> float | None:
        position = self.positions.get(heading_id)
        if position is None:
            return None
        return position - self.scroll_y

    def scroll(self, y: float) -> None:
        max_y = None if self.page_height is None else max(0.0, self.page_height - self.height)
        self.scroll_y = max(0.0, y if max_y is None else min(y, max_y))
        for callback in list(self._listeners):
            callback()

    def scroll_to_heading(self, heading_id: str, *, margin: float) -> bool:
        position = self.positions.get(heading_id)
        if position is None:
            return False
        self.scroll(position - margin)
        return True

    def scroll_to_top(self) -> None:
        self.scroll(0.0)

    def add_scroll_listener(self, callback: Callable[[], None]) -> Unsubscribe:
        self._listeners.append(callback)

        def remove() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return remove


class TocTracker:
    """Keep one heading of the current document marked as being read.

    The active heading is the last one whose top has scrolled to within
    ``active_offset`` pixels of the viewport top; before any has, the first
    heading is active.
    """

    def __init__(
        self,
        *,
        active_offset: float = DOCSITE_TOC_ACTIVE_OFFSET_PX,
        scroll_margin: float = DOCSITE_TOC_SCROLL_MARGIN_PX,
    ) -> None:
        self.active_offset = active_offset
        self.scroll_margin = scroll_margin
        self._state: Observable[TocSpyState] = Observable(TocSpyState())
        self._viewport: Viewport | None = None
        self._remove_listener: Unsubscribe | None = None

    @property
    def state(self) -> TocSpyState:
        return self._state.get()

    @property
    def items(self) -> list[Heading]:
        return self.state.items

    @property
    def active_id(self) -> str:
        return self.state.active_id

    @property
    def is_attached(self) -> bool:
        return self._viewport is not None

    def subscribe(self, callback: Callable[[TocSpyState], None]) -> Unsubscribe:
        return self._state.subscribe(callback)

    def set_headings(self, headings: Iterable[Heading]) -> None:
        items = [heading for heading in headings if heading.level <= MAX_TOC_LEVEL]
        self._state.set(TocSpyState(items=items, active_id=""))

    def set_html(self, html: str) -> None:
        self.set_headings(extract_headings(html))

    def clear(self) -> None:
        self.set_headings([])

    def scroll_to(self, heading_id: str) -> bool:
        """Scroll to a heading and mark it active without waiting for the scroll."""
        if self._viewport is None:
            return False
        if not self._viewport.scroll_to_heading(heading_id, margin=self.scroll_margin):
            logger.debug("Heading %s not in viewport", heading_id)
            return False
        self._set_active(heading_id)
        return True

    def on_scroll(self) -> None:
        if self._viewport is None or not self.items:
            return
        self._set_active(self.current_heading_id(self._viewport))

    def current_heading_id(self, viewport: Viewport) -> str:
        items = self.items
        if not items:
            return ""
        current = items[0].id
        for heading in items:
            offset = viewport.heading_offset(heading.id)
            if offset is not None and offset <= self.active_offset:
                current = heading.id
        return current

    def attach(self, viewport: Viewport) -> Unsubscribe:
        """Start following ``viewport`` scroll events; returns the detach callable."""
        self.detach()
        self._viewport = viewport
        self._remove_listener = viewport.add_scroll_listener(self.on_scroll)
        return self.detach

    def detach(self) -> None:
        if self._remove_listener is not None:
            self._remove_listener()
        self._remove_listener = None
        self._viewport = None

    @contextmanager
    def tracking(self, viewport: Viewport) -> Iterator[TocTracker]:
        self.attach(viewport)
        try:
            yield self
        finally:
            self.detach()

    def _set_active(self, heading_id: str) -> None:
        state = self.state
        if state.active_id == heading_id:
            return
        self._state.set(TocSpyState(items=state.items, active_id=heading_id))
