"""Substring search over document titles and bodies."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass

from docsite.config import (
    DOCSITE_SEARCH_MAX_SNIPPETS,
    DOCSITE_SEARCH_MIN_QUERY_LENGTH,
    DOCSITE_SEARCH_SNIPPET_RADIUS,
)
from docsite.exceptions import DocsiteError, IndexingSkip
from docsite.navigation import NavigationTree
from docsite.renderer import MarkdownRenderer
from docsite.schemas import MatchType, SearchResult

logger = logging.getLogger(__name__)


@dataclass
class _IndexEntry:
    route: str
    label: str
    breadcrumb: str
    body: str | None = None
    skipped: bool = False


def build_snippets(
    text: str,
    pattern: re.Pattern[str],
    *,
    max_snippets: int = DOCSITE_SEARCH_MAX_SNIPPETS,
    radius: int = DOCSITE_SEARCH_SNIPPET_RADIUS,
) -> list[str]:
    """Cut up to ``max_snippets`` windows of ``text`` around matches of ``pattern``.

    Each window spans ``radius`` characters either side of a match. A match
    that starts inside the previous window is merged into it. A new window
    never repeats text already shown by the previous one, so when it would
    overlap it starts where the previous window ends and is no longer centred
    on its match.
    """
    windows: list[tuple[int, int]] = []
    for match in pattern.finditer(text):
        if windows and match.start() < windows[-1][1]:
            continue
        if len(windows) >= max_snippets:
            break
        start = max(0, match.start() - radius)
        if windows:
            start = max(start, windows[-1][1])
        end = min(len(text), match.end() + radius)
        windows.append((start, end))
    return [" ".join(text[start:end].split()) for start, end in windows]


class SearchIndex:
    """Case-insensitive substring index over the navigation's documents.

    Titles are known as soon as the index is built. Bodies are pulled from the
    renderer the first time a query needs them and kept afterwards, so repeated
    queries never fetch an indexed document again. A document whose body
    cannot be fetched is skipped until the next ``build_or_refresh``.
    """

    def __init__(
        self,
        *,
        max_snippets: int = DOCSITE_SEARCH_MAX_SNIPPETS,
        snippet_radius: int = DOCSITE_SEARCH_SNIPPET_RADIUS,
        min_query_length: int = DOCSITE_SEARCH_MIN_QUERY_LENGTH,
    ) -> None:
        self.max_snippets = max_snippets
        self.snippet_radius = snippet_radius
        self.min_query_length = max(1, min_query_length)
        self.skipped: dict[str, IndexingSkip] = {}
        self._entries: list[_IndexEntry] = []
        self._renderer: MarkdownRenderer | None = None

    def __len__(self) -> int:
        return len(self._entries)

    def build_or_refresh(self, tree: NavigationTree, renderer: MarkdownRenderer) -> None:
        """Index every document leaf of ``tree``, keeping bodies already indexed."""
        previous = {entry.route: entry for entry in self._entries}
        entries: list[_IndexEntry] = []
        seen: set[str] = set()
        for leaf in tree.leaves():
            if leaf.route in seen:
                continue
            seen.add(leaf.route)
            old = previous.get(leaf.route)
            body = old.body if old is not None and renderer is self._renderer else None
            entries.append(
                _IndexEntry(route=leaf.route, label=leaf.label, breadcrumb=leaf.breadcrumb, body=body)
            )
        self._entries = entries
        self._renderer = renderer
        self.skipped = {}
        logger.debug("Search index holds %d documents", len(entries))

    async def warm(self) -> None:
        """Index every body now instead of on the first query."""
        await self._ensure_bodies()

    async def search(self, query: str) -> list[SearchResult]:
        term = query.strip()
        if len(term) < self.min_query_length:
            return []

        await self._ensure_bodies()
        pattern = re.compile(re.escape(term), re.IGNORECASE)
        results: list[SearchResult] = []
        for entry in self._entries:
            if entry.skipped or entry.body is None:
                continue
            title_match = pattern.search(entry.label) is not None
            snippets = build_snippets(
                entry.body,
                pattern,
                max_snippets=self.max_snippets,
                radius=self.snippet_radius,
            )
            if not title_match and not snippets:
                continue
            results.append(
                SearchResult(
                    route=entry.route,
                    label=entry.label,
                    breadcrumb=entry.breadcrumb,
                    content_matches=snippets,
                    match_type=_classify(title_match, bool(snippets)),
                )
            )

        results.sort(key=lambda result: result.match_type.rank)
        return results

    async def _ensure_bodies(self) -> None:
        missing = [entry for entry in self._entries if entry.body is None and not entry.skipped]
        if not missing:
            return
        await asyncio.gather(*(self._index_body(entry) for entry in missing))

    async def _index_body(self, entry: _IndexEntry) -> None:
        if self._renderer is None:
            return
        try:
            document = await self._renderer.get_document(entry.route)
        except DocsiteError as exc:
            skip = IndexingSkip(entry.route, exc)
            logger.warning("%s", skip)
            entry.skipped = True
            self.skipped[entry.route] = skip
            return
        entry.body = document.plain_text


def _classify(title_match: bool, content_match: bool) -> MatchType:
    if title_match and content_match:
        return MatchType.BOTH
    if title_match:
        return MatchType.TITLE
    return MatchType.CONTENT
