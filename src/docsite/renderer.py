"""Fetch markdown documents and render them to sanitized HTML."""

from __future__ import annotations

import asyncio
import logging

import markdown

from docsite.exceptions import DecodeError
from docsite.headings import assign_heading_ids
from docsite.html_utils import parse_fragment, sanitize_soup, serialize_fragment, soup_to_text
from docsite.schemas import RenderedDocument
from docsite.sources import DocumentSource

logger = logging.getLogger(__name__)

# GitHub-flavoured output with hard line breaks. No attr_list: heading ids
# come only from assign_heading_ids.
_MARKDOWN_EXTENSIONS = [
    "abbr",
    "def_list",
    "fenced_code",
    "footnotes",
    "tables",
    "md_in_html",
    "nl2br",
    "sane_lists",
]


def render_markdown(md_text: str) -> str:
    """Convert markdown to unsanitized HTML."""
    md_instance = markdown.Markdown(extensions=_MARKDOWN_EXTENSIONS)
    logger.debug("Render markdown: %d chars input", len(md_text))
    return md_instance.convert(md_text)


def decode_markdown(data: bytes, *, path: str) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise DecodeError(path, f"Document is not valid UTF-8 text: {path} ({exc})") from exc


def build_document(route: str, raw_markdown: str) -> RenderedDocument:
    """Render, sanitize and outline ``raw_markdown``.

    Every level 1-4 heading ends up with a document-unique id, and the plain
    text is taken from the sanitized HTML so search never sees script bodies.
    """
    soup = parse_fragment(render_markdown(raw_markdown))
    sanitize_soup(soup)
    headings = assign_heading_ids(soup)
    return RenderedDocument(
        route=route,
        raw_markdown=raw_markdown,
        html=serialize_fragment(soup),
        plain_text=soup_to_text(soup),
        headings=tuple(headings),
    )


class MarkdownRenderer:
    """Fetch, render and memoize documents by route.

    A route is fetched at most once at a time: concurrent callers share the
    pending fetch. Completed documents are cached for the lifetime of the
    renderer; failures are not cached.
    """

    def __init__(self, source: DocumentSource) -> None:
        self.source = source
        self.fetch_count = 0
        self._documents: dict[str, RenderedDocument] = {}
        self._pending: dict[str, asyncio.Task[RenderedDocument]] = {}

    def cached(self, route: str) -> RenderedDocument | None:
        return self._documents.get(route)

    def is_pending(self, route: str) -> bool:
        return route in self._pending

    async def fetch_and_parse(self, route: str) -> str:
        """Return the sanitized HTML for ``route``.

        Raises:
            DocumentNotFound: If the document could not be fetched.
            DecodeError: If the document is not UTF-8 text.
        """
        document = await self.get_document(route)
        return document.html

    async def get_document(self, route: str) -> RenderedDocument:
        cached = self._documents.get(route)
        if cached is not None:
            logger.debug("Document cache hit for %s", route)
            return cached

        task = self._pending.get(route)
        if task is None:
            task = asyncio.get_running_loop().create_task(self._load(route))
            self._pending[route] = task
            task.add_done_callback(lambda _task: self._pending.pop(route, None))
        else:
            logger.debug("Joining in-flight fetch for %s", route)

        # A cancelled caller must not cancel the fetch other callers share.
        return await asyncio.shield(task)

    async def _load(self, route: str) -> RenderedDocument:
        self.fetch_count += 1
        logger.debug("Fetching %s from %s", route, self.source.location(route))
        data = await self.source.fetch_bytes(route)
        document = build_document(route, decode_markdown(data, path=route))
        self._documents[route] = document
        return document
