"""Tests for the markdown renderer and its cache."""

from __future__ import annotations

import asyncio

import pytest

from docsite.exceptions import DecodeError, DocumentNotFound
from docsite.renderer import MarkdownRenderer, build_document, render_markdown


class TestRenderMarkdown:
    """Tests for markdown to HTML conversion."""

    def test_supports_common_constructs(self) -> None:
        """Headings, emphasis, lists, tables, links, code and quotes render."""
        html = render_markdown(
            "# Title\n\n"
            "Some *em* and **strong** and `code`.\n\n"
            "- one\n- two\n\n"
            "| a | b |\n|---|---|\n| 1 | 2 |\n\n"
            "[link](https://example.com)\n\n"
            "```\nfenced\n```\n\n"
            "> quoted\n"
        )
        for fragment in ("<h1>", "<em>em</em>", "<strong>strong</strong>", "<code>code</code>",
                         "<li>one</li>", "<table>", 'href="https://example.com"', "fenced",
                         "<blockquote>"):
            assert fragment in html

    def test_single_newlines_become_breaks(self) -> None:
        """Line breaks inside a paragraph are kept."""
        assert "<br" in render_markdown("line one\nline two")

    def test_malformed_markdown_does_not_fail(self) -> None:
        """Unbalanced syntax degrades to best-effort HTML."""
        html = render_markdown("**unclosed\n\n```\nno closing fence\n\n| broken | table")
        assert "unclosed" in html


class TestBuildDocument:
    """Tests for build_document function."""

    def test_heading_ids_for_repeated_text(self) -> None:
        """'# A' then '## A' yields a and a-2."""
        document = build_document("doc", "# A\n## A\n")
        assert [(h.id, h.level) for h in document.headings] == [("a", 1), ("a-2", 2)]
        assert 'id="a"' in document.html
        assert 'id="a-2"' in document.html

    def test_sanitizes_raw_html(self) -> None:
        """Inline scripts in markdown never reach the output or the text."""
        document = build_document("doc", "# Hi\n\n<script>steal()</script>\n\nBody text\n")
        assert "<script" not in document.html
        assert "steal" not in document.plain_text
        assert "Body text" in document.plain_text

    def test_plain_text_has_no_markup(self) -> None:
        """Plain text is tag-free."""
        document = build_document("doc", "Some **bold** [link](x)\n")
        assert document.plain_text == "Some bold link"


class TestMarkdownRenderer:
    """Tests for MarkdownRenderer."""

    @pytest.mark.asyncio
    async def test_fetch_and_parse_returns_html(self, make_source) -> None:
        """HTML comes back with heading ids."""
        renderer = MarkdownRenderer(make_source({"guides/setup": "# Setup\n\nInstall it.\n"}))
        html = await renderer.fetch_and_parse("guides/setup")
        assert '<h1 id="setup">Setup</h1>' in html

    @pytest.mark.asyncio
    async def test_cached_document_is_not_refetched(self, make_source) -> None:
        """A second call is served from the cache."""
        source = make_source({"a": "# A\n"})
        renderer = MarkdownRenderer(source)

        first = await renderer.fetch_and_parse("a")
        second = await renderer.fetch_and_parse("a")

        assert first == second
        assert source.calls == ["a"]
        assert renderer.cached("a") is not None

    @pytest.mark.asyncio
    async def test_concurrent_calls_share_one_fetch(self, make_source) -> None:
        """Two callers before the first resolves trigger one fetch."""
        source = make_source({"a": "# A\n"}, gated={"a"})
        renderer = MarkdownRenderer(source)

        first = asyncio.create_task(renderer.fetch_and_parse("a"))
        second = asyncio.create_task(renderer.fetch_and_parse("a"))
        await asyncio.sleep(0)
        assert renderer.is_pending("a")

        source.release("a")
        results = await asyncio.gather(first, second)

        assert results[0] == results[1]
        assert source.calls == ["a"]
        assert renderer.fetch_count == 1
        assert not renderer.is_pending("a")

    @pytest.mark.asyncio
    async def test_cancelled_caller_does_not_cancel_shared_fetch(self, make_source) -> None:
        """The pending fetch survives one of its awaiters being cancelled."""
        source = make_source({"a": "# A\n"}, gated={"a"})
        renderer = MarkdownRenderer(source)

        first = asyncio.create_task(renderer.fetch_and_parse("a"))
        second = asyncio.create_task(renderer.fetch_and_parse("a"))
        await asyncio.sleep(0)
        first.cancel()
        source.release("a")

        assert "id=\"a\"" in await second
        with pytest.raises(asyncio.CancelledError):
            await first

    @pytest.mark.asyncio
    async def test_missing_document_raises_not_found(self, make_source) -> None:
        """Non-success fetches surface as DocumentNotFound with the path."""
        renderer = MarkdownRenderer(make_source({}))
        with pytest.raises(DocumentNotFound) as exc_info:
            await renderer.fetch_and_parse("nope")
        assert exc_info.value.path == "nope"
        assert exc_info.value.status == 404

    @pytest.mark.asyncio
    async def test_failures_are_not_cached(self, make_source) -> None:
        """A failed fetch is attempted again on the next call."""
        source = make_source({})
        renderer = MarkdownRenderer(source)
        for _ in range(2):
            with pytest.raises(DocumentNotFound):
                await renderer.fetch_and_parse("nope")
        assert source.calls == ["nope", "nope"]
        assert renderer.cached("nope") is None

    @pytest.mark.asyncio
    async def test_undecodable_content_raises_decode_error(self, make_source) -> None:
        """Bytes that are not UTF-8 raise DecodeError."""
        renderer = MarkdownRenderer(make_source({"bin": b"\xff\xfe\x00\x81"}))
        with pytest.raises(DecodeError) as exc_info:
            await renderer.fetch_and_parse("bin")
        assert exc_info.value.path == "bin"

    @pytest.mark.asyncio
    async def test_byte_order_mark_is_ignored(self, make_source) -> None:
        """A UTF-8 BOM does not leak into the first heading."""
        renderer = MarkdownRenderer(make_source({"bom": "\ufeff# Title\n".encode("utf-8")}))
        document = await renderer.get_document("bom")
        assert document.headings[0].id == "title"
