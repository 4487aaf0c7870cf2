"""Tests for the document view controller."""

from __future__ import annotations

import asyncio

import pytest

from docsite.navigation import NavigationTree
from docsite.renderer import MarkdownRenderer
from docsite.schemas import NavigationNode
from docsite.toc import ScrollViewport, TocTracker
from docsite.viewer import DocumentViewer, normalize_route, resolve_link


def _viewer(source, viewport=None) -> DocumentViewer:
    tree = NavigationTree()
    tree.load(
        [
            NavigationNode(
                label="Guides",
                children=[
                    NavigationNode(label="Setup", route="guides/setup"),
                    NavigationNode(label="Usage", route="guides/usage"),
                ],
            )
        ]
    )
    return DocumentViewer(tree, MarkdownRenderer(source), TocTracker(), viewport=viewport)


class TestNormalizeRoute:
    """Tests for normalize_route function."""

    def test_strips_slash_query_and_fragment(self) -> None:
        assert normalize_route("/guides/setup?x=1#install") == "guides/setup"

    def test_strips_markdown_suffix_and_decodes(self) -> None:
        assert normalize_route("my%20notes/a.md") == "my notes/a"


class TestResolveLink:
    """Tests for resolve_link function."""

    def test_external(self) -> None:
        target = resolve_link("https://example.com/x")
        assert target.kind == "external"
        assert target.target == "https://example.com/x"

    def test_mailto_is_external(self) -> None:
        assert resolve_link("mailto:me@example.com").kind == "external"

    def test_anchor(self) -> None:
        target = resolve_link("#overview-2")
        assert (target.kind, target.target) == ("anchor", "overview-2")

    def test_internal(self) -> None:
        target = resolve_link("/guides/usage.md#top")
        assert (target.kind, target.target) == ("internal", "guides/usage")

    def test_empty(self) -> None:
        assert resolve_link("") is None
        assert resolve_link(None) is None


class TestDocumentViewer:
    """Tests for DocumentViewer.open."""

    @pytest.mark.asyncio
    async def test_publishes_html_and_outline(self, make_source) -> None:
        viewer = _viewer(make_source({"guides/setup": "# Setup\n\n## Install\n"}))

        state = await viewer.open("/guides/setup")

        assert state.route == "guides/setup"
        assert not state.loading
        assert '<h2 id="install">' in state.html
        assert [h.id for h in viewer.toc.items] == ["setup", "install"]
        assert viewer.tree.nodes[0].expanded is True

    @pytest.mark.asyncio
    async def test_route_updates_before_render(self, make_source) -> None:
        """Navigation state changes synchronously; rendering follows."""
        source = make_source({"guides/setup": "# Setup\n"}, gated={"guides/setup"})
        viewer = _viewer(source)

        task = asyncio.create_task(viewer.open("guides/setup"))
        await asyncio.sleep(0)

        assert viewer.tree.active.current_route == "guides/setup"
        assert viewer.state.loading is True

        source.release("guides/setup")
        state = await task
        assert state.loading is False

    @pytest.mark.asyncio
    async def test_stale_render_is_dropped(self, make_source) -> None:
        """A slow document never replaces the one the user moved on to."""
        source = make_source(
            {"guides/setup": "# Setup\n", "guides/usage": "# Usage\n"},
            gated={"guides/setup"},
        )
        viewer = _viewer(source)

        slow = asyncio.create_task(viewer.open("guides/setup"))
        await asyncio.sleep(0)
        await viewer.open("guides/usage")
        source.release("guides/setup")
        await slow

        assert viewer.state.route == "guides/usage"
        assert 'id="usage"' in viewer.state.html
        assert [h.id for h in viewer.toc.items] == ["usage"]

    @pytest.mark.asyncio
    async def test_stale_error_is_dropped(self, make_source) -> None:
        """A late failure for an abandoned route leaves the current document shown."""
        source = make_source({"guides/setup": "# Setup\n"}, gated={"guides/missing"})
        viewer = _viewer(source)

        slow = asyncio.create_task(viewer.open("guides/missing"))
        await asyncio.sleep(0)
        await viewer.open("guides/setup")
        source.release("guides/missing")
        state = await slow

        assert state.route == "guides/setup"
        assert state.error is False
        assert 'id="setup"' in state.html
        assert [h.id for h in viewer.toc.items] == ["setup"]

    @pytest.mark.asyncio
    async def test_missing_document_shows_error(self, make_source) -> None:
        viewer = _viewer(make_source({}))

        state = await viewer.open("guides/missing")

        assert state.error is True
        assert state.html == ""
        assert "HTTP 404" in state.error_detail
        assert viewer.toc.items == []

    @pytest.mark.asyncio
    async def test_scroll_subscription_follows_document(self, make_source) -> None:
        """One listener while a document is open, none after close."""
        viewport = ScrollViewport({"setup": 0.0, "usage": 0.0})
        viewer = _viewer(
            make_source({"guides/setup": "# Setup\n", "guides/usage": "# Usage\n"}),
            viewport=viewport,
        )

        await viewer.open("guides/setup")
        assert viewport.listener_count == 1
        await viewer.open("guides/usage")
        assert viewport.listener_count == 1

        viewer.close()
        assert viewport.listener_count == 0
        assert viewer.state.route == ""

    @pytest.mark.asyncio
    async def test_follow_anchor_scrolls_toc(self, make_source) -> None:
        viewport = ScrollViewport({"setup": 0.0, "install": 400.0})
        viewer = _viewer(make_source({"guides/setup": "# Setup\n\n## Install\n"}), viewport=viewport)
        await viewer.open("guides/setup")

        target = viewer.follow_link("#install")

        assert target.kind == "anchor"
        assert viewer.toc.active_id == "install"
        assert viewport.scroll_y == 320.0
