"""docsite: navigation, rendering, search and table of contents for markdown notes."""

from docsite.config import Settings
from docsite.exceptions import (
    DecodeError,
    DocsiteError,
    DocumentNotFound,
    FetchError,
    IndexingSkip,
    NavigationLoadError,
    ParseError,
)
from docsite.headings import extract_headings, slugify
from docsite.navigation import ActiveDocumentState, NavigationTree
from docsite.renderer import MarkdownRenderer
from docsite.schemas import (
    Heading,
    MatchType,
    NavigationNode,
    RenderedDocument,
    SearchResult,
    TocSpyState,
)
from docsite.search import SearchIndex
from docsite.site import DocSite
from docsite.sources import FileDocumentSource, HttpDocumentSource
from docsite.toc import ScrollViewport, TocTracker
from docsite.viewer import DocumentViewer, resolve_link

__all__ = [
    "ActiveDocumentState",
    "DecodeError",
    "DocSite",
    "DocsiteError",
    "DocumentNotFound",
    "DocumentViewer",
    "FetchError",
    "FileDocumentSource",
    "Heading",
    "HttpDocumentSource",
    "IndexingSkip",
    "MarkdownRenderer",
    "MatchType",
    "NavigationLoadError",
    "NavigationNode",
    "NavigationTree",
    "ParseError",
    "RenderedDocument",
    "ScrollViewport",
    "SearchIndex",
    "SearchResult",
    "Settings",
    "TocSpyState",
    "TocTracker",
    "extract_headings",
    "resolve_link",
    "slugify",
]
