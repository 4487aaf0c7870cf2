"""Custom exceptions for docsite."""

from __future__ import annotations


class DocsiteError(Exception):
    """Base exception for docsite operations."""


class FetchError(DocsiteError):
    """Error during content fetching."""


class DocumentNotFound(FetchError):
    """Document fetch returned a non-success status or the file is missing."""

    def __init__(self, path: str, message: str | None = None, *, status: int | None = None) -> None:
        self.path = path
        self.status = status
        super().__init__(message or f"Document not found: {path}")


class ParseError(DocsiteError):
    """Error during content parsing."""


class DecodeError(ParseError):
    """Fetched content could not be decoded as text."""

    def __init__(self, path: str, message: str | None = None) -> None:
        self.path = path
        super().__init__(message or f"Document is not valid UTF-8 text: {path}")


class NavigationLoadError(DocsiteError):
    """Navigation tree description is missing or malformed."""


class IndexingSkip(DocsiteError):
    """A single document was left out of the search index."""

    def __init__(self, route: str, reason: Exception) -> None:
        self.route = route
        self.reason = reason
        super().__init__(f"Skipped indexing {route}: {reason}")
