"""Document and navigation sources backed by HTTP or the local filesystem."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from docsite.config import DOCSITE_FETCH_TIMEOUT_S, DOCSITE_USER_AGENT, Settings, is_url
from docsite.exceptions import DocumentNotFound, FetchError, NavigationLoadError
from docsite.http_utils import fetch_bytes
from docsite.schemas import NavigationNode

logger = logging.getLogger(__name__)

DOCUMENT_SUFFIX = ".md"


class DocumentSource(Protocol):
    """Anything that can return the raw bytes of ``<route>.md``."""

    def location(self, route: str) -> str: ...

    async def fetch_bytes(self, route: str) -> bytes: ...


def document_location(route: str) -> str:
    """Map a route to its relative, percent-encoded ``.md`` location."""
    segments = [quote(segment, safe="") for segment in route.strip("/").split("/")]
    return "/".join(segments) + DOCUMENT_SUFFIX


class HttpDocumentSource:
    """Fetch documents from ``<base_url>/<route>.md``."""

    def __init__(
        self,
        base_url: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout_s: float = DOCSITE_FETCH_TIMEOUT_S,
        user_agent: str = DOCSITE_USER_AGENT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client
        self._timeout_s = timeout_s
        self._user_agent = user_agent

    def location(self, route: str) -> str:
        return f"{self.base_url}/{document_location(route)}"

    async def fetch_bytes(self, route: str) -> bytes:
        return await fetch_bytes(
            self.location(route),
            client=self._client,
            path=route,
            timeout_s=self._timeout_s,
            user_agent=self._user_agent,
        )


class FileDocumentSource:
    """Read documents from ``<root>/<route>.md`` on disk."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).expanduser().resolve()

    def location(self, route: str) -> str:
        return str(self._path_for(route))

    def _path_for(self, route: str) -> Path:
        segments = [segment for segment in route.strip("/").split("/") if segment]
        if not segments:
            raise DocumentNotFound(route, f"Empty document route: {route!r}")
        path = self.root.joinpath(*segments[:-1], segments[-1] + DOCUMENT_SUFFIX).resolve()
        if not path.is_relative_to(self.root):
            raise DocumentNotFound(route, f"Route escapes the documents folder: {route}")
        return path

    async def fetch_bytes(self, route: str) -> bytes:
        path = self._path_for(route)
        try:
            return await read_bytes_async(path)
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise DocumentNotFound(route, f"File not found: {path}") from exc
        except OSError as exc:
            raise DocumentNotFound(route, f"Failed to read {path}: {exc}") from exc


async def read_bytes_async(path: Path) -> bytes:
    """Read a file asynchronously using a thread pool."""
    return await asyncio.to_thread(path.read_bytes)


def create_document_source(
    settings: Settings, *, client: httpx.AsyncClient | None = None
) -> DocumentSource:
    """Pick an HTTP or filesystem source for ``settings.docs_base``."""
    if settings.docs_base_is_url:
        return HttpDocumentSource(
            settings.docs_base,
            client=client,
            timeout_s=settings.fetch_timeout_s,
            user_agent=settings.user_agent,
        )
    return FileDocumentSource(settings.docs_base)


def parse_navigation(data: Any) -> list[NavigationNode]:
    """Validate a navigation description into nodes.

    Raises:
        NavigationLoadError: If ``data`` is not a list of valid node objects.
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except ValueError as exc:
            raise NavigationLoadError(f"Navigation is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise NavigationLoadError(
            f"Navigation must be a list of items, got {type(data).__name__}"
        )
    try:
        return [NavigationNode.model_validate(item) for item in data]
    except ValidationError as exc:
        raise NavigationLoadError(f"Malformed navigation item: {exc}") from exc


def load_navigation_file(path: Path | str) -> list[NavigationNode]:
    """Load navigation JSON from disk, degrading to an empty tree on failure."""
    path = Path(path)
    try:
        return parse_navigation(path.read_bytes())
    except (OSError, NavigationLoadError) as exc:
        logger.warning("Navigation unavailable at %s, using empty tree: %s", path, exc)
        return []


async def fetch_navigation(
    url: str, *, client: httpx.AsyncClient | None = None
) -> list[NavigationNode]:
    """Fetch navigation JSON over HTTP, degrading to an empty tree on failure."""
    try:
        return parse_navigation(await fetch_bytes(url, client=client))
    except (FetchError, NavigationLoadError) as exc:
        logger.warning("Navigation unavailable at %s, using empty tree: %s", url, exc)
        return []


async def load_navigation(
    location: str, *, client: httpx.AsyncClient | None = None
) -> list[NavigationNode]:
    if is_url(location):
        return await fetch_navigation(location, client=client)
    return await asyncio.to_thread(load_navigation_file, location)
