"""HTTP utilities for fetching static assets."""

from __future__ import annotations

from typing import Final

import httpx

from docsite.config import DOCSITE_FETCH_TIMEOUT_S, DOCSITE_USER_AGENT
from docsite.exceptions import DocumentNotFound

_MAX_REDIRECTS: Final[int] = 5


async def fetch_bytes(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    path: str | None = None,
    timeout_s: float = DOCSITE_FETCH_TIMEOUT_S,
    user_agent: str = DOCSITE_USER_AGENT,
) -> bytes:
    """Fetch the raw body at ``url`` in a single attempt.

    Args:
        url: The URL to fetch.
        client: Optional httpx.AsyncClient for connection pooling. If not
            provided, a new client is created for this request.
        path: Name reported in errors. Defaults to ``url``.
        timeout_s: Request timeout in seconds.
        user_agent: User agent header for a newly created client.

    Returns:
        The response body.

    Raises:
        DocumentNotFound: If the request fails or the response status is not 2xx.
    """
    reported = path or url

    async def do_fetch(http_client: httpx.AsyncClient) -> bytes:
        try:
            response = await http_client.get(url)
        except httpx.RequestError as exc:
            raise DocumentNotFound(reported, f"Failed to fetch {url}: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise DocumentNotFound(
                reported,
                f"HTTP {response.status_code}: {url}",
                status=response.status_code,
            )
        return response.content

    if client is not None:
        return await do_fetch(client)

    async with httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_s),
        headers={"User-Agent": user_agent},
        follow_redirects=True,
        max_redirects=_MAX_REDIRECTS,
    ) as new_client:
        return await do_fetch(new_client)
