"""Test setup for docsite."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from docsite.exceptions import DocumentNotFound  # noqa: E402
from docsite.schemas import NavigationNode  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for pytest.

    This allows running integration tests selectively:
        pytest -m integration       # run only integration tests
        pytest -m "not integration" # skip integration tests
    """
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (touch the filesystem end to end)",
    )


class FakeSource:
    """In-memory document source that records every fetch.

    Routes listed in ``gated`` block until ``release`` is called for them.
    """

    def __init__(self, documents: dict[str, bytes | str], gated: set[str] | None = None) -> None:
        self.documents = {
            route: body.encode("utf-8") if isinstance(body, str) else body
            for route, body in documents.items()
        }
        self.calls: list[str] = []
        self._gated = set(gated or ())
        self._gates: dict[str, asyncio.Event] = {}

    def location(self, route: str) -> str:
        return f"memory://{route}.md"

    def release(self, route: str) -> None:
        self._gate(route).set()

    def _gate(self, route: str) -> asyncio.Event:
        if route not in self._gates:
            self._gates[route] = asyncio.Event()
        return self._gates[route]

    async def fetch_bytes(self, route: str) -> bytes:
        self.calls.append(route)
        if route in self._gated:
            await self._gate(route).wait()
        if route not in self.documents:
            raise DocumentNotFound(route, f"HTTP 404: {self.location(route)}", status=404)
        return self.documents[route]


@pytest.fixture
def make_source() -> Callable[..., FakeSource]:
    """Factory for in-memory document sources."""
    return FakeSource


@pytest.fixture
def guides_tree() -> list[NavigationNode]:
    """A small navigation tree with nested folders."""
    return [
        NavigationNode(label="Home", route="index"),
        NavigationNode(
            label="Guides",
            children=[
                NavigationNode(label="Setup", route="guides/setup"),
                NavigationNode(
                    label="Advanced",
                    children=[NavigationNode(label="Tuning", route="guides/advanced/tuning")],
                ),
            ],
        ),
        NavigationNode(
            label="Reference",
            children=[NavigationNode(label="API Index", route="reference/api")],
        ),
    ]
