"""Rendered document models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Heading(BaseModel):
    """A heading that can be targeted from the table of contents."""

    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    level: int = Field(..., ge=1, le=4)


class RenderedDocument(BaseModel):
    """A fetched and rendered markdown document.

    Attributes:
        route: Navigation route the document was fetched for.
        raw_markdown: Markdown source as fetched.
        html: Sanitized HTML with ids on every level 1-4 heading.
        plain_text: ``html`` with all markup stripped, used for search.
        headings: Level 1-4 headings in document order.
    """

    model_config = ConfigDict(frozen=True)

    route: str
    raw_markdown: str
    html: str
    plain_text: str
    headings: tuple[Heading, ...] = ()
