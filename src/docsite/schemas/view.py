"""Document view and table of contents state models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from docsite.schemas.documents import Heading


class TocSpyState(BaseModel):
    """Table of contents outline and the heading currently being read."""

    items: list[Heading] = Field(default_factory=list)
    active_id: str = ""


class ViewState(BaseModel):
    """What the document view should currently display."""

    route: str = ""
    loading: bool = False
    html: str = ""
    error: bool = False
    error_detail: str = ""


class LinkTarget(BaseModel):
    """Classified destination of a link clicked inside a document."""

    kind: Literal["external", "anchor", "internal"]
    target: str
