"""Navigation tree models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class NavigationNode(BaseModel):
    """A folder or document entry in the navigation tree.

    A node with children is a folder; a node with a route is a document.
    When both are present the node renders as a folder but its route still
    names a document.
    """

    label: str
    route: str | None = None
    icon: str | None = None
    children: list["NavigationNode"] = Field(default_factory=list)
    expanded: bool = False

    @property
    def is_folder(self) -> bool:
        return bool(self.children)

    @property
    def is_leaf(self) -> bool:
        return self.route is not None
