"""Navigation tree state: folder expansion and the active document."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Sequence

from docsite.exceptions import NavigationLoadError
from docsite.schemas import NavigationNode
from docsite.sources import parse_navigation
from docsite.state import Observable, Unsubscribe

logger = logging.getLogger(__name__)

BREADCRUMB_SEPARATOR = " / "


class ActiveDocumentState(Observable[str]):
    """Route of the document currently being viewed."""

    def __init__(self, route: str = "") -> None:
        super().__init__(route)

    @property
    def current_route(self) -> str:
        return self.get()


@dataclass
class NavigationLeaf:
    """A document entry flattened out of the tree, in navigation order."""

    label: str
    route: str
    breadcrumb: str
    node: NavigationNode


class NavigationTree:
    """Hierarchical menu with independently toggled folders.

    Subscribers registered with ``subscribe`` are called with the root nodes
    after every load, toggle or expansion change.
    """

    def __init__(self, active: ActiveDocumentState | None = None) -> None:
        self.active = active or ActiveDocumentState()
        self._nodes: Observable[list[NavigationNode]] = Observable([])

    @property
    def nodes(self) -> list[NavigationNode]:
        return self._nodes.get()

    def subscribe(self, callback: Callable[[list[NavigationNode]], None]) -> Unsubscribe:
        return self._nodes.subscribe(callback)

    def load(self, nodes: Sequence[NavigationNode]) -> None:
        """Replace the tree, collapsing every folder except those leading to the active route."""
        roots = list(nodes)
        for node in iter_nodes(roots):
            node.expanded = False
        self._warn_duplicate_routes(roots)
        _expand_ancestors(roots, self.active.current_route)
        self._nodes.set(roots)

    def load_items(self, data: Any) -> None:
        """Load a raw navigation description, falling back to an empty tree."""
        try:
            nodes = parse_navigation(data)
        except NavigationLoadError as exc:
            logger.warning("Could not load navigation, using empty tree: %s", exc)
            nodes = []
        self.load(nodes)

    def toggle(self, node: NavigationNode) -> None:
        if not node.is_folder:
            return
        node.expanded = not node.expanded
        self._nodes.notify()

    def is_route_active(self, route: str | None) -> bool:
        if not route:
            return False
        return route == self.active.current_route

    def has_active_child(self, node: NavigationNode) -> bool:
        """Return True if any descendant of ``node`` is the active document."""
        return any(
            self.is_route_active(child.route) or self.has_active_child(child)
            for child in node.children
        )

    def set_active_route(self, route: str) -> None:
        self.active.set(route)
        if _expand_ancestors(self.nodes, route):
            self._nodes.notify()

    def find(self, route: str) -> NavigationNode | None:
        for node in iter_nodes(self.nodes):
            if node.route == route:
                return node
        return None

    def leaves(self) -> list[NavigationLeaf]:
        """Every document node with its breadcrumb, in navigation order."""
        result: list[NavigationLeaf] = []

        def _walk(nodes: list[NavigationNode], breadcrumb: str) -> None:
            for node in nodes:
                crumb = f"{breadcrumb}{BREADCRUMB_SEPARATOR}{node.label}" if breadcrumb else node.label
                if node.route:
                    result.append(
                        NavigationLeaf(label=node.label, route=node.route, breadcrumb=crumb, node=node)
                    )
                _walk(node.children, crumb)

        _walk(self.nodes, "")
        return result

    def _warn_duplicate_routes(self, roots: list[NavigationNode]) -> None:
        seen: set[str] = set()
        for node in iter_nodes(roots):
            if not node.route:
                continue
            if node.route in seen:
                logger.warning("Duplicate navigation route %s, first entry wins", node.route)
            seen.add(node.route)


def iter_nodes(nodes: Sequence[NavigationNode]) -> Iterator[NavigationNode]:
    """Depth-first, document-order walk over ``nodes`` and their descendants."""
    for node in nodes:
        yield node
        yield from iter_nodes(node.children)


def _expand_ancestors(nodes: Sequence[NavigationNode], route: str) -> bool:
    """Expand the folders above the first node whose route is ``route``.

    Returns True if any folder changed from collapsed to expanded.
    """
    if not route:
        return False
    changed = False

    def _walk(items: Sequence[NavigationNode]) -> bool:
        nonlocal changed
        for item in items:
            if item.route == route:
                return True
            if item.children and _walk(item.children):
                if not item.expanded:
                    item.expanded = True
                    changed = True
                return True
        return False

    _walk(nodes)
    return changed
