"""Heading slugs, id assignment and outline extraction."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup
from bs4.element import Tag

from docsite.html_utils import parse_fragment
from docsite.schemas import Heading

_HEADING_TAGS = ["h1", "h2", "h3", "h4"]
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_EMPTY_SLUG = "section"


def slugify(text: str) -> str:
    """Lowercase ``text`` and collapse every non-alphanumeric run into ``-``."""
    slug = _NON_ALNUM_RE.sub("-", text.lower())
    return slug.strip("-")


class HeadingIdAssigner:
    """Hand out document-unique heading ids in document order.

    The first heading with a given slug keeps it, later ones get ``-2``,
    ``-3`` and so on. Ids already present in the HTML are reserved so that
    generated ids never collide with them.
    """

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}
        self._used: set[str] = set()

    def __contains__(self, heading_id: str) -> bool:
        return heading_id in self._used

    def reserve(self, existing_id: str) -> str:
        self._used.add(existing_id)
        return existing_id

    def assign(self, text: str) -> str:
        base = slugify(text) or _EMPTY_SLUG
        count = self._counts.get(base, 0)
        while True:
            count += 1
            candidate = base if count == 1 else f"{base}-{count}"
            if candidate not in self._used:
                break
        self._counts[base] = count
        self._used.add(candidate)
        return candidate


def heading_text(tag: Tag) -> str:
    return re.sub(r"\s+", " ", tag.get_text()).strip()


def assign_heading_ids(soup: BeautifulSoup) -> list[Heading]:
    """Give every level 1-4 heading in ``soup`` an id and return the outline.

    Ids on any other element are reserved first. A heading that already carries
    an ``id`` keeps it the first time that id appears; a repeated id is replaced
    by a generated one. The soup is modified in place.
    """
    tags = soup.find_all(_HEADING_TAGS)
    heading_tags = {id(tag) for tag in tags}
    assigner = HeadingIdAssigner()
    for element in soup.find_all(id=True):
        if id(element) not in heading_tags:
            assigner.reserve(element["id"])

    kept: dict[int, str] = {}
    for tag in tags:
        existing = tag.get("id")
        if existing and existing not in assigner:
            kept[id(tag)] = assigner.reserve(existing)

    headings: list[Heading] = []
    for tag in tags:
        text = heading_text(tag)
        heading_id = kept.get(id(tag)) or assigner.assign(text)
        tag["id"] = heading_id
        headings.append(Heading(id=heading_id, text=text, level=int(tag.name[1])))
    return headings


def extract_headings(html: str) -> list[Heading]:
    """Return the level 1-4 outline of ``html``.

    Uses the same id rule as rendering, so an HTML fragment that was rendered
    by docsite yields exactly the ids already present in it.
    """
    if not html:
        return []
    return assign_heading_ids(parse_fragment(html))
