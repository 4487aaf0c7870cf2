"""Shared HTML utilities: fragment parsing, sanitizing and text extraction."""

from __future__ import annotations

import re

try:
    from bs4 import BeautifulSoup
    from bs4.element import Tag
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML parsing (pip install beautifulsoup4)."
    ) from exc


# Elements that execute code, load foreign documents or rewrite the page.
_UNSAFE_TAGS = [
    "script",
    "style",
    "noscript",
    "template",
    "iframe",
    "frame",
    "frameset",
    "object",
    "embed",
    "applet",
    "base",
    "link",
    "meta",
]
_URL_ATTRS = {"href", "src", "action", "formaction", "xlink:href", "background", "poster", "cite"}
_UNSAFE_SCHEMES = ("javascript:", "vbscript:", "data:")
_SAFE_DATA_PREFIX = "data:image/"
_SCHEME_NOISE_RE = re.compile(r"[\s\x00-\x1f]+")


def parse_fragment(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


def fragment_root(soup: BeautifulSoup) -> Tag:
    """Return the element holding the fragment's top-level nodes."""
    if soup.body:
        return soup.body
    return soup


def serialize_fragment(soup: BeautifulSoup) -> str:
    root = fragment_root(soup)
    return "".join(str(child) for child in root.contents)


def sanitize_soup(soup: BeautifulSoup) -> None:
    """Strip script-executing constructs from ``soup`` in place."""
    for tag in soup.find_all(_UNSAFE_TAGS):
        tag.decompose()

    for tag in soup.find_all(True):
        for attr in list(tag.attrs):
            name = attr.lower()
            if name.startswith("on") or name == "srcdoc":
                del tag[attr]
            elif name in _URL_ATTRS and _is_unsafe_url(tag.get(attr)):
                del tag[attr]


def _is_unsafe_url(value: object) -> bool:
    if not isinstance(value, str):
        return False
    compact = _SCHEME_NOISE_RE.sub("", value).lower()
    if compact.startswith(_SAFE_DATA_PREFIX):
        return False
    return compact.startswith(_UNSAFE_SCHEMES)


def sanitize_html(html: str) -> str:
    """Return ``html`` with scripts, event handlers and script URLs removed."""
    soup = parse_fragment(html)
    sanitize_soup(soup)
    return serialize_fragment(soup)


def soup_to_text(soup: BeautifulSoup) -> str:
    text = fragment_root(soup).get_text()
    lines = (re.sub(r"[ \t\r\f\v]+", " ", line).strip() for line in text.splitlines())
    return "\n".join(line for line in lines if line)


def html_to_text(html: str) -> str:
    """Strip all tags from ``html``, keeping one line per text block."""
    return soup_to_text(parse_fragment(html))
