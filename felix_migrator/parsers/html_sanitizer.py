"""
Allow-list sanitization of normalized article HTML.

Only markup Ghost's importer understands is kept.  Disallowed elements are
stripped but their text stays; script-like elements are dropped together
with their content.  Class names are restricted to Ghost's ``kg-`` card
namespace on every allowed tag.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, List

import bleach
from bs4 import BeautifulSoup

GHOST_ALLOWED_TAGS: FrozenSet[str] = frozenset(
    {
        "b",
        "i",
        "em",
        "strong",
        "a",
        "p",
        "br",
        "ul",
        "ol",
        "li",
        "blockquote",
        "figure",
        "figcaption",
        "img",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "div",
        "hr",
        "iframe",
        "span",
    }
)

GHOST_ALLOWED_ATTRIBUTES: Dict[str, List[str]] = {
    "a": ["href", "title", "rel", "target", "class"],
    "img": ["src", "alt", "title", "class"],
    "iframe": ["width", "height", "src", "title", "frameborder", "allow", "allowfullscreen"],
    "figure": ["class"],
    "div": ["class"],
}

ALLOWED_CLASS_PREFIX = "kg-"

ALLOWED_PROTOCOLS = ["http", "https", "ftp", "mailto", "tel"]

# Elements whose text is never meaningful article content
DROPPED_WITH_CONTENT = ("script", "style", "textarea", "option", "noscript")


def _allow_attribute(tag: str, name: str, value: str) -> bool:
    if name == "class":
        # values were narrowed to kg-* by _filter_classes
        return tag in GHOST_ALLOWED_TAGS
    return name in GHOST_ALLOWED_ATTRIBUTES.get(tag, ())


def _filter_classes(soup: BeautifulSoup) -> None:
    for el in soup.find_all(class_=True):
        classes = el.get("class") or []
        if isinstance(classes, str):
            classes = classes.split()
        kept = [c for c in classes if c.startswith(ALLOWED_CLASS_PREFIX)]
        if kept:
            el["class"] = kept
        else:
            del el["class"]


def sanitize_html(html: str) -> str:
    """
    Reduce ``html`` to the Ghost allow-list.

    :param html: A normalized article document.
    :return: The publishable HTML, trimmed of surrounding whitespace.
    """
    if not html or not html.strip():
        return ""

    soup = BeautifulSoup(html, "html.parser")
    for el in soup.find_all(DROPPED_WITH_CONTENT):
        if not el.decomposed:
            el.decompose()
    _filter_classes(soup)

    cleaned = bleach.clean(
        str(soup),
        tags=GHOST_ALLOWED_TAGS,
        attributes=_allow_attribute,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
        strip_comments=True,
    )
    return cleaned.strip()
