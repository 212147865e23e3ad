"""
Cleanup of assembled Felix article HTML before sanitization.

The passes run in a fixed order over a single BeautifulSoup tree; each one
expects the document left behind by the previous pass.  Control characters
are stripped from the serialized text at the very end.  Parsed text and
attribute values are cleaned before the passes run so that a second run
finds nothing left to change.
"""

from __future__ import annotations

import re
from typing import Callable, Tuple

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup

from felix_migrator.utils.errors import NormalizationError

DEFAULT_SITE_URL = "https://felixonline.co.uk"

ELLIPSES = ("...", "…", "&hellip;")

# C0 and C1 control characters, including newlines and tabs
_CONTROL_CHARS = re.compile(r"[\x00-\x1F\x7F-\x9F]")

SoupPass = Callable[[BeautifulSoup, str], None]


def _inner_html(el: Tag) -> str:
    # "html" formatter keeps non-breaking spaces as &nbsp; so they survive strip()
    return el.decode_contents(formatter="html").strip()


def remove_hidden_elements(soup: BeautifulSoup, site_url: str) -> None:
    for selector in ('[style*="display:none"]', '[style*="display: none"]'):
        for el in soup.select(selector):
            if not el.decomposed:
                el.decompose()


def remove_nbsp_paragraphs(soup: BeautifulSoup, site_url: str) -> None:
    for el in soup.find_all("p"):
        if not el.decomposed and _inner_html(el) == "&nbsp;":
            el.decompose()


def remove_empty_elements(soup: BeautifulSoup, site_url: str) -> None:
    # innermost first so a figure emptied by this pass is removed as well
    for el in reversed(soup.find_all(["p", "figure"])):
        if el.decomposed:
            continue
        if _inner_html(el) == "":
            el.decompose()


def replace_ellipsis_paragraphs(soup: BeautifulSoup, site_url: str) -> None:
    for el in soup.find_all("p"):
        if el.decomposed:
            continue
        if el.get_text().strip() in ELLIPSES:
            el.replace_with(soup.new_tag("hr"))


def relativize_site_links(soup: BeautifulSoup, site_url: str) -> None:
    if not site_url:
        return
    for el in soup.find_all("a", href=True):
        href = el["href"]
        if isinstance(href, str) and href.startswith(site_url):
            el["href"] = href[len(site_url):] or "/"


NORMALIZATION_PASSES: Tuple[SoupPass, ...] = (
    remove_hidden_elements,
    remove_nbsp_paragraphs,
    remove_empty_elements,
    replace_ellipsis_paragraphs,
    relativize_site_links,
)


def strip_control_characters(html: str) -> str:
    return _CONTROL_CHARS.sub("", html)


def _strip_control_text(soup: BeautifulSoup) -> None:
    # character references such as &#1; only become control characters once parsed
    for text in soup.find_all(string=_CONTROL_CHARS):
        text.replace_with(type(text)(strip_control_characters(str(text))))
    for el in soup.find_all(True):
        for name, value in list(el.attrs.items()):
            if isinstance(value, str):
                el[name] = strip_control_characters(value)
            elif isinstance(value, list):
                el[name] = [strip_control_characters(v) for v in value]


def normalize_html(html: str, *, site_url: str = DEFAULT_SITE_URL) -> str:
    """
    Normalize the joined block fragments of one article.

    :param html: Rendered fragments joined by newlines.
    :param site_url: Canonical site URL stripped from internal links.
    :return: The normalized document.
    :raises NormalizationError: If the markup is rejected by the parser.
    """
    if not html or not html.strip():
        return ""
    try:
        soup = BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as e:
        raise NormalizationError(f"Could not parse article HTML: {e}") from e
    _strip_control_text(soup)

    for soup_pass in NORMALIZATION_PASSES:
        soup_pass(soup, site_url)

    return strip_control_characters(str(soup))
