from __future__ import annotations

from html import unescape
import re
from typing import Any, Dict, Optional


def _normalize_label(value: Optional[str]) -> str:
    """Unescape HTML entities and collapse inner whitespace.

    Preserves original casing but trims leading/trailing spaces
    and converts sequences of whitespace to a single space.
    """
    if not value:
        return ""
    text = unescape(value).strip()
    text = re.sub(r"\s+", " ", text)
    return text


def section_tag(name: Optional[str], slug: Optional[str], description: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the primary Ghost tag for an article's Felix section.

    The section slug is taken as-is since it already is the public URL
    segment on felixonline.co.uk; only the label and description are
    cleaned up.
    """
    tag: Dict[str, Any] = {"name": _normalize_label(name), "slug": slug}
    if description:
        tag["description"] = _normalize_label(description)
    return tag


def issue_tag(issue_number: Optional[Any]) -> Optional[Dict[str, Any]]:
    """
    Build the ``Issue N`` tag for a printed issue, or ``None`` when the
    article was never part of one.
    """
    if issue_number is None:
        return None
    if isinstance(issue_number, float) and issue_number.is_integer():
        issue_number = int(issue_number)
    number = str(issue_number).strip()
    if not number:
        return None
    return {"name": f"Issue {number}", "slug": f"issue-{number}"}
