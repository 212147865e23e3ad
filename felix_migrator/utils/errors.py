"""
Transformation errors and structured reporting for the Felix → Ghost export.

The exception hierarchy rooted at :class:`ArticleTransformError` covers
everything that can abort a single article while its blocks are being
turned into HTML.  None of these are retried or downgraded: the article is
left out of the export and the failure is recorded.

Reporting mirrors the two JSON Lines logs kept for every run:

``report_error``
    Record an article that could not be exported.  An optional exception
    is serialized alongside its position/type context when available.

``report_ok``
    Record a successfully assembled article.  Additional key/value
    information can be attached via the ``extra`` parameter.

The ``ERRORS`` dictionary maps event codes to human readable messages.
Codes not present in the dictionary fall back to the code itself.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional


class ArticleTransformError(Exception):
    """Base class for failures that abort one article's transformation."""

    kind = "transform"

    def __init__(
        self,
        message: str,
        *,
        position: Optional[int] = None,
        block_type: Optional[str] = None,
        article_id: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.position = position
        self.block_type = block_type
        self.article_id = article_id

    def __str__(self) -> str:
        context = []
        if self.article_id is not None:
            context.append(f"article={self.article_id}")
        if self.position is not None:
            context.append(f"position={self.position}")
        if self.block_type is not None:
            context.append(f"type={self.block_type}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class DecodeError(ArticleTransformError):
    """Unparseable payload, unsupported type tag or unresolvable image."""

    kind = "decode"


class RenderError(ArticleTransformError):
    """A block's fields cannot be formatted, e.g. a non-numeric star count."""

    kind = "render"


class NormalizationError(ArticleTransformError):
    """The assembled document was rejected by the HTML parser."""

    kind = "normalization"


# Mapping of event codes used throughout the export to descriptive messages.
ERRORS: Dict[str, str] = {
    "BLOCK_DECODE": "Failed to decode article block",
    "BLOCK_RENDER": "Failed to render article block",
    "HTML_NORMALIZE": "Failed to normalize article HTML",
    "SOURCE_QUERY": "Failed to read article from the source database",
    "INVALID_POST": "Article metadata rejected by the Ghost post model",
    "UNEXPECTED": "Unexpected error while assembling article",
    "POST_CREATED": "Post assembled successfully",
}

# Error kind -> report code
ERROR_CODES: Dict[str, str] = {
    DecodeError.kind: "BLOCK_DECODE",
    RenderError.kind: "BLOCK_RENDER",
    NormalizationError.kind: "HTML_NORMALIZE",
}

_REPORT_DIR = os.path.join("reports", "migration")
_ERROR_LOG = os.path.join(_REPORT_DIR, "errors.jsonl")
_OK_LOG = os.path.join(_REPORT_DIR, "success.jsonl")


def _write_jsonl(path: str, data: Dict[str, Any]) -> None:
    """Append ``data`` as a JSON object followed by a newline to ``path``."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, default=str)
        f.write("\n")


def report_error(
    code: str,
    article: Dict[str, Any],
    exc: Optional[BaseException] = None,
    *,
    path: str = _ERROR_LOG,
) -> Dict[str, Any]:
    """Log an error event for ``article``.

    Parameters
    ----------
    code:
        A key identifying the type of error.  If ``code`` is present in
        :data:`ERRORS` its value will be used as the message.
    article:
        The source article row associated with the error.  Only the ``id``,
        ``slug`` and ``title`` keys are referenced if present.
    exc:
        Optional exception instance that triggered the error.  Transform
        errors also contribute their ``kind``, ``position`` and
        ``block_type``.
    path:
        JSON Lines file the entry is appended to.

    Returns
    -------
    dict
        The entry that was written.
    """
    message = ERRORS.get(code, code)
    entry: Dict[str, Any] = {
        "code": code,
        "message": message,
        "article_id": article.get("id"),
        "slug": article.get("slug"),
        "title": article.get("title"),
    }
    if exc is not None:
        entry["error"] = str(exc)
    if isinstance(exc, ArticleTransformError):
        entry["kind"] = exc.kind
        entry["position"] = exc.position
        entry["block_type"] = exc.block_type
    _write_jsonl(path, entry)
    return entry


def report_ok(
    code: str,
    article: Dict[str, Any],
    extra: Optional[Dict[str, Any]] = None,
    *,
    path: str = _OK_LOG,
) -> Dict[str, Any]:
    """Log a successful event for ``article``.

    Parameters
    ----------
    code:
        A key identifying the type of event.
    article:
        The source article row associated with the event.
    extra:
        Optional dictionary of additional fields to merge into the log entry.
    path:
        JSON Lines file the entry is appended to.
    """
    message = ERRORS.get(code, code)
    entry: Dict[str, Any] = {
        "code": code,
        "message": message,
        "article_id": article.get("id"),
        "slug": article.get("slug"),
        "title": article.get("title"),
    }
    if extra:
        entry.update(extra)
    _write_jsonl(path, entry)
    return entry
