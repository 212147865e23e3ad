"""
Utility helpers used by the migration tool.

This subpackage exposes the article transformation error hierarchy,
structured JSON Lines reporting, Ghost tag builders and the source
database pre-flight check.
"""

from .errors import (
    ERRORS,
    ArticleTransformError,
    DecodeError,
    NormalizationError,
    RenderError,
    report_error,
    report_ok,
)
from .tags import issue_tag, section_tag

__all__ = [
    "ERRORS",
    "ArticleTransformError",
    "DecodeError",
    "NormalizationError",
    "RenderError",
    "report_error",
    "report_ok",
    "issue_tag",
    "section_tag",
]
