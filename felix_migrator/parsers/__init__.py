"""
Parsers and converters used by the migration pipeline.

This subpackage turns Felix ``blocks`` rows into Ghost-ready HTML.  The
public entry point is ``transform_article_blocks`` from
:mod:`felix_migrator.parsers.pipeline`.
"""

from .block_decoder import RawBlockRecord, decode_block
from .blocks import Block, BlockType, ImageRef, render_block
from .cards import GhostImageCard, ImageCardPayload
from .html_normalizer import normalize_html
from .html_sanitizer import sanitize_html
from .pipeline import PipelineSettings, transform_article_blocks

__all__ = [
    "Block",
    "BlockType",
    "GhostImageCard",
    "ImageCardPayload",
    "ImageRef",
    "PipelineSettings",
    "RawBlockRecord",
    "decode_block",
    "normalize_html",
    "render_block",
    "sanitize_html",
    "transform_article_blocks",
]
