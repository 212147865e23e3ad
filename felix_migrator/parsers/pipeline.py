"""
Block → HTML orchestration for a single article.

``transform_article_blocks`` is the one entry point: it decodes and renders
every block (concurrently when asked to), joins the fragments in position
order, normalizes the joined document and sanitizes it for Ghost.  Any
:class:`~felix_migrator.utils.errors.ArticleTransformError` propagates
unchanged; no partial HTML is ever returned.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, List, Optional

from felix_migrator.utils.errors import ArticleTransformError
from .block_decoder import ImageLookup, RawBlockRecord, decode_block
from .blocks import render_block
from .cards import GhostImageCard, ImageCardRenderer
from .html_normalizer import DEFAULT_SITE_URL, normalize_html
from .html_sanitizer import sanitize_html

DEFAULT_IMAGE_BASE_URL = "https://felixonline.co.uk/img/"


@dataclass(frozen=True)
class PipelineSettings:
    site_url: str = DEFAULT_SITE_URL
    image_base_url: str = DEFAULT_IMAGE_BASE_URL
    block_workers: int = 4


def render_record(
    record: RawBlockRecord,
    image_lookup: ImageLookup,
    card_renderer: ImageCardRenderer,
    settings: PipelineSettings,
) -> str:
    """Decode and render one record, tagging render failures with its position."""
    block = decode_block(record, image_lookup)
    try:
        return render_block(block, card_renderer=card_renderer, image_base_url=settings.image_base_url)
    except ArticleTransformError as e:
        if e.position is None:
            e.position = record.position
        if e.block_type is None:
            e.block_type = record.type
        raise


def render_fragments(
    records: Iterable[RawBlockRecord],
    image_lookup: ImageLookup,
    *,
    card_renderer: ImageCardRenderer,
    settings: PipelineSettings,
) -> List[str]:
    """
    Render every record and return the fragments in ascending position order.

    Fragments are collected with ``Executor.map`` so their order never
    depends on which block finished first.  The first failing block, in
    position order, is the error that is raised.
    """
    ordered = sorted(records, key=lambda r: r.position)
    if settings.block_workers <= 1 or len(ordered) <= 1:
        return [render_record(r, image_lookup, card_renderer, settings) for r in ordered]

    with ThreadPoolExecutor(max_workers=settings.block_workers) as pool:
        return list(
            pool.map(
                lambda r: render_record(r, image_lookup, card_renderer, settings),
                ordered,
            )
        )


def transform_article_blocks(
    records: Iterable[RawBlockRecord],
    image_lookup: ImageLookup,
    *,
    card_renderer: Optional[ImageCardRenderer] = None,
    settings: Optional[PipelineSettings] = None,
) -> str:
    """
    Transform an article's raw blocks into sanitized Ghost HTML.

    Args:
        records: The article's ``blocks`` rows, in any order.
        image_lookup: Resolves a media id to an :class:`ImageRef`.
        card_renderer: Renderer for image cards; defaults to :class:`GhostImageCard`.
        settings: Site and concurrency settings.

    Returns:
        The sanitized body HTML.

    Raises:
        DecodeError: If a block cannot be decoded.
        RenderError: If a decoded block cannot be rendered.
        NormalizationError: If the joined document cannot be parsed.
    """
    settings = settings or PipelineSettings()
    card_renderer = card_renderer or GhostImageCard()

    fragments = render_fragments(records, image_lookup, card_renderer=card_renderer, settings=settings)
    normalized = normalize_html("\n".join(fragments), site_url=settings.site_url)
    return sanitize_html(normalized)
