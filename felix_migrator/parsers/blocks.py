"""
Felix article blocks and their HTML rendering rules.

A Felix article body is an ordered list of typed blocks.  Each block kind
is a pydantic model carrying a ``kind`` discriminator, and :data:`Block`
is the closed union of all of them.  :func:`render_block` is the single
place that knows how every kind turns into an HTML fragment.

Rendering is deliberately permissive: a missing optional field is left
out, it never produces a placeholder.  Review headings and the
author/director lines are always emitted and render an empty element when
the value is missing.  Field values are interpolated as HTML, they come
from the CMS editor and are cleaned by the sanitizer afterwards.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from felix_migrator.utils.errors import RenderError
from .cards import ImageCardPayload, ImageCardRenderer

STAR = "★"


class BlockType(str, Enum):
    TEXT = "text"
    REVIEW = "review"
    SIDEBAR = "sidebar"
    QUOTATION = "quotation"
    IMAGE = "image"
    BOOK_REVIEW = "book-review"
    FILM_REVIEW = "film-review"


class ImageRef(BaseModel):
    """A row of the Felix ``medias`` table."""

    model_config = ConfigDict(frozen=True)

    uuid: str
    width: Optional[int] = None
    height: Optional[int] = None
    filename: Optional[str] = None
    alt_text: Optional[str] = None
    credit: Optional[str] = None
    caption: Optional[str] = None

    def composed_caption(self) -> Optional[str]:
        if self.caption is not None and self.credit is not None:
            return f"{self.caption} / Photo: {self.credit}"
        if self.caption is not None:
            return self.caption
        if self.credit is not None:
            return f"Credit: {self.credit}"
        return None


class _BlockBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)


class TextBlock(_BlockBase):
    kind: Literal["text"] = "text"
    html: Optional[str] = None


class QuotationBlock(_BlockBase):
    kind: Literal["quotation"] = "quotation"
    html: Optional[str] = None


class SidebarBlock(_BlockBase):
    kind: Literal["sidebar"] = "sidebar"
    html: Optional[str] = None
    title: Optional[str] = None


# Star counts are kept as stored; non-numeric values surface at render time.
Stars = Optional[Union[int, float, str]]


class ReviewBlock(_BlockBase):
    kind: Literal["review"] = "review"
    title: Optional[str] = None
    what: Optional[str] = None
    when: Optional[str] = None
    where: Optional[str] = None
    cost: Optional[str] = None
    stars: Stars = None


class BookReviewBlock(_BlockBase):
    kind: Literal["book-review"] = "book-review"
    stars: Stars = None
    title: Optional[str] = None
    author: Optional[str] = None


class FilmReviewBlock(_BlockBase):
    kind: Literal["film-review"] = "film-review"
    stars: Stars = None
    year: Optional[str] = None
    title: Optional[str] = None
    director: Optional[str] = None
    starring: Optional[str] = None


class ImageBlock(_BlockBase):
    kind: Literal["image"] = "image"
    image: Optional[ImageRef] = None
    float_: Optional[str] = Field(None, alias="float")
    width: Optional[Union[int, float, str]] = None


Block = Annotated[
    Union[
        TextBlock,
        QuotationBlock,
        SidebarBlock,
        ReviewBlock,
        BookReviewBlock,
        FilmReviewBlock,
        ImageBlock,
    ],
    Field(discriminator="kind"),
]


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def render_stars(stars: Any) -> str:
    """Return one star glyph per rating point; no rating renders nothing."""
    if stars is None or stars == "":
        return ""
    if isinstance(stars, bool):
        raise RenderError(f"Invalid star rating {stars!r}")
    try:
        count = int(float(stars)) if isinstance(stars, str) else int(stars)
    except (TypeError, ValueError, OverflowError) as e:
        raise RenderError(f"Invalid star rating {stars!r}") from e
    if count < 0:
        raise RenderError(f"Invalid star rating {stars!r}")
    try:
        return STAR * count
    except OverflowError as e:
        raise RenderError(f"Invalid star rating {stars!r}") from e


def _review_header(title: Optional[str], stars: Any) -> str:
    return (
        '<section class="review">\n'
        f"    <h2>{_text(title)}</h2>\n"
        f'    <div class="stars">{render_stars(stars)}</div>\n'
    )


def _definitions(entries: List[Tuple[str, Any]]) -> str:
    return "".join(f"        <dt>{label}</dt>\n        <dd>{_text(value)}</dd>\n" for label, value in entries)


def render_review(block: ReviewBlock) -> str:
    details = [
        ("What", block.what),
        ("Where", block.where),
        ("When", block.when),
        ("Cost", block.cost),
    ]
    items = "\n".join(f"        <li>{label}: {value}</li>" for label, value in details if value is not None)
    return _review_header(block.title, block.stars) + f"    <ul>\n{items}\n    </ul>\n</section>"


def render_book_review(block: BookReviewBlock) -> str:
    return (
        _review_header(block.title, block.stars)
        + "    <dl>\n"
        + _definitions([("Author", block.author)])
        + "    </dl>\n</section>"
    )


def render_film_review(block: FilmReviewBlock) -> str:
    entries: List[Tuple[str, Any]] = [("Director", block.director)]
    if block.year is not None:
        entries.append(("Year", block.year))
    if block.starring is not None:
        entries.append(("Starring", block.starring))
    return _review_header(block.title, block.stars) + "    <dl>\n" + _definitions(entries) + "    </dl>\n</section>"


def render_sidebar(block: SidebarBlock) -> str:
    heading = f"    <h2>{block.title}</h2>\n" if block.title is not None else ""
    return f'<section class="sidebar">\n{heading}    {_text(block.html)}\n</section>'


def render_image(block: ImageBlock, card_renderer: ImageCardRenderer, image_base_url: str) -> str:
    if block.image is None:
        return ""
    # TODO: map block.float_/block.width onto Ghost's kg-width-wide/full card widths.
    payload = ImageCardPayload(
        src=f"{image_base_url}{block.image.uuid}",
        alt=block.image.alt_text,
        caption=block.image.composed_caption(),
    )
    return card_renderer.render(payload)


def render_block(block: Block, *, card_renderer: ImageCardRenderer, image_base_url: str) -> str:
    """
    Render ``block`` to its HTML fragment.

    :param block: Any member of the :data:`Block` union.
    :param card_renderer: Renderer used for image cards.
    :param image_base_url: Prefix joined with an image uuid to form its URL.
    :raises RenderError: If the block's fields cannot be formatted.
    """
    if isinstance(block, TextBlock):
        return _text(block.html)
    if isinstance(block, QuotationBlock):
        return f"<blockquote>{_text(block.html)}</blockquote>"
    if isinstance(block, SidebarBlock):
        return render_sidebar(block)
    if isinstance(block, ReviewBlock):
        return render_review(block)
    if isinstance(block, BookReviewBlock):
        return render_book_review(block)
    if isinstance(block, FilmReviewBlock):
        return render_film_review(block)
    if isinstance(block, ImageBlock):
        return render_image(block, card_renderer, image_base_url)
    raise RenderError(f"No renderer for block {type(block).__name__}")
