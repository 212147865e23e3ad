"""
Ghost card renderers.

Only the image card is needed for Felix content.  The markup follows the
``kg-default-cards`` image card so Ghost's importer recognises the figure
and turns it back into a native image card.
"""

from __future__ import annotations

from typing import Optional, Protocol

from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict


class ImageCardPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    src: str
    alt: Optional[str] = None
    caption: Optional[str] = None


class ImageCardRenderer(Protocol):
    def render(self, payload: ImageCardPayload) -> str:
        ...


class GhostImageCard:
    """
    Render an image payload as ``<figure class="kg-card kg-image-card">``.

    The caption is inserted as raw HTML since Felix captions and credits
    may carry inline markup (links, emphasis).  A card without ``src``
    renders to an empty string.
    """

    def render(self, payload: ImageCardPayload) -> str:
        if not payload.src:
            return ""

        soup = BeautifulSoup("", "html.parser")
        figure = soup.new_tag("figure")
        classes = ["kg-card", "kg-image-card"]

        img = soup.new_tag("img")
        img["src"] = payload.src
        img["class"] = "kg-image"
        img["alt"] = payload.alt or ""
        img["loading"] = "lazy"
        figure.append(img)

        if payload.caption:
            figcaption = soup.new_tag("figcaption")
            fragment = BeautifulSoup(payload.caption, "html.parser")
            for node in list(fragment.contents):
                figcaption.append(node.extract())
            figure.append(figcaption)
            classes.append("kg-card-hascaption")

        figure["class"] = " ".join(classes)
        return str(figure)
