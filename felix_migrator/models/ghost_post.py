from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

EXCERPT_LIMIT = 300


def truncate_excerpt(value: Optional[str]) -> Optional[str]:
    """Ghost rejects custom excerpts over 300 characters."""
    if value is None:
        return None
    if len(value) > EXCERPT_LIMIT:
        return value[: EXCERPT_LIMIT - 1] + "…"
    return value


class GhostTag(BaseModel):
    model_config = ConfigDict(extra="allow", str_strip_whitespace=True)

    name: str
    slug: str
    description: Optional[str] = None


class GhostAuthor(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    slug: str
    bio: Optional[str] = None

    @property
    def email(self) -> str:
        # Ghost requires an email per staff user; Felix writers have none.
        return f"{self.slug}@example.com"


class GhostPost(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
    )

    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    visibility: Literal["public", "members", "paid"] = "public"
    status: Literal["published", "draft"] = "published"
    type: Literal["post", "page"] = "post"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    published_at: Optional[datetime] = None
    custom_excerpt: Optional[str] = None
    tags: list[GhostTag] = Field(default_factory=list)
    authors: list[GhostAuthor] = Field(default_factory=list)
    feature_image: Optional[str] = None
    feature_image_alt: Optional[str] = None
    feature_image_caption: Optional[str] = None
    html: Optional[str] = None

    @field_validator("custom_excerpt", mode="before")
    @classmethod
    def _truncate_excerpt(cls, v: Optional[str]):
        return truncate_excerpt(v)

    def add_tag(self, tag: dict[str, Any]) -> None:
        self.tags = [*self.tags, GhostTag(**tag)]

    def add_author(self, author: dict[str, Any]) -> None:
        self.authors = [*self.authors, GhostAuthor(**author)]

    def to_ghost_post(self, post_id: int) -> dict[str, Any]:
        """Row for ``data.posts`` of a Ghost import file."""
        body = self.model_dump(mode="json", exclude={"tags", "authors"}, exclude_none=True)
        body["id"] = post_id
        return body
