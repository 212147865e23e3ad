"""
Collection of assembled posts into a Ghost import file.

Ghost imports a single JSON document holding posts, tags and staff users
plus the join tables linking them.  :class:`GhostExport` accumulates
finished :class:`~felix_migrator.models.ghost_post.GhostPost` records and
deduplicates tags and users by slug, assigning sequential ids in the order
they are first seen.
"""

from __future__ import annotations

import json
import os
import time
from typing import Any, Dict, List, Optional

from felix_migrator.models.ghost_post import GhostAuthor, GhostPost, GhostTag


class GhostExport:
    """Accumulates posts and renders the Ghost import document."""

    def __init__(self, *, version: str = "5.0.0") -> None:
        self.version = version
        self.posts: List[GhostPost] = []
        self._tags: Dict[str, GhostTag] = {}
        self._users: Dict[str, GhostAuthor] = {}

    def __len__(self) -> int:
        return len(self.posts)

    def add_post(self, post: GhostPost) -> None:
        if not post.authors:
            raise ValueError(f"Post '{post.slug}' has no authors")
        self.posts.append(post)
        for tag in post.tags:
            self._tags.setdefault(tag.slug, tag)
        for author in post.authors:
            self._users.setdefault(author.slug, author)

    def to_ghost_json(self, exported_on: Optional[int] = None) -> Dict[str, Any]:
        tag_ids = {slug: i for i, slug in enumerate(self._tags, start=1)}
        user_ids = {slug: i for i, slug in enumerate(self._users, start=1)}

        tags = [
            {"id": tag_ids[slug], **tag.model_dump(exclude_none=True)}
            for slug, tag in self._tags.items()
        ]
        users = [
            {"id": user_ids[slug], "email": user.email, **user.model_dump(exclude_none=True)}
            for slug, user in self._users.items()
        ]

        posts: List[Dict[str, Any]] = []
        posts_tags: List[Dict[str, Any]] = []
        posts_authors: List[Dict[str, Any]] = []
        for post_id, post in enumerate(self.posts, start=1):
            posts.append(post.to_ghost_post(post_id))
            for order, tag in enumerate(post.tags):
                posts_tags.append({"post_id": post_id, "tag_id": tag_ids[tag.slug], "sort_order": order})
            for order, author in enumerate(post.authors):
                posts_authors.append({"post_id": post_id, "author_id": user_ids[author.slug], "sort_order": order})

        if exported_on is None:
            exported_on = int(time.time() * 1000)

        return {
            "meta": {"exported_on": exported_on, "version": self.version},
            "data": {
                "posts": posts,
                "tags": tags,
                "users": users,
                "posts_tags": posts_tags,
                "posts_authors": posts_authors,
            },
        }

    def write(self, out_path: str = "ghost-export.json") -> str:
        """Write the import document to ``out_path`` and return the path."""
        os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
        with open(out_path, "w", encoding="utf-8") as f:
            json.dump(self.to_ghost_json(), f, indent=2, ensure_ascii=False)
        return out_path
