import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import json
from datetime import datetime

import pytest
pytest.importorskip("pydantic")

from pydantic import ValidationError

from felix_migrator.migrators.ghost_export import GhostExport
from felix_migrator.models.ghost_post import GhostPost, truncate_excerpt


def make_post(slug, tags, authors):
    post = GhostPost(title=slug.title(), slug=slug)
    post.created_at = datetime(2020, 1, 2, 3, 4, 5)
    for tag in tags:
        post.add_tag(tag)
    for author in authors:
        post.add_author(author)
    post.html = "<p>x</p>"
    return post


NEWS = {"name": "News", "slug": "news"}
ISSUE = {"name": "Issue 1700", "slug": "issue-1700"}
FELIX = {"name": "Felix", "slug": "felix", "bio": "Student Newspaper of Imperial College London"}
ANA = {"name": "Ana", "slug": "ana"}


def test_excerpt_truncation():
    assert truncate_excerpt(None) is None
    assert truncate_excerpt("a" * 300) == "a" * 300
    long = truncate_excerpt("a" * 301)
    assert long == "a" * 299 + "…"
    assert len(long) == 300


def test_excerpt_is_truncated_on_assignment():
    post = GhostPost(title="T", slug="t")
    post.custom_excerpt = "b" * 500
    assert post.custom_excerpt.endswith("…")
    assert len(post.custom_excerpt) == 300


def test_post_requires_title_and_slug():
    with pytest.raises(ValidationError):
        GhostPost(title=None, slug="x")
    with pytest.raises(ValidationError):
        GhostPost(title="x", slug="")


def test_export_deduplicates_tags_and_users():
    export = GhostExport(version="5.0.0")
    export.add_post(make_post("first", [NEWS, ISSUE], [ANA, FELIX]))
    export.add_post(make_post("second", [NEWS], [FELIX]))

    doc = export.to_ghost_json(exported_on=123)
    data = doc["data"]
    assert doc["meta"] == {"exported_on": 123, "version": "5.0.0"}
    assert [t["slug"] for t in data["tags"]] == ["news", "issue-1700"]
    assert [u["slug"] for u in data["users"]] == ["ana", "felix"]
    assert data["users"][1]["email"] == "felix@example.com"
    assert [p["slug"] for p in data["posts"]] == ["first", "second"]
    assert data["posts"][0]["id"] == 1
    assert data["posts"][0]["created_at"] == "2020-01-02T03:04:05"
    assert "tags" not in data["posts"][0]

    assert data["posts_tags"] == [
        {"post_id": 1, "tag_id": 1, "sort_order": 0},
        {"post_id": 1, "tag_id": 2, "sort_order": 1},
        {"post_id": 2, "tag_id": 1, "sort_order": 0},
    ]
    assert data["posts_authors"] == [
        {"post_id": 1, "author_id": 1, "sort_order": 0},
        {"post_id": 1, "author_id": 2, "sort_order": 1},
        {"post_id": 2, "author_id": 2, "sort_order": 0},
    ]


def test_post_without_author_is_rejected():
    export = GhostExport()
    with pytest.raises(ValueError):
        export.add_post(make_post("lonely", [NEWS], []))
    assert len(export) == 0


def test_write(tmp_path):
    export = GhostExport()
    export.add_post(make_post("first", [NEWS], [FELIX]))
    out = export.write(str(tmp_path / "out" / "ghost-export.json"))
    with open(out, encoding="utf-8") as f:
        doc = json.load(f)
    assert doc["data"]["posts"][0]["html"] == "<p>x</p>"
