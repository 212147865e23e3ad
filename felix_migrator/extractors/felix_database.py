"""
Read access to the Felix CMS tables held in a DuckDB database.

The tables are loaded from a dump of the Felix MySQL schema by
``scripts/initialize_database.py``.  Every query opens its own cursor, which
DuckDB hands out as an independent connection to the same database, so one
:class:`FelixDatabase` can be shared by all article workers.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import duckdb

from felix_migrator.parsers.block_decoder import RawBlockRecord
from felix_migrator.parsers.blocks import ImageRef

ARTICLES_QUERY = """
    SELECT articles.id,
           sections.title              AS section_name,
           sections.description        AS section_description,
           section_slugs.slug          AS section_slug,
           issues.issue,
           articles.updated_at,
           articles.created_at,
           articles.publish_start_date AS published_at,
           articles.headline           AS title,
           articles.lede               AS custom_excerpt,
           article_slugs.slug          AS slug
    FROM articles
             LEFT JOIN article_slugs ON articles.id = article_slugs.article_id
             LEFT JOIN issues ON articles.issue_id = issues.id
             LEFT JOIN sections ON articles.section_id = sections.id
             LEFT JOIN section_slugs ON sections.id = section_slugs.section_id
    WHERE articles.deleted_at IS NULL
      AND articles.published = 1
      AND article_slugs.deleted_at IS NULL
      AND article_slugs.active = 1
      AND sections.deleted_at IS NULL
      AND sections.published = 1
      AND section_slugs.deleted_at IS NULL
      AND section_slugs.active = 1
    ORDER BY articles.id
"""

AUTHORS_QUERY = """
    SELECT writers.name,
           CONCAT_WS(' - ', writers.role, writers.bio) AS bio,
           writer_slugs.slug
    FROM articles
             LEFT JOIN article_writer ON articles.id = article_writer.article_id
             LEFT JOIN writers ON article_writer.writer_id = writers.id
             LEFT JOIN writer_slugs ON writers.id = writer_slugs.writer_id
    WHERE articles.id = ?
      AND writers.deleted_at IS NULL
      AND writers."current" = 1
      AND writer_slugs.deleted_at IS NULL
      AND writer_slugs.active = 1
    ORDER BY article_writer."position"
"""

IMAGE_QUERY = """
    SELECT uuid, width, height, filename, alt_text, credit, caption
    FROM medias
    WHERE id = ?
      AND deleted_at IS NULL
"""

FEATURE_IMAGE_QUERY = """
    SELECT media_id
    FROM mediables
    WHERE deleted_at IS NULL
      AND mediable_id = ?
      AND mediable_type = 'articles'
"""

BLOCKS_QUERY = """
    SELECT blocks."position",
           blocks."type",
           blocks.content,
           mediables.media_id
    FROM blocks
             LEFT JOIN mediables ON blocks."type" = 'image' AND blocks.id = mediables.mediable_id
    WHERE blocks.blockable_id = ?
      AND blocks.blockable_type = 'articles'
    ORDER BY blocks."position"
"""


class FelixDatabase:
    """Queries the Felix source tables.  Safe to share between threads."""

    def __init__(self, con: duckdb.DuckDBPyConnection) -> None:
        self.con = con

    @classmethod
    def open(cls, path: str, *, read_only: bool = True) -> "FelixDatabase":
        return cls(duckdb.connect(database=path, read_only=read_only))

    def close(self) -> None:
        self.con.close()

    def _fetch(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        cur = self.con.cursor()
        try:
            cur.execute(sql, list(params) if params else None)
            columns = [d[0] for d in cur.description]
            return [dict(zip(columns, row)) for row in cur.fetchall()]
        finally:
            cur.close()

    def list_articles(self) -> List[Dict[str, Any]]:
        return self._fetch(ARTICLES_QUERY)

    def get_article_authors(self, article_id: int) -> List[Dict[str, Any]]:
        """Current writers of ``article_id`` in byline order; may be empty."""
        rows = self._fetch(AUTHORS_QUERY, [article_id])
        return [{"name": row["name"], "slug": row["slug"], "bio": row["bio"] or None} for row in rows]

    def get_image(self, media_id: int) -> Optional[ImageRef]:
        rows = self._fetch(IMAGE_QUERY, [media_id])
        if not rows:
            return None
        row = rows[0]
        # uuid may come back as a UUID value depending on the column type
        return ImageRef(**{**row, "uuid": str(row["uuid"])})

    def get_feature_image(self, article_id: int) -> Optional[ImageRef]:
        """
        Resolve the article's feature image.

        A ``mediables`` row pointing at a deleted or missing media is an
        error, as it would be for an inline image.
        """
        rows = self._fetch(FEATURE_IMAGE_QUERY, [article_id])
        if not rows:
            return None
        media_id = rows[0]["media_id"]
        image = self.get_image(media_id)
        if image is None:
            raise LookupError(f"Image with ID {media_id} not found.")
        return image

    def get_article_blocks(self, article_id: int) -> List[RawBlockRecord]:
        rows = self._fetch(BLOCKS_QUERY, [article_id])
        return [RawBlockRecord(**row) for row in rows]
