"""
High-level orchestration of the Felix → Ghost migration.

This module defines a :class:`FelixMigrationTool` class that ties together
the source database, the block pipeline and the Ghost export into a
complete run.  Each published Felix article is assembled into a
:class:`~felix_migrator.models.ghost_post.GhostPost` on a worker thread;
finished posts are collected into a single Ghost import file.

Configuration is supplied via a JSON file path or directly as a
dictionary.  The ``source`` section names the DuckDB database, ``ghost``
holds the public site and image URLs and ``migration`` the run settings
(output path, concurrency, limit).
"""

from __future__ import annotations

import json
import logging
import os
import sys
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import duckdb
from pydantic import ValidationError

from felix_migrator.extractors.felix_database import FelixDatabase
from felix_migrator.migrators.ghost_export import GhostExport
from felix_migrator.models.ghost_post import GhostPost
from felix_migrator.parsers.cards import GhostImageCard, ImageCardRenderer
from felix_migrator.parsers.pipeline import PipelineSettings, transform_article_blocks
from felix_migrator.utils.errors import ERROR_CODES, ArticleTransformError, report_error, report_ok
from felix_migrator.utils.tags import issue_tag, section_tag

LOGGER_NAME = "felix_migrator"

DEFAULT_AUTHOR: Dict[str, str] = {
    "name": "Felix",
    "slug": "felix",
    "bio": "Student Newspaper of Imperial College London",
}


@dataclass
class ArticleFailure:
    article_id: Optional[int]
    slug: Optional[str]
    code: str
    error: str
    position: Optional[int] = None
    block_type: Optional[str] = None


@dataclass
class MigrationResult:
    export: GhostExport
    failures: List[ArticleFailure] = field(default_factory=list)


class FelixMigrationTool:
    """
    Encapsulates the state and behaviour required to export Felix articles
    to Ghost.  The tool reads configuration, queries the source database,
    assembles one post per article and records successes and failures
    using the :mod:`felix_migrator.utils.errors` module.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        *,
        config_file: Optional[str] = None,
        source: Optional[FelixDatabase] = None,
        card_renderer: Optional[ImageCardRenderer] = None,
    ) -> None:
        if config_file and os.path.exists(config_file):
            with open(config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
        elif config is None:
            config = {}

        # Ensure essential keys exist to prevent KeyErrors
        config.setdefault("source", {})
        config["source"].setdefault("database", os.getenv("FELIX_DUCKDB_PATH", "data/felix.duckdb"))

        config.setdefault("ghost", {})
        config["ghost"].setdefault("site_url", "https://felixonline.co.uk")
        config["ghost"].setdefault("image_base_url", "https://felixonline.co.uk/img/")
        config["ghost"].setdefault("version", "5.0.0")

        config.setdefault("migration", {})
        config["migration"].setdefault("output", "ghost-export.json")
        config["migration"].setdefault("max_workers", 8)
        config["migration"].setdefault("block_workers", 4)
        config["migration"].setdefault("limit", None)
        config["migration"].setdefault("report_dir", os.path.join("reports", "migration"))
        config["migration"].setdefault("log_level", "DEBUG")

        config.setdefault("default_author", dict(DEFAULT_AUTHOR))

        self.config = config
        self.settings = PipelineSettings(
            site_url=config["ghost"]["site_url"],
            image_base_url=config["ghost"]["image_base_url"],
            block_workers=int(config["migration"]["block_workers"]),
        )
        self.card_renderer = card_renderer or GhostImageCard()
        self._source = source
        self.logger = self._configure_logger()

    def _configure_logger(self) -> logging.Logger:
        logger = logging.getLogger(LOGGER_NAME)
        logger.setLevel(self.config["migration"]["log_level"])
        if not logger.handlers:
            formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
            stream = logging.StreamHandler(sys.stdout)
            stream.setFormatter(formatter)
            logger.addHandler(stream)

            report_dir = self.config["migration"]["report_dir"]
            os.makedirs(report_dir, exist_ok=True)
            file_handler = logging.FileHandler(os.path.join(report_dir, "migration.log"), encoding="utf-8")
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        return logger

    @property
    def source(self) -> FelixDatabase:
        if self._source is None:
            self._source = FelixDatabase.open(self.config["source"]["database"])
        return self._source

    def log_message(self, message: str, level: str = "INFO") -> None:
        self.logger.log(logging.getLevelName(level.upper()), message)

    def assemble_post(self, data: Dict[str, Any]) -> GhostPost:
        """
        Build the Ghost post for one article row.

        Fields are filled in a fixed order: identity and status, timestamps,
        excerpt, tags, authors, feature image and finally the body, which
        depends on every block of the article transforming cleanly.

        :param data: A row from :meth:`FelixDatabase.list_articles`.
        :return: The completed post.
        :raises ArticleTransformError: If the body cannot be produced; the
            error carries the article id.
        """
        article_id = data["id"]

        post = GhostPost(
            title=data.get("title"),
            slug=data.get("slug"),
            visibility="public",
            status="published",  # only published articles are selected
            type="page" if data.get("section_slug") == "about" else "post",
        )

        post.created_at = data.get("created_at")
        post.updated_at = data.get("updated_at")
        post.published_at = data.get("published_at")

        post.custom_excerpt = data.get("custom_excerpt")

        post.add_tag(section_tag(data.get("section_name"), data.get("section_slug"), data.get("section_description")))
        issue = issue_tag(data.get("issue"))
        if issue is not None:
            post.add_tag(issue)

        authors = self.source.get_article_authors(article_id)
        if not authors:
            authors = [self.config["default_author"]]
        for author in authors:
            post.add_author(author)

        image = self.source.get_feature_image(article_id)
        if image is not None:
            post.feature_image = f"{self.settings.image_base_url}{image.uuid}"
            post.feature_image_alt = image.alt_text
            post.feature_image_caption = image.caption

        records = self.source.get_article_blocks(article_id)
        try:
            post.html = transform_article_blocks(
                records,
                self.source.get_image,
                card_renderer=self.card_renderer,
                settings=self.settings,
            )
        except ArticleTransformError as e:
            e.article_id = article_id
            raise

        return post

    def _failure(self, data: Dict[str, Any], code: str, exc: Exception) -> ArticleFailure:
        report_error(code, data, exc, path=os.path.join(self.config["migration"]["report_dir"], "errors.jsonl"))
        self.log_message(f"Skipping article {data.get('id')} '{data.get('slug')}': {exc}", level="ERROR")
        return ArticleFailure(
            article_id=data.get("id"),
            slug=data.get("slug"),
            code=code,
            error=str(exc),
            position=getattr(exc, "position", None),
            block_type=getattr(exc, "block_type", None),
        )

    def migrate_articles(self, articles: List[Dict[str, Any]]) -> MigrationResult:
        """
        Assemble ``articles`` concurrently and collect the successful posts.

        A failing article is reported and left out; it never affects the
        others.  Posts are added to the export in the order of ``articles``.
        """
        limit: Optional[int] = self.config["migration"].get("limit")
        if limit is not None:
            articles = articles[:limit]

        result = MigrationResult(export=GhostExport(version=self.config["ghost"]["version"]))
        ok_log = os.path.join(self.config["migration"]["report_dir"], "success.jsonl")
        max_workers = max(1, int(self.config["migration"]["max_workers"]))

        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = [(data, pool.submit(self.assemble_post, data)) for data in articles]
            for data, future in futures:
                try:
                    post = future.result()
                except ArticleTransformError as e:
                    result.failures.append(self._failure(data, ERROR_CODES.get(e.kind, "BLOCK_DECODE"), e))
                    continue
                except ValidationError as e:
                    result.failures.append(self._failure(data, "INVALID_POST", e))
                    continue
                except (duckdb.Error, LookupError) as e:
                    result.failures.append(self._failure(data, "SOURCE_QUERY", e))
                    continue
                except Exception as e:
                    result.failures.append(self._failure(data, "UNEXPECTED", e))
                    continue

                result.export.add_post(post)
                report_ok("POST_CREATED", data, {"type": post.type}, path=ok_log)
                self.log_message(f"Assembled article {data.get('id')} '{post.slug}'", level="DEBUG")

        self.log_message(f"Assembled {len(result.export)} posts, {len(result.failures)} articles failed")
        return result

    def process_all(self) -> MigrationResult:
        """Export every published Felix article."""
        articles = self.source.list_articles()
        self.log_message(f"Found {len(articles)} published articles")
        return self.migrate_articles(articles)
