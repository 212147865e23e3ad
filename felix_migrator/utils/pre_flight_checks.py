from typing import Iterable, List

import duckdb

# Tables read by FelixDatabase
REQUIRED_TABLES = (
    "articles",
    "article_slugs",
    "article_writer",
    "blocks",
    "issues",
    "medias",
    "mediables",
    "sections",
    "section_slugs",
    "writers",
    "writer_slugs",
)


class PreFlightCheckError(Exception):
    """Custom exception for pre-flight check failures."""
    pass


def run_source_pre_flight_checks(con: duckdb.DuckDBPyConnection, required: Iterable[str] = REQUIRED_TABLES) -> None:
    """
    Verifies that the source database holds every Felix table the export reads.

    Args:
        con: An open DuckDB connection to the Felix source database.
        required: Table names that must be present.

    Raises:
        PreFlightCheckError: If the catalog cannot be read or tables are missing.
    """
    try:
        existing = {row[0] for row in con.cursor().execute("SHOW TABLES;").fetchall()}
    except duckdb.Error as e:
        raise PreFlightCheckError(f"Could not list tables in the source database: {e}") from e

    missing: List[str] = [table for table in required if table not in existing]
    if missing:
        raise PreFlightCheckError(
            f"Source database is missing required tables: {', '.join(sorted(missing))}. "
            "Run scripts/initialize_database.py first."
        )
