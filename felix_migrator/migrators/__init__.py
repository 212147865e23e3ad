"""
Ghost export writers.

This subpackage collects assembled posts, deduplicates their tags and
authors and writes the JSON document accepted by Ghost's importer.
"""

from .ghost_export import GhostExport

__all__ = ["GhostExport"]
