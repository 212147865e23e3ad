"""
Extractors for the Felix source database.

This subpackage reads articles, writers, media and content blocks from the
DuckDB copy of the Felix CMS schema and hands them over as plain rows,
:class:`~felix_migrator.parsers.blocks.ImageRef` and
:class:`~felix_migrator.parsers.block_decoder.RawBlockRecord` instances.
"""
