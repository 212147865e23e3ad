"""
Top-level package for the Felix → Ghost migration utility.

This package bundles all components required to read articles from the
Felix CMS schema, turn their content blocks into Ghost-compatible HTML and
write a Ghost import file.  Modules are split into subpackages:

* :mod:`felix_migrator.extractors` – queries against the source database
* :mod:`felix_migrator.parsers` – block decoding, rendering, normalization
  and sanitization
* :mod:`felix_migrator.migrators` – Ghost import file generation
* :mod:`felix_migrator.models` – the Ghost post record
* :mod:`felix_migrator.utils` – errors, reporting, tags and pre-flight checks

Each layer has no direct knowledge of configuration or execution strategy;
orchestration is handled in :mod:`felix_migrator.migration_tool`.
"""

__version__ = "0.1.0"
