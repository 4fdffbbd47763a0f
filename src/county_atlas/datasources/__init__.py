"""Raw data inputs.

    datasources/
    ├── tables/      CSV extracts: quote-aware parser, per-file layouts, reader
    └── geometry/    County boundary FeatureCollection: fetch, parse, state filter

Each subpackage keeps the same shape: ``client.py`` for retrieval (raises
``SourceUnavailableError``), pure parsing modules, and ``__init__.py``
re-exporting the public API with ``__all__``.

Adding a new CSV source
-----------------------
1. Describe its shape as a ``ParseOptions`` in ``tables/layouts.py`` and add
   its (name_field, value_field) to ``LAYOUT_FIELDS``.
2. Register a ``SourceSpec`` in ``reference/sources.py``.
3. The fetch flow copies it into the store; the build flow parses and joins
   it. Add tests with a small inline sample of the real file.
"""
