"""Static reference data: state scope, source files, view definitions.

``geography`` is re-exported here; import ``reference.sources`` directly
(it depends on the table layouts, which depend on this package).

Adding a new source:
1. Add a layout to ``datasources/tables/layouts.py`` if none fits.
2. Add a ``SourceSpec`` to ``reference/sources.py`` and list it in ``SOURCES``.
3. Add a ``ChoroplethView`` / ``ScatterView`` that consumes it.
"""

from county_atlas.reference.geography import AGGREGATE_ROW_NAMES as AGGREGATE_ROW_NAMES
from county_atlas.reference.geography import GEORGIA_FIPS_PREFIX as GEORGIA_FIPS_PREFIX
