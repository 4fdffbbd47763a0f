"""State scope for the boundary feed and the source extracts."""

from __future__ import annotations

# Census state FIPS code; county feature ids in the boundary feed start with it.
GEORGIA_FIPS_PREFIX = "13"

# Summary rows that appear alongside counties in report exports.
AGGREGATE_ROW_NAMES: frozenset[str] = frozenset({"United States", "Georgia"})
