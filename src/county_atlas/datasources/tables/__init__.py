"""County CSV extracts.

Public API:
  - parser: parse_records, split_fields, parse_number
  - models: Record, ParseOptions, ParsedTable
  - layouts: INCOME_LAYOUT, RATE_LAYOUT, DEMOGRAPHIC_LAYOUT, TREND_LAYOUT
  - client: read_source (local path or URL)
"""

from county_atlas.datasources.tables.client import read_source
from county_atlas.datasources.tables.layouts import (
    DEMOGRAPHIC_LAYOUT,
    INCOME_LAYOUT,
    LAYOUT_FIELDS,
    LAYOUTS,
    RATE_LAYOUT,
    TREND_LAYOUT,
)
from county_atlas.datasources.tables.models import ParsedTable, ParseOptions, Record
from county_atlas.datasources.tables.parser import parse_number, parse_records, split_fields

__all__ = [
    "DEMOGRAPHIC_LAYOUT",
    "INCOME_LAYOUT",
    "LAYOUTS",
    "LAYOUT_FIELDS",
    "RATE_LAYOUT",
    "TREND_LAYOUT",
    "ParseOptions",
    "ParsedTable",
    "Record",
    "parse_number",
    "parse_records",
    "read_source",
    "split_fields",
]
