"""Parse layouts for the CSV extracts the visualizations consume."""

from __future__ import annotations

from county_atlas.datasources.tables.models import ParseOptions
from county_atlas.reference.geography import AGGREGATE_ROW_NAMES

# County income report export: preamble, header marker, quoted body, footer notes.
INCOME_MARKER = "County,FIPS,Value (Dollars)"
INCOME_NAME_FIELD = "County"
INCOME_VALUE_FIELD = "Value"

INCOME_LAYOUT = ParseOptions(
    columns=(INCOME_NAME_FIELD, "FIPS", INCOME_VALUE_FIELD),
    start_marker=INCOME_MARKER,
    footer_prefixes=("Suggested", "Notes:"),
    quoted=True,
    header_token="County",
    skip_names=AGGREGATE_ROW_NAMES,
    numeric_fields=(INCOME_VALUE_FIELD,),
)

# Hypertension rate by county: header row, then county,rate pairs (names may be quoted).
RATE_NAME_FIELD = "county"
RATE_VALUE_FIELD = "rate"

RATE_LAYOUT = ParseOptions(
    columns=(RATE_NAME_FIELD, RATE_VALUE_FIELD),
    has_header=True,
    quoted=True,
    numeric_fields=(RATE_VALUE_FIELD,),
)

# Demographic percentages: named header columns, extra columns ignored, 0% is valid.
DEMOGRAPHIC_NAME_FIELD = "County"
DEMOGRAPHIC_VALUE_FIELD = "Value"

DEMOGRAPHIC_LAYOUT = ParseOptions(
    has_header=True,
    quoted=True,
    numeric_fields=(DEMOGRAPHIC_VALUE_FIELD,),
    allow_non_positive=True,
)

# Historical series: header row, first column is the period, second the value.
TREND_LAYOUT = ParseOptions(
    has_header=True,
    quoted=True,
)

LAYOUTS: dict[str, ParseOptions] = {
    "income": INCOME_LAYOUT,
    "rate": RATE_LAYOUT,
    "demographic": DEMOGRAPHIC_LAYOUT,
    "trend": TREND_LAYOUT,
}

#: (name_field, value_field) per county layout.
LAYOUT_FIELDS: dict[str, tuple[str, str]] = {
    "income": (INCOME_NAME_FIELD, INCOME_VALUE_FIELD),
    "rate": (RATE_NAME_FIELD, RATE_VALUE_FIELD),
    "demographic": (DEMOGRAPHIC_NAME_FIELD, DEMOGRAPHIC_VALUE_FIELD),
}
