"""County boundary geometry.

Public API:
  - client: fetch_county_geojson
  - features: parse_feature_collection, filter_by_id_prefix, to_feature_collection
"""

from county_atlas.datasources.geometry.client import fetch_county_geojson
from county_atlas.datasources.geometry.features import (
    filter_by_id_prefix,
    parse_feature_collection,
    to_feature_collection,
)

__all__ = [
    "fetch_county_geojson",
    "filter_by_id_prefix",
    "parse_feature_collection",
    "to_feature_collection",
]
