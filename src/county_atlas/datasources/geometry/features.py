"""FeatureCollection parsing and the state pre-filter applied before joins."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import structlog
from pydantic import ValidationError

from county_atlas.schemas import DEFAULT_NAME_PROPERTY, GeoFeature

logger = structlog.get_logger(__name__)


def parse_feature_collection(
    doc: dict[str, Any], name_property: str = DEFAULT_NAME_PROPERTY
) -> list[GeoFeature]:
    """Convert a GeoJSON FeatureCollection into GeoFeature models.

    Features without any usable identifier are skipped.
    """
    features: list[GeoFeature] = []
    skipped = 0
    for raw in doc.get("features", []):
        try:
            features.append(GeoFeature.from_geojson(raw, name_property))
        except ValidationError:
            skipped += 1
    if skipped:
        logger.warning("features_skipped", skipped=skipped, kept=len(features))
    return features


def filter_by_id_prefix(features: Iterable[GeoFeature], prefix: str) -> list[GeoFeature]:
    """Keep features whose identifier starts with ``prefix`` (e.g. state FIPS ``"13"``)."""
    return [f for f in features if f.id.startswith(prefix)]


def to_feature_collection(features: Iterable[GeoFeature]) -> dict[str, Any]:
    """Wrap features back into a GeoJSON FeatureCollection dict."""
    return {"type": "FeatureCollection", "features": [f.to_geojson() for f in features]}
