"""County boundary feed client."""

from __future__ import annotations

from typing import Any

import requests

from county_atlas.config import PLOTLY_COUNTY_GEOJSON
from county_atlas.errors import SourceUnavailableError
from county_atlas.services.http import session


def fetch_county_geojson(url: str = PLOTLY_COUNTY_GEOJSON) -> dict[str, Any]:
    """
    Download the county FeatureCollection.

    Args:
        url: GeoJSON endpoint; defaults to the Plotly county FIPS dataset.

    Returns:
        Raw FeatureCollection dict.

    Raises:
        SourceUnavailableError: The request failed or the body is not a
            FeatureCollection.
    """
    try:
        resp = session.get(url)
        resp.raise_for_status()
        doc: dict[str, Any] = resp.json()
    except (requests.RequestException, ValueError) as exc:
        msg = f"Failed to fetch county geometry from {url}: {exc}"
        raise SourceUnavailableError(msg) from exc

    if not isinstance(doc, dict) or not isinstance(doc.get("features"), list):
        msg = f"Response from {url} is not a GeoJSON FeatureCollection"
        raise SourceUnavailableError(msg)
    return doc
