"""
Prefect flow for pulling raw inputs into the store.

Downloads the county boundary GeoJSON and copies each CSV extract (from
``sources_dir`` or ``sources_base_url``) into ``data/``. Fresh entries are
skipped.

Run locally:
    python -m county_atlas.flows.fetch
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any
from urllib.parse import quote

from prefect import flow, task

from county_atlas.config import get_settings
from county_atlas.datasources.geometry import fetch_county_geojson
from county_atlas.datasources.tables import read_source
from county_atlas.errors import SourceUnavailableError
from county_atlas.reference.sources import SOURCES, SourceSpec
from county_atlas.store import DataStore

store = DataStore(get_settings().data_dir)

GEOMETRY_PATH = Path("reference/geojson-counties-fips.json")
GEOMETRY_TTL = timedelta(days=90)
SOURCE_TTL = timedelta(hours=24)


def source_path(spec: SourceSpec) -> Path:
    """Store path for a CSV extract."""
    return Path("sources") / spec.filename


def source_location(spec: SourceSpec, sources_dir: Path, base_url: str | None = None) -> str:
    """Where to read an extract from: ``base_url/<file>`` if set, else ``sources_dir/<file>``."""
    if base_url:
        return f"{base_url.rstrip('/')}/{quote(spec.filename)}"
    return str(sources_dir / spec.filename)


@task(name="fetch-geometry", retries=2, retry_delay_seconds=5)
def fetch_geometry(url: str) -> dict[str, Any]:
    """Download the county FeatureCollection."""
    return fetch_county_geojson(url)


@task(name="save-geometry")
def save_geometry(doc: dict[str, Any], url: str) -> Path:
    """Save the boundary feed to the reference tier."""
    return store.write(
        GEOMETRY_PATH,
        doc,
        source=url,
        valid_until=datetime.now(UTC) + GEOMETRY_TTL,
    )


@task(name="fetch-source")
def fetch_source(location: str) -> str:
    """Read one CSV extract from disk or HTTP."""
    return read_source(location)


@task(name="save-source")
def save_source(spec: SourceSpec, text: str, location: str) -> Path:
    """Save a CSV extract verbatim to the sources tier."""
    return store.write_text(
        source_path(spec),
        text,
        source=location,
        valid_until=datetime.now(UTC) + SOURCE_TTL,
        layout=spec.layout,
    )


@flow(name="fetch-data", log_prints=True)
def fetch_all(
    geojson_url: str | None = None,
    sources_dir: Path | None = None,
    sources_base_url: str | None = None,
) -> dict[str, Any]:
    """
    Fetch the geometry feed and all CSV extracts.

    Missing extracts are reported and skipped; the build flow leaves out
    every view that depends on them.
    """
    settings = get_settings()
    url = geojson_url or settings.geojson_url
    local_dir = sources_dir or settings.sources_dir
    base_url = sources_base_url or settings.sources_base_url

    results: dict[str, Any] = {"sources": [], "missing": []}

    # --- Geometry ---
    if store.is_fresh(GEOMETRY_PATH):
        print("County geometry is fresh, skipping fetch.")
        doc = store.read(GEOMETRY_PATH) or {}
    else:
        print(f"Fetching county geometry from {url}...")
        doc = fetch_geometry(url)
        path = save_geometry(doc, url)
        print(f"Saved {len(doc.get('features', []))} features to {path}")

    results["features"] = len(doc.get("features", []))

    # --- CSV extracts ---
    for spec in SOURCES:
        if store.is_fresh(source_path(spec)):
            print(f"{spec.name} is fresh, skipping fetch.")
            results["sources"].append(spec.name)
            continue

        location = source_location(spec, local_dir, base_url)
        try:
            text = fetch_source(location)
        except SourceUnavailableError as exc:
            print(f"Warning: {exc}")
            results["missing"].append(spec.name)
            continue

        path = save_source(spec, text, location)
        print(f"Saved {spec.name} ({len(text)} chars) to {path}")
        results["sources"].append(spec.name)

    return results


if __name__ == "__main__":
    result = fetch_all()
    print(f"Flow complete: {result}")
