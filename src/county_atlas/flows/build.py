"""
Prefect flow for turning cached inputs into view-ready JSON.

For every view in ``reference/sources.py``:
  - choropleths: parse the extract, join it onto the state's county
    features, write ``derived/<view>.json`` (GeoJSON with value/matched)
  - scatters: pair two extracts by county, fit the regression, write the
    coefficients and highlighted points
  - trends: summarise the historical series

Run locally:
    python -m county_atlas.flows.build
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from prefect import flow, task
from prefect.cache_policies import NO_CACHE

from county_atlas import pipeline
from county_atlas.analysis.serialization import (
    correlation_to_dict,
    join_result_to_dict,
    trend_to_dict,
)
from county_atlas.config import get_settings
from county_atlas.counties.dataset import CountyDataset
from county_atlas.datasources.geometry import filter_by_id_prefix, parse_feature_collection
from county_atlas.errors import DegenerateInputError, ParseError
from county_atlas.flows.fetch import GEOMETRY_PATH, source_path
from county_atlas.reference.sources import (
    CHOROPLETHS,
    SCATTERS,
    TRENDS,
    ChoroplethView,
    ScatterView,
    SourceSpec,
)
from county_atlas.schemas import GeoFeature
from county_atlas.store import DataStore

store = DataStore(get_settings().data_dir)

DERIVED_DIR = Path("derived")


# =============================================================================
# Data loading tasks
# =============================================================================


@task(name="load-geometry")
def load_geometry(prefix: str) -> list[GeoFeature] | None:
    """Load cached county features, keeping ids that start with ``prefix``."""
    doc = store.read(GEOMETRY_PATH)
    if doc is None:
        return None
    return filter_by_id_prefix(parse_feature_collection(doc), prefix)


@task(name="load-source")
def load_source(spec: SourceSpec) -> str | None:
    """Load the raw text of a cached CSV extract."""
    return store.read_text(source_path(spec))


@task(name="build-dataset", cache_policy=NO_CACHE)
def build_dataset(spec: SourceSpec, text: str, scale: float = 1.0) -> CountyDataset:
    """Parse an extract into a CountyDataset."""
    return pipeline.dataset_from_text(spec, text, scale)


# =============================================================================
# View tasks
# =============================================================================


@task(name="build-choropleth", cache_policy=NO_CACHE)
def build_choropleth(
    view: ChoroplethView,
    features: list[GeoFeature],
    dataset: CountyDataset,
    min_match_fraction: float,
) -> dict[str, Any]:
    """Join one map layer and flag poor coverage."""
    result = pipeline.choropleth(view, features, dataset)
    print(f"{view.name}: matched {result.matched_count}/{result.total} counties")
    warning = result.quality_warning(min_match_fraction)
    if warning is not None:
        print(f"Warning: {warning}")
    payload = join_result_to_dict(result)
    payload["value_domain"] = list(dataset.value_range(view.source.value_field))
    return payload


@task(name="build-scatter", cache_policy=NO_CACHE)
def build_scatter(
    view: ScatterView,
    x_dataset: CountyDataset,
    y_dataset: CountyDataset,
    outlier_count: int,
) -> dict[str, Any]:
    """Fit the regression for one scatter view."""
    result = pipeline.scatter(view, x_dataset, y_dataset, outlier_count)
    print(f"{view.name}: n={result.size_n}, r={result.correlation:.3f}")
    return correlation_to_dict(result)


@task(name="write-output")
def write_output(name: str, payload: dict[str, Any]) -> Path:
    """Write one view's JSON to the derived tier."""
    return store.write(DERIVED_DIR / f"{name}.json", payload, source="build-outputs")


# =============================================================================
# Main flow
# =============================================================================


def _dataset(
    cache: dict[tuple[str, float], CountyDataset | None],
    texts: dict[str, str | None],
    spec: SourceSpec,
    scale: float,
) -> CountyDataset | None:
    """Build (once per source and scale) a dataset, or None if its source is unusable."""
    key = (spec.name, scale)
    if key not in cache:
        text = texts.get(spec.name)
        if text is None:
            cache[key] = None
        else:
            try:
                cache[key] = build_dataset(spec, text, scale)
            except ParseError as exc:
                print(f"Warning: {exc}")
                cache[key] = None
    return cache[key]


@flow(name="build-outputs", log_prints=True)
def build_all(
    state_prefix: str | None = None,
    outlier_count: int | None = None,
    min_match_fraction: float | None = None,
) -> dict[str, Any]:
    """
    Build all view outputs from the store.

    Views whose inputs are missing or unusable are skipped with a warning;
    the rest are still written.
    """
    settings = get_settings()
    prefix = state_prefix if state_prefix is not None else settings.state_fips_prefix
    k = outlier_count if outlier_count is not None else settings.outlier_count
    min_fraction = (
        min_match_fraction if min_match_fraction is not None else settings.min_match_fraction
    )

    outputs: dict[str, str] = {}
    skipped: list[str] = []

    print("Loading source extracts...")
    specs = {v.source.name: v.source for v in CHOROPLETHS}
    specs.update({s.x.name: s.x for s in SCATTERS})
    specs.update({s.y.name: s.y for s in SCATTERS})
    texts = {name: load_source(spec) for name, spec in specs.items()}
    for name, text in texts.items():
        if text is None:
            print(f"Warning: no cached extract for {name}. Run fetch flow first.")

    datasets: dict[tuple[str, float], CountyDataset | None] = {}

    print("Loading county geometry...")
    features = load_geometry(prefix)
    if features is None:
        print("Warning: no county geometry found. Building without choropleths.")
        skipped.extend(v.name for v in CHOROPLETHS)
    else:
        print(f"Found {len(features)} counties with id prefix {prefix!r}")
        for view in CHOROPLETHS:
            dataset = _dataset(datasets, texts, view.source, view.scale)
            if dataset is None:
                skipped.append(view.name)
                continue
            payload = build_choropleth(view, features, dataset, min_fraction)
            outputs[view.name] = str(write_output(view.name, payload))

    for view in SCATTERS:
        x_ds = _dataset(datasets, texts, view.x, view.x_scale)
        y_ds = _dataset(datasets, texts, view.y, view.y_scale)
        if x_ds is None or y_ds is None:
            skipped.append(view.name)
            continue
        try:
            payload = build_scatter(view, x_ds, y_ds, k)
        except DegenerateInputError as exc:
            print(f"Warning: {view.name}: {exc}")
            skipped.append(view.name)
            continue
        outputs[view.name] = str(write_output(view.name, payload))

    for spec in TRENDS:
        text = load_source(spec)
        if text is None:
            skipped.append(spec.name)
            continue
        try:
            summary = pipeline.trend_from_text(text)
        except ParseError as exc:
            print(f"Warning: {exc}")
            skipped.append(spec.name)
            continue
        outputs[spec.name] = str(write_output(spec.name, trend_to_dict(summary)))

    print(f"Wrote {len(outputs)} outputs, skipped {len(skipped)}")
    return {"outputs": outputs, "skipped": skipped}


if __name__ == "__main__":
    result = build_all()
    print(f"Flow complete: {result}")
