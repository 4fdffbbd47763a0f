"""
Per-view pipeline steps shared by the build flow and the CLI.

Each function takes already-retrieved text or features and returns an
immutable result; nothing here touches the network or the store.
"""

from __future__ import annotations

from collections.abc import Sequence

from county_atlas.analysis.correlation import CorrelationResult, analyze_datasets
from county_atlas.analysis.geo_join import JoinResult, join_features
from county_atlas.analysis.trend import TrendSummary, build_trend
from county_atlas.counties.dataset import CountyDataset
from county_atlas.datasources.tables.layouts import LAYOUTS, TREND_LAYOUT
from county_atlas.datasources.tables.parser import parse_records
from county_atlas.reference.sources import ChoroplethView, ScatterView, SourceSpec
from county_atlas.schemas import GeoFeature


def dataset_from_text(spec: SourceSpec, text: str, scale: float = 1.0) -> CountyDataset:
    """Parse one extract with its layout and key it by county.

    Raises:
        ParseError: The extract yielded no usable county rows.
    """
    table = parse_records(text, LAYOUTS[spec.layout])
    return CountyDataset.build(
        table.records,
        spec.name_field,
        [spec.value_field],
        scale=scale,
        source=spec.name,
    )


def choropleth(
    view: ChoroplethView, features: Sequence[GeoFeature], dataset: CountyDataset
) -> JoinResult:
    """Join one map layer."""
    return join_features(features, dataset, view.source.value_field, layer=view.name)


def scatter(
    view: ScatterView,
    x_dataset: CountyDataset,
    y_dataset: CountyDataset,
    outlier_count: int = 3,
) -> CorrelationResult:
    """Regression of ``view.y`` on ``view.x`` over counties present in both.

    Raises:
        DegenerateInputError: Fewer than two shared counties or zero variance.
    """
    return analyze_datasets(
        x_dataset,
        y_dataset,
        view.x.value_field,
        view.y.value_field,
        outlier_count=outlier_count,
    )


def trend_from_text(text: str) -> TrendSummary:
    """Parse and summarise a historical series.

    Raises:
        ParseError: No usable rows.
    """
    return build_trend(parse_records(text, TREND_LAYOUT).records)
