"""Joins, correlations and summaries over county datasets.

Dependency rule: analysis/ works on parsed datasets and GeoFeature models
only. It never fetches data, touches the store, or writes files.

Modules:
  - geo_join: boundary features + CountyDataset -> per-feature values
  - correlation: two CountyDatasets -> regression, Pearson r, highlights
  - trend: historical series -> first/last change, peak, slope
  - serialization: results -> JSON-compatible dicts

Adding an analysis module
-------------------------
1. Create ``analysis/{name}.py`` with a pure function taking datasets or
   feature lists and returning a frozen dataclass.
2. Raise ``DegenerateInputError`` / ``ParseError`` rather than returning NaN
   or empty placeholders.
3. Add a serializer to ``serialization.py`` and call both from
   ``flows/build.py``.
4. Re-export below and add ``tests/test_{name}.py``.
"""

from county_atlas.analysis.correlation import (
    DEFAULT_OUTLIER_COUNT,
    CorrelationResult,
    Extrema,
    LabeledPoint,
    Outlier,
    PairedSeries,
    analyze,
    analyze_datasets,
    pair_datasets,
)
from county_atlas.analysis.geo_join import JoinedFeature, JoinResult, join_features, join_layers
from county_atlas.analysis.serialization import (
    correlation_to_dict,
    join_result_to_dict,
    trend_to_dict,
)
from county_atlas.analysis.trend import TrendPoint, TrendSummary, build_trend, trend_points

__all__ = [
    "DEFAULT_OUTLIER_COUNT",
    "CorrelationResult",
    "Extrema",
    "JoinResult",
    "JoinedFeature",
    "LabeledPoint",
    "Outlier",
    "PairedSeries",
    "TrendPoint",
    "TrendSummary",
    "analyze",
    "analyze_datasets",
    "build_trend",
    "correlation_to_dict",
    "join_features",
    "join_layers",
    "join_result_to_dict",
    "pair_datasets",
    "trend_points",
    "trend_to_dict",
]
