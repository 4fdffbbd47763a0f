"""JSON serialization helpers for join, correlation and trend results."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from county_atlas.analysis.correlation import CorrelationResult, LabeledPoint
    from county_atlas.analysis.geo_join import JoinResult
    from county_atlas.analysis.trend import TrendSummary


def _point(p: LabeledPoint) -> dict[str, Any]:
    return {"county": p.label, "x": p.x, "y": p.y}


def join_result_to_dict(result: JoinResult) -> dict[str, Any]:
    """Serialize a JoinResult as a GeoJSON FeatureCollection plus diagnostics.

    Each feature gets ``value`` and ``matched`` properties; unmatched
    features keep ``value: null``.
    """
    value_range = result.value_range()
    return {
        "type": "FeatureCollection",
        "layer": result.layer,
        "value_field": result.value_field,
        "matched_count": result.matched_count,
        "total": result.total,
        "value_range": list(value_range) if value_range else None,
        "unmatched": list(result.unmatched_names),
        "features": [
            {
                **jf.feature.to_geojson(),
                "properties": {
                    **jf.feature.properties,
                    "value": jf.value,
                    "matched": jf.matched,
                },
            }
            for jf in result.features
        ],
    }


def correlation_to_dict(result: CorrelationResult) -> dict[str, Any]:
    """Serialize a CorrelationResult for the scatter view."""
    (x1, y1), (x2, y2) = result.trend_line()
    return {
        "n": result.size_n,
        "slope": result.slope,
        "intercept": result.intercept,
        "correlation": round(result.correlation, 3),
        "mean_x": result.mean_x,
        "mean_y": result.mean_y,
        "trend_line": [[x1, y1], [x2, y2]],
        "extrema": {
            "max_y": _point(result.extrema.max_y),
            "min_y": _point(result.extrema.min_y),
            "max_x": _point(result.extrema.max_x),
            "min_x": _point(result.extrema.min_x),
        },
        "outliers": [
            {"county": o.label, "x": o.x, "y": o.y, "residual": o.residual}
            for o in result.outliers
        ],
        "points_of_interest": [_point(p) for p in result.points_of_interest],
    }


def trend_to_dict(summary: TrendSummary) -> dict[str, Any]:
    """Serialize a TrendSummary."""
    return {
        "points": [{"period": p.period, "value": p.value} for p in summary.points],
        "first": {"period": summary.first.period, "value": summary.first.value},
        "last": {"period": summary.last.period, "value": summary.last.value},
        "peak": {"period": summary.peak.period, "value": summary.peak.value},
        "trough": {"period": summary.trough.period, "value": summary.trough.value},
        "change": round(summary.change, 2),
        "percent_change": round(summary.percent_change, 1),
        "slope_per_period": summary.slope_per_period,
    }
