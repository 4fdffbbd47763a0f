"""Summaries for single-series historical data (year -> value).

The historical hypertension file is a header row followed by
``period,value`` rows; the first column is a label (``2017`` or
``2017-2018``) and the second a rate.
"""

from __future__ import annotations

import statistics
from collections.abc import Iterable
from dataclasses import dataclass

from county_atlas.datasources.tables.models import Record
from county_atlas.datasources.tables.parser import parse_number
from county_atlas.errors import ParseError


@dataclass(frozen=True)
class TrendPoint:
    period: str
    value: float


@dataclass(frozen=True)
class TrendSummary:
    """First/last comparison and extremes of a time series."""

    points: tuple[TrendPoint, ...]
    first: TrendPoint
    last: TrendPoint
    peak: TrendPoint
    trough: TrendPoint
    change: float
    percent_change: float
    slope_per_period: float | None


def trend_points(records: Iterable[Record]) -> list[TrendPoint]:
    """Take the first two fields of each record as (period, value).

    Rows with an empty period or a value that is not positive are skipped.
    """
    points: list[TrendPoint] = []
    for record in records:
        fields = list(record.values())
        if len(fields) < 2 or not fields[0]:
            continue
        value = parse_number(fields[1])
        if value is None:
            continue
        points.append(TrendPoint(period=fields[0], value=value))
    return points


def _period_positions(points: list[TrendPoint]) -> list[float]:
    """Numeric x for each point: the leading year if every label has one, else the index."""
    years: list[float] = []
    for p in points:
        head = p.period.split("-")[0].strip()
        if not head.isdigit():
            return [float(i) for i in range(len(points))]
        years.append(float(head))
    return years


def build_trend(records: Iterable[Record]) -> TrendSummary:
    """Summarise a historical series.

    Raises:
        ParseError: No usable (period, value) rows.
    """
    points = trend_points(records)
    if not points:
        msg = "trend series has no usable rows"
        raise ParseError(msg)

    first, last = points[0], points[-1]
    peak = trough = first
    for p in points[1:]:
        if p.value > peak.value:
            peak = p
        if p.value < trough.value:
            trough = p

    # Undefined for a single point or when every period shares one position.
    slope: float | None
    try:
        fit = statistics.linear_regression(_period_positions(points), [p.value for p in points])
        slope = fit.slope
    except statistics.StatisticsError:
        slope = None

    change = last.value - first.value
    return TrendSummary(
        points=tuple(points),
        first=first,
        last=last,
        peak=peak,
        trough=trough,
        change=change,
        percent_change=change / first.value * 100,
        slope_per_period=slope,
    )
