"""Regression, correlation and highlight selection for two county series.

Answers "does hypertension fall as income rises?" for the scatter view:

    slope     = Sxy / Sxx
    intercept = mean_y - slope * mean_x
    r         = Sxy / sqrt(Sxx * Syy)

where ``Sxx = sum((x - mean_x)^2)`` and so on. Degenerate input (fewer than
two points, zero variance, non-finite values) raises
:class:`~county_atlas.errors.DegenerateInputError` instead of producing NaN.
"""

from __future__ import annotations

import math
import statistics
from collections.abc import Sequence
from dataclasses import dataclass

from county_atlas.counties.dataset import CountyDataset
from county_atlas.errors import DegenerateInputError

DEFAULT_OUTLIER_COUNT = 3


@dataclass(frozen=True)
class LabeledPoint:
    """One county on the scatter plot."""

    label: str
    x: float
    y: float


@dataclass(frozen=True)
class Outlier:
    """A point and its absolute distance from the regression line."""

    label: str
    x: float
    y: float
    residual: float


@dataclass(frozen=True)
class Extrema:
    """Points holding the max/min of each axis (first occurrence wins ties)."""

    max_y: LabeledPoint
    min_y: LabeledPoint
    max_x: LabeledPoint
    min_x: LabeledPoint

    def as_tuple(self) -> tuple[LabeledPoint, ...]:
        return (self.max_y, self.min_y, self.max_x, self.min_x)

    @property
    def labels(self) -> frozenset[str]:
        return frozenset(p.label for p in self.as_tuple())


@dataclass(frozen=True)
class CorrelationResult:
    """Output of :func:`analyze`."""

    slope: float
    intercept: float
    correlation: float
    mean_x: float
    mean_y: float
    extrema: Extrema
    outliers: tuple[Outlier, ...]
    size_n: int

    def predict(self, x: float) -> float:
        """Regression-line value at ``x``."""
        return self.slope * x + self.intercept

    def trend_line(self) -> tuple[tuple[float, float], tuple[float, float]]:
        """Endpoints of the regression line across the observed x range."""
        x1 = self.extrema.min_x.x
        x2 = self.extrema.max_x.x
        return (x1, self.predict(x1)), (x2, self.predict(x2))

    @property
    def highlighted_outliers(self) -> tuple[Outlier, ...]:
        """Outliers that are not already flagged as extrema."""
        taken = self.extrema.labels
        return tuple(o for o in self.outliers if o.label not in taken)

    @property
    def points_of_interest(self) -> tuple[LabeledPoint, ...]:
        """Extrema then outliers, each label at most once."""
        seen: set[str] = set()
        points: list[LabeledPoint] = []
        for point in self.extrema.as_tuple():
            if point.label not in seen:
                seen.add(point.label)
                points.append(point)
        for outlier in self.outliers:
            if outlier.label not in seen:
                seen.add(outlier.label)
                points.append(LabeledPoint(outlier.label, outlier.x, outlier.y))
        return tuple(points)


@dataclass(frozen=True)
class PairedSeries:
    """Two co-indexed value series for the counties present in both datasets."""

    labels: tuple[str, ...]
    x: tuple[float, ...]
    y: tuple[float, ...]

    def __len__(self) -> int:
        return len(self.labels)


def _extrema(points: Sequence[LabeledPoint]) -> Extrema:
    max_y = min_y = max_x = min_x = points[0]
    for p in points[1:]:
        if p.y > max_y.y:
            max_y = p
        if p.y < min_y.y:
            min_y = p
        if p.x > max_x.x:
            max_x = p
        if p.x < min_x.x:
            min_x = p
    return Extrema(max_y=max_y, min_y=min_y, max_x=max_x, min_x=min_x)


def analyze(
    x: Sequence[float],
    y: Sequence[float],
    labels: Sequence[str],
    outlier_count: int = DEFAULT_OUTLIER_COUNT,
) -> CorrelationResult:
    """Fit a least-squares line and pick the points worth labelling.

    Args:
        x: Independent values (e.g. income in thousands).
        y: Dependent values (e.g. hypertension rate), co-indexed with ``x``.
        labels: County label for each index.
        outlier_count: How many largest-residual points to return.

    Returns:
        CorrelationResult with regression, Pearson r, extrema and outliers.

    Raises:
        ValueError: The sequences differ in length or ``outlier_count`` < 0.
        DegenerateInputError: Fewer than 2 points, zero variance in x or y,
            or a non-finite value.
    """
    n = len(x)
    if len(y) != n or len(labels) != n:
        msg = f"x, y and labels must have equal length (got {n}, {len(y)}, {len(labels)})"
        raise ValueError(msg)
    if outlier_count < 0:
        msg = f"outlier_count must be >= 0, got {outlier_count}"
        raise ValueError(msg)
    if n < 2:
        msg = f"need at least 2 points for a regression, got {n}"
        raise DegenerateInputError(msg)

    xs = [float(v) for v in x]
    ys = [float(v) for v in y]
    if not all(math.isfinite(v) for v in (*xs, *ys)):
        msg = "x and y must be finite numbers"
        raise DegenerateInputError(msg)

    mean_x = statistics.fmean(xs)
    mean_y = statistics.fmean(ys)

    sxx = sxy = syy = 0.0
    for xi, yi in zip(xs, ys, strict=True):
        dx = xi - mean_x
        dy = yi - mean_y
        sxx += dx * dx
        sxy += dx * dy
        syy += dy * dy

    # Decided on the raw values; float deviations from the mean need not cancel.
    if min(xs) == max(xs):
        msg = "x has zero variance; regression slope is undefined"
        raise DegenerateInputError(msg)
    if min(ys) == max(ys):
        msg = "y has zero variance; correlation is undefined"
        raise DegenerateInputError(msg)

    slope = sxy / sxx
    intercept = mean_y - slope * mean_x
    # Rounding can push |r| a hair past 1 for colinear input.
    correlation = max(-1.0, min(1.0, sxy / math.sqrt(sxx * syy)))

    points = [LabeledPoint(str(lbl), xi, yi) for lbl, xi, yi in zip(labels, xs, ys, strict=True)]
    residuals = [abs(p.y - (slope * p.x + intercept)) for p in points]
    ranked = sorted(range(n), key=lambda i: residuals[i], reverse=True)
    outliers = tuple(
        Outlier(points[i].label, points[i].x, points[i].y, residuals[i])
        for i in ranked[:outlier_count]
    )

    return CorrelationResult(
        slope=slope,
        intercept=intercept,
        correlation=correlation,
        mean_x=mean_x,
        mean_y=mean_y,
        extrema=_extrema(points),
        outliers=outliers,
        size_n=n,
    )


def pair_datasets(
    x_dataset: CountyDataset,
    y_dataset: CountyDataset,
    x_field: str,
    y_field: str,
) -> PairedSeries:
    """Inner-join two datasets on county key, in ``x_dataset`` order.

    Counties missing from either side are left out.
    """
    labels: list[str] = []
    xs: list[float] = []
    ys: list[float] = []
    for entry in x_dataset:
        x_value = entry.values.get(x_field)
        y_value = y_dataset.value(entry.key, y_field)
        if x_value is None or y_value is None:
            continue
        labels.append(entry.label)
        xs.append(x_value)
        ys.append(y_value)
    return PairedSeries(labels=tuple(labels), x=tuple(xs), y=tuple(ys))


def analyze_datasets(
    x_dataset: CountyDataset,
    y_dataset: CountyDataset,
    x_field: str,
    y_field: str,
    outlier_count: int = DEFAULT_OUTLIER_COUNT,
) -> CorrelationResult:
    """Pair two datasets by county and run :func:`analyze` on the result."""
    paired = pair_datasets(x_dataset, y_dataset, x_field, y_field)
    return analyze(paired.x, paired.y, paired.labels, outlier_count=outlier_count)
