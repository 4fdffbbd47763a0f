"""Join county boundary features to keyed datasets by display name.

Every input feature produces exactly one :class:`JoinedFeature`, in input
order. Unmatched features carry ``value=None`` so the rendering layer can
draw them as "no data"; they are never dropped.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

import structlog

from county_atlas.counties.dataset import CountyDataset
from county_atlas.errors import JoinDataQualityWarning
from county_atlas.schemas import GeoFeature

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class JoinedFeature:
    """A boundary feature with its joined value (None when unmatched)."""

    feature: GeoFeature
    value: float | None
    matched: bool


@dataclass(frozen=True)
class JoinResult:
    """Per-feature join output plus coverage diagnostics."""

    layer: str
    value_field: str
    features: tuple[JoinedFeature, ...]
    matched_count: int

    @property
    def total(self) -> int:
        return len(self.features)

    @property
    def coverage(self) -> float:
        """Fraction of features that matched (0.0 for an empty feature set)."""
        return self.matched_count / self.total if self.features else 0.0

    @property
    def unmatched_names(self) -> tuple[str, ...]:
        return tuple(jf.feature.name or jf.feature.id for jf in self.features if not jf.matched)

    def value_range(self) -> tuple[float, float] | None:
        """(min, max) of matched values, or None when nothing matched."""
        values = [jf.value for jf in self.features if jf.value is not None]
        if not values:
            return None
        return min(values), max(values)

    def quality_warning(self, min_fraction: float) -> JoinDataQualityWarning | None:
        """Return a warning when coverage is below ``min_fraction``."""
        if self.features and self.coverage >= min_fraction:
            return None
        return JoinDataQualityWarning(self.layer, self.matched_count, self.total, min_fraction)


def join_features(
    features: Iterable[GeoFeature],
    dataset: CountyDataset,
    value_field: str,
    *,
    layer: str = "",
) -> JoinResult:
    """Attach ``value_field`` from ``dataset`` to each feature by name.

    Matching uses :meth:`CountyDataset.lookup` on the feature's display
    name, so ``"Fulton"`` and ``"Fulton County"`` both resolve. The function
    does not filter by state; callers apply
    :func:`~county_atlas.datasources.geometry.filter_by_id_prefix` first.

    Args:
        features: Boundary features, in render order.
        dataset: Keyed county values.
        value_field: Field of the dataset to attach.
        layer: Label for diagnostics (defaults to the dataset source).

    Returns:
        JoinResult with one entry per input feature.
    """
    joined: list[JoinedFeature] = []
    matched = 0
    for feature in features:
        value = dataset.value(feature.name, value_field) if feature.name else None
        if value is not None:
            matched += 1
        joined.append(JoinedFeature(feature=feature, value=value, matched=value is not None))

    result = JoinResult(
        layer=layer or dataset.source or value_field,
        value_field=value_field,
        features=tuple(joined),
        matched_count=matched,
    )
    logger.info(
        "features_joined",
        layer=result.layer,
        matched_count=result.matched_count,
        total=result.total,
    )
    if result.matched_count < result.total:
        logger.debug("features_unmatched", layer=result.layer, names=result.unmatched_names)
    return result


def join_layers(
    features: Sequence[GeoFeature],
    layers: Mapping[str, tuple[CountyDataset, str]],
) -> dict[str, JoinResult]:
    """Join the same feature set against several datasets.

    Args:
        features: Boundary features shared by every layer.
        layers: Layer name -> (dataset, value_field).

    Returns:
        Layer name -> JoinResult, in the order of ``layers``.
    """
    return {
        name: join_features(features, dataset, value_field, layer=name)
        for name, (dataset, value_field) in layers.items()
    }
