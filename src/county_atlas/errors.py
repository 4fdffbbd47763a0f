"""Exception and warning types raised across the pipeline."""

from __future__ import annotations


class CountyAtlasError(Exception):
    """Base class for pipeline errors."""


class SourceUnavailableError(CountyAtlasError):
    """A raw source (CSV extract or geometry feed) could not be read."""


class ParseError(CountyAtlasError, ValueError):
    """A source parsed to zero usable records."""


class DegenerateInputError(CountyAtlasError, ValueError):
    """A statistical precondition does not hold (too few points, zero variance)."""


class JoinDataQualityWarning(UserWarning):
    """Fewer geometry features matched a dataset than the caller expects.

    Returned by :meth:`JoinResult.quality_warning`, never raised by the join.
    """

    def __init__(self, layer: str, matched: int, total: int, min_fraction: float) -> None:
        self.layer = layer
        self.matched = matched
        self.total = total
        self.min_fraction = min_fraction
        super().__init__(
            f"{layer}: matched {matched}/{total} features "
            f"(below {min_fraction:.0%} coverage threshold)"
        )
