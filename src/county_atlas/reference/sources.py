"""Source extracts and the views built from them.

Rescale factors live on the view, not the source: income is drawn in whole
dollars on the choropleth and in thousands on the scatter plot.
"""

from __future__ import annotations

from dataclasses import dataclass

from county_atlas.datasources.tables.layouts import LAYOUT_FIELDS


@dataclass(frozen=True)
class SourceSpec:
    """One CSV extract and the layout it is parsed with."""

    name: str
    filename: str
    layout: str
    description: str = ""

    @property
    def name_field(self) -> str:
        return LAYOUT_FIELDS[self.layout][0]

    @property
    def value_field(self) -> str:
        return LAYOUT_FIELDS[self.layout][1]


@dataclass(frozen=True)
class ChoroplethView:
    name: str
    source: SourceSpec
    scale: float = 1.0


@dataclass(frozen=True)
class ScatterView:
    name: str
    x: SourceSpec
    y: SourceSpec
    x_scale: float = 1.0
    y_scale: float = 1.0


INCOME = SourceSpec(
    "income",
    "GeorgiaIncomeData.csv",
    "income",
    "Median household income by county (report export)",
)
HYPERTENSION = SourceSpec(
    "hypertension",
    "HypertensionCountyData.csv",
    "rate",
    "Hypertension rate by county",
)
BLACK_POPULATION = SourceSpec(
    "black_population",
    "georgia race population - Sheet1.csv",
    "demographic",
    "Black population percentage by county",
)
HYPERTENSION_HISTORY = SourceSpec(
    "hypertension_history",
    "HypertensionHistoricalData.csv",
    "trend",
    "Statewide hypertension rate by period",
)

SOURCES: tuple[SourceSpec, ...] = (INCOME, HYPERTENSION, BLACK_POPULATION, HYPERTENSION_HISTORY)

CHOROPLETHS: tuple[ChoroplethView, ...] = (
    ChoroplethView("income_map", INCOME),
    ChoroplethView("hypertension_map", HYPERTENSION),
    ChoroplethView("black_population_map", BLACK_POPULATION),
)

SCATTERS: tuple[ScatterView, ...] = (
    ScatterView("income_vs_hypertension", INCOME, HYPERTENSION, x_scale=0.001),
)

TRENDS: tuple[SourceSpec, ...] = (HYPERTENSION_HISTORY,)


def get_source(name: str) -> SourceSpec:
    """Look up a source by name."""
    for spec in SOURCES:
        if spec.name == name:
            return spec
    msg = f"Unknown source {name!r}; expected one of {[s.name for s in SOURCES]}"
    raise KeyError(msg)
