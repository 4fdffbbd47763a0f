"""
Tests for the build flow module and result serialization.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from county_atlas.analysis import analyze, build_trend, correlation_to_dict, trend_to_dict
from county_atlas.flows import build
from county_atlas.flows.fetch import GEOMETRY_PATH, source_path
from county_atlas.reference.sources import (
    HYPERTENSION,
    HYPERTENSION_HISTORY,
    INCOME,
    ChoroplethView,
)
from county_atlas.schemas import GeoFeature
from county_atlas.store import DataStore

GEOJSON = {
    "type": "FeatureCollection",
    "features": [
        {"type": "Feature", "id": "13001", "properties": {"NAME": "Appling"}, "geometry": None},
        {"type": "Feature", "id": "13121", "properties": {"NAME": "Fulton"}, "geometry": None},
        {"type": "Feature", "id": "13005", "properties": {"NAME": "Bacon"}, "geometry": None},
        {"type": "Feature", "id": "01001", "properties": {"NAME": "Autauga"}, "geometry": None},
    ],
}

INCOME_CSV = """\
"Median Household Income"
County,FIPS,Value (Dollars)
"United States","00000","$74,755"
"Appling County","13001","$38,000"
"Fulton County","13121","$75,000"
Notes: 2022 dollars
"""

RATE_CSV = "county,rate\nAppling,45.2\nFulton,30.1\n"
HISTORY_CSV = "Year,Rate\n2015,30.0\n2020,33.0\n"


def seed_store(base_dir: Path, sources: dict[str, str], geometry: bool = True) -> DataStore:
    """Populate a store the way the fetch flow would."""
    ds = DataStore(base_dir)
    valid = datetime.now(UTC) + timedelta(days=1)
    if geometry:
        ds.write(GEOMETRY_PATH, GEOJSON, source="test", valid_until=valid)
    specs = {s.name: s for s in (INCOME, HYPERTENSION, HYPERTENSION_HISTORY)}
    for name, text in sources.items():
        ds.write_text(source_path(specs[name]), text, source="test", valid_until=valid)
    return ds


class TestLoadTasks:
    """Test loading cached inputs."""

    def test_load_geometry_filters_state(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(build, "store", seed_store(tmp_path, {}))

        features = build.load_geometry("13")

        assert features is not None
        assert [f.id for f in features] == ["13001", "13121", "13005"]

    def test_load_geometry_missing(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(build, "store", DataStore(tmp_path))
        assert build.load_geometry("13") is None

    def test_load_source(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(build, "store", seed_store(tmp_path, {"hypertension": RATE_CSV}))
        assert build.load_source(HYPERTENSION) == RATE_CSV
        assert build.load_source(INCOME) is None


class TestBuildChoropleth:
    """Test one map layer."""

    def test_payload(self) -> None:
        dataset = build.build_dataset(INCOME, INCOME_CSV)
        features = [
            GeoFeature(id="13001", name="Appling", properties={"NAME": "Appling"}),
            GeoFeature(id="13005", name="Bacon", properties={"NAME": "Bacon"}),
        ]

        payload = build.build_choropleth(
            ChoroplethView("income_map", INCOME), features, dataset, 0.9
        )

        assert payload["type"] == "FeatureCollection"
        assert payload["matched_count"] == 1
        assert payload["total"] == 2
        assert payload["unmatched"] == ["Bacon"]
        assert payload["value_domain"] == [38000.0, 75000.0]
        props = [f["properties"] for f in payload["features"]]
        assert props[0] == {"NAME": "Appling", "value": 38000.0, "matched": True}
        assert props[1] == {"NAME": "Bacon", "value": None, "matched": False}


class TestSerialization:
    """Test JSON shapes of analysis results."""

    def test_correlation_to_dict(self) -> None:
        result = analyze([0, 1, 2, 3, 4], [0, 2, 0, 4, 4], ["A", "B", "C", "D", "E"])
        payload = correlation_to_dict(result)
        assert payload["n"] == 5
        assert payload["slope"] == 1.0
        assert payload["correlation"] == round(result.correlation, 3)
        assert payload["trend_line"] == [[0.0, 0.0], [4.0, 4.0]]
        assert payload["extrema"]["max_y"] == {"county": "D", "x": 3.0, "y": 4.0}
        assert [o["county"] for o in payload["outliers"]] == ["C", "B", "D"]
        assert [p["county"] for p in payload["points_of_interest"]] == ["D", "A", "E", "C", "B"]

    def test_trend_to_dict(self) -> None:
        summary = build_trend([{"y": "2015", "v": "30"}, {"y": "2020", "v": "33"}])
        payload = trend_to_dict(summary)
        assert payload["first"] == {"period": "2015", "value": 30.0}
        assert payload["change"] == 3.0
        assert payload["percent_change"] == 10.0
        assert len(payload["points"]) == 2


class TestBuildAllFlow:
    """Test the main build flow."""

    def test_build_all_no_inputs(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(build, "store", DataStore(tmp_path))

        result = build.build_all(state_prefix="13")

        assert result["outputs"] == {}
        assert "income_map" in result["skipped"]
        assert "income_vs_hypertension" in result["skipped"]
        assert "hypertension_history" in result["skipped"]

    def test_build_all_with_data(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        ds = seed_store(
            tmp_path,
            {"income": INCOME_CSV, "hypertension": RATE_CSV, "hypertension_history": HISTORY_CSV},
        )
        monkeypatch.setattr(build, "store", ds)

        result = build.build_all(state_prefix="13", outlier_count=1, min_match_fraction=0.5)

        assert set(result["outputs"]) == {
            "income_map",
            "hypertension_map",
            "income_vs_hypertension",
            "hypertension_history",
        }
        assert result["skipped"] == ["black_population_map"]

        income_map = ds.read(Path("derived/income_map.json"))
        assert income_map["total"] == 3
        assert income_map["matched_count"] == 2
        assert income_map["unmatched"] == ["Bacon"]

        scatter = ds.read(Path("derived/income_vs_hypertension.json"))
        assert scatter["n"] == 2
        assert scatter["slope"] < 0
        assert scatter["extrema"]["max_x"]["county"] == "Fulton"
        assert scatter["extrema"]["max_x"]["x"] == pytest.approx(75.0)
        assert len(scatter["outliers"]) == 1

        history = ds.read(Path("derived/hypertension_history.json"))
        assert history["last"]["period"] == "2020"

    def test_build_all_without_geometry_still_builds_scatter(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        ds = seed_store(tmp_path, {"income": INCOME_CSV, "hypertension": RATE_CSV}, geometry=False)
        monkeypatch.setattr(build, "store", ds)

        result = build.build_all(state_prefix="13")

        assert list(result["outputs"]) == ["income_vs_hypertension"]
        assert "income_map" in result["skipped"]

    def test_build_all_unusable_extract_skipped(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        ds = seed_store(tmp_path, {"income": INCOME_CSV, "hypertension": "county,rate\n"})
        monkeypatch.setattr(build, "store", ds)

        result = build.build_all(state_prefix="13")

        assert "income_map" in result["outputs"]
        assert "hypertension_map" in result["skipped"]
        assert "income_vs_hypertension" in result["skipped"]

    def test_build_all_degenerate_scatter_skipped(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        ds = seed_store(
            tmp_path, {"income": INCOME_CSV, "hypertension": "county,rate\nFulton,30.1\n"}
        )
        monkeypatch.setattr(build, "store", ds)

        result = build.build_all(state_prefix="13")

        assert "hypertension_map" in result["outputs"]
        assert "income_vs_hypertension" in result["skipped"]
