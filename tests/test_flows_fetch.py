"""
Tests for the fetch flow module.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from county_atlas.errors import SourceUnavailableError
from county_atlas.flows import fetch
from county_atlas.reference.sources import BLACK_POPULATION, HYPERTENSION, INCOME
from county_atlas.store import DataStore

GEOJSON = {
    "type": "FeatureCollection",
    "features": [
        {"type": "Feature", "id": "13001", "properties": {"NAME": "Appling"}, "geometry": None},
        {"type": "Feature", "id": "13121", "properties": {"NAME": "Fulton"}, "geometry": None},
    ],
}

INCOME_CSV = 'County,FIPS,Value (Dollars)\n"Appling County","13001","$38,000"\n'
RATE_CSV = "county,rate\nAppling,45.2\n"


class TestSourceLocation:
    """Test where extracts are read from."""

    def test_local_dir(self, tmp_path: Path) -> None:
        assert fetch.source_location(INCOME, tmp_path) == str(tmp_path / "GeorgiaIncomeData.csv")

    def test_base_url_quotes_filename(self, tmp_path: Path) -> None:
        location = fetch.source_location(BLACK_POPULATION, tmp_path, "https://example.com/data/")
        assert location == "https://example.com/data/georgia%20race%20population%20-%20Sheet1.csv"

    def test_source_path(self) -> None:
        assert fetch.source_path(HYPERTENSION) == Path("sources/HypertensionCountyData.csv")


class TestFetchTasks:
    """Test individual fetch and save tasks."""

    @patch("county_atlas.datasources.geometry.client.session.get")
    def test_fetch_geometry(self, mock_get: Mock) -> None:
        mock_response = Mock()
        mock_response.json.return_value = GEOJSON
        mock_response.raise_for_status = Mock()
        mock_get.return_value = mock_response

        result = fetch.fetch_geometry("https://example.com/counties.json")

        assert len(result["features"]) == 2
        mock_get.assert_called_once_with("https://example.com/counties.json")

    def test_save_geometry(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(fetch, "store", DataStore(tmp_path))

        path = fetch.save_geometry(GEOJSON, "https://example.com/counties.json")

        envelope = json.loads(path.read_text())
        assert envelope["meta"]["source"] == "https://example.com/counties.json"
        assert envelope["data"] == GEOJSON
        expiry = datetime.fromisoformat(envelope["meta"]["valid_until"])
        assert expiry > datetime.now(UTC) + timedelta(days=80)

    def test_fetch_source_local(self, tmp_path: Path) -> None:
        src = tmp_path / "rates.csv"
        src.write_text(RATE_CSV)
        assert fetch.fetch_source(str(src)) == RATE_CSV

    def test_save_source(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(fetch, "store", DataStore(tmp_path))

        path = fetch.save_source(HYPERTENSION, RATE_CSV, "local/rates.csv")

        assert path == tmp_path / "sources" / "HypertensionCountyData.csv"
        assert path.read_text() == RATE_CSV
        meta = json.loads(path.with_suffix(".csv.meta.json").read_text())["meta"]
        assert meta["layout"] == "rate"
        assert meta["source"] == "local/rates.csv"


class TestFetchAllFlow:
    """Test the main fetch flow."""

    @patch("county_atlas.flows.fetch.fetch_county_geojson")
    def test_fetch_all(
        self, mock_geo: Mock, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(fetch, "store", DataStore(tmp_path / "data"))
        mock_geo.return_value = GEOJSON
        src = tmp_path / "extracts"
        src.mkdir()
        (src / INCOME.filename).write_text(INCOME_CSV)
        (src / HYPERTENSION.filename).write_text(RATE_CSV)

        result = fetch.fetch_all(geojson_url="https://example.com/g.json", sources_dir=src)

        assert result["features"] == 2
        assert result["sources"] == ["income", "hypertension"]
        assert result["missing"] == ["black_population", "hypertension_history"]
        store = fetch.store
        assert store.read(fetch.GEOMETRY_PATH) == GEOJSON
        assert store.read_text(fetch.source_path(INCOME)) == INCOME_CSV

    @patch("county_atlas.flows.fetch.read_source")
    @patch("county_atlas.flows.fetch.fetch_county_geojson")
    def test_fresh_entries_skipped(
        self,
        mock_geo: Mock,
        mock_read: Mock,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(fetch, "store", DataStore(tmp_path))
        mock_geo.return_value = GEOJSON
        mock_read.return_value = RATE_CSV

        fetch.fetch_all(geojson_url="https://example.com/g.json", sources_dir=tmp_path)
        fetch.fetch_all(geojson_url="https://example.com/g.json", sources_dir=tmp_path)

        assert mock_geo.call_count == 1
        assert mock_read.call_count == 4

    @patch("county_atlas.flows.fetch.read_source")
    @patch("county_atlas.flows.fetch.fetch_county_geojson")
    def test_base_url_used(
        self,
        mock_geo: Mock,
        mock_read: Mock,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(fetch, "store", DataStore(tmp_path))
        mock_geo.return_value = GEOJSON
        mock_read.side_effect = SourceUnavailableError("404")

        result = fetch.fetch_all(
            geojson_url="https://example.com/g.json",
            sources_base_url="https://example.com/extracts",
        )

        assert result["sources"] == []
        assert len(result["missing"]) == 4
        first_location = mock_read.call_args_list[0].args[0]
        assert first_location == "https://example.com/extracts/GeorgiaIncomeData.csv"
