"""Tests for the keyed county dataset."""

from __future__ import annotations

import pytest

from county_atlas.counties import CountyDataset
from county_atlas.datasources.tables import INCOME_LAYOUT, parse_records
from county_atlas.errors import ParseError


def _income(*rows: tuple[str, str]) -> CountyDataset:
    records = [{"County": name, "Value": value} for name, value in rows]
    return CountyDataset.build(records, "County", ["Value"], source="income")


class TestBuild:
    """Test dataset construction from records."""

    def test_keys_in_input_order(self) -> None:
        ds = _income(("Fulton County", "$75,000"), ("Appling County", "$38,000"))
        assert ds.keys() == ("fulton", "appling")
        assert len(ds) == 2

    def test_values_parsed(self) -> None:
        ds = _income(("Fulton County", "$75,000"))
        assert ds.lookup("Fulton") == {"Value": 75000.0}

    def test_label_drops_suffix(self) -> None:
        ds = _income(("Fulton County", "1"))
        assert next(iter(ds)).label == "Fulton"

    def test_last_write_wins(self) -> None:
        ds = _income(("Fulton County", "1"), ("Cobb", "2"), ("FULTON", "3"))
        assert ds.value("Fulton", "Value") == 3.0
        assert ds.keys() == ("fulton", "cobb")
        assert ds.duplicate_keys == ("fulton",)

    def test_bad_rows_skipped(self) -> None:
        ds = _income(("Fulton", "1"), ("", "5"), ("Cobb", "n/a"))
        assert ds.keys() == ("fulton",)
        assert ds.rows_skipped == 2

    def test_zero_kept(self) -> None:
        ds = _income(("Taliaferro", "0"))
        assert ds.value("Taliaferro", "Value") == 0.0

    def test_scalar_scale(self) -> None:
        records = [{"County": "Fulton", "Value": "$75,000"}]
        ds = CountyDataset.build(records, "County", ["Value"], scale=0.001)
        assert ds.value("Fulton", "Value") == pytest.approx(75.0)

    def test_per_field_scale(self) -> None:
        records = [{"County": "Fulton", "a": "10", "b": "10"}]
        ds = CountyDataset.build(records, "County", ["a", "b"], scale={"a": 2.0})
        assert ds.lookup("Fulton") == {"a": 20.0, "b": 10.0}

    def test_no_usable_rows_raises(self) -> None:
        with pytest.raises(ParseError, match="income: no usable county rows"):
            _income(("", "1"), ("Cobb", "n/a"))

    def test_empty_records_raise(self) -> None:
        with pytest.raises(ParseError):
            CountyDataset.build([], "County", ["Value"])

    def test_entries_read_only(self) -> None:
        ds = _income(("Fulton", "1"))
        with pytest.raises(TypeError):
            ds.entries["cobb"] = ds.entries["fulton"]  # type: ignore[index]

    def test_from_parsed_income_extract(self) -> None:
        text = (
            "County,FIPS,Value (Dollars)\n"
            '"Appling County","13001","$38,000"\n'
            '"Fulton County","13121","$75,000"\n'
        )
        table = parse_records(text, INCOME_LAYOUT)
        ds = CountyDataset.build(table.records, "County", ["Value"])
        assert ds.value("Appling", "Value") == 38000.0


class TestLookup:
    """Test name-variant lookups."""

    @pytest.mark.parametrize(
        "name", ["Fulton", "Fulton County", "FULTON", "  fulton  county ", "fulton."]
    )
    def test_variants_resolve(self, name: str) -> None:
        ds = _income(("Fulton County", "$75,000"))
        assert ds.lookup(name) == {"Value": 75000.0}

    def test_missing_county(self) -> None:
        ds = _income(("Fulton County", "1"))
        assert ds.lookup("Cobb") is None
        assert ds.value("Cobb", "Value") is None
        assert ds.get("") is None

    def test_missing_field(self) -> None:
        ds = _income(("Fulton County", "1"))
        assert ds.value("Fulton", "rate") is None

    def test_contains(self) -> None:
        ds = _income(("Fulton County", "1"))
        assert "Fulton County" in ds
        assert "Cobb" not in ds
        assert 42 not in ds


class TestValueRange:
    """Test min/max over a field."""

    def test_range(self) -> None:
        ds = _income(("A", "5"), ("B", "1"), ("C", "9"))
        assert ds.value_range("Value") == (1.0, 9.0)

    def test_unknown_field_raises(self) -> None:
        ds = _income(("A", "5"))
        with pytest.raises(KeyError):
            ds.value_range("rate")
