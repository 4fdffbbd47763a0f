"""Tests for county name canonicalization."""

from __future__ import annotations

import pytest

from county_atlas.counties import display_name, normalize, variants_of


class TestNormalize:
    """Test the canonical key function."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Appling County", "appling"),
            ("Appling", "appling"),
            ("  DeKalb   County ", "dekalb"),
            ("DEKALB", "dekalb"),
            ("St. Mary's Parish", "st marys"),
            ("Ben Hill County", "ben hill"),
            ("", ""),
        ],
    )
    def test_canonical_keys(self, raw: str, expected: str) -> None:
        assert normalize(raw) == expected

    def test_suffix_variants_share_a_key(self) -> None:
        assert normalize("Fulton County") == normalize("fulton") == normalize("FULTON")

    def test_idempotent(self) -> None:
        for raw in ["Appling County", "St. Mary's Parish", " Ben  Hill "]:
            assert normalize(normalize(raw)) == normalize(raw)

    def test_word_county_alone_kept(self) -> None:
        assert normalize("County") == "county"


class TestVariantsOf:
    """Test lookup candidate generation."""

    def test_key_first(self) -> None:
        assert variants_of("Fulton County")[0] == "fulton"

    def test_includes_county_suffixed_form(self) -> None:
        assert variants_of("Fulton") == ("fulton", "fulton county")

    def test_no_duplicates(self) -> None:
        variants = variants_of("Cobb County")
        assert len(variants) == len(set(variants))

    def test_empty_name(self) -> None:
        assert variants_of("   ") == ()


class TestDisplayName:
    """Test the human-readable label."""

    def test_suffix_removed_case_preserved(self) -> None:
        assert display_name("DeKalb County") == "DeKalb"

    def test_whitespace_collapsed(self) -> None:
        assert display_name("  Ben   Hill  county ") == "Ben Hill"

    def test_plain_name_unchanged(self) -> None:
        assert display_name("Appling") == "Appling"
