"""In-memory county lookup built from parsed records.

A :class:`CountyDataset` is built once per source load and never mutated.
Rows are keyed by :func:`~county_atlas.counties.keys.normalize`; when two
rows normalize to the same key the later row wins and the key is recorded
in ``duplicate_keys`` so data-quality checks can report it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

import structlog

from county_atlas.counties.keys import display_name, normalize, variants_of
from county_atlas.datasources.tables.models import Record
from county_atlas.datasources.tables.parser import parse_number
from county_atlas.errors import ParseError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CountyValue:
    """Numeric fields for one county."""

    key: str
    label: str
    values: Mapping[str, float]


@dataclass(frozen=True)
class CountyDataset:
    """Read-only mapping of county key -> named numeric values."""

    entries: Mapping[str, CountyValue]
    value_fields: tuple[str, ...]
    source: str = ""
    duplicate_keys: tuple[str, ...] = ()
    rows_skipped: int = 0

    @classmethod
    def build(
        cls,
        records: Iterable[Record],
        name_field: str,
        value_fields: Iterable[str],
        *,
        scale: float | Mapping[str, float] = 1.0,
        source: str = "",
    ) -> CountyDataset:
        """Key records by normalized county name.

        Args:
            records: Parsed rows, in file order.
            name_field: Field holding the county display name.
            value_fields: Fields to convert to numbers. A row missing any of
                them, or holding a non-numeric value, is skipped.
            scale: Multiplier applied to every value, or a per-field mapping
                (fields not in the mapping are left as-is). Income is shown in
                dollars on the map and in thousands on the scatter plot.
            source: Label used in logs and error messages.

        Raises:
            ParseError: No record produced a usable entry.
        """
        fields = tuple(value_fields)
        factors = (
            {name: scale.get(name, 1.0) for name in fields}
            if isinstance(scale, Mapping)
            else dict.fromkeys(fields, float(scale))
        )

        entries: dict[str, CountyValue] = {}
        duplicates: list[str] = []
        skipped = 0

        for record in records:
            raw_name = record.get(name_field, "")
            key = normalize(raw_name)
            if not key:
                skipped += 1
                continue

            values: dict[str, float] = {}
            for name in fields:
                number = parse_number(record.get(name, ""), allow_non_positive=True)
                if number is None:
                    break
                values[name] = number * factors[name]
            else:
                if key in entries:
                    duplicates.append(key)
                entries[key] = CountyValue(
                    key=key, label=display_name(raw_name), values=MappingProxyType(values)
                )
                continue
            skipped += 1

        label = source or "dataset"
        if not entries:
            msg = f"{label}: no usable county rows"
            raise ParseError(msg)

        if duplicates:
            logger.warning("duplicate_county_keys", source=label, keys=sorted(set(duplicates)))
        logger.debug("dataset_built", source=label, counties=len(entries), skipped=skipped)

        return cls(
            entries=MappingProxyType(entries),
            value_fields=fields,
            source=source,
            duplicate_keys=tuple(duplicates),
            rows_skipped=skipped,
        )

    def get(self, raw_name: str) -> CountyValue | None:
        """Return the entry for a raw display name, trying each name variant."""
        for candidate in variants_of(raw_name):
            entry = self.entries.get(candidate)
            if entry is not None:
                return entry
        return None

    def lookup(self, raw_name: str) -> Mapping[str, float] | None:
        """Return the value mapping for a raw display name, or None if absent."""
        entry = self.get(raw_name)
        return entry.values if entry is not None else None

    def value(self, raw_name: str, field_name: str) -> float | None:
        """Return one numeric field for a raw display name, or None."""
        values = self.lookup(raw_name)
        if values is None:
            return None
        return values.get(field_name)

    def value_range(self, field_name: str) -> tuple[float, float]:
        """Return (min, max) of a field across all counties."""
        numbers = [e.values[field_name] for e in self.entries.values() if field_name in e.values]
        if not numbers:
            msg = f"{self.source or 'dataset'} has no values for field {field_name!r}"
            raise KeyError(msg)
        return min(numbers), max(numbers)

    def keys(self) -> tuple[str, ...]:
        """County keys in insertion order."""
        return tuple(self.entries)

    def __iter__(self) -> Iterator[CountyValue]:
        return iter(self.entries.values())

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, raw_name: object) -> bool:
        return isinstance(raw_name, str) and self.get(raw_name) is not None
