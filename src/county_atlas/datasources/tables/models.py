"""Table parsing data models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

#: A parsed data row: ordered field name -> cleaned string value (read-only).
Record = Mapping[str, str]

DEFAULT_FOOTER_PREFIXES = ("Suggested", "Notes:")


@dataclass(frozen=True)
class ParseOptions:
    """Describes one delimited-text layout.

    Attributes:
        columns: Field names assigned by position. When None, names come from
            the header line (or the start-marker line).
        has_header: The first non-blank line is a header and is not data.
        start_marker: Data begins after the first line containing this text.
            Lines before it are ignored; the marker line itself is the header.
        footer_prefixes: Parsing stops at the first data line starting with
            any of these (only applies once a start marker has been seen).
        quoted: Split fields with the quote-aware scanner instead of a plain
            comma split.
        header_token: Skip rows whose first cleaned field equals this text
            (repeated headers inside the body).
        skip_names: Skip rows whose first cleaned field is one of these
            (aggregate rows like ``United States``).
        numeric_fields: Fields that must parse to a finite number, otherwise
            the row is dropped.
        allow_non_positive: Accept zero and negative numbers in
            ``numeric_fields``; by default only values > 0 are kept.
    """

    columns: tuple[str, ...] | None = None
    has_header: bool = False
    start_marker: str | None = None
    footer_prefixes: tuple[str, ...] = DEFAULT_FOOTER_PREFIXES
    quoted: bool = True
    header_token: str | None = None
    skip_names: frozenset[str] = frozenset()
    numeric_fields: tuple[str, ...] = ()
    allow_non_positive: bool = False


@dataclass(frozen=True)
class ParsedTable:
    """Records extracted from one source plus aggregate row diagnostics."""

    records: tuple[Record, ...] = ()
    columns: tuple[str, ...] = ()
    lines_seen: int = 0
    rows_dropped: int = 0
    header_rows_skipped: int = 0
    dropped_reasons: dict[str, int] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):  # type: ignore[no-untyped-def]
        return iter(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records
