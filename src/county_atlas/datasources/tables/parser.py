"""Delimited-text parsing for the county CSV extracts.

Two shapes show up in the source files:

  - plain tables: an optional header line, then ``name,value`` rows with no
    quoting (hypertension rates, historical series);
  - report exports: free-text preamble, a header line that marks the start
    of the data body, quoted fields that may contain commas
    (``"$38,000"``), and trailing ``Notes:`` / ``Suggested citation`` lines.

Parsing is tolerant per row: rows that fail numeric validation are dropped
and counted, never raised. An empty result is returned as an empty
:class:`ParsedTable`; deciding that zero rows is fatal is the caller's job.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from types import MappingProxyType
from typing import Any

import structlog

from county_atlas.datasources.tables.models import ParsedTable, ParseOptions, Record

logger = structlog.get_logger(__name__)

_NON_NUMERIC = re.compile(r"[^0-9.]")


def split_fields(line: str, quoted: bool = True) -> list[str]:
    """Split one line on commas, honouring double quotes when ``quoted``.

    Quote characters toggle an in-quotes state and are dropped from the
    output; commas inside quotes are kept as field content. Every field is
    whitespace-trimmed.

    >>> split_fields('"Appling County","13001","$38,000"')
    ['Appling County', '13001', '$38,000']
    """
    if not quoted:
        return [part.strip() for part in line.split(",")]

    parts: list[str] = []
    current: list[str] = []
    in_quotes = False
    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    return [part.strip() for part in parts]


def parse_number(raw: Any, allow_non_positive: bool = False) -> float | None:
    """Parse a numeric field, stripping currency and grouping characters.

    Everything except digits and ``.`` is removed before conversion, so
    ``"$38,000"`` and ``"45.2%"`` both parse. A leading ``-`` on the trimmed
    input keeps the value negative.

    Args:
        raw: Field value; numbers pass through unchanged.
        allow_non_positive: Accept zero and negative values.

    Returns:
        The finite float, or None when the field is unusable.
    """
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        value = float(raw)
    else:
        text = str(raw).strip()
        cleaned = _NON_NUMERIC.sub("", text)
        if not cleaned:
            return None
        try:
            value = float(cleaned)
        except ValueError:
            return None
        if text.startswith("-"):
            value = -value

    if not math.isfinite(value):
        return None
    if value <= 0 and not allow_non_positive:
        return None
    return value


def _is_footer(line: str, prefixes: tuple[str, ...]) -> bool:
    return line.lstrip().lstrip('"').startswith(prefixes)


def _rejection(record: dict[str, str], options: ParseOptions) -> str | None:
    """Return why a record fails numeric validation, or None if it passes."""
    for name in options.numeric_fields:
        raw = record.get(name)
        if raw is None:
            return "missing_field"
        if parse_number(raw, options.allow_non_positive) is None:
            return "invalid_number"
    return None


def parse_records(text: str, options: ParseOptions | None = None) -> ParsedTable:
    """Parse delimited text into ordered, read-only records.

    Blank lines and a leading byte-order mark are ignored. Rows with more
    fields than there are column names lose the extras; rows with fewer
    simply lack the trailing fields.
    With neither ``columns`` nor a header, fields are named by position
    (``"0"``, ``"1"``, ...).

    Args:
        text: Full text of the source.
        options: Layout description; defaults to a header-less quoted table.

    Returns:
        ParsedTable with the surviving records in input order.
    """
    text = text.removeprefix("\ufeff")
    opts = options or ParseOptions()
    columns = opts.columns
    in_body = opts.start_marker is None
    header_pending = opts.has_header and opts.start_marker is None

    records: list[Record] = []
    reasons: Counter[str] = Counter()
    lines_seen = 0
    header_rows = 0

    for line in text.splitlines():
        if not line.strip():
            continue

        if not in_body:
            if opts.start_marker in line:  # type: ignore[operator]
                in_body = True
                header_rows += 1
                if columns is None:
                    columns = tuple(split_fields(line, opts.quoted))
            continue

        if opts.start_marker is not None and _is_footer(line, opts.footer_prefixes):
            break

        if header_pending:
            header_pending = False
            header_rows += 1
            if columns is None:
                columns = tuple(split_fields(line, opts.quoted))
            continue

        lines_seen += 1
        fields = split_fields(line, opts.quoted)
        first = fields[0]

        if opts.header_token is not None and first == opts.header_token:
            header_rows += 1
            continue
        if first in opts.skip_names:
            reasons["skipped_name"] += 1
            continue

        names = columns if columns is not None else tuple(str(i) for i in range(len(fields)))
        record = dict(zip(names, fields, strict=False))

        reason = _rejection(record, opts)
        if reason is not None:
            reasons[reason] += 1
            continue
        records.append(MappingProxyType(record))

    table = ParsedTable(
        records=tuple(records),
        columns=columns or (),
        lines_seen=lines_seen,
        rows_dropped=sum(reasons.values()),
        header_rows_skipped=header_rows,
        dropped_reasons=dict(reasons),
    )
    logger.debug(
        "table_parsed",
        records=len(table.records),
        lines_seen=lines_seen,
        rows_dropped=table.rows_dropped,
        reasons=table.dropped_reasons,
    )
    return table
