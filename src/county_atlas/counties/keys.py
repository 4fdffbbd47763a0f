"""County name canonicalization.

Income exports say ``"Appling County"``, rate files say ``"Appling"``, the
boundary feed says ``"Appling"`` in one vintage and ``"Appling County"`` in
another. Every name is reduced to one comparable key:

    "  DeKalb   County " -> "dekalb"
    "St. Mary's Parish"  -> "st marys"

The variant set is deliberately tiny (with and without the ``county``
suffix). It does not resolve real spelling differences.
"""

from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")
_PUNCTUATION = re.compile(r"[^\w\s]")
_SUFFIX = re.compile(r"\s+(county|parish)$")
_DISPLAY_SUFFIX = re.compile(r"\s+(county|parish)$", re.IGNORECASE)

COUNTY_SUFFIX = " county"


def _squash(raw: str) -> str:
    """Lower-case, drop punctuation, collapse whitespace."""
    text = _PUNCTUATION.sub("", str(raw).lower())
    return _WHITESPACE.sub(" ", text).strip()


def normalize(raw: str) -> str:
    """Return the canonical county key for a display name.

    Lower-cases, removes punctuation, collapses whitespace and strips a
    trailing ``county`` / ``parish`` word.
    """
    return _SUFFIX.sub("", _squash(raw))


def variants_of(raw: str) -> tuple[str, ...]:
    """Return lookup candidates in priority order, without duplicates.

    Order: the normalized key, the key with a trailing ``" county"``
    removed, and that stem with ``" county"`` appended.
    """
    key = normalize(raw)
    if not key:
        return ()
    stem = key.removesuffix(COUNTY_SUFFIX)
    candidates = (key, stem, stem + COUNTY_SUFFIX)
    return tuple(dict.fromkeys(c for c in candidates if c))


def display_name(raw: str) -> str:
    """Human label: original casing, trimmed, ``County`` suffix removed."""
    text = _WHITESPACE.sub(" ", str(raw)).strip()
    return _DISPLAY_SUFFIX.sub("", text)
