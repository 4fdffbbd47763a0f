"""Tiered on-disk cache for raw inputs and derived outputs.

Tiers by update frequency:
  - reference/: county boundary GeoJSON, 90-day TTL
  - sources/:   raw CSV extracts as fetched, 24h TTL
  - derived/:   join/analysis JSON written by the build flow, no TTL

JSON payloads are wrapped in a ``{"meta": ..., "data": ...}`` envelope.
Raw text (CSV) is stored verbatim with a ``.meta.json`` sidecar so the
parser sees exactly the bytes that were fetched.

Every write goes to a temporary file in the target directory and is moved
into place with ``os.replace``: a reader sees either the previous version
or the new one, never a partial file.
"""

from __future__ import annotations

import json
import os
import tempfile
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003
from typing import Any


class DataStore:
    """Reads and writes cached files with freshness metadata."""

    def __init__(self, base_dir: Path) -> None:
        self.base = base_dir
        self.reference = base_dir / "reference"
        self.sources = base_dir / "sources"
        self.derived = base_dir / "derived"

    def read(self, path: Path) -> Any:
        """Return the ``data`` payload of an enveloped JSON file, or None if missing."""
        envelope = self.read_raw(path)
        if envelope is None:
            return None
        return envelope.get("data", envelope)

    def read_raw(self, path: Path) -> dict[str, Any] | None:
        """Read the full envelope (meta + data) from a JSON file."""
        full = self._resolve(path)
        if not full.exists():
            return None
        with full.open(encoding="utf-8") as f:
            result: dict[str, Any] = json.load(f)
        return result

    def read_text(self, path: Path) -> str | None:
        """Return raw text stored with :meth:`write_text`, or None if missing."""
        full = self._resolve(path)
        if not full.exists():
            return None
        return full.read_text(encoding="utf-8")

    def write(
        self,
        path: Path,
        data: Any,
        source: str,
        valid_until: datetime | None = None,
        **params: Any,
    ) -> Path:
        """Write data wrapped in a metadata envelope.

        Args:
            path: Relative path under base_dir (e.g. ``derived/income_map.json``).
            data: JSON-serializable payload stored under ``data``.
            source: Where the payload came from (URL, file name, flow name).
            valid_until: Expiry timestamp. None means never fresh.
            **params: Extra metadata fields.

        Returns:
            Absolute path of the written file.
        """
        full = self._resolve(path)
        envelope = {"meta": self._meta(source, valid_until, params), "data": data}
        self._atomic_write(full, json.dumps(envelope, indent=2))
        return full

    def write_text(
        self,
        path: Path,
        text: str,
        source: str,
        valid_until: datetime | None = None,
        **params: Any,
    ) -> Path:
        """Store raw text verbatim with a ``.meta.json`` sidecar.

        Args:
            path: Relative destination (e.g. ``sources/GeorgiaIncomeData.csv``).
            text: File content.
            source: Origin of the text.
            valid_until: Expiry timestamp.
            **params: Extra metadata fields.

        Returns:
            Absolute path of the stored file.
        """
        full = self._resolve(path)
        self._atomic_write(full, text)
        sidecar = full.with_suffix(full.suffix + ".meta.json")
        self._atomic_write(
            sidecar, json.dumps({"meta": self._meta(source, valid_until, params)}, indent=2)
        )
        return full

    def file_path(self, path: Path) -> Path | None:
        """Return the absolute path of a stored file, or None if missing."""
        full = self._resolve(path)
        return full if full.exists() else None

    def is_fresh(self, path: Path) -> bool:
        """Check if a file exists and its ``valid_until`` has not passed.

        Works for both JSON envelopes and sidecar-described text files.
        """
        full = self._resolve(path)
        if not full.exists():
            return False

        valid_until = self._read_meta(full).get("valid_until")
        if valid_until is None:
            return False

        expiry = datetime.fromisoformat(valid_until)
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=UTC)
        return datetime.now(UTC) < expiry

    @staticmethod
    def _meta(source: str, valid_until: datetime | None, params: dict[str, Any]) -> dict[str, Any]:
        meta: dict[str, Any] = {
            "source": source,
            "fetched_at": datetime.now(UTC).isoformat(),
        }
        if valid_until is not None:
            meta["valid_until"] = valid_until.isoformat()
        meta.update(params)
        return meta

    @staticmethod
    def _atomic_write(full: Path, content: str) -> None:
        full.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=full.parent, prefix=f".{full.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, full)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _resolve(self, path: Path) -> Path:
        full = self.base / path if not path.is_absolute() else path
        try:
            full.resolve().relative_to(self.base.resolve())
        except ValueError:
            msg = f"Path escapes store base directory: {path}"
            raise ValueError(msg) from None
        return full

    def _read_meta(self, full: Path) -> dict[str, Any]:
        """Read metadata from a sidecar ``.meta.json`` or an embedded envelope."""
        sidecar = full.with_suffix(full.suffix + ".meta.json")
        if sidecar.exists():
            with sidecar.open(encoding="utf-8") as f:
                result: dict[str, Any] = json.load(f)
            return result.get("meta", {})

        if full.suffix == ".json":
            with full.open(encoding="utf-8") as f:
                envelope: dict[str, Any] = json.load(f)
            return envelope.get("meta", {})

        return {}
