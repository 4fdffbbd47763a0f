"""Read raw CSV extracts from disk or over HTTP."""

from __future__ import annotations

from pathlib import Path

import requests

from county_atlas.errors import SourceUnavailableError
from county_atlas.services.http import session


def read_source(location: str | Path, encoding: str = "utf-8-sig") -> str:
    """Return the full text of a CSV extract.

    Args:
        location: Local path, or an ``http(s)://`` URL.
        encoding: Text encoding for local files; the default drops a UTF-8 BOM.

    Raises:
        SourceUnavailableError: The file is missing or the request failed.
    """
    loc = str(location)
    if loc.startswith(("http://", "https://")):
        try:
            resp = session.get(loc)
            resp.raise_for_status()
        except requests.RequestException as exc:
            msg = f"Failed to fetch {loc}: {exc}"
            raise SourceUnavailableError(msg) from exc
        return resp.text

    path = Path(loc)
    try:
        return path.read_text(encoding=encoding)
    except OSError as exc:
        msg = f"Failed to read {path}: {exc}"
        raise SourceUnavailableError(msg) from exc
