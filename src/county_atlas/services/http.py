"""
Shared HTTP client for pulling source extracts and the geometry feed.

A ``requests.Session`` with urllib3 retry/backoff mounted for transient
failures (connection resets, 429, 502-504) and a default timeout injected
into every request. The county GeoJSON is a ~25 MB download, so the
default timeout is generous.

Usage::

    from county_atlas.services.http import session

    resp = session.get(url)
    resp.raise_for_status()
"""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from county_atlas import __version__

DEFAULT_RETRY = Retry(
    total=3,
    backoff_factor=1,  # 0s, 1s, 2s
    status_forcelist=[429, 502, 503, 504],
    allowed_methods=["GET", "HEAD"],
    raise_on_status=False,  # resp.raise_for_status() reports the final status
)

DEFAULT_TIMEOUT = 60  # seconds

USER_AGENT = f"county-atlas/{__version__}"


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Session:
    """
    Build a session with the retry adapter mounted for http and https.

    Args:
        retry: Custom retry strategy (defaults to ``DEFAULT_RETRY``).
        timeout: Timeout applied when a caller does not pass one.
    """
    s = requests.Session()
    adapter = HTTPAdapter(max_retries=retry or DEFAULT_RETRY)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = USER_AGENT

    _original_send = s.send

    def _send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: object
    ) -> requests.Response:
        # Session.request always forwards timeout=None when the caller omits it.
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = timeout
        return _original_send(prepared, **kwargs)  # type: ignore[arg-type]

    s.send = _send_with_timeout  # type: ignore[method-assign]
    return s


#: Module-level session shared by all datasource clients.
session: requests.Session = create_session()
