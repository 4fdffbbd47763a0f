"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from county_atlas.log import configure_logging


@pytest.fixture(autouse=True, scope="session")
def _stdlib_logging() -> None:
    """Route structlog through stdlib logging so log lines never land on stdout."""
    configure_logging("DEBUG")
