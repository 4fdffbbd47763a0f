"""
Application settings.

Values are read from ``COUNTY_ATLAS_*`` environment variables or a local
``.env`` file. Per-visualization options (rescale factors, accepted value
ranges) are not settings; see ``reference/sources.py``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PLOTLY_COUNTY_GEOJSON = (
    "https://raw.githubusercontent.com/plotly/datasets/master/geojson-counties-fips.json"
)


class Settings(BaseSettings):
    """Runtime configuration for the county pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="COUNTY_ATLAS_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "County Atlas"
    app_env: str = "development"
    debug: bool = False

    log_level: str = "INFO"
    log_format: str = Field(default="console", pattern="^(console|json)$")

    data_dir: Path = Path("data")
    sources_dir: Path = Path("data/sources")
    sources_base_url: str | None = None
    geojson_url: str = PLOTLY_COUNTY_GEOJSON
    state_fips_prefix: str = "13"

    outlier_count: int = Field(default=3, ge=0)
    min_match_fraction: float = Field(default=0.9, ge=0.0, le=1.0)


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
