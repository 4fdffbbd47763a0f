"""
Domain models for externally supplied data.

Pydantic models validate the geometry feed at the boundary; everything
downstream of parsing works with frozen dataclasses.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

#: Property that carries the county display name in the Plotly/Census feed.
DEFAULT_NAME_PROPERTY = "NAME"


class GeoFeature(BaseModel):
    """One polygon feature from a county boundary collection.

    Only ``name`` participates in joins; ``geometry`` is carried through
    untouched for the rendering layer.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Region identifier (county FIPS in the default feed)")
    name: str | None = Field(default=None, description="Display name used for joining")
    geometry: dict[str, Any] | None = None
    properties: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        if value is None:
            msg = "feature id is required"
            raise ValueError(msg)
        return str(value)

    @classmethod
    def from_geojson(
        cls, feature: dict[str, Any], name_property: str = DEFAULT_NAME_PROPERTY
    ) -> GeoFeature:
        """Build from a GeoJSON ``Feature`` dict."""
        properties = feature.get("properties") or {}
        feature_id = feature.get("id")
        if feature_id is None:
            feature_id = properties.get("GEO_ID") or properties.get("id")
        name = properties.get(name_property)
        return cls(
            id=feature_id,
            name=str(name) if name is not None else None,
            geometry=feature.get("geometry"),
            properties=properties,
        )

    def to_geojson(self) -> dict[str, Any]:
        """Return a GeoJSON ``Feature`` dict."""
        return {
            "type": "Feature",
            "id": self.id,
            "properties": self.properties,
            "geometry": self.geometry,
        }
