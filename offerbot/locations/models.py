from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

from ..geo.distance import GeoPoint

STREET_TYPES = ("ROUTE",)
POSTCODE_TYPES = ("POSTAL_CODE",)


class ResolvedLocation(BaseModel):
    name: str
    types: list[str] = Field(default_factory=list)
    center: GeoPoint | None = None
    northeast: GeoPoint | None = None
    southwest: GeoPoint | None = None
    is_full_postcode: bool = False
    is_street: bool = False

    @model_validator(mode="after")
    def _require_point_or_box(self) -> "ResolvedLocation":
        if self.center is None and (self.northeast is None or self.southwest is None):
            raise ValueError("a location needs a center point or a northeast/southwest box")
        return self

    @property
    def primary_type(self) -> str | None:
        return self.types[0] if self.types else None

    @property
    def is_precise(self) -> bool:
        """True when the user gave a full postcode or a street, not a locality."""
        return self.is_full_postcode or self.is_street

    def header_suffix(self) -> str:
        if self.primary_type in STREET_TYPES + POSTCODE_TYPES:
            return f"near {self.name}"
        return f"in {self.name}"


def _point_from_payload(payload: dict[str, Any] | None) -> GeoPoint | None:
    if not payload:
        return None
    return GeoPoint(lat=float(payload["latitude"]), lon=float(payload["longitude"]))


def location_from_geometry(geometry: dict[str, Any], *, is_full_postcode: bool = False) -> ResolvedLocation:
    """Build a ``ResolvedLocation`` from a geocoder ``geometry`` payload."""
    types = [str(t) for t in geometry.get("types") or []]
    return ResolvedLocation(
        name=str(geometry.get("name", "")),
        types=types,
        center=_point_from_payload(geometry.get("center")),
        northeast=_point_from_payload(geometry.get("northeast")),
        southwest=_point_from_payload(geometry.get("southwest")),
        is_full_postcode=is_full_postcode or bool(geometry.get("isFullPostcode")),
        is_street=bool(geometry.get("isStreet")) or any(t in STREET_TYPES for t in types),
    )


class SaveLocationRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1, max_length=200)
