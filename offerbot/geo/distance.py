from __future__ import annotations

import math

from pydantic import BaseModel

EARTH_RADIUS_IN_METERS = 6_371_000

# Bounding boxes at least this wide are searched as an area; smaller ones as a
# point plus radius.
AREA_SEARCH_THRESHOLD_METERS = 1200.0


class GeoPoint(BaseModel):
    lat: float
    lon: float

    def comma_separated(self) -> str:
        return f"{self.lat},{self.lon}"


def haversine_meters(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points, in meters."""
    d_lat = math.radians(b.lat - a.lat)
    d_lon = math.radians(b.lon - a.lon)

    half_chord = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat)) * math.cos(math.radians(b.lat)) * math.sin(d_lon / 2) ** 2
    )
    angular_distance = 2 * math.atan2(math.sqrt(half_chord), math.sqrt(1 - half_chord))
    return angular_distance * EARTH_RADIUS_IN_METERS


def is_area_search(
    northeast: GeoPoint | None,
    southwest: GeoPoint | None,
    threshold_meters: float = AREA_SEARCH_THRESHOLD_METERS,
) -> bool:
    if northeast is None or southwest is None:
        return False
    return haversine_meters(northeast, southwest) >= threshold_meters
