from __future__ import annotations

from typing import Any

import pytest

from offerbot.history.saved_locations import InMemorySavedLocations
from offerbot.history.searches import InMemorySearchHistory

CATALOG_PAYLOAD: dict[str, Any] = {
    "cuisineTypes": [
        {"name": "Chinese"},
        {"name": "Italian"},
        {"name": "Middle Eastern"},
        {"name": "Burgers"},
    ],
    "restaurants": [
        {"id": "r1", "name": "Boca Empanadas"},
        {"id": "r2", "name": "Pho & Bun"},
        {"id": "r3", "name": "Thali Cafe (Clifton)"},
        {"id": "r4", "name": "Thali Cafe (Southville)"},
        {"id": "r5", "name": "Thali Cafe (Totterdown)"},
        {"id": "r6", "name": "Thali Cafe (Montpelier)"},
        {"id": "r7", "name": "Thali Cafe (Easton)"},
        {"id": "r8", "name": "Pizza Union @ Aldgate"},
    ],
}


def _point(lat: float, lon: float) -> dict[str, float]:
    return {"latitude": lat, "longitude": lon}


GEOMETRIES: dict[str, dict[str, Any]] = {
    "old street": {
        "name": "Old St",
        "types": ["ROUTE"],
        "center": _point(51.5256, -0.0875),
        "northeast": _point(51.5262, -0.0850),
        "southwest": _point(51.5250, -0.0900),
    },
    "old st": {
        "name": "Old St",
        "types": ["ROUTE"],
        "center": _point(51.5256, -0.0875),
    },
    "n1 8ju": {
        "name": "Danbury St",
        "types": ["POSTAL_CODE"],
        "center": _point(51.5340, -0.1000),
    },
    "shoreditch": {
        "name": "Shoreditch",
        "types": ["NEIGHBORHOOD", "POLITICAL"],
        "center": _point(51.5246, -0.0779),
        "northeast": _point(51.5350, -0.0650),
        "southwest": _point(51.5150, -0.0900),
    },
    "soho": {
        "name": "Soho",
        "types": ["NEIGHBORHOOD"],
        "center": _point(51.5136, -0.1365),
    },
    "bristol": {
        "name": "Bristol",
        "types": ["LOCALITY"],
        "center": _point(51.4545, -2.5879),
        "northeast": _point(51.5444, -2.4502),
        "southwest": _point(51.3925, -2.7305),
    },
}


class FakeGeocoder:
    """Geocoder double keyed on lowercased place names; records every lookup."""

    def __init__(self, geometries: dict[str, dict[str, Any]] | None = None) -> None:
        self.geometries = dict(GEOMETRIES if geometries is None else geometries)
        self.calls: list[str] = []

    async def __call__(self, place_name: str) -> dict[str, Any] | None:
        self.calls.append(place_name)
        return self.geometries.get(place_name.lower().strip())


@pytest.fixture
def catalog_payload() -> dict[str, Any]:
    return CATALOG_PAYLOAD


@pytest.fixture
def geometries() -> dict[str, dict[str, Any]]:
    return GEOMETRIES


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest.fixture
def history() -> InMemorySearchHistory:
    return InMemorySearchHistory()


@pytest.fixture
def saved_locations() -> InMemorySavedLocations:
    return InMemorySavedLocations()
