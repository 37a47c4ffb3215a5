from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from ..locations.models import ResolvedLocation

SAVED_LOCATION_OPTIONS: dict[str, str] = {
    "work": 'If you save this location, you can just type "lunch near work" in the future.',
    "home": 'If you save this location, you can just type "dinner near home" in the future.',
}


def is_saved_location_option(name: str) -> bool:
    return name in SAVED_LOCATION_OPTIONS


class SavedLocationStore(Protocol):
    async def save(self, user_id: str, name: str, location: ResolvedLocation) -> None: ...

    async def get(self, name: str, user_id: str) -> ResolvedLocation | None: ...

    async def has_saved(self, name: str, user_id: str) -> bool: ...


class InMemorySavedLocations:
    def __init__(self) -> None:
        self._saved: list[dict[str, Any]] = []

    async def save(self, user_id: str, name: str, location: ResolvedLocation) -> None:
        self._saved.append({
            "user_id": user_id,
            "name": name,
            "location": location,
            "date": datetime.now(),
        })

    async def get(self, name: str, user_id: str) -> ResolvedLocation | None:
        """Return the user's most recently saved location under ``name``."""
        for record in reversed(self._saved):
            if record["user_id"] == user_id and record["name"] == name:
                return record["location"]
        return None

    async def has_saved(self, name: str, user_id: str) -> bool:
        return await self.get(name, user_id) is not None

    def clear(self) -> None:
        self._saved.clear()
