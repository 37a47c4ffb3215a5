from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from ..locations.models import ResolvedLocation
from ..parsing.models import SearchCriteria


class SearchHistoryStore(Protocol):
    async def save(self, text: str, criteria: SearchCriteria | None, user_id: str | None) -> None: ...

    async def find_latest_location(
        self, user_id: str, since: datetime | None = None
    ) -> ResolvedLocation | None: ...


class InMemorySearchHistory:
    """Search log kept in process memory, newest entries last."""

    def __init__(self) -> None:
        self._entries: list[dict[str, Any]] = []

    async def save(self, text: str, criteria: SearchCriteria | None, user_id: str | None) -> None:
        self._entries.append({
            "text": text,
            "criteria": criteria,
            "user_id": user_id,
            "date": datetime.now(),
        })

    async def find_latest_location(
        self, user_id: str, since: datetime | None = None
    ) -> ResolvedLocation | None:
        for entry in reversed(self._entries):
            if entry["user_id"] != user_id:
                continue
            criteria = entry["criteria"]
            if criteria is None or criteria.location is None:
                continue
            if since is not None and entry["date"] < since:
                continue
            return criteria.location
        return None

    async def count_searches(self, user_id: str) -> int:
        return sum(1 for e in self._entries if e["user_id"] == user_id)

    def get_entries(self) -> list[dict[str, Any]]:
        return self._entries

    def clear(self) -> None:
        self._entries.clear()
