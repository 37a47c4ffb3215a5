from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Awaitable, Callable

from ..utils import normalize_search_input
from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .models import CatalogSnapshot, RestaurantRef, build_snapshot

logger = logging.getLogger(__name__)

FetchSearchHints = Callable[[], Awaitable[dict[str, Any]]]

_FOOD_SUFFIX = " food"


def normalize_cuisine_text(text: str) -> str:
    normalized = normalize_search_input(text)
    if normalized.endswith(_FOOD_SUFFIX):
        normalized = normalized[: -len(_FOOD_SUFFIX)]
    return normalized


class CatalogCache:
    """
    In-memory catalog of cuisine types and restaurant names.

    The snapshot is refreshed in a background task and swapped by a single
    assignment. Readers wait for the first snapshot, never for later refreshes.
    """

    def __init__(self, fetch: FetchSearchHints, config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> None:
        self._fetch = fetch
        self._config = config
        self._snapshot: CatalogSnapshot | None = None
        self._ready = asyncio.Event()
        self._task: asyncio.Task | None = None
        self._refresh_failures = 0

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self._refresh_forever())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def _refresh_forever(self) -> None:
        while True:
            await self.refresh()
            await asyncio.sleep(self._config.refresh_interval_seconds)

    async def refresh(self) -> bool:
        """Fetch and swap in a new snapshot. Failures keep the previous one."""
        version = self._snapshot.version + 1 if self._snapshot else 1
        try:
            payload = await self._fetch()
            snapshot = build_snapshot(payload, version=version)
        except Exception:
            self._refresh_failures += 1
            logger.warning("Catalog refresh failed, keeping previous snapshot", exc_info=True)
            return False

        self._snapshot = snapshot
        self._ready.set()
        logger.info(
            "Catalog snapshot v%d loaded: %d cuisine types, %d restaurants",
            snapshot.version,
            len(snapshot.cuisine_types),
            len(snapshot.restaurants),
        )
        return True

    async def snapshot(self) -> CatalogSnapshot:
        await self._ready.wait()
        assert self._snapshot is not None
        return self._snapshot

    async def match_cuisine_type(self, text: str) -> str | None:
        """Return the canonical cuisine name matching ``text``, or ``None``."""
        normalized = normalize_cuisine_text(text)
        snapshot = await self.snapshot()
        for cuisine_type in snapshot.cuisine_types:
            if cuisine_type.lower() == normalized:
                return cuisine_type
        return None

    async def match_restaurants(self, text: str) -> list[RestaurantRef]:
        """
        Return every catalog restaurant whose name matches ``text``.

        A name matches exactly, with ``&`` read as ``and``, or with a branch
        suffix such as ``" (Clifton)"`` or ``" @ Old St"`` removed, so a chain
        name matches all of its branches.
        """
        normalized = normalize_search_input(text)
        snapshot = await self.snapshot()
        if not normalized:
            return []

        df = snapshot.restaurants
        mask = (
            (df["name_lower"] == normalized)
            | (df["name_and"] == normalized)
            | (df["name_base"] == normalized)
        )
        return snapshot.restaurant_refs(mask)

    def get_stats(self) -> dict:
        snapshot = self._snapshot
        return {
            "ready": snapshot is not None,
            "version": snapshot.version if snapshot else 0,
            "cuisine_types": len(snapshot.cuisine_types) if snapshot else 0,
            "restaurants": len(snapshot.restaurants) if snapshot else 0,
            "loaded_at": snapshot.loaded_at if snapshot else None,
            "refresh_failures": self._refresh_failures,
        }
