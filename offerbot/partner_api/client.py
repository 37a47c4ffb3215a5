"""
Partner API integration layer.

Responsibilities:
- Hold the partner credentials and versioned accept header on one async HTTP client.
- Expose the catalog, geocoding, restaurant search and offer event endpoints.
- Turn transport failures into ``SearchError(partner_api_error)``.
"""
from __future__ import annotations

import logging
from datetime import date, time
from typing import Any

import httpx

from ..errors import ErrorKind, SearchError
from .config import DEFAULT_PARTNER_API_CONFIG, PartnerApiConfig

logger = logging.getLogger(__name__)

SEARCH_HINTS_PATH = "/offers/search-hints"
GEOCODE_PATH = "/geo/geocode"
RESTAURANT_SEARCH_PATH = "/restaurants/search/authorised-restaurants"
ACTIVE_EVENTS_PATH = "/offers/search/active-events-by-restaurant-ids"


class PartnerApiClient:
    def __init__(
        self,
        config: PartnerApiConfig = DEFAULT_PARTNER_API_CONFIG,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            headers={
                "Authorization": f"Partner {config.api_key}",
                "Accept": config.accept,
            },
            timeout=config.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "PartnerApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        logger.info("Partner API request: GET %s%s params=%s", self.config.base_url, path, params or {})
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise SearchError(ErrorKind.partner_api_error, f"Partner API request failed: GET {path}") from exc

        if not response.content:
            return {}
        try:
            payload = response.json()
        except ValueError as exc:
            raise SearchError(ErrorKind.partner_api_error, f"Partner API returned a non-JSON body: GET {path}") from exc
        if not isinstance(payload, dict):
            raise SearchError(ErrorKind.partner_api_error, f"Partner API returned an unexpected body: GET {path}")
        return payload

    async def fetch_search_hints(self) -> dict[str, Any]:
        return await self.get(SEARCH_HINTS_PATH)

    async def geocode(self, place_name: str) -> dict[str, Any] | None:
        """Return the located ``geometry`` payload, or ``None`` when nothing matched."""
        response = await self.get(GEOCODE_PATH, {"placeName": place_name})
        if not response.get("isFound"):
            return None
        return response.get("geometry")

    async def search_restaurants(self, params: dict[str, str]) -> list[dict[str, Any]]:
        response = await self.get(RESTAURANT_SEARCH_PATH, params)
        return list(response.get("results") or [])

    async def search_active_events(
        self,
        restaurant_ids: list[str],
        day: date,
        start_time: time | None = None,
        end_time: time | None = None,
    ) -> list[dict[str, Any]]:
        params = {
            "ids": ",".join(restaurant_ids),
            "includeEnded": "false",
            "startDate": day.isoformat(),
            "endDate": day.isoformat(),
        }
        if start_time is not None:
            params["startTime"] = start_time.strftime("%H:%M")
        if end_time is not None:
            params["endTime"] = end_time.strftime("%H:%M")

        response = await self.get(ACTIVE_EVENTS_PATH, params)
        return list(response.get("events") or [])
