from __future__ import annotations

import logging
from datetime import datetime

from .catalog.cache import CatalogCache
from .catalog.config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .history.saved_locations import (
    InMemorySavedLocations,
    SavedLocationStore,
    is_saved_location_option,
)
from .history.searches import InMemorySearchHistory, SearchHistoryStore
from .locations.models import ResolvedLocation
from .locations.resolver import LocationResolver
from .offers.config import DEFAULT_RANKING_CONFIG, RankingConfig
from .offers.engine import OfferSearchEngine
from .offers.models import SearchResult
from .parsing.parser import CriteriaParser
from .partner_api.client import PartnerApiClient

logger = logging.getLogger(__name__)


class OfferSearchService:
    """Wires the partner API, catalog, stores, parser and engine together."""

    def __init__(
        self,
        api: PartnerApiClient | None = None,
        *,
        history: SearchHistoryStore | None = None,
        saved_locations: SavedLocationStore | None = None,
        catalog_config: CatalogConfig = DEFAULT_CATALOG_CONFIG,
        ranking_config: RankingConfig = DEFAULT_RANKING_CONFIG,
    ) -> None:
        self.api = api or PartnerApiClient()
        self.catalog = CatalogCache(self.api.fetch_search_hints, catalog_config)
        self.resolver = LocationResolver(self.api.geocode)
        self.history = history or InMemorySearchHistory()
        self.saved_locations = saved_locations or InMemorySavedLocations()
        self.parser = CriteriaParser(self.catalog, self.resolver, self.history, self.saved_locations)
        self.engine = OfferSearchEngine(self.api, self.api.config.link_base_url, ranking_config)

    async def start(self) -> None:
        logger.info("Starting offer search service")
        self.catalog.start()

    async def stop(self) -> None:
        await self.catalog.stop()
        await self.api.aclose()

    async def search(self, text: str, user_id: str | None = None, now: datetime | None = None) -> SearchResult:
        criteria = await self.parser.parse(text, user_id)
        result = await self.engine.search(criteria, now)
        if user_id and result.save_location_options:
            result.save_location_options = [
                name
                for name in result.save_location_options
                if not await self.saved_locations.has_saved(name, user_id)
            ]
        return result

    async def save_location(self, user_id: str, name: str, text: str) -> ResolvedLocation:
        if not is_saved_location_option(name):
            raise ValueError(f"Unknown saved location name: {name}")
        location = await self.resolver.resolve(text)
        await self.saved_locations.save(user_id, name, location)
        return location
