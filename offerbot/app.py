from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, HTTPException, Request

from .errors import SearchError, user_message_for
from .history.saved_locations import SAVED_LOCATION_OPTIONS, is_saved_location_option
from .locations.models import ResolvedLocation, SaveLocationRequest
from .offers.models import SearchRequest, SearchResponse, SearchResponseType
from .service import OfferSearchService

logger = logging.getLogger(__name__)


def create_app(service: OfferSearchService | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.service = service or OfferSearchService()
        await app.state.service.start()
        try:
            yield
        finally:
            await app.state.service.stop()

    app = FastAPI(title="Restaurant Offer Search API", version="1.0.0", lifespan=lifespan)

    # ── Public endpoints ─────────────────────────────────────────────────

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/catalog/stats")
    def catalog_stats(request: Request) -> dict:
        return request.app.state.service.catalog.get_stats()

    # ── Search ───────────────────────────────────────────────────────────

    @app.post("/search", response_model=SearchResponse)
    async def search(body: SearchRequest, request: Request) -> SearchResponse:
        service: OfferSearchService = request.app.state.service
        try:
            result = await service.search(body.text, body.user_id)
        except SearchError as error:
            logger.info("Search for %r failed: %s", body.text, error.message)
            return SearchResponse(
                type=SearchResponseType.error,
                message=user_message_for(error),
                error_kind=error.kind,
            )

        return SearchResponse(
            type=SearchResponseType.results,
            message=result.message,
            result=result,
        )

    # ── Saved locations ──────────────────────────────────────────────────

    @app.get("/saved-locations/options")
    def saved_location_options() -> dict[str, str]:
        return SAVED_LOCATION_OPTIONS

    @app.post("/saved-locations", response_model=ResolvedLocation)
    async def save_location(body: SaveLocationRequest, request: Request) -> ResolvedLocation:
        if not is_saved_location_option(body.name):
            raise HTTPException(status_code=422, detail=f"Unknown saved location name: {body.name}")

        service: OfferSearchService = request.app.state.service
        try:
            return await service.save_location(body.user_id, body.name, body.text)
        except SearchError as error:
            if error.kind.is_location_error:
                raise HTTPException(status_code=404, detail=user_message_for(error)) from error
            raise HTTPException(status_code=502, detail=error.message) from error

    return app


app = create_app()
