from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Any, Protocol

from ..errors import ErrorKind, SearchError
from ..geo.distance import is_area_search
from ..history.saved_locations import SAVED_LOCATION_OPTIONS
from ..parsing.models import SearchCriteria
from .config import DEFAULT_RANKING_CONFIG, RankingConfig
from .formatting import format_no_offers, paginate, render_entries
from .models import OfferEvent, SearchResult, WalkingDistance

logger = logging.getLogger(__name__)


class OffersApi(Protocol):
    async def search_restaurants(self, params: dict[str, str]) -> list[dict[str, Any]]: ...

    async def search_active_events(
        self,
        restaurant_ids: list[str],
        day: date,
        start_time: time | None = None,
        end_time: time | None = None,
    ) -> list[dict[str, Any]]: ...


# ---------------------------------------------------------------------------
# Query construction
# ---------------------------------------------------------------------------


def build_restaurant_query(
    criteria: SearchCriteria,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> dict[str, str]:
    """Combine the cuisine, restaurant id and location filters into query params."""
    params: dict[str, str] = {}

    if criteria.cuisine_type:
        params["cuisineTypes"] = criteria.cuisine_type

    if criteria.restaurants:
        params["ids"] = ",".join(r.id for r in criteria.restaurants)

    location = criteria.location
    if location is not None:
        if is_area_search(location.northeast, location.southwest, config.area_search_threshold_meters):
            params["northeastPoint"] = location.northeast.comma_separated()
            params["southwestPoint"] = location.southwest.comma_separated()
        elif location.center is not None:
            params["nearPoint"] = location.center.comma_separated()
            params["rangeInKilometers"] = f"{config.search_radius_km:g}"
        else:
            raise SearchError(ErrorKind.location_not_found, f"Unsure what to do with location: {location.name}")

        # Walking distances are only meaningful from a street or full postcode.
        if location.is_precise and location.center is not None:
            params["userPoint"] = location.center.comma_separated()

    return params


# ---------------------------------------------------------------------------
# Bucketing and sorting
# ---------------------------------------------------------------------------


def _minutes_of(value: time) -> int:
    return value.hour * 60 + value.minute


def is_in_next_two_hours(event: OfferEvent, now: time, config: RankingConfig = DEFAULT_RANKING_CONFIG) -> bool:
    if event.has_started:
        return True
    if not event.is_today:
        return False

    cutoff = _minutes_of(config.late_night_cutoff)
    now_minutes = _minutes_of(now)
    if event.start_minutes >= cutoff:
        return now_minutes >= cutoff
    return now_minutes + config.next_window_minutes >= event.start_minutes


def bucket_events(
    events: list[OfferEvent],
    now: time,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> tuple[list[OfferEvent], list[OfferEvent]]:
    next_two_hours: list[OfferEvent] = []
    on_later: list[OfferEvent] = []
    for event in events:
        if is_in_next_two_hours(event, now, config):
            next_two_hours.append(event)
        else:
            on_later.append(event)
    return next_two_hours, on_later


def sort_by_walking_distance(events: list[OfferEvent]) -> list[OfferEvent]:
    """Nearest first when any event has a walking distance, otherwise unchanged."""
    if not any(e.walking_distance for e in events):
        return events
    return sorted(
        events,
        key=lambda e: e.walking_distance.distance_in_meters if e.walking_distance else float("inf"),
    )


def _walking_distances(candidates: list[dict[str, Any]]) -> dict[str, WalkingDistance]:
    distances: dict[str, WalkingDistance] = {}
    for candidate in candidates:
        restaurant_id = str(candidate["restaurant"]["id"])
        distance = WalkingDistance.from_payload(candidate.get("walkingDistance"))
        if distance is not None and restaurant_id not in distances:
            distances[restaurant_id] = distance
    return distances


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


class OfferSearchEngine:
    def __init__(
        self,
        api: OffersApi,
        link_base_url: str,
        config: RankingConfig = DEFAULT_RANKING_CONFIG,
    ) -> None:
        self._api = api
        self._link_base_url = link_base_url
        self._config = config

    async def search(self, criteria: SearchCriteria, now: datetime | None = None) -> SearchResult:
        now = now or datetime.now()

        candidates = await self._api.search_restaurants(build_restaurant_query(criteria, self._config))
        if not candidates:
            raise SearchError(ErrorKind.no_restaurants_found, "We couldn't find anything matching that search right now")

        walking = _walking_distances(candidates)
        restaurant_ids = [str(c["restaurant"]["id"]) for c in candidates]

        raw_events = await self._api.search_active_events(
            restaurant_ids, now.date(), criteria.start_time, criteria.end_time,
        )
        events = [
            event
            for event in (
                OfferEvent.from_payload(p, walking.get(str((p.get("restaurant") or {}).get("id"))))
                for p in raw_events
            )
            if event.is_active_on_date and not event.has_ended
        ]
        logger.info(
            "Offer search: %d candidate restaurants, %d active events", len(candidates), len(events),
        )

        if not events:
            if criteria.restaurants:
                # Named restaurants always get a link, even with nothing on today.
                return SearchResult(
                    parsed_criteria=criteria,
                    has_events=False,
                    message=format_no_offers(criteria.restaurants, self._link_base_url),
                )
            raise SearchError(ErrorKind.no_offers_found, "We couldn't find any offers for that search that are on today")

        next_two_hours, on_later = bucket_events(events, now.time(), self._config)
        entries = render_entries(
            sort_by_walking_distance(next_two_hours),
            sort_by_walking_distance(on_later),
            criteria.location,
            self._link_base_url,
            self._config,
        )
        message, message_after_showing_more = paginate(entries, self._config)

        return SearchResult(
            parsed_criteria=criteria,
            has_events=True,
            message=message,
            message_after_showing_more=message_after_showing_more,
            add_show_more_button=bool(message_after_showing_more),
            save_location_options=self._save_location_options(criteria),
        )

    @staticmethod
    def _save_location_options(criteria: SearchCriteria) -> list[str]:
        if criteria.location is None or criteria.is_location_from_history:
            return []
        return list(SAVED_LOCATION_OPTIONS)
