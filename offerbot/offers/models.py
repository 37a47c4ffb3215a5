from __future__ import annotations

import uuid
from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from ..errors import ErrorKind
from ..parsing.models import SearchCriteria


class WalkingDistance(BaseModel):
    distance_in_meters: float
    duration_text: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any] | None) -> "WalkingDistance | None":
        if not payload or payload.get("distanceInMeters") is None:
            return None
        return cls(
            distance_in_meters=float(payload["distanceInMeters"]),
            duration_text=str(payload.get("durationText") or ""),
        )


class GroupDiscountBonus(BaseModel):
    min_covers: int
    bonus: float


class OfferEvent(BaseModel):
    restaurant_id: str
    restaurant_name: str
    street_name: str = ""
    discount: float
    item_name: str | None = None
    start_time: str = Field(..., description="HH:MM local time")
    end_time: str = Field(..., description="HH:MM local time, may be 24:00")
    event_date: date
    is_today: bool = True
    is_active_on_date: bool = True
    has_started: bool = False
    has_ended: bool = False
    covers_remaining: int | None = None
    group_discount_bonuses: list[GroupDiscountBonus] = Field(default_factory=list)
    walking_distance: WalkingDistance | None = None

    @property
    def start_minutes(self) -> int:
        return _minutes(self.start_time)

    @classmethod
    def from_payload(
        cls,
        payload: dict[str, Any],
        walking_distance: WalkingDistance | None = None,
    ) -> "OfferEvent":
        """Build from one ``active-events-by-restaurant-ids`` entry."""
        event = payload.get("event") or {}
        offer = payload.get("offer") or {}
        restaurant = payload.get("restaurant") or {}
        return cls(
            restaurant_id=str(restaurant.get("id", "")),
            restaurant_name=str(restaurant.get("name", "")),
            street_name=str(restaurant.get("streetName") or ""),
            discount=event.get("discount", 0),
            item_name=offer.get("itemName") or None,
            start_time=event["startTime"],
            end_time=event["endTime"],
            event_date=event["date"],
            is_today=bool(event.get("isToday", True)),
            is_active_on_date=bool(event.get("isActiveOnDate", False)),
            has_started=bool(event.get("hasStarted", False)),
            has_ended=bool(event.get("hasEnded", False)),
            covers_remaining=event.get("coversRemaining"),
            group_discount_bonuses=[
                GroupDiscountBonus(min_covers=b["minCovers"], bonus=b["bonus"])
                for b in offer.get("groupDiscountBonuses") or []
            ],
            walking_distance=walking_distance,
        )


def _minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")[:2]
    return int(hours) * 60 + int(minutes)


class SearchResult(BaseModel):
    parsed_criteria: SearchCriteria
    has_events: bool
    message: str
    message_after_showing_more: str = ""
    add_show_more_button: bool = False
    search_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    save_location_options: list[str] = Field(
        default_factory=list,
        description="Saved-location names the searched location could be stored under",
    )


class SearchRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=1000)
    user_id: str | None = None


class SearchResponseType(str, Enum):
    results = "results"
    error = "error"


class SearchResponse(BaseModel):
    type: SearchResponseType
    message: str
    result: SearchResult | None = None
    error_kind: ErrorKind | None = None
