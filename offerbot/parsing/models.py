from __future__ import annotations

from datetime import time
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from ..catalog.models import RestaurantRef
from ..errors import ErrorKind, SearchError
from ..locations.models import ResolvedLocation


class SearchCriteria(BaseModel):
    model_config = ConfigDict(frozen=True)

    cuisine_type: str | None = None
    restaurants: tuple[RestaurantRef, ...] = ()
    location: ResolvedLocation | None = None
    start_time: time | None = None
    end_time: time | None = None
    is_location_from_history: bool = False

    @property
    def has_time_window(self) -> bool:
        return self.start_time is not None or self.end_time is not None

    @property
    def is_resolved(self) -> bool:
        return bool(
            self.cuisine_type
            or self.restaurants
            or self.location is not None
            or self.has_time_window
        )


class StepOutcome(str, Enum):
    terminal = "terminal"
    proceed = "continue"
    no_match = "no_match"


class CriteriaDraft(BaseModel):
    """Mutable accumulator the parsing steps fill in before it is frozen."""

    text: str
    user_id: str | None = None
    cuisine_type: str | None = None
    restaurants: list[RestaurantRef] = Field(default_factory=list)
    location: ResolvedLocation | None = None
    start_time: time | None = None
    end_time: time | None = None
    is_location_from_history: bool = False

    @property
    def has_time_window(self) -> bool:
        return self.start_time is not None or self.end_time is not None

    def freeze(self) -> SearchCriteria:
        """Return the immutable criteria; a draft with no facets is a parse failure."""
        criteria = SearchCriteria(
            cuisine_type=self.cuisine_type,
            restaurants=tuple(self.restaurants),
            location=self.location,
            start_time=self.start_time,
            end_time=self.end_time,
            is_location_from_history=self.is_location_from_history,
        )
        if not criteria.is_resolved:
            raise SearchError(ErrorKind.parse_failure, f"Could not parse text: {self.text}")
        return criteria
