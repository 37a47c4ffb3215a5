from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from datetime import time
from typing import Awaitable, Callable

from ..catalog.cache import CatalogCache
from ..errors import ErrorKind, SearchError
from ..history.saved_locations import SavedLocationStore, is_saved_location_option
from ..history.searches import SearchHistoryStore
from ..locations.models import ResolvedLocation
from ..locations.resolver import LocationResolver
from ..utils import hours_ago, normalize_search_input
from .models import CriteriaDraft, SearchCriteria, StepOutcome

logger = logging.getLogger(__name__)

MIXED_RE = re.compile(r".+ (?:in|around|near) .+", re.IGNORECASE)
MIXED_SPLIT_RE = re.compile(r" (?:in|around|near) ", re.IGNORECASE)

NEAR_ME_TEXTS = ("near me", "around me", "here")
RECENT_LOCATION_HOURS = 6

# ---------------------------------------------------------------------------
# Meal-time keywords
# ---------------------------------------------------------------------------

MEAL_TIME_WINDOWS: dict[str, tuple[time, time]] = {
    "lunch": (time(12, 0), time(14, 30)),
    "dinner": (time(17, 0), time(20, 30)),
}

# History writes run detached from the parse; keep references until done.
_background_tasks: set[asyncio.Task] = set()


def preprocess(text: str) -> str:
    """Trim, then drop one trailing full stop and a trailing "please"."""
    text = text.strip()
    if text.endswith("."):
        text = text[:-1].strip()
    if text.lower().endswith("please"):
        text = text[: -len("please")].strip()
    return text


def split_mixed(text: str) -> tuple[str, str] | None:
    """Split "<what> in|around|near <where>" on the first cue word."""
    if not MIXED_RE.match(text):
        return None
    left, right = MIXED_SPLIT_RE.split(text, maxsplit=1)
    return left, right


StepFn = Callable[[CriteriaDraft, str], Awaitable[StepOutcome]]


@dataclass(frozen=True)
class ParseStep:
    name: str
    run: StepFn


class CriteriaParser:
    """
    Turns free text plus an optional user id into ``SearchCriteria``.

    Each path is an ordered list of named steps. A step reports whether it
    finished the parse, matched and let parsing continue, or did not match;
    terminal failures are raised as ``SearchError``.
    """

    def __init__(
        self,
        catalog: CatalogCache,
        resolver: LocationResolver,
        history: SearchHistoryStore,
        saved_locations: SavedLocationStore,
    ) -> None:
        self._catalog = catalog
        self._resolver = resolver
        self._history = history
        self._saved_locations = saved_locations

    # -----------------------------------------------------------------------
    # Step lists
    # -----------------------------------------------------------------------

    @property
    def single_steps(self) -> list[ParseStep]:
        return [
            ParseStep("restaurant", self._match_restaurant_only),
            ParseStep("cuisine", self._match_cuisine),
            ParseStep("meal_time", self._match_meal_time),
            ParseStep("saved_location", self._match_saved_location_phrase),
            ParseStep("near_me", self._match_near_me),
            ParseStep("geocode", self._geocode_or_ignore),
        ]

    @property
    def mixed_left_steps(self) -> list[ParseStep]:
        return [
            ParseStep("cuisine", self._match_cuisine),
            ParseStep("restaurants", self._match_restaurants),
            ParseStep("meal_time", self._match_meal_time),
        ]

    @property
    def mixed_right_steps(self) -> list[ParseStep]:
        return [
            ParseStep("saved_location", self._match_saved_location_name),
            ParseStep("me", self._match_me),
            ParseStep("geocode", self._geocode_or_fail),
        ]

    async def _run_steps(self, steps: list[ParseStep], draft: CriteriaDraft, text: str) -> bool:
        """Run ``steps`` in order; return True once one of them is terminal."""
        for step in steps:
            outcome = await step.run(draft, text)
            logger.debug("Parse step %s on %r: %s", step.name, text, outcome.value)
            if outcome is StepOutcome.terminal:
                return True
        return False

    # -----------------------------------------------------------------------
    # Entry point
    # -----------------------------------------------------------------------

    async def parse(self, text: str, user_id: str | None = None) -> SearchCriteria:
        text = preprocess(text)
        draft = CriteriaDraft(text=text, user_id=user_id)

        try:
            mixed = split_mixed(text)
            if mixed is not None:
                criteria = await self._parse_mixed(draft, *mixed)
            else:
                criteria = await self._parse_single(draft)
        except SearchError:
            self._record(text, None, user_id)
            raise

        self._record(text, criteria, user_id)
        return criteria

    async def _parse_single(self, draft: CriteriaDraft) -> SearchCriteria:
        if await self._run_steps(self.single_steps, draft, draft.text):
            return draft.freeze()

        if draft.cuisine_type or draft.has_time_window:
            if draft.location is None and draft.user_id:
                location = await self._history.find_latest_location(draft.user_id)
                if location is not None:
                    logger.info("Adopted location from last search by user %s: %s", draft.user_id, location.name)
                    self._adopt(draft, location)
            return draft.freeze()

        raise SearchError(ErrorKind.parse_failure, f"Could not parse text: {draft.text}")

    async def _parse_mixed(self, draft: CriteriaDraft, left: str, right: str) -> SearchCriteria:
        await self._run_steps(self.mixed_left_steps, draft, left)

        # "prawns in London" must not fall back to a London-only search.
        if not (draft.cuisine_type or draft.restaurants or draft.has_time_window):
            raise SearchError(ErrorKind.parse_failure, f"Could not parse text: {draft.text}")

        await self._run_steps(self.mixed_right_steps, draft, right)
        return draft.freeze()

    # -----------------------------------------------------------------------
    # Catalog and meal-time steps
    # -----------------------------------------------------------------------

    async def _match_restaurant_only(self, draft: CriteriaDraft, text: str) -> StepOutcome:
        outcome = await self._match_restaurants(draft, text)
        return StepOutcome.terminal if outcome is StepOutcome.proceed else outcome

    async def _match_restaurants(self, draft: CriteriaDraft, text: str) -> StepOutcome:
        restaurants = await self._catalog.match_restaurants(text)
        if not restaurants:
            return StepOutcome.no_match
        draft.restaurants = restaurants
        return StepOutcome.proceed

    async def _match_cuisine(self, draft: CriteriaDraft, text: str) -> StepOutcome:
        cuisine_type = await self._catalog.match_cuisine_type(text)
        if cuisine_type is None:
            return StepOutcome.no_match
        draft.cuisine_type = cuisine_type
        return StepOutcome.proceed

    async def _match_meal_time(self, draft: CriteriaDraft, text: str) -> StepOutcome:
        window = MEAL_TIME_WINDOWS.get(normalize_search_input(text))
        if window is None:
            return StepOutcome.no_match
        draft.start_time, draft.end_time = window
        return StepOutcome.proceed

    # -----------------------------------------------------------------------
    # Location steps
    # -----------------------------------------------------------------------

    async def _match_saved_location_phrase(self, draft: CriteriaDraft, text: str) -> StepOutcome:
        """Match "home", "work", "near home" and "near work"."""
        name = normalize_search_input(text)
        if name.startswith("near "):
            name = name[len("near "):]
        return await self._adopt_saved_location(draft, name)

    async def _match_saved_location_name(self, draft: CriteriaDraft, text: str) -> StepOutcome:
        return await self._adopt_saved_location(draft, normalize_search_input(text))

    async def _adopt_saved_location(self, draft: CriteriaDraft, name: str) -> StepOutcome:
        if not draft.user_id or not is_saved_location_option(name):
            return StepOutcome.no_match
        location = await self._saved_locations.get(name, draft.user_id)
        if location is None:
            return StepOutcome.no_match
        logger.info("Adopted saved %r location for user %s: %s", name, draft.user_id, location.name)
        self._adopt(draft, location)
        return StepOutcome.terminal

    async def _match_near_me(self, draft: CriteriaDraft, text: str) -> StepOutcome:
        if normalize_search_input(text) not in NEAR_ME_TEXTS:
            return StepOutcome.no_match
        await self._adopt_recent_location(draft)
        return StepOutcome.terminal

    async def _match_me(self, draft: CriteriaDraft, text: str) -> StepOutcome:
        if normalize_search_input(text) != "me":
            return StepOutcome.no_match
        await self._adopt_recent_location(draft)
        return StepOutcome.terminal

    async def _adopt_recent_location(self, draft: CriteriaDraft) -> None:
        if draft.user_id:
            location = await self._history.find_latest_location(
                draft.user_id, since=hours_ago(RECENT_LOCATION_HOURS)
            )
            if location is not None:
                logger.info("Adopted location from last search by user %s: %s", draft.user_id, location.name)
                self._adopt(draft, location)
                return
        logger.info("Asking user %s where they are", draft.user_id)
        raise SearchError(ErrorKind.needs_location, "The user needs to say where they are")

    async def _geocode_or_ignore(self, draft: CriteriaDraft, text: str) -> StepOutcome:
        try:
            draft.location = await self._resolver.resolve(text)
        except SearchError as exc:
            logger.debug("Ignoring geocode failure for %r: %s", text, exc.message)
            return StepOutcome.no_match
        return StepOutcome.terminal

    async def _geocode_or_fail(self, draft: CriteriaDraft, text: str) -> StepOutcome:
        try:
            draft.location = await self._resolver.resolve(text)
        except SearchError as exc:
            raise SearchError(ErrorKind.location_not_found, f"Could not geocode: {draft.text}") from exc
        return StepOutcome.terminal

    @staticmethod
    def _adopt(draft: CriteriaDraft, location: ResolvedLocation) -> None:
        draft.location = location
        draft.is_location_from_history = True

    # -----------------------------------------------------------------------
    # History
    # -----------------------------------------------------------------------

    def _record(self, text: str, criteria: SearchCriteria | None, user_id: str | None) -> None:
        task = asyncio.get_running_loop().create_task(self._save_history(text, criteria, user_id))
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)

    async def _save_history(self, text: str, criteria: SearchCriteria | None, user_id: str | None) -> None:
        try:
            await self._history.save(text, criteria, user_id)
        except Exception:
            logger.warning("Failed to record search history for %r", text, exc_info=True)
