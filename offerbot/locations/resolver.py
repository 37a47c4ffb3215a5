from __future__ import annotations

import re
from typing import Any, Awaitable, Callable

from ..errors import ErrorKind, SearchError
from .models import ResolvedLocation, location_from_geometry

Geocode = Callable[[str], Awaitable["dict[str, Any] | None"]]

_CONVERSATIONAL_CUE_RE = re.compile(r"^(?:in|near|around) ", re.IGNORECASE)
FULL_POSTCODE_RE = re.compile(r"^[A-Z]{1,2}[0-9][0-9A-Z]?\s?[0-9][A-Z]{2}$", re.IGNORECASE)


def strip_conversational_cue(text: str) -> str:
    """Drop one leading "in ", "near " or "around "."""
    return _CONVERSATIONAL_CUE_RE.sub("", text.strip(), count=1).strip()


def is_full_postcode(text: str) -> bool:
    return bool(FULL_POSTCODE_RE.match(text.strip()))


class LocationResolver:
    """Maps free text to a ``ResolvedLocation`` using the partner geocoder."""

    def __init__(self, geocode: Geocode) -> None:
        self._geocode = geocode

    async def resolve(self, text: str) -> ResolvedLocation:
        place_name = strip_conversational_cue(text)
        if not place_name:
            raise SearchError(ErrorKind.location_not_found, "Nothing to geocode")

        geometry = await self._geocode(place_name)
        if not geometry:
            raise SearchError(ErrorKind.location_not_found, f"Could not geocode location: {place_name}")

        try:
            return location_from_geometry(geometry, is_full_postcode=is_full_postcode(place_name))
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise SearchError(ErrorKind.location_not_found, f"Geocoder returned no usable geometry for: {place_name}") from exc
