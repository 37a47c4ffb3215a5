from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    parse_failure = "parse_failure"
    needs_location = "needs_location"
    location_not_found = "location_not_found"
    no_restaurants_found = "no_restaurants_found"
    no_offers_found = "no_offers_found"
    partner_api_error = "partner_api_error"

    @property
    def is_location_error(self) -> bool:
        return self in (ErrorKind.needs_location, ErrorKind.location_not_found)


class SearchError(Exception):
    """
    Terminal failure of a parse or search.

    Callers branch on ``kind`` rather than on exception subclasses.
    """

    def __init__(self, kind: ErrorKind, message: str = "") -> None:
        super().__init__(message or kind.value)
        self.kind = kind
        self.message = message or kind.value

    def __repr__(self) -> str:
        return f"SearchError(kind={self.kind.value!r}, message={self.message!r})"


NEEDS_LOCATION_MESSAGE = "Where are you? Tell me a street, postcode or area and I'll find offers near you."
UNKNOWN_LOCATION_MESSAGE = "Sorry, I don't understand that location. Try a street name, postcode or area."
NOTHING_FOUND_MESSAGE = "We couldn't find anything on today for that search. Try another search?"


def user_message_for(error: SearchError) -> str:
    """Map a terminal failure to the message shown to the user."""
    if error.kind == ErrorKind.needs_location:
        return NEEDS_LOCATION_MESSAGE
    if error.kind.is_location_error:
        return UNKNOWN_LOCATION_MESSAGE
    return NOTHING_FOUND_MESSAGE
