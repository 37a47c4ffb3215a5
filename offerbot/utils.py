from __future__ import annotations

import re
from datetime import date, datetime, timedelta

_WHITESPACE_RUN_RE = re.compile(r"\s{2,}")

MONTHS = ["Jan", "Feb", "March", "April", "May", "June", "July", "Aug", "Sept", "Oct", "Nov", "Dec"]


def normalize_search_input(text: str) -> str:
    """Lowercase, trim and collapse whitespace runs to a single space."""
    return _WHITESPACE_RUN_RE.sub(" ", text.lower().strip())


def hours_ago(hours: float, now: datetime | None = None) -> datetime:
    now = now or datetime.now()
    return now - timedelta(hours=hours)


def format_local_date(value: date) -> str:
    return f"{value.day} {MONTHS[value.month - 1]} {value.year}"


def format_time_string(value: str) -> str:
    """
    Format a 24-hour ``HH:MM`` string as a short 12-hour time.

    ``"17:00"`` -> ``"5pm"``, ``"09:05"`` -> ``"9:05am"``, ``"00:00"`` and
    ``"24:00"`` -> ``"12am"``. ``"24:00"`` is accepted because offer windows
    may end at midnight.
    """
    hours = int(value[0:2])
    # Minutes stay a string to keep the leading zero.
    minutes = value[3:5]

    if hours in (0, 24):
        formatted = f"12:{minutes}am"
    elif hours == 12:
        formatted = f"12:{minutes}pm"
    elif hours > 12:
        formatted = f"{hours - 12}:{minutes}pm"
    else:
        formatted = f"{hours}:{minutes}am"

    return formatted.replace(":00", "")
