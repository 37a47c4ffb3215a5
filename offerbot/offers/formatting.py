"""Chat message rendering for ranked offer events."""

from __future__ import annotations

from ..catalog.models import RestaurantRef
from ..locations.models import ResolvedLocation
from ..utils import format_local_date, format_time_string
from .config import DEFAULT_RANKING_CONFIG, RankingConfig
from .models import OfferEvent

NEXT_TWO_HOURS_LABEL = "Next two hours"
ON_LATER_LABEL = "On later"


def restaurant_link(link_base_url: str, restaurant_id: str, label: str) -> str:
    return f"<{link_base_url.rstrip('/')}/slack/{restaurant_id}|{label}>"


def bucket_header(label: str, location: ResolvedLocation | None) -> str:
    if location is not None:
        label = f"{label} {location.header_suffix()}"
    return f"*{label}*:"


def _format_discount(value: float) -> str:
    return f"{value:g}%"


def format_event(
    event: OfferEvent,
    link_base_url: str,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> str:
    """Render one event as a chat entry (one line plus optional upsell and link)."""
    text = f"{_format_discount(event.discount)} off"

    if event.item_name:
        text += f" *{event.item_name}*"

    text += (
        f" at {event.restaurant_name} ({event.street_name})"
        f" - {format_time_string(event.start_time)}-{format_time_string(event.end_time)}"
    )

    if not event.is_today:
        text += f" on {format_local_date(event.event_date)}"

    if event.walking_distance and event.walking_distance.duration_text:
        text += f" ({event.walking_distance.duration_text} away)"

    if event.covers_remaining is not None:
        if event.covers_remaining == 0:
            text += " (all gone!)"
        elif event.covers_remaining <= config.low_covers_threshold:
            text += f" ({event.covers_remaining} left)"

    if event.group_discount_bonuses:
        bonus = event.group_discount_bonuses[0]
        total = _format_discount(bonus.bonus + event.discount)
        text += f"\nGroups of {bonus.min_covers}+ get {total}"

    text += "\n" + restaurant_link(link_base_url, event.restaurant_id, "Reserve voucher")
    return text.strip()


def render_entries(
    next_two_hours: list[OfferEvent],
    on_later: list[OfferEvent],
    location: ResolvedLocation | None,
    link_base_url: str,
    config: RankingConfig = DEFAULT_RANKING_CONFIG,
) -> list[str]:
    """Render both buckets in order, with each bucket's header on its first entry."""
    entries: list[str] = []
    for label, events in ((NEXT_TWO_HOURS_LABEL, next_two_hours), (ON_LATER_LABEL, on_later)):
        for i, event in enumerate(events):
            entry = format_event(event, link_base_url, config)
            if i == 0:
                entry = f"{bucket_header(label, location)}\n{entry}"
            entries.append(entry)
    return entries


def paginate(entries: list[str], config: RankingConfig = DEFAULT_RANKING_CONFIG) -> tuple[str, str]:
    """Cap to ``max_lines`` entries and split into the first page and the rest."""
    entries = entries[: config.max_lines]
    first = entries[: config.first_page_lines]
    rest = entries[config.first_page_lines:]
    return "\n".join(first), "\n".join(rest)


def format_no_offers(restaurants: list[RestaurantRef] | tuple[RestaurantRef, ...], link_base_url: str) -> str:
    lines: list[str] = []
    for restaurant in restaurants:
        lines.append(f"{restaurant.name} doesn't have any offers coming up today.")
        lines.append(restaurant_link(link_base_url, restaurant.id, "View on CityMunch"))
    return "\n".join(lines)
