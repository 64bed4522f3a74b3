"""Timeline synthesis: merge a day's activity feeds into one ordered agenda.

This module is pure: no I/O, no shared state. Given the same DayAgenda and
TripContext it always returns the same DayTimeline.

Ordering:
    Records are flattened lodging -> attractions -> transports, each tagged
    with an insertion index, then stably sorted by (minutes, index). Records
    without a parseable "H:MM"/"HH:MM" prefix sort after all timed records.

Route inference:
    A location cursor is seeded from the trip destination (city, then
    country), falling back to the origin city. Each entry proposes a
    destination (explicit hint, else subtitle, else explicit title) and an
    origin (transport "from", else the cursor). When both are known and
    differ, the entry carries a RouteQuery. The cursor then moves to the
    destination, else the origin.
"""

import logging
import math
import re
from collections.abc import Sequence
from dataclasses import dataclass

from tripboard.config import get_settings
from tripboard.models.agenda import (
    AttractionRecord,
    DayAgenda,
    LodgingRecord,
    TransportRecord,
    TripContext,
)
from tripboard.models.common import ActivityCategory
from tripboard.models.timeline import DayTimeline, RouteQuery, TimelineEntry

logger = logging.getLogger(__name__)

_TIME_PREFIX = re.compile(r"^(\d{1,2}):(\d{2})")

# Sort position for records without a parseable time
_NO_TIME = math.inf

GENERIC_LABELS = {
    ActivityCategory.lodging: "Hotel",
    ActivityCategory.attraction: "Attraction",
    ActivityCategory.transport: "Transportation",
}

ActivityRecord = LodgingRecord | AttractionRecord | TransportRecord


@dataclass(frozen=True)
class _Tagged:
    """Flattened record with its category and insertion index."""

    category: ActivityCategory
    index: int
    record: ActivityRecord
    minutes: int | None


@dataclass(frozen=True)
class _Labels:
    """Display labels plus the location hints used for route inference."""

    title: str
    subtitle: str | None
    explicit_title: str | None
    origin_hint: str | None
    destination_hint: str | None


def _clean(value: str | None) -> str | None:
    """Strip a label; blank strings count as absent."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_time_minutes(value: str | None) -> int | None:
    """Convert a leading H:MM / HH:MM prefix to minutes since midnight.

    The prefix is converted literally, so "24:00" is 1440. Returns None for
    absent or unmatched values.
    """
    if not value:
        return None
    match = _TIME_PREFIX.match(value)
    if match is None:
        return None
    return int(match.group(1)) * 60 + int(match.group(2))


def _flatten(day: DayAgenda) -> list[_Tagged]:
    """Flatten the three category feeds in lodging -> attraction -> transport order."""
    feeds: list[tuple[ActivityCategory, Sequence[ActivityRecord]]] = [
        (ActivityCategory.lodging, day.lodging),
        (ActivityCategory.attraction, day.attractions),
        (ActivityCategory.transport, day.transports),
    ]
    tagged: list[_Tagged] = []
    for category, records in feeds:
        for record in records:
            tagged.append(
                _Tagged(
                    category=category,
                    index=len(tagged),
                    record=record,
                    minutes=parse_time_minutes(record.time),
                )
            )
    return tagged


def _sort_key(item: _Tagged) -> tuple[float, int]:
    minutes: float = item.minutes if item.minutes is not None else _NO_TIME
    return (minutes, item.index)


def _paired_labels(
    category: ActivityCategory, explicit_title: str | None, secondary: str | None
) -> _Labels:
    """Title falls back to the secondary label; a distinct secondary becomes the subtitle."""
    title = explicit_title or secondary or GENERIC_LABELS[category]
    subtitle = secondary if explicit_title and secondary and secondary != explicit_title else None
    return _Labels(
        title=title,
        subtitle=subtitle,
        explicit_title=explicit_title,
        origin_hint=None,
        destination_hint=secondary,
    )


def _derive_labels(category: ActivityCategory, record: ActivityRecord) -> _Labels:
    explicit_title = _clean(record.title)

    if isinstance(record, LodgingRecord):
        return _paired_labels(category, explicit_title, _clean(record.hotel_name))

    if isinstance(record, AttractionRecord):
        return _paired_labels(category, explicit_title, _clean(record.location))

    origin = _clean(record.origin)
    destination = _clean(record.destination)
    if origin and destination:
        subtitle: str | None = f"{origin} → {destination}"
    else:
        subtitle = origin or destination
    return _Labels(
        title=explicit_title or GENERIC_LABELS[category],
        subtitle=subtitle,
        explicit_title=explicit_title,
        origin_hint=origin,
        destination_hint=destination,
    )


def seed_cursor(trip: TripContext | None) -> str | None:
    """Initial traveler location: destination city/country, else origin city."""
    if trip is None:
        return None
    return (
        _clean(trip.destination_city)
        or _clean(trip.destination_country)
        or _clean(trip.origin_city)
    )


def _route_step(
    cursor: str | None,
    category: ActivityCategory,
    labels: _Labels,
    transport_mode: str,
    default_mode: str,
) -> tuple[RouteQuery | None, str | None]:
    """One fold step: returns (route query for this entry, next cursor)."""
    destination = labels.destination_hint or labels.subtitle or labels.explicit_title
    origin = labels.origin_hint or cursor

    route: RouteQuery | None = None
    if origin and destination and origin != destination:
        mode = transport_mode if category == ActivityCategory.transport else default_mode
        route = RouteQuery(origin=origin, destination=destination, mode=mode)

    return route, destination or origin or cursor


def synthesize_day(
    day: DayAgenda,
    trip: TripContext | None = None,
    *,
    transport_mode: str | None = None,
    default_mode: str | None = None,
) -> DayTimeline:
    """Build the ordered, route-annotated agenda for one day.

    Args:
        day: Raw day agenda with lodging/attraction/transport feeds
        trip: Trip locations used to seed the location cursor
        transport_mode: Travel mode for transport entries (default from settings)
        default_mode: Travel mode for all other entries (default from settings)

    Returns:
        DayTimeline whose entries are totally ordered by (minutes, insertion index)
    """
    settings = get_settings()
    transport_mode = transport_mode or settings.transport_travel_mode
    default_mode = default_mode or settings.default_travel_mode

    ordered = sorted(_flatten(day), key=_sort_key)

    entries: list[TimelineEntry] = []
    cursor = seed_cursor(trip)
    for position, item in enumerate(ordered):
        labels = _derive_labels(item.category, item.record)
        route, cursor = _route_step(cursor, item.category, labels, transport_mode, default_mode)
        entries.append(
            TimelineEntry(
                entry_key=f"{day.date}:{position}:{item.category.value}",
                category=item.category,
                time=item.record.time,
                minutes=item.minutes,
                title=labels.title,
                subtitle=labels.subtitle,
                route_query=route,
            )
        )

    logger.debug(
        "Synthesized timeline for %s: %d entries, %d routes",
        day.date,
        len(entries),
        sum(1 for e in entries if e.route_query is not None),
    )

    return DayTimeline(
        date=day.date,
        summary=day.summary,
        image_url=day.image_url,
        weather=day.weather,
        entries=entries,
    )


def synthesize_trip(
    days: Sequence[DayAgenda], trip: TripContext | None = None
) -> list[DayTimeline]:
    """Synthesize every day independently, preserving input day order."""
    return [synthesize_day(day, trip) for day in days]
