"""Timeline models - synthesized, time-ordered day agenda."""

from pydantic import BaseModel

from tripboard.models.agenda import Weather
from tripboard.models.common import ActivityCategory


class RouteQuery(BaseModel):
    """Request descriptor for a navigable leg between two agenda entries."""

    origin: str
    destination: str
    mode: str


class TimelineEntry(BaseModel):
    """Single ordered agenda item."""

    entry_key: str
    category: ActivityCategory
    time: str | None = None
    minutes: int | None = None
    title: str
    subtitle: str | None = None
    route_query: RouteQuery | None = None


class DayTimeline(BaseModel):
    """Synthesized agenda for one day."""

    date: str
    summary: str | None = None
    image_url: str | None = None
    weather: Weather | None = None
    entries: list[TimelineEntry]

    @property
    def route_queries(self) -> list[tuple[str, RouteQuery]]:
        """Inferred route queries keyed by entry, in agenda order."""
        return [(e.entry_key, e.route_query) for e in self.entries if e.route_query is not None]
