"""Route provider response model."""

from pydantic import Field

from tripboard.models.common import WireModel


class RouteSummary(WireModel):
    """Resolved route for a route query."""

    travel_mode: str | None = None
    route_summary: str | None = None
    distance_text: str | None = None
    distance_meters: int | None = None
    duration_text: str | None = None
    duration_seconds: int | None = None
    overview_polyline: str | None = None
    embed_url: str | None = None
    share_url: str | None = None
    warnings: list[str] = Field(default_factory=list)
