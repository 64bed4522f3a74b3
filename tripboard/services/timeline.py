"""Trip timeline assembly from the trip provider."""

import logging

from tripboard.models.timeline import DayTimeline
from tripboard.providers import TripProvider
from tripboard.timeline.synthesizer import synthesize_trip

logger = logging.getLogger(__name__)


async def build_trip_timeline(provider: TripProvider, trip_id: int) -> list[DayTimeline]:
    """Fetch trip context and day agendas, then synthesize every day.

    Provider errors propagate unchanged.
    """
    trip = await provider.fetch_trip(trip_id)
    days = await provider.fetch_days(trip_id)
    timelines = synthesize_trip(days, trip)
    logger.info(
        "Built trip timeline",
        extra={"structured": {"trip_id": trip_id, "days": len(timelines)}},
    )
    return timelines
