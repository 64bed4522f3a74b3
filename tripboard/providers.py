"""Collaborator protocol interfaces (trip, booking and route providers)."""

from typing import Protocol

from tripboard.models.agenda import DayAgenda, TripContext
from tripboard.models.booking import BatchQuoteRequest, BookingItem, QuotePayload
from tripboard.models.route import RouteSummary
from tripboard.models.timeline import RouteQuery


class TripProvider(Protocol):
    """Source of trip locations and per-day agendas."""

    async def fetch_trip(self, trip_id: int) -> TripContext:
        """Fetch trip-level origin/destination context.

        Args:
            trip_id: Trip ID

        Returns:
            TripContext used to seed route inference
        """
        ...

    async def fetch_days(self, trip_id: int) -> list[DayAgenda]:
        """Fetch one DayAgenda per trip day, in day order."""
        ...


class BookingProvider(Protocol):
    """Backend booking API."""

    async def fetch_items(self, trip_id: int) -> list[BookingItem]:
        """Fetch the current booking items for a trip."""
        ...

    async def confirm(self, quote: QuotePayload) -> None:
        """Submit a single quote/confirm request.

        Raises:
            Any collaborator error; interpretation is left to the caller.
        """
        ...

    async def confirm_itinerary(self, request: BatchQuoteRequest) -> None:
        """Submit an itinerary-wide quote/confirm request."""
        ...


class RouteProvider(Protocol):
    """Map routing service."""

    async def route(self, query: RouteQuery) -> RouteSummary:
        """Resolve a route query to distance, duration and links."""
        ...
