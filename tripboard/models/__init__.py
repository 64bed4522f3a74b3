"""Models package - re-exports for convenience."""

from tripboard.models.agenda import (
    AttractionRecord,
    DayAgenda,
    LodgingRecord,
    TransportRecord,
    TripContext,
    Weather,
)
from tripboard.models.booking import (
    BatchQuoteItem,
    BatchQuoteRequest,
    BookingItem,
    QuotePayload,
    QuoteSummary,
)
from tripboard.models.common import ActivityCategory, BookingStatus, WireModel
from tripboard.models.route import RouteSummary
from tripboard.models.timeline import DayTimeline, RouteQuery, TimelineEntry

__all__ = [
    # Common
    "WireModel",
    "ActivityCategory",
    "BookingStatus",
    # Agenda
    "DayAgenda",
    "LodgingRecord",
    "AttractionRecord",
    "TransportRecord",
    "Weather",
    "TripContext",
    # Timeline
    "DayTimeline",
    "TimelineEntry",
    "RouteQuery",
    # Booking
    "BookingItem",
    "QuotePayload",
    "QuoteSummary",
    "BatchQuoteItem",
    "BatchQuoteRequest",
    # Route
    "RouteSummary",
]
