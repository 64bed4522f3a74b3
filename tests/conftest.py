"""Shared pytest fixtures for all test suites."""

from typing import Any

import pytest

from tripboard.models import BookingItem, DayAgenda, TripContext


@pytest.fixture
def trip() -> TripContext:
    """Trip from Sydney to Tokyo."""
    return TripContext(
        trip_id=42,
        origin_city="Sydney",
        origin_country="Australia",
        destination_city="Tokyo",
        destination_country="Japan",
    )


@pytest.fixture
def museum_day() -> DayAgenda:
    """Hotel -> museum -> airport day, categories listed out of time order."""
    return DayAgenda(
        date="2025-06-10",
        transports=[{"time": "14:00", "from": "Museum", "to": "Airport"}],
        attractions=[{"time": "10:00", "location": "Museum"}],
        lodging=[{"time": "08:00", "hotelName": "Grand Hotel"}],
    )


def make_item(
    entity_id: int,
    status: str | None = "pending",
    *,
    reservation_required: bool | None = True,
    quote: bool = True,
    quote_currency: str | None = None,
    currency: str | None = None,
    trip_id: int = 42,
    params: dict[str, Any] | None = None,
) -> BookingItem:
    """Build a BookingItem the way the backend returns it (camelCase keys)."""
    data: dict[str, Any] = {
        "entityId": entity_id,
        "tripId": trip_id,
        "productType": "hotel",
        "status": status,
        "reservationRequired": reservation_required,
        "currency": currency,
    }
    if quote:
        data["quoteRequest"] = {
            "productType": "hotel",
            "currency": quote_currency,
            "partySize": 2,
            "params": params,
            "tripId": trip_id,
            "entityId": entity_id,
            "itemReference": f"ref-{entity_id}",
        }
    return BookingItem.model_validate(data)


@pytest.fixture
def item_factory() -> Any:
    """Factory for BookingItem records."""
    return make_item
