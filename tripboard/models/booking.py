"""Booking models - bookable trip items and confirmation requests."""

from typing import Any

from pydantic import BaseModel, Field

from tripboard.models.common import WireModel


class QuotePayload(WireModel):
    """Exact payload needed to (re)request a quote for one item."""

    product_type: str
    currency: str | None = None
    party_size: int | None = None
    params: dict[str, Any] | None = None
    trip_id: int | None = None
    entity_id: int | None = None
    item_reference: str | None = None

    def to_request_body(self) -> dict[str, Any]:
        """Serialize to the quote API body (snake_case keys)."""
        return {
            "product_type": self.product_type,
            "currency": self.currency,
            "party_size": self.party_size,
            "params": dict(self.params or {}),
            "trip_id": self.trip_id,
            "entity_id": self.entity_id,
            "item_reference": self.item_reference,
        }


class QuoteSummary(WireModel):
    """Outcome of a previous quote/confirmation."""

    voucher_code: str | None = None
    invoice_id: str | None = None
    status: str | None = None
    currency: str | None = None
    total_amount: int | None = None


class BookingItem(WireModel):
    """One bookable unit of a trip (transport, hotel or attraction instance)."""

    entity_id: int
    trip_id: int
    product_type: str
    status: str | None = None
    reservation_required: bool | None = None
    quote_request: QuotePayload | None = None
    currency: str | None = None

    # Display-only fields
    title: str | None = None
    subtitle: str | None = None
    date: str | None = None
    time: str | None = None
    price: int | None = None
    image_url: str | None = None
    metadata: dict[str, Any] | None = None
    quote_summary: QuoteSummary | None = None


class BatchQuoteItem(BaseModel):
    """Re-quote fields for one item in an itinerary-wide request."""

    reference: str | None
    product_type: str
    party_size: int | None
    params: dict[str, Any] = Field(default_factory=dict)
    entity_id: int | None


class BatchQuoteRequest(BaseModel):
    """Itinerary-wide confirmation request."""

    itinerary_id: str
    currency: str
    items: list[BatchQuoteItem]
    trip_id: int

    def to_request_body(self) -> dict[str, Any]:
        """Serialize to the itinerary quote API body."""
        return self.model_dump(mode="json")
