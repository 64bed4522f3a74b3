"""Booking reconciliation: pending classification and confirmation requests.

All functions are pure with respect to their inputs and never mutate the
BookingItem list. Recomputing after a server-side status flip naturally
drops confirmed items from the next batch.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from tripboard.config import get_settings
from tripboard.models.booking import BatchQuoteItem, BatchQuoteRequest, BookingItem, QuotePayload
from tripboard.models.common import BookingStatus

logger = logging.getLogger(__name__)

_CONFIRMED_ALIASES = frozenset({"confirm", "confirmed"})


@dataclass(frozen=True)
class BookingPartition:
    """Pending vs. settled split of a trip's booking items (original order kept)."""

    pending: list[BookingItem]
    settled: list[BookingItem]


def canonical_status(status: str | None) -> BookingStatus:
    """Canonicalize a free-form status string, case-insensitively.

    Absent or empty status reads as pending. Surrounding whitespace is kept,
    so " confirmed " is not an alias of confirmed.
    """
    normalized = (status or "").lower()
    if not normalized or normalized == "pending":
        return BookingStatus.pending
    if normalized in _CONFIRMED_ALIASES:
        return BookingStatus.confirmed
    if normalized == "failed":
        return BookingStatus.failed
    return BookingStatus.other


def is_pending(item: BookingItem) -> bool:
    """Reservation required (absent means required) and not yet confirmed."""
    if item.reservation_required is False:
        return False
    return canonical_status(item.status) != BookingStatus.confirmed


def is_confirmable(item: BookingItem) -> bool:
    """Whether a confirm action for this item should be offered."""
    return item.quote_request is not None and is_pending(item)


def pending_count(items: Sequence[BookingItem]) -> int:
    """Number of pending items, including ones that cannot be confirmed."""
    return sum(1 for item in items if is_pending(item))


def partition_items(items: Sequence[BookingItem]) -> BookingPartition:
    """Split items into pending and settled."""
    pending: list[BookingItem] = []
    settled: list[BookingItem] = []
    for item in items:
        (pending if is_pending(item) else settled).append(item)
    return BookingPartition(pending=pending, settled=settled)


def build_single_confirm(item: BookingItem) -> QuotePayload | None:
    """Quote request to forward verbatim for one item, or None when it has none."""
    if item.quote_request is None:
        return None
    return item.quote_request.model_copy(deep=True)


def select_batch_currency(items: Sequence[BookingItem], default: str) -> str:
    """First quote-request currency, else first item currency, else the default."""
    for item in items:
        if item.quote_request is not None and item.quote_request.currency:
            return item.quote_request.currency
    for item in items:
        if item.currency:
            return item.currency
    return default


def itinerary_id_for(trip_id: int | str, prefix: str | None = None) -> str:
    """Stable itinerary identifier for a trip, so retried batches share it."""
    if prefix is None:
        prefix = get_settings().itinerary_id_prefix
    return f"{prefix}{trip_id}"


def _batch_item(quote: QuotePayload) -> BatchQuoteItem:
    return BatchQuoteItem(
        reference=quote.item_reference,
        product_type=quote.product_type,
        party_size=quote.party_size,
        params=dict(quote.params or {}),
        entity_id=quote.entity_id,
    )


def build_batch_request(
    trip_id: int,
    items: Sequence[BookingItem],
    *,
    default_currency: str | None = None,
    itinerary_prefix: str | None = None,
) -> BatchQuoteRequest | None:
    """Build the itinerary-wide "confirm all" request.

    Args:
        trip_id: Trip the items belong to
        items: Current booking items for the trip (any status)
        default_currency: Fallback when no item carries a currency
            (default from settings)
        itinerary_prefix: Itinerary id prefix (default from settings)

    Returns:
        BatchQuoteRequest covering every pending item with a quote request,
        or None when there is nothing to confirm
    """
    eligible = [item for item in items if is_pending(item) and item.quote_request is not None]
    if not eligible:
        logger.debug("No pending confirmable items for trip %s", trip_id)
        return None

    if default_currency is None:
        default_currency = get_settings().default_currency
    currency = select_batch_currency(eligible, default_currency)

    request = BatchQuoteRequest(
        itinerary_id=itinerary_id_for(trip_id, itinerary_prefix),
        currency=currency,
        items=[_batch_item(item.quote_request) for item in eligible if item.quote_request],
        trip_id=trip_id,
    )

    logger.debug(
        "Built batch quote request %s: %d items, currency=%s",
        request.itinerary_id,
        len(request.items),
        currency,
    )
    return request
