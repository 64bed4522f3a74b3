"""Caller-side booking confirmation with per-entity in-flight tracking.

The reconciler is stateless; this service owns the only mutable state the
booking flow needs: which entity ids (and whether a batch) are currently
being confirmed. A second request for something already in flight is
rejected, never queued.
"""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum

from tripboard.booking.reconciler import (
    build_batch_request,
    build_single_confirm,
    is_confirmable,
    pending_count,
)
from tripboard.models.booking import BookingItem
from tripboard.providers import BookingProvider


class ConfirmOutcome(str, Enum):
    """Result of a confirm action from the caller's point of view."""

    requested = "requested"
    unconfirmable = "unconfirmable"
    in_flight = "in_flight"
    nothing_pending = "nothing_pending"


@dataclass(frozen=True)
class BookingSnapshot:
    """Freshly fetched booking items with their derived pending count."""

    trip_id: int
    items: list[BookingItem]
    pending_count: int


class InFlightConfirmations:
    """Set of entity ids currently being confirmed, plus a batch flag."""

    def __init__(self) -> None:
        self._entity_ids: set[int] = set()
        self._batch = False

    @property
    def batch_in_flight(self) -> bool:
        return self._batch

    def is_in_flight(self, entity_id: int) -> bool:
        """Whether a single confirm for this entity (or any batch) is running."""
        return self._batch or entity_id in self._entity_ids

    def try_acquire(self, entity_id: int) -> bool:
        """Mark an entity as in flight; False if it (or a batch) already is."""
        if self.is_in_flight(entity_id):
            return False
        self._entity_ids.add(entity_id)
        return True

    def release(self, entity_id: int) -> None:
        self._entity_ids.discard(entity_id)

    def try_acquire_batch(self) -> bool:
        """Mark a batch as in flight; False while any confirmation is running."""
        if self._batch or self._entity_ids:
            return False
        self._batch = True
        return True

    def release_batch(self) -> None:
        self._batch = False

    @contextmanager
    def hold(self, entity_id: int) -> Iterator[bool]:
        """Context manager yielding whether the entity was acquired."""
        acquired = self.try_acquire(entity_id)
        try:
            yield acquired
        finally:
            if acquired:
                self.release(entity_id)

    @contextmanager
    def hold_batch(self) -> Iterator[bool]:
        """Context manager yielding whether the batch slot was acquired."""
        acquired = self.try_acquire_batch()
        try:
            yield acquired
        finally:
            if acquired:
                self.release_batch()


# Metrics interface (implemented by tripboard.utils.metrics)
class BookingMetrics:
    """Interface for confirmation metrics."""

    def inc_confirmation(self, scope: str, outcome: str) -> None:
        """Increment confirmation counter."""
        pass


# Logging interface (implemented by tripboard.utils.logging)
class BookingLogger:
    """Interface for structured confirmation logging."""

    def log_confirmation(
        self,
        scope: str,
        outcome: str,
        trip_id: int | None,
        entity_id: int | None = None,
        item_count: int | None = None,
        currency: str | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log confirmation attempt."""
        pass


class BookingConfirmationService:
    """Drives single and batch confirmations against the booking provider."""

    def __init__(
        self,
        provider: BookingProvider,
        in_flight: InFlightConfirmations | None = None,
        metrics: BookingMetrics | None = None,
        logger: BookingLogger | None = None,
        default_currency: str | None = None,
    ) -> None:
        """Initialize service.

        Args:
            provider: Booking collaborator used for fetch and confirm calls
            in_flight: Shared in-flight tracker (optional, defaults to a new one)
            metrics: Metrics recorder (optional, defaults to no-op)
            logger: Structured logger (optional, defaults to no-op)
            default_currency: Batch currency fallback (default from settings)
        """
        self._provider = provider
        self.in_flight = in_flight or InFlightConfirmations()
        self._metrics = metrics or BookingMetrics()
        self._logger = logger or BookingLogger()
        self._default_currency = default_currency

    async def refresh(self, trip_id: int) -> BookingSnapshot:
        """Fetch current items and recompute the pending count."""
        items = await self._provider.fetch_items(trip_id)
        return BookingSnapshot(trip_id=trip_id, items=items, pending_count=pending_count(items))

    def _record(
        self,
        scope: str,
        outcome: ConfirmOutcome | str,
        trip_id: int | None,
        *,
        entity_id: int | None = None,
        item_count: int | None = None,
        currency: str | None = None,
        error_reason: str | None = None,
    ) -> None:
        outcome_value = outcome.value if isinstance(outcome, ConfirmOutcome) else outcome
        self._metrics.inc_confirmation(scope, outcome_value)
        self._logger.log_confirmation(
            scope,
            outcome_value,
            trip_id,
            entity_id=entity_id,
            item_count=item_count,
            currency=currency,
            error_reason=error_reason,
        )

    async def confirm_item(self, item: BookingItem) -> ConfirmOutcome:
        """Forward one item's quote request unless it is unconfirmable or already in flight.

        Items without a quote request, already confirmed, or not requiring a
        reservation are unconfirmable and never reach the provider.

        Raises:
            Whatever the provider raises; the in-flight mark is released first.
        """
        quote = build_single_confirm(item) if is_confirmable(item) else None
        if quote is None:
            self._record(
                "single", ConfirmOutcome.unconfirmable, item.trip_id, entity_id=item.entity_id
            )
            return ConfirmOutcome.unconfirmable

        with self.in_flight.hold(item.entity_id) as acquired:
            if not acquired:
                self._record(
                    "single", ConfirmOutcome.in_flight, item.trip_id, entity_id=item.entity_id
                )
                return ConfirmOutcome.in_flight
            try:
                await self._provider.confirm(quote)
            except Exception as e:
                self._record(
                    "single",
                    "error",
                    item.trip_id,
                    entity_id=item.entity_id,
                    error_reason=type(e).__name__,
                )
                raise

        self._record(
            "single",
            ConfirmOutcome.requested,
            item.trip_id,
            entity_id=item.entity_id,
            currency=quote.currency,
        )
        return ConfirmOutcome.requested

    async def confirm_all(self, trip_id: int, items: Sequence[BookingItem]) -> ConfirmOutcome:
        """Build and submit the batch request for every pending confirmable item.

        Short-circuits before any provider call when nothing is pending.
        """
        request = build_batch_request(trip_id, items, default_currency=self._default_currency)
        if request is None:
            self._record("batch", ConfirmOutcome.nothing_pending, trip_id, item_count=0)
            return ConfirmOutcome.nothing_pending

        with self.in_flight.hold_batch() as acquired:
            if not acquired:
                self._record("batch", ConfirmOutcome.in_flight, trip_id)
                return ConfirmOutcome.in_flight
            try:
                await self._provider.confirm_itinerary(request)
            except Exception as e:
                self._record(
                    "batch",
                    "error",
                    trip_id,
                    item_count=len(request.items),
                    error_reason=type(e).__name__,
                )
                raise

        self._record(
            "batch",
            ConfirmOutcome.requested,
            trip_id,
            item_count=len(request.items),
            currency=request.currency,
        )
        return ConfirmOutcome.requested
