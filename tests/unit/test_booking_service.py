"""Unit tests for caller-side booking confirmation and in-flight tracking."""

import asyncio
from typing import Any

import pytest
from prometheus_client import REGISTRY

from tripboard.models import BatchQuoteRequest, BookingItem, QuotePayload
from tripboard.services.booking import (
    BookingConfirmationService,
    ConfirmOutcome,
    InFlightConfirmations,
)
from tripboard.utils.logging import StructuredBookingLogger
from tripboard.utils.metrics import PrometheusBookingMetrics


class FakeBookingProvider:
    """In-memory booking provider that flips confirmed items server-side."""

    def __init__(self, items: list[BookingItem]) -> None:
        self.items = items
        self.single_requests: list[QuotePayload] = []
        self.batch_requests: list[BatchQuoteRequest] = []
        self.gate: asyncio.Event | None = None
        self.fail_with: Exception | None = None

    async def fetch_items(self, trip_id: int) -> list[BookingItem]:
        return [i for i in self.items if i.trip_id == trip_id]

    def _mark_confirmed(self, entity_ids: set[int | None]) -> None:
        self.items = [
            i.model_copy(update={"status": "CONFIRMED"}) if i.entity_id in entity_ids else i
            for i in self.items
        ]

    async def confirm(self, quote: QuotePayload) -> None:
        self.single_requests.append(quote)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with
        self._mark_confirmed({quote.entity_id})

    async def confirm_itinerary(self, request: BatchQuoteRequest) -> None:
        self.batch_requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with
        self._mark_confirmed({i.entity_id for i in request.items})


class TestInFlightConfirmations:
    """Test the explicit in-flight set."""

    def test_second_acquire_rejected(self) -> None:
        in_flight = InFlightConfirmations()
        assert in_flight.try_acquire(1) is True
        assert in_flight.try_acquire(1) is False
        assert in_flight.try_acquire(2) is True

    def test_release_allows_reacquire(self) -> None:
        in_flight = InFlightConfirmations()
        in_flight.try_acquire(1)
        in_flight.release(1)
        assert in_flight.is_in_flight(1) is False
        assert in_flight.try_acquire(1) is True

    def test_batch_blocks_singles_and_vice_versa(self) -> None:
        in_flight = InFlightConfirmations()
        assert in_flight.try_acquire_batch() is True
        assert in_flight.try_acquire(5) is False
        in_flight.release_batch()

        assert in_flight.try_acquire(5) is True
        assert in_flight.try_acquire_batch() is False

    def test_hold_releases_on_error(self) -> None:
        in_flight = InFlightConfirmations()
        with pytest.raises(RuntimeError):
            with in_flight.hold(3) as acquired:
                assert acquired is True
                raise RuntimeError("boom")
        assert in_flight.is_in_flight(3) is False

    def test_hold_does_not_release_foreign_mark(self) -> None:
        in_flight = InFlightConfirmations()
        in_flight.try_acquire(3)
        with in_flight.hold(3) as acquired:
            assert acquired is False
        assert in_flight.is_in_flight(3) is True


class TestConfirmItem:
    """Test single confirmation flow."""

    @pytest.mark.asyncio
    async def test_confirm_then_refresh_shows_confirmed(self, item_factory: Any) -> None:
        provider = FakeBookingProvider([item_factory(1), item_factory(2)])
        service = BookingConfirmationService(provider)

        snapshot = await service.refresh(42)
        assert snapshot.pending_count == 2

        outcome = await service.confirm_item(snapshot.items[0])
        assert outcome == ConfirmOutcome.requested
        assert provider.single_requests == [snapshot.items[0].quote_request]

        snapshot = await service.refresh(42)
        assert snapshot.pending_count == 1

    @pytest.mark.asyncio
    async def test_unconfirmable_item_never_reaches_provider(self, item_factory: Any) -> None:
        provider = FakeBookingProvider([item_factory(1, quote=False)])
        service = BookingConfirmationService(provider)

        outcome = await service.confirm_item(provider.items[0])

        assert outcome == ConfirmOutcome.unconfirmable
        assert provider.single_requests == []

    @pytest.mark.asyncio
    async def test_settled_items_are_not_reconfirmed(self, item_factory: Any) -> None:
        provider = FakeBookingProvider(
            [item_factory(1, "confirmed"), item_factory(2, reservation_required=False)]
        )
        service = BookingConfirmationService(provider)

        outcomes = [await service.confirm_item(item) for item in provider.items]

        assert outcomes == [ConfirmOutcome.unconfirmable, ConfirmOutcome.unconfirmable]
        assert provider.single_requests == []

    @pytest.mark.asyncio
    async def test_concurrent_confirm_for_same_entity_rejected(self, item_factory: Any) -> None:
        provider = FakeBookingProvider([item_factory(1)])
        provider.gate = asyncio.Event()
        service = BookingConfirmationService(provider)
        item = provider.items[0]

        first = asyncio.create_task(service.confirm_item(item))
        await asyncio.sleep(0)
        second = await service.confirm_item(item)
        provider.gate.set()

        assert second == ConfirmOutcome.in_flight
        assert await first == ConfirmOutcome.requested
        assert len(provider.single_requests) == 1
        assert service.in_flight.is_in_flight(1) is False

    @pytest.mark.asyncio
    async def test_provider_error_propagates_and_releases(self, item_factory: Any) -> None:
        provider = FakeBookingProvider([item_factory(1)])
        provider.fail_with = ConnectionError("backend down")
        service = BookingConfirmationService(provider)

        with pytest.raises(ConnectionError):
            await service.confirm_item(provider.items[0])

        assert service.in_flight.is_in_flight(1) is False


class TestConfirmAll:
    """Test batch confirmation flow."""

    @pytest.mark.asyncio
    async def test_batch_then_second_batch_is_noop(self, item_factory: Any) -> None:
        provider = FakeBookingProvider(
            [item_factory(1), item_factory(2, "confirmed"), item_factory(3, quote=False)]
        )
        service = BookingConfirmationService(provider)

        snapshot = await service.refresh(42)
        assert await service.confirm_all(42, snapshot.items) == ConfirmOutcome.requested
        assert [i.entity_id for i in provider.batch_requests[0].items] == [1]

        snapshot = await service.refresh(42)
        assert snapshot.pending_count == 1  # unconfirmable item still shown as pending
        assert await service.confirm_all(42, snapshot.items) == ConfirmOutcome.nothing_pending
        assert len(provider.batch_requests) == 1

    @pytest.mark.asyncio
    async def test_nothing_pending_short_circuits(self, item_factory: Any) -> None:
        provider = FakeBookingProvider([item_factory(2, "confirmed")])
        service = BookingConfirmationService(provider)

        assert await service.confirm_all(42, provider.items) == ConfirmOutcome.nothing_pending
        assert provider.batch_requests == []

    @pytest.mark.asyncio
    async def test_service_default_currency(self, item_factory: Any) -> None:
        provider = FakeBookingProvider([item_factory(1)])
        service = BookingConfirmationService(provider, default_currency="NZD")

        await service.confirm_all(42, provider.items)

        assert provider.batch_requests[0].currency == "NZD"
        assert provider.batch_requests[0].itinerary_id == "iti_42"

    @pytest.mark.asyncio
    async def test_single_rejected_while_batch_in_flight(self, item_factory: Any) -> None:
        provider = FakeBookingProvider([item_factory(1), item_factory(2)])
        provider.gate = asyncio.Event()
        service = BookingConfirmationService(provider)

        batch = asyncio.create_task(service.confirm_all(42, provider.items))
        await asyncio.sleep(0)
        single = await service.confirm_item(provider.items[1])
        again = await service.confirm_all(42, provider.items)
        provider.gate.set()

        assert single == ConfirmOutcome.in_flight
        assert again == ConfirmOutcome.in_flight
        assert await batch == ConfirmOutcome.requested
        assert service.in_flight.batch_in_flight is False

    @pytest.mark.asyncio
    async def test_batch_error_propagates_and_releases(self, item_factory: Any) -> None:
        provider = FakeBookingProvider([item_factory(1)])
        provider.fail_with = TimeoutError()
        service = BookingConfirmationService(provider)

        with pytest.raises(TimeoutError):
            await service.confirm_all(42, provider.items)

        assert service.in_flight.batch_in_flight is False


@pytest.mark.asyncio
async def test_metrics_and_logs_recorded(
    item_factory: Any, caplog: pytest.LogCaptureFixture
) -> None:
    """Test Prometheus counters and structured log records for confirmations."""

    def sample(scope: str, outcome: str) -> float:
        value = REGISTRY.get_sample_value(
            "booking_confirm_requests_total", {"scope": scope, "outcome": outcome}
        )
        return value or 0.0

    provider = FakeBookingProvider([item_factory(1), item_factory(2, quote=False)])
    service = BookingConfirmationService(
        provider, metrics=PrometheusBookingMetrics(), logger=StructuredBookingLogger()
    )
    single_before = sample("single", "unconfirmable")
    batch_before = sample("batch", "requested")

    with caplog.at_level("INFO", logger="tripboard.utils.logging"):
        await service.confirm_item(provider.items[1])
        await service.confirm_all(42, provider.items)

    assert sample("single", "unconfirmable") == single_before + 1
    assert sample("batch", "requested") == batch_before + 1

    structured = [r.structured for r in caplog.records if hasattr(r, "structured")]
    assert {"scope": "single", "outcome": "unconfirmable", "trip_id": 42, "entity_id": 2} in (
        structured
    )
    assert {
        "scope": "batch",
        "outcome": "requested",
        "trip_id": 42,
        "item_count": 1,
        "currency": "AUD",
    } in structured
