"""Structured logging for booking confirmations and route lookups."""

import logging
from typing import Any

from tripboard.models.timeline import RouteQuery

logger = logging.getLogger(__name__)


class StructuredBookingLogger:
    """Structured logger for confirmation requests."""

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
        """Log a single or batch confirmation attempt with structured data."""
        log_data: dict[str, Any] = {
            "scope": scope,
            "outcome": outcome,
            "trip_id": trip_id,
        }
        if entity_id is not None:
            log_data["entity_id"] = entity_id
        if item_count is not None:
            log_data["item_count"] = item_count
        if currency:
            log_data["currency"] = currency
        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Booking confirmation ({scope}): {outcome}"

        if outcome == "error":
            logger.warning(log_msg, extra={"structured": log_data})
        else:
            logger.info(log_msg, extra={"structured": log_data})


class StructuredRouteLogger:
    """Structured logger for route lookups."""

    def log_lookup(
        self,
        entry_key: str,
        outcome: str,
        query: RouteQuery | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log a route lookup with structured data."""
        log_data: dict[str, Any] = {"entry_key": entry_key, "outcome": outcome}
        if query is not None:
            log_data.update(query.model_dump())
        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Route lookup: {entry_key} - {outcome}"

        if outcome == "error":
            logger.warning(log_msg, extra={"structured": log_data})
        else:
            logger.debug(log_msg, extra={"structured": log_data})
