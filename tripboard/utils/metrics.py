"""Prometheus metrics for booking confirmations and route lookups."""

from prometheus_client import Counter

booking_confirm_requests_total = Counter(
    "booking_confirm_requests_total",
    "Total booking confirmation attempts",
    ["scope", "outcome"],
)

route_lookups_total = Counter(
    "route_lookups_total",
    "Total route lookups",
    ["outcome"],
)


class PrometheusBookingMetrics:
    """Prometheus-based booking metrics implementation."""

    def inc_confirmation(self, scope: str, outcome: str) -> None:
        """Increment confirmation counter."""
        booking_confirm_requests_total.labels(scope=scope, outcome=outcome).inc()


class PrometheusRouteMetrics:
    """Prometheus-based route lookup metrics implementation."""

    def inc_lookup(self, outcome: str) -> None:
        """Increment route lookup counter."""
        route_lookups_total.labels(outcome=outcome).inc()
