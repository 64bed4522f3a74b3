"""Lazy route resolution for timeline entries.

Route queries are only sent to the route provider when a caller asks for
one. Results are cached per entry key; requesting a key whose previous
lookup is still pending cancels that lookup.
"""

import asyncio

from tripboard.models.route import RouteSummary
from tripboard.models.timeline import RouteQuery, TimelineEntry
from tripboard.providers import RouteProvider


# Metrics interface (implemented by tripboard.utils.metrics)
class RouteMetrics:
    """Interface for route lookup metrics."""

    def inc_lookup(self, outcome: str) -> None:
        """Increment route lookup counter."""
        pass


# Logging interface (implemented by tripboard.utils.logging)
class RouteLogger:
    """Interface for structured route lookup logging."""

    def log_lookup(
        self,
        entry_key: str,
        outcome: str,
        query: RouteQuery | None = None,
        error_reason: str | None = None,
    ) -> None:
        """Log route lookup."""
        pass


class RouteLookupService:
    """Resolves entry route queries on demand.

    One instance serves one trip view. Resolved routes are cached for the
    lifetime of the instance and the cache only grows; call invalidate()
    when the timeline is recomputed or the view changes trips.
    """

    def __init__(
        self,
        provider: RouteProvider,
        metrics: RouteMetrics | None = None,
        logger: RouteLogger | None = None,
    ) -> None:
        """Initialize service.

        Args:
            provider: Route collaborator
            metrics: Metrics recorder (optional, defaults to no-op)
            logger: Structured logger (optional, defaults to no-op)
        """
        self._provider = provider
        self._metrics = metrics or RouteMetrics()
        self._logger = logger or RouteLogger()
        self._cache: dict[str, tuple[RouteQuery, RouteSummary]] = {}
        self._pending: dict[str, asyncio.Task[RouteSummary]] = {}

    def _record(
        self,
        entry_key: str,
        outcome: str,
        query: RouteQuery | None = None,
        error_reason: str | None = None,
    ) -> None:
        self._metrics.inc_lookup(outcome)
        self._logger.log_lookup(entry_key, outcome, query, error_reason)

    def cached(self, entry: TimelineEntry) -> RouteSummary | None:
        """Cached route for the entry's current query, if any."""
        hit = self._cache.get(entry.entry_key)
        if hit is None or entry.route_query is None or hit[0] != entry.route_query:
            return None
        return hit[1]

    async def resolve(self, entry: TimelineEntry) -> RouteSummary | None:
        """Resolve the entry's route query, or None if it has none.

        Raises:
            asyncio.CancelledError: If a newer lookup for the same entry superseded this one
            Any provider error, uncached
        """
        key = entry.entry_key
        query = entry.route_query
        if query is None:
            self._record(key, "no_query")
            return None

        hit = self.cached(entry)
        if hit is not None:
            self._record(key, "cache_hit", query)
            return hit

        previous = self._pending.get(key)
        if previous is not None and not previous.done():
            previous.cancel()

        task = asyncio.create_task(self._provider.route(query))
        self._pending[key] = task
        try:
            summary = await task
        except asyncio.CancelledError:
            self._record(key, "cancelled", query)
            raise
        except Exception as e:
            self._record(key, "error", query, error_reason=type(e).__name__)
            raise
        finally:
            if self._pending.get(key) is task:
                del self._pending[key]

        self._cache[key] = (query, summary)
        self._record(key, "resolved", query)
        return summary

    def invalidate(self) -> None:
        """Drop cached routes and cancel pending lookups."""
        for task in self._pending.values():
            task.cancel()
        self._pending.clear()
        self._cache.clear()
