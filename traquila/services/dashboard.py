"""Dashboard session: current filters plus the latest pipeline result.

The session recomputes explicitly. ``refresh()`` takes a snapshot of the
journal, compares its content fingerprint (and the filters) with the last
run, and only re-runs the pipeline when something that feeds it changed.
Filter changes go through ``update_filters`` and friends, which recompute
right away. Subscribers are called with every new result.
"""

import logging
from collections.abc import Callable, Hashable
from datetime import datetime, timezone
from typing import Any

from traquila.models import Bottle, BottleType, TastingRecord
from traquila.schemas.insights import DashboardFilters, DashboardResult, ExperiencePlace
from traquila.services import insights
from traquila.services.journal import JournalStore

logger = logging.getLogger(__name__)

ResultCallback = Callable[[DashboardResult], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def source_fingerprint(bottles: list[Bottle], records: list[TastingRecord], now: datetime) -> Hashable:
    """Summary of everything in the inputs that can change a dashboard result.

    Every field of every bottle and pour is included, since result rows
    carry the full records. The current day is added so time ranges roll
    over at midnight.
    """
    bottle_part = tuple(sorted(bottle.model_dump_json() for bottle in bottles))
    record_part = tuple(sorted(record.model_dump_json() for record in records))
    return (len(bottles), len(records), now.date().isoformat(), bottle_part, record_part)


class DashboardSession:
    """Owns the dashboard filters and publishes recomputed results."""

    def __init__(
        self,
        store: JournalStore,
        filters: DashboardFilters | None = None,
        clock: Callable[[], datetime] | None = None,
        pipeline_options: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            store: Journal to read bottles and pours from.
            filters: Initial filter configuration.
            clock: Source of the reference time for time-range filters.
            pipeline_options: Keyword options passed to ``insights.recompute``.
        """
        self._store = store
        self._filters = filters or DashboardFilters()
        self._clock = clock or _utcnow
        self._pipeline_options = pipeline_options or {}
        self._subscribers: list[ResultCallback] = []
        self._fingerprint: Hashable | None = None
        self._computed_filters: DashboardFilters | None = None
        self._result = DashboardResult()
        self.recompute_count = 0

    @property
    def store(self) -> JournalStore:
        return self._store

    @property
    def filters(self) -> DashboardFilters:
        return self._filters

    @property
    def result(self) -> DashboardResult:
        return self._result

    def subscribe(self, callback: ResultCallback) -> Callable[[], None]:
        """Register a callback for new results. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def refresh(self, force: bool = False) -> DashboardResult:
        """Recompute if the journal or the filters changed since the last run."""
        now = self._clock()
        bottles, records = self._store.snapshot()
        fingerprint = source_fingerprint(bottles, records, now)

        if not force and fingerprint == self._fingerprint and self._filters == self._computed_filters:
            logger.debug("Dashboard inputs unchanged, keeping previous result")
            return self._result

        self._result = insights.recompute(self._filters, bottles, records, now, **self._pipeline_options)
        self._fingerprint = fingerprint
        self._computed_filters = self._filters
        self.recompute_count += 1
        self._publish()
        return self._result

    def update_filters(self, **changes: Any) -> DashboardResult:
        """Replace some filter fields and recompute."""
        updated = self._filters.model_copy(update=changes)
        # model_copy skips validation; round-trip to coerce raw values.
        self._filters = DashboardFilters.model_validate(updated.model_dump())
        return self.refresh()

    def set_filters(self, filters: DashboardFilters) -> DashboardResult:
        self._filters = filters
        return self.refresh()

    def toggle_expression(self, expression: BottleType) -> DashboardResult:
        """Add or remove a bottle type from the expression filter."""
        return self.update_filters(selected_expressions=self._filters.selected_expressions ^ {expression})

    def toggle_place(self, place: ExperiencePlace) -> DashboardResult:
        """Add or remove a place from the place filter."""
        return self.update_filters(selected_places=self._filters.selected_places ^ {place})

    def _publish(self) -> None:
        for callback in list(self._subscribers):
            try:
                callback(self._result)
            except Exception:
                logger.exception("Dashboard subscriber %r failed", callback)
