"""Browsing session: snapshot load lifecycle and local filtering."""
import logging
from datetime import date, datetime
from typing import Any, Callable, List, Optional, Tuple

from finder.event_filter import EventFilter
from finder.models import ALL_CATEGORIES, Event, EventBatch, FilterState, LoadingState
from snapshot.snapshot_loader import SnapshotLoadError, SnapshotLoader

logger = logging.getLogger(__name__)


class BrowsingSession:
    """
    Holds one client session's batch and filter state.

    The batch is loaded once and replaced wholesale on retry. Filtering
    runs locally on every call to ``visible_events``; the last result is
    reused while the batch, the filters and the current day are unchanged.
    """

    def __init__(
        self,
        loader: SnapshotLoader,
        event_filter: Optional[EventFilter] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.loader = loader
        self.event_filter = event_filter or EventFilter()
        self.clock = clock
        self.state = LoadingState.IDLE
        self.batch: Optional[EventBatch] = None
        self.error: Optional[str] = None
        self.filters = FilterState()
        self._cache_key: Optional[Tuple[int, FilterState, date]] = None
        self._cache: List[Event] = []

    def load(self) -> bool:
        """
        Load the current batch, replacing any previous one.

        Returns:
            True on success, False if the session is now in the error state
        """
        self.state = LoadingState.LOADING
        self.error = None

        try:
            batch = self.loader.load_batch()
        except SnapshotLoadError as e:
            logger.error(
                f"Could not load today's events: {e}",
                extra={'error_type': type(e).__name__}
            )
            self.batch = None
            self.error = str(e)
            self.state = LoadingState.ERROR
            self._invalidate()
            return False

        self.batch = batch
        self.state = LoadingState.SUCCESS
        self._invalidate()
        logger.info(f"Session loaded {len(batch.events)} events")
        return True

    def retry(self) -> bool:
        """Re-run the load from scratch after a failure."""
        logger.info("Retrying event snapshot load")
        return self.load()

    def update_filters(self, **changes: Any) -> FilterState:
        """
        Change one or more filters.

        Args:
            **changes: FilterState fields to replace

        Returns:
            The new filter state
        """
        self.filters = self.filters.replace(**changes)
        return self.filters

    def clear_filters(self) -> FilterState:
        self.filters = FilterState()
        return self.filters

    def visible_events(self) -> List[Event]:
        """
        Events passing the current filters.

        Returns:
            Filtered events in batch order, empty when nothing is loaded
        """
        if self.batch is None:
            return []

        now = self.clock()
        today = now.date() if isinstance(now, datetime) else now
        key = (id(self.batch), self.filters, today)
        if key != self._cache_key:
            self._cache = self.event_filter.filter(self.batch.events, self.filters, now)
            self._cache_key = key

        return list(self._cache)

    def heading(self) -> str:
        if self.filters.category == ALL_CATEGORIES:
            return "Latest Events"
        return f"{self.filters.category} Events"

    def _invalidate(self) -> None:
        self._cache_key = None
        self._cache = []
