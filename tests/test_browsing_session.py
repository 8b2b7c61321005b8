"""Unit tests for BrowsingSession."""
from datetime import datetime
from unittest.mock import MagicMock, Mock

import pytest

from browsing.session import BrowsingSession
from finder.event_filter import EventFilter
from finder.models import DateRange, Event, EventBatch, GroundingSource, LoadingState
from snapshot.snapshot_loader import SnapshotLoadError, SnapshotLoader


@pytest.fixture
def sample_batch():
    """Create a sample event batch."""
    return EventBatch(
        events=(
            Event(id='1', title='Jazz Night', date='2024-06-12', tags=['Arts']),
            Event(id='2', title='Cal vs Oregon', date='2024-06-10', tags=['Sports'],
                  location='Haas Pavilion, Berkeley, CA'),
            Event(id='3', title='Cal at UCLA', date='2024-06-11', tags=['Sports'],
                  location='Pauley Pavilion, Los Angeles'),
        ),
        sources=(GroundingSource(title='UC Berkeley Events', uri='https://events.berkeley.edu/'),),
        last_updated=1718000000000
    )


@pytest.fixture
def clock():
    return Mock(return_value=datetime(2024, 6, 10, 9, 0))


class TestBrowsingSession:
    """Test cases for BrowsingSession class."""

    def test_initial_state(self, clock):
        session = BrowsingSession(loader=Mock(), clock=clock)

        assert session.state is LoadingState.IDLE
        assert session.batch is None
        assert session.visible_events() == []
        assert session.heading() == 'Latest Events'

    def test_load_success(self, sample_batch, clock):
        """Test successful load transitions to SUCCESS."""
        loader = Mock()
        loader.load_batch.return_value = sample_batch

        session = BrowsingSession(loader=loader, clock=clock)

        assert session.load() is True
        assert session.state is LoadingState.SUCCESS
        assert session.batch is sample_batch
        assert session.error is None
        assert [event.id for event in session.visible_events()] == ['1', '2']

    def test_load_failure_then_retry(self, sample_batch, clock):
        """Test that a failed load is terminal until retried."""
        loader = Mock()
        loader.load_batch.side_effect = [
            SnapshotLoadError('Failed to load events: 503'),
            sample_batch
        ]

        session = BrowsingSession(loader=loader, clock=clock)

        assert session.load() is False
        assert session.state is LoadingState.ERROR
        assert session.error == 'Failed to load events: 503'
        assert session.visible_events() == []
        assert loader.load_batch.call_count == 1

        assert session.retry() is True
        assert session.state is LoadingState.SUCCESS
        assert session.error is None
        assert loader.load_batch.call_count == 2

    def test_update_and_clear_filters(self, sample_batch, clock):
        loader = Mock()
        loader.load_batch.return_value = sample_batch
        session = BrowsingSession(loader=loader, clock=clock)
        session.load()

        filters = session.update_filters(date_range='today', category='Sports')

        assert filters.date_range is DateRange.TODAY
        assert session.heading() == 'Sports Events'
        assert [event.id for event in session.visible_events()] == ['2']

        session.clear_filters()

        assert [event.id for event in session.visible_events()] == ['1', '2']

    def test_results_cached_until_filters_change(self, sample_batch, clock):
        """Test that filtering reruns only when its inputs change."""
        loader = Mock()
        loader.load_batch.return_value = sample_batch
        event_filter = MagicMock(wraps=EventFilter())
        session = BrowsingSession(loader=loader, event_filter=event_filter, clock=clock)
        session.load()

        session.visible_events()
        session.visible_events()
        assert event_filter.filter.call_count == 1

        session.update_filters(search_query='jazz')
        assert [event.id for event in session.visible_events()] == ['1']
        assert event_filter.filter.call_count == 2

    def test_cache_dropped_on_reload(self, sample_batch, clock):
        loader = Mock()
        loader.load_batch.return_value = sample_batch
        event_filter = MagicMock(wraps=EventFilter())
        session = BrowsingSession(loader=loader, event_filter=event_filter, clock=clock)

        session.load()
        session.visible_events()
        session.load()
        session.visible_events()

        assert event_filter.filter.call_count == 2

    def test_cache_dropped_when_day_changes(self, sample_batch):
        """Test that date windows are re-evaluated on a new day."""
        loader = Mock()
        loader.load_batch.return_value = sample_batch
        clock = Mock(return_value=datetime(2024, 6, 10, 23, 59))
        session = BrowsingSession(loader=loader, clock=clock)
        session.load()
        session.update_filters(date_range='today')

        assert [event.id for event in session.visible_events()] == ['2']

        clock.return_value = datetime(2024, 6, 12, 0, 1)

        assert [event.id for event in session.visible_events()] == ['1']

    def test_visible_events_returns_copy(self, sample_batch, clock):
        loader = Mock()
        loader.load_batch.return_value = sample_batch
        session = BrowsingSession(loader=loader, clock=clock)
        session.load()

        session.visible_events().clear()

        assert len(session.visible_events()) == 2


class TestBrowsingSessionWithFileLoader:
    """Test cases for BrowsingSession backed by a real snapshot file."""

    def test_infinite_last_updated_still_loads(self, tmp_path, clock):
        path = tmp_path / 'events.json'
        path.write_text(
            '{"events": [{"id": "1", "title": "Jazz Night", "date": "2024-06-12", "tags": ["Arts"]}],'
            ' "lastUpdated": Infinity}',
            encoding='utf-8'
        )
        session = BrowsingSession(loader=SnapshotLoader(path), clock=clock)

        assert session.load() is True
        assert session.state is LoadingState.SUCCESS
        assert session.error is None
        assert isinstance(session.batch.last_updated, int)
