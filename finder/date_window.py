"""Date window evaluation relative to a reference instant."""
import logging
from datetime import date, datetime, timedelta
from typing import Optional, Tuple, Union

from finder.models import DateRange, Event

logger = logging.getLogger(__name__)

WEEK_DAYS = 7
MONTH_DAYS = 30
SATURDAY = 5


def parse_event_date(value: str) -> Optional[date]:
    """
    Parse an event's calendar date.

    Args:
        value: Date string in YYYY-MM-DD format, optionally followed by a
            time component (YYYY-MM-DDTHH:MM...)

    Returns:
        Calendar date or None if the value can't be parsed
    """
    if not isinstance(value, str):
        return None

    value = value.strip()
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        pass

    if len(value) > 10 and value[10] in ('T', ' '):
        try:
            return datetime.strptime(value[:10], '%Y-%m-%d').date()
        except ValueError:
            return None

    return None


def _as_date(now: Union[datetime, date]) -> date:
    if isinstance(now, datetime):
        return now.date()
    return now


def weekend_bounds(today: date) -> Tuple[date, date]:
    """
    Saturday and Sunday of the coming weekend.

    On a Saturday or Sunday this is the current weekend, starting today.
    """
    weekday = today.weekday()
    if weekday >= SATURDAY:
        start = today
    else:
        start = today + timedelta(days=SATURDAY - weekday)
    sunday = start + timedelta(days=6 - start.weekday())
    return start, sunday


class DateWindowEvaluator:
    """Classifies event dates against the selectable date windows."""

    def in_window(
        self,
        event: Event,
        date_range: Union[DateRange, str],
        now: Union[datetime, date],
    ) -> bool:
        """
        Check whether an event falls within a date window.

        All comparisons use calendar dates in the local convention of
        ``now``. Events with unparsable dates fail every window except
        "upcoming", which applies no restriction at all.

        Args:
            event: Event to test
            date_range: Selected date window
            now: Reference instant (naive local time)

        Returns:
            True if the event is inside the window
        """
        try:
            date_range = DateRange(date_range)
        except ValueError:
            logger.warning(f"Unknown date range: {date_range!r}")
            return False

        if date_range is DateRange.UPCOMING:
            return True

        event_date = parse_event_date(event.date)
        if event_date is None:
            return False

        today = _as_date(now)

        if date_range is DateRange.TODAY:
            return event_date == today

        if date_range is DateRange.WEEK:
            return today <= event_date <= today + timedelta(days=WEEK_DAYS)

        if date_range is DateRange.MONTH:
            return today <= event_date <= today + timedelta(days=MONTH_DAYS)

        start, end = weekend_bounds(today)
        return start <= event_date <= end
