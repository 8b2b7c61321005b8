"""Data models for campus event browsing."""
import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple

ALL_CATEGORIES = "All"

DEFAULT_CATEGORIES = (
    ALL_CATEGORIES,
    "Academic",
    "Arts",
    "Sports",
    "Science & Tech",
    "Student Life",
)


def _text(value: Any) -> str:
    """Coerce a snapshot field to text, treating missing values as empty."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def event_tags(event: Any) -> List[str]:
    """
    String tags of an event, in order.

    Any list or tuple of tags is accepted; other values yield no tags and
    non-string elements are dropped.
    """
    tags = getattr(event, 'tags', None)
    if not isinstance(tags, (list, tuple)):
        return []
    return [tag for tag in tags if isinstance(tag, str)]


@dataclass
class Event:
    """One discovered campus event."""
    id: str = ""
    title: str = ""
    organizer: str = ""
    date: str = ""
    time: str = ""
    location: str = ""
    description: str = ""
    tags: List[str] = field(default_factory=list)
    url: str = ""

    @property
    def primary_tag(self) -> str:
        """First tag, used as the display tag."""
        tags = event_tags(self)
        return tags[0] if tags else ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        """
        Build an event from one snapshot record.

        Missing or null fields become empty strings and a tags value that
        is not a list or tuple becomes an empty list.

        Args:
            data: Event record from the snapshot JSON

        Returns:
            Event object
        """
        raw_tags = data.get('tags')
        tags = [_text(tag) for tag in raw_tags if tag is not None] \
            if isinstance(raw_tags, (list, tuple)) else []

        return cls(
            id=_text(data.get('id')),
            title=_text(data.get('title')),
            organizer=_text(data.get('organizer')),
            date=_text(data.get('date')),
            time=_text(data.get('time')),
            location=_text(data.get('location')),
            description=_text(data.get('description')),
            tags=tags,
            url=_text(data.get('url')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


@dataclass(frozen=True)
class GroundingSource:
    """Citation backing the batch as a whole."""
    title: str
    uri: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GroundingSource":
        uri = _text(data.get('uri'))
        return cls(title=_text(data.get('title')) or uri, uri=uri)

    def to_dict(self) -> Dict[str, str]:
        return {'title': self.title, 'uri': self.uri}


@dataclass(frozen=True)
class EventBatch:
    """Events loaded for one session, replaced wholesale on reload."""
    events: Tuple[Event, ...]
    sources: Tuple[GroundingSource, ...]
    last_updated: int


class DateRange(str, Enum):
    """Date windows a user can restrict the listing to."""
    UPCOMING = 'upcoming'
    TODAY = 'today'
    WEEK = 'week'
    WEEKEND = 'weekend'
    MONTH = 'month'


@dataclass(frozen=True)
class FilterState:
    """Current user-selected filters."""
    category: str = ALL_CATEGORIES
    date_range: DateRange = DateRange.UPCOMING
    search_query: str = ""

    def replace(self, **changes: Any) -> "FilterState":
        """Return a copy with the given fields changed."""
        if 'date_range' in changes:
            changes['date_range'] = DateRange(changes['date_range'])
        return dataclasses.replace(self, **changes)


class LoadingState(Enum):
    """Lifecycle of the one-time snapshot load."""
    IDLE = 'IDLE'
    LOADING = 'LOADING'
    SUCCESS = 'SUCCESS'
    ERROR = 'ERROR'
