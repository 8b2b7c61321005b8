"""Loader for the published campus events snapshot."""
import json
import logging
import math
import re
import time
from pathlib import Path
from typing import Any, Dict, List, Union

import requests

from finder.models import Event, EventBatch, GroundingSource

logger = logging.getLogger(__name__)

ISO_DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')


class SnapshotLoadError(Exception):
    """Raised when the snapshot can't be fetched or parsed."""


def _is_timestamp(value: Any) -> bool:
    """Whether value is a usable epoch-milliseconds number."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


class SnapshotLoader:
    """Loads the current event batch from a URL or a local file."""

    def __init__(self, source: Union[str, Path], timeout: int = 30):
        """
        Initialize the snapshot loader.

        Args:
            source: http(s) URL or filesystem path of the snapshot JSON
            timeout: HTTP request timeout in seconds (default: 30)
        """
        self.source = str(source)
        self.timeout = timeout

    @property
    def is_remote(self) -> bool:
        return self.source.startswith(('http://', 'https://'))

    def load_batch(self) -> EventBatch:
        """
        Load the current event batch.

        A failed load is not retried; callers retry by invoking this method
        again.

        Returns:
            EventBatch with validated events and deduplicated sources

        Raises:
            SnapshotLoadError: If fetching or parsing fails
        """
        logger.info(f"Loading event snapshot from {self.source}")

        try:
            raw_text = self._fetch_snapshot_text()
            document = json.loads(raw_text)
        except requests.RequestException as e:
            logger.error(f"Failed to fetch snapshot: {e}")
            raise SnapshotLoadError(f"Failed to load events: {e}") from e
        except OSError as e:
            logger.error(f"Failed to read snapshot: {e}")
            raise SnapshotLoadError(f"Failed to load events: {e}") from e
        except ValueError as e:
            logger.error(f"Snapshot is not valid JSON: {e}")
            raise SnapshotLoadError(f"Failed to parse events: {e}") from e

        batch = self.parse_snapshot(document)
        logger.info(
            f"Loaded {len(batch.events)} events and {len(batch.sources)} sources",
            extra={'last_updated': batch.last_updated}
        )
        return batch

    def _fetch_snapshot_text(self) -> str:
        """
        Fetch raw snapshot text.

        Returns:
            Snapshot document as a string

        Raises:
            requests.RequestException: If the HTTP request fails
            OSError: If the local file can't be read
        """
        if self.is_remote:
            response = requests.get(
                self.source,
                headers={'Cache-Control': 'no-cache'},
                timeout=self.timeout
            )
            response.raise_for_status()
            return response.text

        return Path(self.source).read_text(encoding='utf-8')

    def parse_snapshot(self, document: Any) -> EventBatch:
        """
        Build an EventBatch from a decoded snapshot document.

        Args:
            document: Decoded JSON document

        Returns:
            EventBatch object

        Raises:
            SnapshotLoadError: If the document has the wrong shape
        """
        if not isinstance(document, dict):
            raise SnapshotLoadError("Failed to parse events: snapshot must be a JSON object")

        raw_events = document.get('events') or []
        raw_sources = document.get('sources') or []
        if not isinstance(raw_events, list) or not isinstance(raw_sources, list):
            raise SnapshotLoadError(
                "Failed to parse events: 'events' and 'sources' must be arrays"
            )

        last_updated = document.get('lastUpdated')
        if not _is_timestamp(last_updated):
            if last_updated is not None:
                logger.warning(f"Ignoring invalid lastUpdated value: {last_updated!r}")
            last_updated = int(time.time() * 1000)

        return EventBatch(
            events=tuple(self._parse_events(raw_events)),
            sources=tuple(self._parse_sources(raw_sources)),
            last_updated=int(last_updated)
        )

    def _parse_events(self, raw_events: List[Any]) -> List[Event]:
        events = []

        for index, record in enumerate(raw_events):
            if not isinstance(record, dict):
                logger.warning(f"Skipping event #{index}: record is not an object")
                continue

            event = Event.from_dict(record)
            if not ISO_DATE_PATTERN.match(event.date):
                logger.warning(
                    f"Skipping event '{event.title}': invalid date format: '{event.date}'"
                )
                continue

            events.append(event)

        return events

    def _parse_sources(self, raw_sources: List[Any]) -> List[GroundingSource]:
        # Later records win for a repeated uri, keeping first-seen order
        unique: Dict[str, GroundingSource] = {}

        for record in raw_sources:
            if not isinstance(record, dict):
                continue
            source = GroundingSource.from_dict(record)
            if not source.uri:
                continue
            unique[source.uri] = source

        return list(unique.values())
