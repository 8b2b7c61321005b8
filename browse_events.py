"""Command-line entry point for browsing the campus events snapshot."""
import argparse
import json
import logging
import os
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional, TextIO

from browsing.session import BrowsingSession
from finder.event_filter import EventFilter
from finder.models import DEFAULT_CATEGORIES, DateRange
from finder.vocabulary import DEFAULT_VOCABULARY, VocabularyError, load_vocabulary
from snapshot.snapshot_loader import SnapshotLoader


# Attributes every LogRecord carries; anything else came in through extra=
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord('', logging.INFO, '', 0, '', (), None))
) | {'message', 'asctime', 'taskName'}


class JsonFormatter(logging.Formatter):
    """Formats records as one JSON object, including extra= fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage()
        }

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and not key.startswith('_'):
                log_data[key] = value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = 'INFO', stream: Optional[TextIO] = None) -> logging.Handler:
    """
    Route all logging through a single JSON handler.

    Results go to stdout, so logs default to stderr.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        stream: Stream to write log lines to (default: sys.stderr)

    Returns:
        The installed handler
    """
    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    return handler


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Browse today's batch of campus events.")
    parser.add_argument(
        "--snapshot",
        default=os.environ.get('SNAPSHOT_SOURCE', 'public/events.json'),
        help="URL or path of the events snapshot (default: $SNAPSHOT_SOURCE or public/events.json)",
    )
    parser.add_argument(
        "--category",
        default=DEFAULT_CATEGORIES[0],
        help=f"Category filter, e.g. {', '.join(DEFAULT_CATEGORIES)} (default: All)",
    )
    parser.add_argument(
        "--date-range",
        choices=[date_range.value for date_range in DateRange],
        default=DateRange.UPCOMING.value,
        help="Date window (default: upcoming)",
    )
    parser.add_argument(
        "--search",
        default="",
        help="Free-text search query",
    )
    parser.add_argument(
        "--today",
        type=lambda value: datetime.strptime(value, '%Y-%m-%d'),
        default=None,
        help="Reference date YYYY-MM-DD for date windows (default: now)",
    )
    parser.add_argument(
        "--vocabulary",
        default=os.environ.get('VOCABULARY_PATH'),
        help="YAML file overriding the search vocabulary (default: $VOCABULARY_PATH)",
    )
    return parser


def _result_document(session: BrowsingSession) -> Dict[str, Any]:
    events = session.visible_events()
    return {
        'heading': session.heading(),
        'count': len(events),
        'lastUpdated': session.batch.last_updated,
        'events': [event.to_dict() for event in events],
        'sources': [source.to_dict() for source in session.batch.sources]
    }


def main(argv: Optional[List[str]] = None) -> int:
    """
    Load the snapshot, apply the requested filters and print the result.

    Args:
        argv: Command-line arguments (default: sys.argv[1:])

    Returns:
        Process exit code (0 on success, 1 on load failure)
    """
    log_level = os.environ.get('LOG_LEVEL', 'INFO')
    timeout_seconds = int(os.environ.get('TIMEOUT_SECONDS', '30'))

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    args = build_parser().parse_args(argv)

    vocabulary = DEFAULT_VOCABULARY
    if args.vocabulary:
        try:
            vocabulary = load_vocabulary(args.vocabulary)
        except (OSError, VocabularyError) as e:
            logger.error(
                f"Failed to load vocabulary: {str(e)}",
                extra={'error_type': type(e).__name__}
            )
            print(json.dumps({
                'message': 'Failed to load vocabulary',
                'error': str(e),
                'error_type': type(e).__name__
            }))
            return 1

    if args.category not in vocabulary.categories:
        logger.warning(
            f"Category '{args.category}' is not one of: {', '.join(vocabulary.categories)}"
        )

    clock = (lambda: args.today) if args.today else datetime.now
    session = BrowsingSession(
        loader=SnapshotLoader(args.snapshot, timeout=timeout_seconds),
        event_filter=EventFilter(vocabulary),
        clock=clock
    )

    if not session.load():
        print(json.dumps({
            'message': "We couldn't load today's events.",
            'error': session.error,
            'error_type': 'SnapshotLoadError'
        }))
        return 1

    session.update_filters(
        category=args.category,
        date_range=args.date_range,
        search_query=args.search
    )

    document = _result_document(session)
    logger.info(
        f"Found {document['count']} events",
        extra={
            'category': args.category,
            'date_range': args.date_range,
            'search_query': args.search
        }
    )
    print(json.dumps(document, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
