"""Filter pipeline reducing a batch of events to the displayed subset."""
import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Set, Union

from finder.category import CategoryPredicate, matches_category
from finder.date_window import DateWindowEvaluator
from finder.locality import LocalityHeuristic
from finder.models import DateRange, Event, FilterState
from finder.synonyms import SynonymExpander
from finder.text_match import TextMatcher
from finder.vocabulary import DEFAULT_VOCABULARY, SearchVocabulary

logger = logging.getLogger(__name__)


class EventFilter:
    """Applies category, date, search and locality filters to events."""

    def __init__(
        self,
        vocabulary: SearchVocabulary = DEFAULT_VOCABULARY,
        category_predicate: CategoryPredicate = matches_category,
    ):
        """
        Initialize the filter pipeline.

        Args:
            vocabulary: Search vocabulary shared by all predicates
            category_predicate: Function deciding category membership
                (default: loose substring match)
        """
        self.vocabulary = vocabulary
        self.category_predicate = category_predicate
        self.expander = SynonymExpander(vocabulary)
        self.matcher = TextMatcher(vocabulary)
        self.locality = LocalityHeuristic(vocabulary)
        self.date_window = DateWindowEvaluator()

    def filter(
        self,
        events: Iterable[Event],
        filters: FilterState,
        now: Union[datetime, date],
    ) -> List[Event]:
        """
        Reduce events to those passing every active filter.

        The input is never modified and surviving events keep their
        relative order. An event whose fields break a predicate is
        excluded without aborting the rest of the pass.

        Args:
            events: Full batch of events
            filters: Current filter state
            now: Reference instant for date windows

        Returns:
            List of matching events in input order
        """
        events = list(events)
        terms = self.search_terms(filters.search_query)

        kept = []
        for event in events:
            try:
                if self._keep(event, filters, terms, now):
                    kept.append(event)
            except Exception as e:
                logger.debug(
                    f"Excluding malformed event '{getattr(event, 'id', '')}': {e}"
                )
                continue

        logger.debug(
            f"Filtered {len(kept)} of {len(events)} events",
            extra={
                'category': filters.category,
                'date_range': getattr(filters.date_range, 'value', filters.date_range),
                'search_query': filters.search_query
            }
        )
        return kept

    def search_terms(self, search_query: str) -> Optional[Set[str]]:
        """
        Expand a search query, or return None when search is inactive.

        Args:
            search_query: Raw query text

        Returns:
            Expanded term set, or None for a blank query
        """
        if not isinstance(search_query, str) or not search_query.strip():
            return None
        return self.expander.expand(search_query)

    def matches_category(self, event: Event, category: str) -> bool:
        return self.category_predicate(event, category)

    def in_date_window(
        self,
        event: Event,
        date_range: Union[DateRange, str],
        now: Union[datetime, date],
    ) -> bool:
        return self.date_window.in_window(event, date_range, now)

    def matches_search(self, event: Event, search_query: str) -> bool:
        terms = self.search_terms(search_query)
        return terms is None or self.matcher.matches(event, terms)

    def is_local(self, event: Event) -> bool:
        return self.locality.is_local(event)

    def _keep(
        self,
        event: Event,
        filters: FilterState,
        terms: Optional[Set[str]],
        now: Union[datetime, date],
    ) -> bool:
        if not self.matches_category(event, filters.category):
            return False
        if not self.in_date_window(event, filters.date_range, now):
            return False
        if terms is not None and not self.matcher.matches(event, terms):
            return False
        return self.is_local(event)
