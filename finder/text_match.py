"""Text matching of events against expanded search terms."""
import re
from typing import Dict, Iterable, Pattern

from finder.models import Event, event_tags
from finder.vocabulary import DEFAULT_VOCABULARY, SearchVocabulary


class TextMatcher:
    """Decides whether an event's text satisfies a set of search terms."""

    def __init__(self, vocabulary: SearchVocabulary = DEFAULT_VOCABULARY):
        self.vocabulary = vocabulary
        self._word_patterns: Dict[str, Pattern] = {}

    def searchable_text(self, event: Event) -> str:
        """
        Build the lowercase haystack for an event.

        Args:
            event: Event to index

        Returns:
            Title, description, organizer and tags joined by spaces
        """
        parts = [event.title, event.description, event.organizer]
        parts.extend(event_tags(event))
        return ' '.join(part for part in parts if isinstance(part, str)).lower()

    def matches(self, event: Event, terms: Iterable[str]) -> bool:
        """
        Check whether any term occurs in the event's text.

        Short ambiguous tokens must match as whole words; every other term
        matches as a substring. Empty terms never match.

        Args:
            event: Event to test
            terms: Expanded search terms

        Returns:
            True if at least one term matches
        """
        haystack = self.searchable_text(event)

        for term in terms:
            if not term:
                continue
            if term in self.vocabulary.whole_word_only:
                if self._word_pattern(term).search(haystack):
                    return True
            elif term in haystack:
                return True

        return False

    def _word_pattern(self, term: str) -> Pattern:
        pattern = self._word_patterns.get(term)
        if pattern is None:
            pattern = re.compile(rf'\b{re.escape(term)}\b', re.IGNORECASE | re.ASCII)
            self._word_patterns[term] = pattern
        return pattern
