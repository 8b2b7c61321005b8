"""Synonym expansion for free-text event search."""
import logging
from typing import Set

from finder.vocabulary import DEFAULT_VOCABULARY, SearchVocabulary

logger = logging.getLogger(__name__)


class SynonymExpander:
    """Expands a search query into equivalent and related terms."""

    def __init__(self, vocabulary: SearchVocabulary = DEFAULT_VOCABULARY):
        self.vocabulary = vocabulary

    def expand(self, query: str) -> Set[str]:
        """
        Expand a search query using the synonym vocabulary.

        A vocabulary key fires when it equals the whole normalized query or
        one of its whitespace-separated words. Keys never fire on part of a
        word, so "art" is not triggered by "smart".

        Args:
            query: Free-text search query

        Returns:
            Set of terms containing the normalized query and all expansions
        """
        normalized = query.lower().strip() if isinstance(query, str) else ""
        terms = {normalized}

        synonyms = self.vocabulary.synonyms
        if normalized in synonyms:
            terms.update(synonyms[normalized])

        query_words = set(normalized.split())
        for key, related in synonyms.items():
            if key == normalized or key in query_words:
                terms.update(related)

        logger.debug(f"Expanded query '{normalized}' to {len(terms)} terms")
        return terms
