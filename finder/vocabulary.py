"""Search vocabulary: synonyms, whole-word tokens, home venues, categories."""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Tuple, Union

import yaml

from finder.models import ALL_CATEGORIES, DEFAULT_CATEGORIES

logger = logging.getLogger(__name__)


class VocabularyError(ValueError):
    """Raised when a vocabulary file has an unexpected shape."""


DEFAULT_SYNONYMS: Dict[str, Tuple[str, ...]] = {
    'ai': ('artificial intelligence', 'machine learning', 'ml', 'deep learning', 'neural network'),
    'artificial intelligence': ('ai', 'machine learning', 'ml', 'deep learning'),
    'machine learning': ('ml', 'ai', 'artificial intelligence', 'deep learning'),
    'ml': ('machine learning', 'ai', 'artificial intelligence'),
    'tech': ('technology', 'computer', 'software', 'engineering', 'science & tech'),
    'technology': ('tech', 'computer', 'software', 'engineering'),
    'music': ('concert', 'performance', 'jazz', 'classical', 'orchestra', 'recital'),
    'concert': ('music', 'performance', 'show', 'live'),
    'sports': ('athletics', 'game', 'match', 'basketball', 'football', 'volleyball'),
    'basketball': ('sports', 'game', 'hoops', 'cal bears'),
    'football': ('sports', 'game', 'cal bears'),
    'lecture': ('talk', 'presentation', 'seminar', 'speaker', 'academic'),
    'talk': ('lecture', 'presentation', 'seminar', 'speaker'),
    'workshop': ('class', 'training', 'hands-on', 'session'),
    'art': ('arts', 'exhibition', 'gallery', 'museum', 'visual'),
    'arts': ('art', 'exhibition', 'gallery', 'performance', 'theater', 'theatre'),
    'theater': ('theatre', 'play', 'drama', 'performance', 'arts'),
    'theatre': ('theater', 'play', 'drama', 'performance', 'arts'),
    'film': ('movie', 'cinema', 'screening'),
    'movie': ('film', 'cinema', 'screening'),
    'health': ('wellness', 'medical', 'healthcare', 'public health'),
    'wellness': ('health', 'mental health', 'self-care'),
    'career': ('job', 'employment', 'professional', 'networking', 'recruiting'),
    'job': ('career', 'employment', 'hiring', 'internship'),
    'diversity': ('dei', 'inclusion', 'equity', 'multicultural'),
    'dei': ('diversity', 'equity', 'inclusion'),
}

# Short tokens that appear inside unrelated words ("training", "against")
DEFAULT_WHOLE_WORD_ONLY = frozenset({'ai', 'ml', 'ar', 'vr', 'it', 'cs'})

# Location fragments of Berkeley home venues. "cal " keeps its trailing space
# so it does not fire on words like "californian".
DEFAULT_LOCAL_VENUES: Tuple[str, ...] = (
    'berkeley',
    'cal ',
    'haas pavilion',
    'memorial stadium',
    'edwards stadium',
    'evans diamond',
    'stu gardner',
    'levine-fricke',
    'spieker aquatics',
    'legends aquatic',
    'hearst gym',
    'witter rugby',
    'goldman field',
    'kleeberger field',
    'hellman tennis',
    'underhill',
    'recreational sports facility',
    'strawberry canyon',
    'golden bear',
    'zellerbach',
    'sproul plaza',
)

_KNOWN_KEYS = {'synonyms', 'whole_word_only', 'local_venues', 'categories'}


def _freeze_synonyms(synonyms: Mapping[str, Iterable[str]]) -> Mapping[str, Tuple[str, ...]]:
    return MappingProxyType({
        key.lower().strip(): tuple(term.lower().strip() for term in terms)
        for key, terms in synonyms.items()
    })


@dataclass(frozen=True)
class SearchVocabulary:
    """Immutable vocabulary injected into the matching components."""
    synonyms: Mapping[str, Tuple[str, ...]] = field(
        default_factory=lambda: _freeze_synonyms(DEFAULT_SYNONYMS)
    )
    whole_word_only: frozenset = DEFAULT_WHOLE_WORD_ONLY
    local_venues: Tuple[str, ...] = DEFAULT_LOCAL_VENUES
    categories: Tuple[str, ...] = DEFAULT_CATEGORIES

    @classmethod
    def build(
        cls,
        synonyms: Mapping[str, Iterable[str]] = DEFAULT_SYNONYMS,
        whole_word_only: Iterable[str] = DEFAULT_WHOLE_WORD_ONLY,
        local_venues: Iterable[str] = DEFAULT_LOCAL_VENUES,
        categories: Iterable[str] = DEFAULT_CATEGORIES,
    ) -> "SearchVocabulary":
        """
        Build a vocabulary from plain collections, normalizing terms.

        Venue fragments are lowercased but not stripped so that fragments
        such as "cal " keep their trailing space.
        """
        categories = tuple(categories)
        if ALL_CATEGORIES not in categories:
            categories = (ALL_CATEGORIES,) + categories

        return cls(
            synonyms=_freeze_synonyms(synonyms),
            whole_word_only=frozenset(term.lower().strip() for term in whole_word_only),
            local_venues=tuple(venue.lower() for venue in local_venues),
            categories=categories,
        )


DEFAULT_VOCABULARY = SearchVocabulary()


def _string_list(raw: Dict[str, Any], key: str) -> list:
    value = raw[key]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise VocabularyError(f"'{key}' must be a list of strings")
    return value


def load_vocabulary(path: Union[Path, str]) -> SearchVocabulary:
    """
    Load a vocabulary from a YAML file.

    Each top-level key present in the file replaces the built-in default
    for that key; absent keys keep the defaults.

    Args:
        path: Path to YAML vocabulary file

    Returns:
        SearchVocabulary built from the file

    Raises:
        FileNotFoundError: If the file doesn't exist
        VocabularyError: If the file contents are malformed
    """
    path = Path(path)
    with path.open(encoding='utf-8') as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise VocabularyError(f"Vocabulary file {path} is not valid YAML: {e}") from e

    if not isinstance(raw, dict):
        raise VocabularyError(f"Vocabulary file {path} must contain a mapping")

    unknown = set(raw) - _KNOWN_KEYS
    if unknown:
        raise VocabularyError(f"Unknown vocabulary keys: {', '.join(sorted(unknown))}")

    options: Dict[str, Any] = {}

    if 'synonyms' in raw:
        synonyms = raw['synonyms']
        if not isinstance(synonyms, dict):
            raise VocabularyError("'synonyms' must map terms to lists of terms")
        for key, terms in synonyms.items():
            if not isinstance(key, str) or not isinstance(terms, list) \
                    or not all(isinstance(term, str) for term in terms):
                raise VocabularyError(f"Synonym entry {key!r} must be a list of strings")
        options['synonyms'] = synonyms

    for key in ('whole_word_only', 'local_venues', 'categories'):
        if key in raw:
            options[key] = _string_list(raw, key)

    logger.info(f"Loaded vocabulary from {path}", extra={'keys': sorted(options)})
    return SearchVocabulary.build(**options)
