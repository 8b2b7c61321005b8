"""Home-game heuristic for sports listings."""
from finder.models import Event, event_tags
from finder.vocabulary import DEFAULT_VOCABULARY, SearchVocabulary


class LocalityHeuristic:
    """
    Suppresses away-game sports listings.

    Only events tagged as sports are checked. Their location must contain
    one of the vocabulary's home venue fragments; anything else is treated
    as a road game. Home games at unlisted venues are dropped too, which is
    an accepted limitation of the allowlist.
    """

    def __init__(self, vocabulary: SearchVocabulary = DEFAULT_VOCABULARY):
        self.vocabulary = vocabulary

    def is_sports(self, event: Event) -> bool:
        return any('sport' in tag.lower() for tag in event_tags(event))

    def is_local(self, event: Event) -> bool:
        """
        Check whether an event should be shown as a local listing.

        Args:
            event: Event to test

        Returns:
            True for non-sports events and for sports events at home venues
        """
        if not self.is_sports(event):
            return True

        location = event.location.lower() if isinstance(event.location, str) else ''
        return any(venue in location for venue in self.vocabulary.local_venues)
