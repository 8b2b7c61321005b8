"""Unit tests for LocalityHeuristic."""
from finder.locality import LocalityHeuristic
from finder.models import Event
from finder.vocabulary import SearchVocabulary


class TestLocalityHeuristic:
    """Test cases for LocalityHeuristic class."""

    def test_away_game_is_excluded(self):
        """Test that a sports event at Stanford is not local."""
        heuristic = LocalityHeuristic()
        event = Event(title='Cal at Stanford', tags=['Sports'], location='Stanford, CA')

        assert heuristic.is_local(event) is False

    def test_home_game_is_included(self):
        """Test that a sports event at Haas Pavilion is local."""
        heuristic = LocalityHeuristic()
        event = Event(title='Cal vs Oregon', tags=['Sports'], location='Haas Pavilion, Berkeley, CA')

        assert heuristic.is_local(event) is True

    def test_sport_tag_is_case_insensitive_substring(self):
        """Test that tags such as 'Club Sports' count as sports."""
        heuristic = LocalityHeuristic()
        event = Event(tags=['Arts', 'club SPORTS'], location='Eugene, OR')

        assert heuristic.is_sports(event) is True
        assert heuristic.is_local(event) is False

    def test_cal_fragment_requires_trailing_space(self):
        """Test the 'cal ' venue fragment."""
        heuristic = LocalityHeuristic()

        assert heuristic.is_local(Event(tags=['Sports'], location='Cal Field House')) is True
        assert heuristic.is_local(Event(tags=['Sports'], location='Californian Arena, Fresno')) is False

    def test_non_sports_events_always_pass(self):
        """Test that non-sports events are never filtered."""
        heuristic = LocalityHeuristic()
        event = Event(title='Gallery Talk', tags=['Arts'], location='Los Angeles, CA')

        assert heuristic.is_local(event) is True

    def test_missing_tags_pass_as_non_sports(self):
        """Test that missing tags are treated as a non-sports event."""
        heuristic = LocalityHeuristic()

        assert heuristic.is_local(Event(tags=None, location='Stanford, CA')) is True

    def test_missing_location_fails_for_sports(self):
        """Test that a sports event without location is not local."""
        heuristic = LocalityHeuristic()

        assert heuristic.is_local(Event(tags=['Sports'], location=None)) is False

    def test_injected_venue_list(self):
        """Test locality with a substituted venue list."""
        vocabulary = SearchVocabulary.build(local_venues=['maples pavilion'])
        heuristic = LocalityHeuristic(vocabulary)

        assert heuristic.is_local(Event(tags=['Sports'], location='Maples Pavilion, Stanford')) is True
        assert heuristic.is_local(Event(tags=['Sports'], location='Haas Pavilion, Berkeley')) is False

    def test_tuple_tags_are_checked(self):
        """Test that sports tags given as a tuple still trigger the venue check."""
        heuristic = LocalityHeuristic()

        assert heuristic.is_local(Event(tags=('Sports',), location='Stanford, CA')) is False
        assert heuristic.is_local(Event(tags=('Sports',), location='Haas Pavilion, Berkeley, CA')) is True

    def test_non_string_tags_are_ignored(self):
        heuristic = LocalityHeuristic()
        event = Event(tags=[None, 42, 'Sports'], location='Stanford, CA')

        assert heuristic.is_sports(event) is True
        assert heuristic.is_local(Event(tags=[None, 42], location='Stanford, CA')) is True
