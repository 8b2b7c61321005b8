"""Category predicates used by the event filter."""
from typing import Callable

from finder.models import ALL_CATEGORIES, Event, event_tags

CategoryPredicate = Callable[[Event, str], bool]


def matches_category(event: Event, category: str) -> bool:
    """
    Loose category match.

    Accepts an exact tag or any tag containing the category name
    case-insensitively, so "Science & Tech" still matches a tag such as
    "Science & Technology".
    """
    if category == ALL_CATEGORIES:
        return True

    tags = event_tags(event)
    if category in tags:
        return True

    needle = category.lower()
    return any(needle in tag.lower() for tag in tags)


def matches_category_exact(event: Event, category: str) -> bool:
    """Strict category match on exact tag labels."""
    if category == ALL_CATEGORIES:
        return True
    return category in event_tags(event)
