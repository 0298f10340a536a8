from __future__ import annotations

from collections.abc import Sequence

from ..suggestions.models import CommunityRatingSummary, SocialData, Suggestion
from .models import CommunityRating, FriendActivity, SocialSignals
from .source import SocialSignalSource, fetch_signals

TRENDING_LABEL = "Popular this week"


def _contains_name(place_name: str, suggestion_name: str) -> bool:
    """True when ``place_name`` contains ``suggestion_name``, ignoring case."""
    place = place_name.strip().casefold()
    name = suggestion_name.strip().casefold()
    if not place or not name:
        return False
    return name in place


def _names_match(place_name: str, suggestion_name: str) -> bool:
    """Case-insensitive substring match in either direction."""
    return _contains_name(place_name, suggestion_name) or _contains_name(suggestion_name, place_name)


def _find_friend_activity(name: str, activities: Sequence[FriendActivity]) -> FriendActivity | None:
    for activity in activities:
        if _names_match(activity.place_name, name):
            return activity
    return None


def enhance_suggestions(suggestions: Sequence[Suggestion], signals: SocialSignals) -> list[Suggestion]:
    """Overlay social signals onto ``suggestions``.

    Pure: output[i] is a new object derived from suggestions[i], inputs are
    left untouched, and a suggestion with no matching signal simply gets
    empty ``social_data`` fields.
    """
    ratings_by_id: dict[str, CommunityRating] = {}
    for rating in signals.community_ratings:
        ratings_by_id.setdefault(rating.place_id, rating)

    enhanced: list[Suggestion] = []
    for suggestion in suggestions:
        activity = _find_friend_activity(suggestion.name, signals.friend_activities)
        rating = ratings_by_id.get(suggestion.id)
        is_trending = any(
            _contains_name(trending.place_name, suggestion.name)
            for trending in signals.trending_places
        )

        social_data = SocialData(
            friend_activity=(
                f"{activity.friend_name} {activity.action} this place" if activity else None
            ),
            community_rating=(
                CommunityRatingSummary(rating=rating.average_rating, review_count=rating.review_count)
                if rating
                else None
            ),
            is_trending=is_trending,
            trending_label=TRENDING_LABEL if is_trending else None,
        )
        enhanced.append(suggestion.model_copy(update={"social_data": social_data}, deep=True))

    return enhanced


class SocialEnricher:
    """Binds the pure merger to a concrete social signal source."""

    def __init__(self, source: SocialSignalSource):
        self.source = source

    def enhance(self, suggestions: Sequence[Suggestion]) -> list[Suggestion]:
        return enhance_suggestions(suggestions, fetch_signals(self.source))
