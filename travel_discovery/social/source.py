from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol

from .models import CommunityRating, FriendActivity, SocialSignals, TrendingPlace


class SocialSignalSource(Protocol):
    """Read-only queries a social backend must answer."""

    def list_friend_activities(self) -> list[FriendActivity]: ...

    def list_community_ratings(self) -> list[CommunityRating]: ...

    def list_trending_places(self) -> list[TrendingPlace]: ...


def fetch_signals(source: SocialSignalSource) -> SocialSignals:
    return SocialSignals(
        friend_activities=tuple(source.list_friend_activities()),
        community_ratings=tuple(source.list_community_ratings()),
        trending_places=tuple(source.list_trending_places()),
    )


class StaticSocialSignalSource:
    """Fixed in-process data standing in for the social backend."""

    def __init__(self, now: datetime | None = None):
        self._now = now

    def _ago(self, hours: int) -> datetime:
        return (self._now or datetime.now()) - timedelta(hours=hours)

    def list_friend_activities(self) -> list[FriendActivity]:
        return [
            FriendActivity(friend_name="Sarah", place_name="Blue Bottle Coffee", action="visited", timestamp=self._ago(2)),
            FriendActivity(friend_name="Mike", place_name="Central Park", action="liked", timestamp=self._ago(5)),
            FriendActivity(friend_name="Emma", place_name="Local Art Gallery", action="reviewed", timestamp=self._ago(24)),
        ]

    def list_community_ratings(self) -> list[CommunityRating]:
        return [
            CommunityRating(
                place_id="place_1",
                average_rating=4.7,
                review_count=234,
                recent_reviews=["Amazing coffee!", "Great atmosphere", "Must visit"],
            ),
            CommunityRating(
                place_id="place_2",
                average_rating=4.3,
                review_count=156,
                recent_reviews=["Beautiful views", "Perfect for photos", "Peaceful spot"],
            ),
        ]

    def list_trending_places(self) -> list[TrendingPlace]:
        return [
            TrendingPlace(place_id="trending_1", place_name="Rooftop Bar Downtown", trend_score=95, weekly_visits=1250),
            TrendingPlace(place_id="trending_2", place_name="New Food Market", trend_score=88, weekly_visits=890),
            TrendingPlace(place_id="trending_3", place_name="Pop-up Art Exhibition", trend_score=82, weekly_visits=670),
        ]
