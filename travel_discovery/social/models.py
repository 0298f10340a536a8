from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ..suggestions.models import CamelModel


class FriendActivity(CamelModel):
    friend_name: str
    place_name: str
    action: Literal["visited", "liked", "reviewed"]
    timestamp: datetime


class CommunityRating(CamelModel):
    place_id: str
    average_rating: float = Field(..., ge=0.0, le=5.0)
    review_count: int = Field(..., ge=0)
    recent_reviews: list[str] = Field(default_factory=list)


class TrendingPlace(CamelModel):
    place_id: str
    place_name: str
    trend_score: float
    weekly_visits: int = Field(..., ge=0)


class SocialSignals(BaseModel):
    """One snapshot of the three social queries."""

    model_config = ConfigDict(frozen=True)

    friend_activities: tuple[FriendActivity, ...] = ()
    community_ratings: tuple[CommunityRating, ...] = ()
    trending_places: tuple[TrendingPlace, ...] = ()
