from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

TimeOfDay = Literal["morning", "afternoon", "evening"]
Category = Literal["food", "culture", "nature", "shopping", "entertainment"]
WeatherSuitability = Literal["indoor", "outdoor", "both"]

CATEGORIES: tuple[str, ...] = ("food", "culture", "nature", "shopping", "entertainment")

PLACEHOLDER_IMAGES: dict[str, str] = {
    "food": "https://images.unsplash.com/photo-1555396273-367ea4eb4db5?w=400",
    "culture": "https://images.unsplash.com/photo-1513475382585-d06e58bcb0e0?w=400",
    "nature": "https://images.unsplash.com/photo-1441974231531-c6227db76b6e?w=400",
    "shopping": "https://images.unsplash.com/photo-1441986300917-64674bd600d8?w=400",
    "entertainment": "https://images.unsplash.com/photo-1514525253161-7a46d19cd819?w=400",
}


class ContentKind(str, Enum):
    suggestions = "suggestions"
    local_discovery = "local_discovery"


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class GeoPoint(CamelModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class PlaceRef(CamelModel):
    id: str | None = None
    name: str = Field(..., min_length=1)


class UserContext(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        frozen=True,
    )

    location: GeoPoint
    city: str = Field(..., min_length=1)
    interests: tuple[str, ...] = ()
    favorites: tuple[PlaceRef, ...] = ()
    time_of_day: TimeOfDay
    weather: str = "sunny"


class CommunityRatingSummary(CamelModel):
    rating: float
    review_count: int


class SocialData(CamelModel):
    friend_activity: str | None = None
    community_rating: CommunityRatingSummary | None = None
    is_trending: bool = False
    trending_label: str | None = None


class Suggestion(CamelModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    category: Category = "culture"
    description: str = ""
    rating: float = Field(..., ge=0.0, le=5.0)
    distance: str = ""
    price_level: int = Field(..., ge=1, le=3)
    is_open: bool = True
    photo_url: str | None = None
    tags: list[str] = Field(default_factory=list)
    time_of_day: Literal["morning", "afternoon", "evening", "anytime"] = "anytime"
    weather_suitable: WeatherSuitability = "both"
    social_data: SocialData | None = None

    @field_validator("id", "name", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        # Oracles sometimes emit numeric ids.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value: Any) -> str:
        lower = str(value or "").strip().lower()
        return lower if lower in CATEGORIES else "culture"

    @field_validator("time_of_day", mode="before")
    @classmethod
    def _normalize_time_of_day(cls, value: Any) -> str:
        lower = str(value or "").strip().lower()
        return lower if lower in ("morning", "afternoon", "evening") else "anytime"

    @field_validator("weather_suitable", mode="before")
    @classmethod
    def _normalize_weather(cls, value: Any) -> str:
        lower = str(value or "").strip().lower()
        return lower if lower in ("indoor", "outdoor") else "both"

    @field_validator("tags", mode="before")
    @classmethod
    def _clean_tags(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        return [str(t).strip() for t in value if str(t).strip()]


class HiddenGem(CamelModel):
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)


class FoodCulture(CamelModel):
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)


class LocalDiscovery(CamelModel):
    hidden_gem: HiddenGem
    food_culture: FoodCulture
    insider_tip: str = Field(..., min_length=1)


# ── API payloads ─────────────────────────────────────────────────────────


class SuggestionsRequest(CamelModel):
    location: GeoPoint
    city: str = Field(..., min_length=1)
    interests: list[str] = Field(default_factory=list)
    favorites: list[PlaceRef] = Field(default_factory=list)
    time_of_day: TimeOfDay | None = None
    weather: str | None = None


class LocalDiscoveryRequest(CamelModel):
    city: str = Field(..., min_length=1)


class InteractionRequest(CamelModel):
    suggestion_id: str = Field(..., min_length=1)
    action: Literal["like", "pass", "visit"]


class InteractionResponse(CamelModel):
    status: str
