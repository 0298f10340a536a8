from __future__ import annotations

from .models import (
    PLACEHOLDER_IMAGES,
    ContentKind,
    FoodCulture,
    HiddenGem,
    LocalDiscovery,
    Suggestion,
    UserContext,
)


def fallback_suggestions(context: UserContext) -> list[Suggestion]:
    """Two generic, always-valid suggestions for the requesting city."""
    return [
        Suggestion(
            id="fallback_1",
            name="Local Coffee House",
            category="food",
            description="Cozy spot with artisan coffee and pastries",
            rating=4.3,
            distance="0.4km",
            price_level=2,
            is_open=True,
            photo_url=PLACEHOLDER_IMAGES["food"],
            tags=["coffee", "breakfast"],
            time_of_day=context.time_of_day,
            weather_suitable="indoor",
        ),
        Suggestion(
            id="fallback_2",
            name=f"{context.city} Cultural Center",
            category="culture",
            description="Discover local history and art exhibitions",
            rating=4.6,
            distance="1.2km",
            price_level=1,
            is_open=True,
            photo_url=PLACEHOLDER_IMAGES["culture"],
            tags=["museum", "art"],
            time_of_day=context.time_of_day,
            weather_suitable="indoor",
        ),
    ]


def fallback_local_discovery(city: str) -> LocalDiscovery:
    return LocalDiscovery(
        hidden_gem=HiddenGem(
            name=f"{city} Neighbourhood Park",
            description="A peaceful local park often overlooked by tourists.",
        ),
        food_culture=FoodCulture(
            name="Street Food",
            description=f"Traditional street food popular with {city} residents.",
            location=f"The nearest market street in {city}",
        ),
        insider_tip="Visit popular attractions early in the morning to avoid crowds.",
    )


def fallback(kind: ContentKind, context: UserContext) -> list[Suggestion] | LocalDiscovery:
    if kind is ContentKind.suggestions:
        return fallback_suggestions(context)
    return fallback_local_discovery(context.city)
