from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from .models import GeoPoint, PlaceRef, TimeOfDay, UserContext


def time_of_day_for_hour(hour: int) -> TimeOfDay:
    """Map a wall-clock hour (0-23) to a time-of-day bucket."""
    if hour < 12:
        return "morning"
    if hour < 18:
        return "afternoon"
    return "evening"


def build_user_context(
    location: GeoPoint | dict,
    city: str,
    interests: Iterable[str] = (),
    favorites: Iterable[PlaceRef | dict] = (),
    time_of_day: TimeOfDay | None = None,
    weather: str | None = None,
    now: datetime | None = None,
) -> UserContext:
    """Assemble the immutable context handed to the generation pipeline.

    Callers must only invoke this once both location and city are known.
    """
    if time_of_day is None:
        time_of_day = time_of_day_for_hour((now or datetime.now()).hour)

    return UserContext(
        location=location,
        city=city,
        interests=tuple(i for i in interests if i),
        favorites=tuple(favorites),
        time_of_day=time_of_day,
        weather=weather or "sunny",
    )
