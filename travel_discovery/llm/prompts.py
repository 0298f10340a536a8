from __future__ import annotations

from ..suggestions.models import ContentKind, UserContext

SUGGESTIONS_SYSTEM_PROMPT = (
    "You are a local travel guide. Given a traveller's city, interests, "
    "time of day and weather, suggest places worth visiting right now.\n\n"
    "Return ONLY a JSON array. Do not wrap it in prose or markdown."
)

LOCAL_DISCOVERY_SYSTEM_PROMPT = (
    "You are a well-connected local who shares things tourists miss: "
    "a hidden gem, a local food tradition and one genuinely useful insider tip.\n\n"
    "Return ONLY a JSON object. Do not wrap it in prose or markdown."
)

_SUGGESTION_EXAMPLE = """\
[{{
  "id": "unique_id",
  "name": "Place Name",
  "category": "food|culture|nature|shopping|entertainment",
  "description": "Brief engaging description (max 80 chars)",
  "rating": 4.5,
  "distance": "0.8km",
  "priceLevel": 2,
  "isOpen": true,
  "tags": ["tag1", "tag2"],
  "timeOfDay": "{time_of_day}",
  "weatherSuitable": "indoor|outdoor|both"
}}]"""

_LOCAL_DISCOVERY_EXAMPLE = """\
{
  "hiddenGem": {"name": "Place name", "description": "Why locals love it (max 100 chars)"},
  "foodCulture": {"name": "Dish or food tradition", "description": "What it is and why it matters", "location": "Where to try it"},
  "insiderTip": "A genuinely useful tip not everyone would know"
}"""


def _suggestions_message(context: UserContext, count: int) -> str:
    favorites = ", ".join(f.name for f in context.favorites) or "none"
    lines = [
        f"Generate {count} personalized place suggestions for {context.city} based on:",
        f"- User interests: {', '.join(context.interests) or 'general travel'}",
        f"- Time: {context.time_of_day}",
        f"- Weather: {context.weather}",
        f"- Previous favorites: {favorites}",
        f"- Location: {context.location.lat:.4f}, {context.location.lng:.4f}",
        "",
        "Return a JSON array with exactly this format:",
        _SUGGESTION_EXAMPLE.format(time_of_day=context.time_of_day),
        "",
        "Ratings are between 0 and 5 and priceLevel is 1, 2 or 3. "
        f"Make suggestions relevant to {context.time_of_day} and {context.weather} weather.",
    ]
    return "\n".join(lines)


def _local_discovery_message(context: UserContext) -> str:
    lines = [
        f"Share local discoveries for {context.city}.",
        "",
        "Return a JSON object with exactly this format:",
        _LOCAL_DISCOVERY_EXAMPLE,
        "",
        "Every field must be a non-empty string.",
    ]
    return "\n".join(lines)


def build_messages(context: UserContext, kind: ContentKind, count: int = 4) -> list[dict[str, str]]:
    """Return the chat messages for one generation request."""
    if kind is ContentKind.suggestions:
        return [
            {"role": "system", "content": SUGGESTIONS_SYSTEM_PROMPT},
            {"role": "user", "content": _suggestions_message(context, count)},
        ]
    return [
        {"role": "system", "content": LOCAL_DISCOVERY_SYSTEM_PROMPT},
        {"role": "user", "content": _local_discovery_message(context)},
    ]
