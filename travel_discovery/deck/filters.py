from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from ..suggestions.models import Suggestion
from .models import FilterMode

logger = logging.getLogger(__name__)

NEARBY_MAX_DISTANCE = 1.0
BUDGET_MAX_PRICE_LEVEL = 2
TRENDING_MIN_RATING = 4.5

_LEADING_FLOAT_RE = re.compile(r"^\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+))")


def parse_distance_km(distance: str | None) -> float | None:
    """Parse the leading number of a free-text distance ("0.8km" -> 0.8).

    Units are not converted. Returns None when there is no numeric prefix.
    """
    match = _LEADING_FLOAT_RE.match(distance or "")
    if not match:
        return None
    return float(match.group(1))


def _is_nearby(suggestion: Suggestion) -> bool:
    distance = parse_distance_km(suggestion.distance)
    if distance is None:
        logger.info(
            "Excluding %s from nearby: distance %r has no numeric prefix",
            suggestion.id, suggestion.distance,
        )
        return False
    return distance < NEARBY_MAX_DISTANCE


def _is_trending(suggestion: Suggestion) -> bool:
    social = suggestion.social_data
    return bool(social and social.is_trending) or suggestion.rating >= TRENDING_MIN_RATING


def matches_filter(suggestion: Suggestion, mode: FilterMode) -> bool:
    if mode is FilterMode.nearby:
        return _is_nearby(suggestion)
    if mode is FilterMode.budget:
        return suggestion.price_level <= BUDGET_MAX_PRICE_LEVEL
    if mode is FilterMode.trending:
        return _is_trending(suggestion)
    return True


def filter_suggestions(suggestions: Sequence[Suggestion], mode: FilterMode | str) -> list[Suggestion]:
    """Keep the suggestions matching ``mode``, preserving order."""
    mode = FilterMode(mode)
    return [s for s in suggestions if matches_filter(s, mode)]
