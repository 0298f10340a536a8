from __future__ import annotations

import logging
from typing import Any, Literal

from .store import get_events, record_event

logger = logging.getLogger(__name__)

InteractionAction = Literal["like", "pass", "visit"]


def track_interaction(suggestion_id: str, action: InteractionAction) -> None:
    """Fire-and-forget side channel for swipe and visit interactions."""
    logger.info("User %s place %s", action, suggestion_id)
    record_event("interaction", {"suggestion_id": suggestion_id, "action": action})


def get_interactions() -> list[dict[str, Any]]:
    return get_events("interaction")
