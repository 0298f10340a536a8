from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import Field

from ..suggestions.models import CamelModel, Suggestion


class FilterMode(str, Enum):
    all = "all"
    nearby = "nearby"
    budget = "budget"
    trending = "trending"


SwipeAction = Literal["like", "pass"]
InteractionStatus = Literal["pending", "confirmed", "rolled_back"]


class InteractionLogEntry(CamelModel):
    suggestion_id: str
    action: SwipeAction
    at: datetime
    status: InteractionStatus = "pending"


class DeckState(CamelModel):
    """Serializable deck state, e.g. for a session cookie."""

    all_items: list[Suggestion] = Field(default_factory=list)
    mode: FilterMode = FilterMode.all
    current_index: int = Field(default=0, ge=0)
    interaction_log: list[InteractionLogEntry] = Field(default_factory=list)
    deck_generation: int = 0


class DeckSnapshot(CamelModel):
    items: list[Suggestion]
    current_index: int
    current: Suggestion | None = None
    mode: FilterMode
    interaction_log: list[InteractionLogEntry]
    deck_generation: int


class FilterRequest(CamelModel):
    mode: FilterMode
