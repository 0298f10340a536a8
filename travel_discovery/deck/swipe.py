from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from ..analytics.interactions import track_interaction
from ..suggestions.models import Suggestion
from .filters import filter_suggestions
from .models import DeckSnapshot, DeckState, FilterMode, InteractionLogEntry, SwipeAction

logger = logging.getLogger(__name__)

InteractionCallback = Callable[[str, SwipeAction], None]


class SwipeDeck:
    """Cursor over a filtered suggestion batch plus its interaction log.

    Invariant: ``0 <= current_index <= max(0, len(items) - 1)``, and the
    index never decreases until the deck is rebuilt by ``set_filter`` or
    ``replace_items``.

    Each interaction is logged as ``pending`` before the side channel is
    called, then moved to ``confirmed`` or ``rolled_back`` depending on
    whether the side channel succeeded. A rollback never rewinds the cursor.
    """

    def __init__(
        self,
        suggestions: Sequence[Suggestion] = (),
        mode: FilterMode | str = FilterMode.all,
        on_interaction: InteractionCallback = track_interaction,
    ):
        self.on_interaction = on_interaction
        self.all_items: list[Suggestion] = list(suggestions)
        self.mode = FilterMode(mode)
        self.items: list[Suggestion] = filter_suggestions(self.all_items, self.mode)
        self.current_index = 0
        self.interaction_log: list[InteractionLogEntry] = []
        self.deck_generation = 0

    @classmethod
    def from_state(cls, state: DeckState, on_interaction: InteractionCallback = track_interaction) -> SwipeDeck:
        deck = cls(state.all_items, state.mode, on_interaction=on_interaction)
        deck.current_index = min(state.current_index, deck._max_index())
        deck.interaction_log = list(state.interaction_log)
        deck.deck_generation = state.deck_generation
        return deck

    def to_state(self) -> DeckState:
        return DeckState(
            all_items=self.all_items,
            mode=self.mode,
            current_index=self.current_index,
            interaction_log=self.interaction_log,
            deck_generation=self.deck_generation,
        )

    def snapshot(self) -> DeckSnapshot:
        return DeckSnapshot(
            items=self.items,
            current_index=self.current_index,
            current=self.current,
            mode=self.mode,
            interaction_log=self.interaction_log,
            deck_generation=self.deck_generation,
        )

    @property
    def current(self) -> Suggestion | None:
        if not self.items:
            return None
        return self.items[self.current_index]

    def _max_index(self) -> int:
        return max(0, len(self.items) - 1)

    def _interact(self, action: SwipeAction) -> InteractionLogEntry | None:
        suggestion = self.current
        if suggestion is None:
            return None

        entry = InteractionLogEntry(
            suggestion_id=suggestion.id,
            action=action,
            at=datetime.now(timezone.utc),
        )
        self.interaction_log.append(entry)
        self.current_index = min(self.current_index + 1, self._max_index())

        try:
            self.on_interaction(suggestion.id, action)
        except Exception:
            logger.warning("Tracking %s on %s failed, rolling back", action, suggestion.id, exc_info=True)
            entry.status = "rolled_back"
        else:
            entry.status = "confirmed"
        return entry

    def like(self) -> InteractionLogEntry | None:
        return self._interact("like")

    def pass_(self) -> InteractionLogEntry | None:
        return self._interact("pass")

    def _rebuild(self) -> None:
        self.items = filter_suggestions(self.all_items, self.mode)
        self.current_index = 0
        self.deck_generation += 1

    def set_filter(self, mode: FilterMode | str) -> None:
        """Switch filter mode; starts a fresh deck but keeps the interaction log."""
        mode = FilterMode(mode)
        if mode is self.mode:
            return
        self.mode = mode
        self._rebuild()

    def replace_items(self, suggestions: Sequence[Suggestion]) -> None:
        self.all_items = list(suggestions)
        self._rebuild()
