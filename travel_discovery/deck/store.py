"""
In-process deck storage for HTTP sessions.

The session cookie only carries a deck id; the ``DeckState`` behind it lives
here. Every load/mutate/save runs under one lock, the map is bounded
(least recently used decks are evicted first), and suggestion batches are
ticketed so a slow response cannot overwrite a newer batch for the same deck.
"""
from __future__ import annotations

import itertools
import logging
import threading
from collections import OrderedDict
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from ..analytics.interactions import track_interaction
from ..suggestions.models import Suggestion
from .models import DeckState
from .swipe import InteractionCallback, SwipeDeck

logger = logging.getLogger(__name__)

DEFAULT_MAX_DECKS = 1000


class DeckStore:
    def __init__(
        self,
        max_decks: int = DEFAULT_MAX_DECKS,
        on_interaction: InteractionCallback = track_interaction,
    ):
        self.max_decks = max_decks
        self.on_interaction = on_interaction
        self._states: OrderedDict[str, DeckState] = OrderedDict()
        self._tickets: dict[str, int] = {}
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, deck_id: object) -> bool:
        return deck_id in self._states

    def _load(self, deck_id: str) -> SwipeDeck:
        state = self._states.get(deck_id)
        if state is None:
            return SwipeDeck(on_interaction=self.on_interaction)
        return SwipeDeck.from_state(state, on_interaction=self.on_interaction)

    def _put(self, deck_id: str, deck: SwipeDeck) -> None:
        self._states[deck_id] = deck.to_state()
        self._states.move_to_end(deck_id, last=True)
        while len(self._states) > self.max_decks:
            evicted, _ = self._states.popitem(last=False)
            self._tickets.pop(evicted, None)
            logger.debug("Evicted deck %s", evicted)

    @contextmanager
    def open(self, deck_id: str) -> Iterator[SwipeDeck]:
        """Yield the deck for ``deck_id``; it is saved back if the block succeeds."""
        with self._lock:
            deck = self._load(deck_id)
            yield deck
            self._put(deck_id, deck)

    def issue_ticket(self, deck_id: str) -> int:
        """Mark a new suggestion batch request for ``deck_id`` as the latest one."""
        with self._lock:
            ticket = next(self._counter)
            self._tickets[deck_id] = ticket
            if deck_id not in self._states:
                self._put(deck_id, self._load(deck_id))
            else:
                self._states.move_to_end(deck_id, last=True)
            return ticket

    def replace_items(self, deck_id: str, suggestions: Sequence[Suggestion], ticket: int) -> bool:
        """Start a new deck from ``suggestions`` unless ``ticket`` was overtaken."""
        with self._lock:
            if self._tickets.get(deck_id) != ticket:
                logger.debug("Discarding stale suggestion batch for deck %s", deck_id)
                return False
            deck = self._load(deck_id)
            deck.replace_items(suggestions)
            self._put(deck_id, deck)
            return True

    def clear(self) -> None:
        with self._lock:
            self._states.clear()
            self._tickets.clear()
