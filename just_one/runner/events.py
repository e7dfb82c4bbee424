"""Events published to observers while a game runs."""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Callable

from pydantic import BaseModel, Field

from just_one.engine import GameState

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Types of game events."""

    STATE_CHANGED = "state_changed"
    PHASE_CHANGED = "phase_changed"
    LOADING_CHANGED = "loading_changed"
    CLUE_ADDED = "clue_added"
    CLUES_PROCESSED = "clues_processed"
    GUESS_MADE = "guess_made"
    ROUND_SKIPPED = "round_skipped"
    ROUND_COMPLETE = "round_complete"
    GAME_COMPLETE = "game_complete"
    ERROR = "error"


class GameEvent(BaseModel):
    """One observable change, with a snapshot of the state after it."""

    event_type: EventType
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    state: GameState
    data: dict[str, Any] = Field(default_factory=dict)


GameObserver = Callable[[GameEvent], None]


class EventBus:
    """Fan-out of game events to subscribed observers.

    Observers are called synchronously in subscription order. An observer
    that raises is logged and skipped; it never breaks the game loop.
    """

    def __init__(self):
        self._observers: list[GameObserver] = []

    def subscribe(self, observer: GameObserver) -> Callable[[], None]:
        """Register an observer and return a function that removes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            self.unsubscribe(observer)

        return unsubscribe

    def unsubscribe(self, observer: GameObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def publish(self, event: GameEvent) -> None:
        for observer in list(self._observers):
            try:
                observer(event)
            except Exception:
                logger.exception(f"Observer failed on {event.event_type.value} event")

    def __len__(self) -> int:
        return len(self._observers)
