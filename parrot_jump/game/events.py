"""
Synchronous event bus for presentation hooks (sounds, spin animation, HUD).

The simulation buffers events while a tick runs and emits them once the tick
is complete, so handlers always see a consistent run.
"""

from __future__ import annotations
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class EventType(Enum):
    STARTED = auto()
    JUMPED = auto()
    LANDED = auto()
    SCORED = auto()
    STAGE_CHANGED = auto()
    GAME_OVER = auto()
    RESTARTED = auto()


@dataclass
class Event:
    """
    Attributes:
        type: what happened
        tick: simulation tick the event belongs to
        data: event payload (score, stage index, platform slot...)
    """
    type: EventType
    tick: int = 0
    data: Dict[str, Any] = field(default_factory=dict)


Handler = Callable[[Event], None]


class EventBus:
    def __init__(self) -> None:
        self._handlers: Dict[EventType, List[Handler]] = defaultdict(list)
        self._global_handlers: List[Handler] = []

    def subscribe(self, event_type: EventType, handler: Handler) -> Callable[[], None]:
        """Subscribe to one event type. Returns an unsubscribe function."""
        self._handlers[event_type].append(handler)
        logger.debug("handler subscribed to %s", event_type.name)

        def unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)
                logger.debug("handler unsubscribed from %s", event_type.name)

        return unsubscribe

    def subscribe_all(self, handler: Handler) -> Callable[[], None]:
        self._global_handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._global_handlers:
                self._global_handlers.remove(handler)

        return unsubscribe

    def emit(self, event: Event) -> None:
        for handler in list(self._handlers.get(event.type, [])) + list(self._global_handlers):
            handler(event)
