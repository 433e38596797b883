from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, DefaultDict, Dict, List, Optional

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    MOVE = "move"
    ATTACK = "attack"
    MISS = "miss"
    DEATH = "death"
    PICKUP = "pickup"
    DROP = "drop"
    USE = "use"
    EQUIP = "equip"
    UNEQUIP = "unequip"
    DOOR = "door"
    STAIRS = "stairs"
    WAIT = "wait"
    INSPECT = "inspect"
    MODE = "mode"
    REJECTED = "rejected"
    LEVEL_UP = "level_up"
    EFFECT = "effect"
    DEBUG = "debug"
    GAME_OVER = "game_over"
    GAUNTLET = "gauntlet"


@dataclass(frozen=True)
class GameEvent:
    """One structured entry of the game's event stream.

    Attributes:
        type: What happened.
        message: Human-readable line for a message log.
        round: Round counter at the time the event was emitted.
        data: Machine-readable details (actor ids, positions, damage...).
    """

    type: EventType
    message: str
    round: int
    data: Dict[str, Any] = field(default_factory=dict)


Subscriber = Callable[[GameEvent], None]

# Subscriptions under this key receive every event.
ALL = "*"


class EventLog:
    """In-memory event stream with per-type subscriptions.

    Events are kept in emission order. Subscribers run synchronously in
    registration order when an event is published.
    """

    def __init__(self) -> None:
        self._events: List[GameEvent] = []
        self._subs: DefaultDict[str, List[Subscriber]] = defaultdict(list)

    def subscribe(self, callback: Subscriber, event_type: Optional[EventType] = None) -> None:
        if not callable(callback):
            raise TypeError("callback must be callable")
        key = event_type.value if event_type is not None else ALL
        self._subs[key].append(callback)
        logger.debug("Subscribed %s to '%s'", getattr(callback, "__name__", str(callback)), key)

    def unsubscribe(self, callback: Subscriber, event_type: Optional[EventType] = None) -> None:
        key = event_type.value if event_type is not None else ALL
        if callback in self._subs.get(key, []):
            self._subs[key].remove(callback)

    def publish(self, event: GameEvent) -> GameEvent:
        self._events.append(event)
        if event.type in (EventType.DEATH, EventType.LEVEL_UP, EventType.STAIRS, EventType.GAME_OVER):
            logger.info(event.message)
        else:
            logger.debug(event.message)
        for cb in list(self._subs.get(event.type.value, [])) + list(self._subs.get(ALL, [])):
            cb(event)
        return event

    def emit(self, event_type: EventType, message: str, round: int, **data: Any) -> GameEvent:
        return self.publish(GameEvent(type=event_type, message=message, round=round, data=data))

    def events(self, event_type: Optional[EventType] = None) -> List[GameEvent]:
        if event_type is None:
            return list(self._events)
        return [e for e in self._events if e.type is event_type]

    def since(self, index: int) -> List[GameEvent]:
        """Events emitted after the first ``index`` ones."""
        return self._events[index:]

    def __len__(self) -> int:
        return len(self._events)

    def clear(self) -> None:
        self._events.clear()


__all__ = ["EventLog", "EventType", "GameEvent"]
