from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from ..items import EquipSlot


class Direction(Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @classmethod
    def parse(cls, text: str) -> "Direction":
        key = text.strip().lower()
        aliases = {"n": "up", "north": "up", "s": "down", "south": "down", "w": "left", "west": "left",
                   "e": "right", "east": "right"}
        return cls[aliases.get(key, key).upper()]


# -- player intents --------------------------------------------------------------


@dataclass(frozen=True)
class Move:
    direction: Direction


@dataclass(frozen=True)
class Wait:
    pass


@dataclass(frozen=True)
class PickUp:
    pass


@dataclass(frozen=True)
class UseItem:
    slot: int


@dataclass(frozen=True)
class DropItem:
    slot: int


@dataclass(frozen=True)
class Equip:
    slot: int


@dataclass(frozen=True)
class Unequip:
    slot: EquipSlot


@dataclass(frozen=True)
class Descend:
    pass


@dataclass(frozen=True)
class Ascend:
    pass


# -- sub-modes -------------------------------------------------------------------


@dataclass(frozen=True)
class EnterLookMode:
    pass


@dataclass(frozen=True)
class EnterRangedMode:
    pass


@dataclass(frozen=True)
class MoveCursor:
    direction: Direction


@dataclass(frozen=True)
class ConfirmTarget:
    pass


@dataclass(frozen=True)
class CancelMode:
    pass


# -- debug -----------------------------------------------------------------------


@dataclass(frozen=True)
class DebugTeleport:
    x: int
    y: int


@dataclass(frozen=True)
class DebugSetStat:
    stat: str
    value: int


@dataclass(frozen=True)
class DebugRevealAll:
    pass


@dataclass(frozen=True)
class DebugNoclip:
    enabled: Optional[bool] = None  # None toggles


@dataclass(frozen=True)
class DebugGodMode:
    enabled: Optional[bool] = None  # None toggles


@dataclass(frozen=True)
class DebugSpawnItem:
    def_id: str


MODE_INTENTS: Tuple[type, ...] = (MoveCursor, ConfirmTarget, CancelMode)
DEBUG_INTENTS: Tuple[type, ...] = (
    DebugTeleport,
    DebugSetStat,
    DebugRevealAll,
    DebugNoclip,
    DebugGodMode,
    DebugSpawnItem,
)

Intent = Union[
    Move,
    Wait,
    PickUp,
    UseItem,
    DropItem,
    Equip,
    Unequip,
    Descend,
    Ascend,
    EnterLookMode,
    EnterRangedMode,
    MoveCursor,
    ConfirmTarget,
    CancelMode,
    DebugTeleport,
    DebugSetStat,
    DebugRevealAll,
    DebugNoclip,
    DebugGodMode,
    DebugSpawnItem,
]
