from __future__ import annotations

import logging
from enum import Enum
from typing import List, Set

from ..config import GauntletParams, GenerationParams
from ..data.loader import DefinitionTables
from ..entities import spawn_enemy
from ..map.grid import Coord
from ..rng import DiceRoller
from .level import Level
from .rooms import Room

logger = logging.getLogger(__name__)


class RoomEncounter(str, Enum):
    EMPTY = "empty"
    ENEMY = "enemy"
    ENEMY_TREASURE = "enemy_treasure"
    TREASURE = "treasure"


def roll_encounter(roller: DiceRoller) -> RoomEncounter:
    """d100: 30% enemies, 20% enemies with treasure, 25% treasure, 25% empty."""
    r = roller.roll(1, 100)
    if r <= 30:
        return RoomEncounter.ENEMY
    if r <= 50:
        return RoomEncounter.ENEMY_TREASURE
    if r <= 75:
        return RoomEncounter.TREASURE
    return RoomEncounter.EMPTY


class Populator:
    """Spawns enemies and floor items room by room.

    The entry room never gets enemies. On gauntlet floors every other room is an
    enemy room, enemy counts are multiplied and floor loot is withheld unless the
    gauntlet settings allow it.
    """

    def __init__(self, params: GenerationParams, gauntlet: GauntletParams, tables: DefinitionTables) -> None:
        self.params = params
        self.gauntlet = gauntlet
        self.tables = tables

    def populate(self, level: Level, roller: DiceRoller) -> None:
        blocked: Set[Coord] = {level.entry, level.stairs_down}
        if level.stairs_up is not None:
            blocked.add(level.stairs_up)
        enemy_ids = self.tables.enemies_for_depth(level.depth)
        item_ids = self.tables.items_for_depth(level.depth)
        next_eid = level.depth * 1000 + 1

        for index, room in enumerate(level.rooms):
            encounter = roll_encounter(roller)
            if level.gauntlet:
                encounter = RoomEncounter.ENEMY_TREASURE if self.gauntlet.spawn_loot else RoomEncounter.ENEMY
            if index == 0:
                # Entry room: never start the player next to enemies.
                encounter = (
                    RoomEncounter.TREASURE
                    if encounter in (RoomEncounter.ENEMY_TREASURE, RoomEncounter.TREASURE)
                    and (not level.gauntlet or self.gauntlet.spawn_loot)
                    else RoomEncounter.EMPTY
                )

            points = self._free_points(room, blocked)
            roller.shuffle(points)

            if encounter in (RoomEncounter.ENEMY, RoomEncounter.ENEMY_TREASURE) and enemy_ids:
                count = roller.randint(self.params.min_enemies_per_room, self.params.max_enemies_per_room)
                if level.gauntlet:
                    count *= self.gauntlet.enemy_multiplier
                for _ in range(count):
                    if not points:
                        break
                    x, y = points.pop()
                    definition = self.tables.enemy(roller.choice(enemy_ids))
                    level.enemies.append(spawn_enemy(next_eid, definition, x, y))
                    next_eid += 1

            if encounter in (RoomEncounter.TREASURE, RoomEncounter.ENEMY_TREASURE) and item_ids:
                count = roller.randint(min(1, self.params.max_items_per_room), self.params.max_items_per_room)
                for _ in range(count):
                    if not points:
                        break
                    level.add_item(points.pop(), self.tables.item(roller.choice(item_ids)))

        logger.debug(
            "Populated depth %d: %d enemies, %d items (gauntlet=%s)",
            level.depth,
            len(level.enemies),
            len(level.items),
            level.gauntlet,
        )

    @staticmethod
    def _free_points(room: Room, blocked: Set[Coord]) -> List[Coord]:
        return [p for p in room.floor_points() if p not in blocked]
