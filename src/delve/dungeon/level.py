from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..entities import Actor
from ..fov.fog_of_war import VisibilitySet
from ..items import Item
from ..map.grid import Coord, Grid
from .rooms import Room


@dataclass
class FloorItem:
    x: int
    y: int
    item: Item

    @property
    def pos(self) -> Coord:
        return (self.x, self.y)


@dataclass
class Level:
    """One generated floor: its grid, rooms, stairs, inhabitants and sight memory."""

    depth: int
    grid: Grid
    rooms: List[Room]
    entry: Coord
    stairs_down: Coord
    stairs_up: Optional[Coord]
    gauntlet: bool
    seed: int
    enemies: List[Actor] = field(default_factory=list)
    items: List[FloorItem] = field(default_factory=list)
    visibility: VisibilitySet = field(init=False)

    def __post_init__(self) -> None:
        self.visibility = VisibilitySet(self.grid.width, self.grid.height)

    def living_enemies(self) -> List[Actor]:
        """Enemies still alive, in spawn order."""
        return [e for e in self.enemies if e.alive]

    def enemy_at(self, pos: Coord) -> Optional[Actor]:
        for enemy in self.enemies:
            if enemy.alive and enemy.pos == pos:
                return enemy
        return None

    def items_at(self, pos: Coord) -> List[FloorItem]:
        return [fi for fi in self.items if fi.pos == pos]

    def add_item(self, pos: Coord, item: Item) -> FloorItem:
        floor_item = FloorItem(pos[0], pos[1], item)
        self.items.append(floor_item)
        return floor_item

    def remove_item(self, floor_item: FloorItem) -> None:
        self.items.remove(floor_item)

    def purge_dead(self) -> int:
        """Drop dead enemies from the iteration order; returns how many were removed."""
        before = len(self.enemies)
        self.enemies = [e for e in self.enemies if e.alive]
        return before - len(self.enemies)
