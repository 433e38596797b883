from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple

from ..dungeon.level import FloorItem, Level
from ..entities import Actor
from ..map.grid import Coord


@dataclass(frozen=True)
class ActorView:
    eid: int
    kind: str
    name: str
    def_id: Optional[str]
    x: int
    y: int
    hp: int
    max_hp: int
    glyph: str

    @classmethod
    def of(cls, actor: Actor) -> "ActorView":
        return cls(
            eid=actor.eid,
            kind=actor.kind.value,
            name=actor.name,
            def_id=actor.def_id,
            x=actor.x,
            y=actor.y,
            hp=actor.hp,
            max_hp=actor.max_hp,
            glyph=actor.glyph,
        )


@dataclass(frozen=True)
class ItemView:
    def_id: str
    name: str
    x: int
    y: int
    glyph: str
    color: str

    @classmethod
    def of(cls, floor_item: FloorItem) -> "ItemView":
        item = floor_item.item
        return cls(item.def_id, item.name, floor_item.x, floor_item.y, item.glyph, item.color)


@dataclass(frozen=True)
class PlayerStatsView:
    hp: int
    max_hp: int
    level: int
    experience: int
    strength: int
    dexterity: int
    vitality: int
    perception: int
    mitigation: int
    dodge: int
    damage: str
    crit_chance: int
    sight_radius: int
    weapon: Optional[str]
    armor: Optional[str]
    inventory: Tuple[str, ...]
    effects: Tuple[str, ...]


@dataclass(frozen=True)
class LevelSnapshot:
    """Read-only copy of everything a renderer needs between ticks."""

    depth: int
    round: int
    state: str
    mode: str
    cursor: Optional[Coord]
    gauntlet: bool
    width: int
    height: int
    tiles: Tuple[str, ...]
    visible: FrozenSet[Coord]
    explored: FrozenSet[Coord]
    player: ActorView
    enemies: Tuple[ActorView, ...]
    items: Tuple[ItemView, ...]

    @classmethod
    def capture(cls, level: Level, player: Actor, round: int, state: str, mode: str,
                cursor: Optional[Coord]) -> "LevelSnapshot":
        return cls(
            depth=level.depth,
            round=round,
            state=state,
            mode=mode,
            cursor=cursor,
            gauntlet=level.gauntlet,
            width=level.grid.width,
            height=level.grid.height,
            tiles=tuple(level.grid.to_ascii()),
            visible=level.visibility.currently_visible,
            explored=level.visibility.ever_explored,
            player=ActorView.of(player),
            enemies=tuple(ActorView.of(e) for e in level.living_enemies()),
            items=tuple(ItemView.of(fi) for fi in level.items),
        )

    def render(self, fog: bool = True) -> List[str]:
        """ASCII view: unexplored tiles blank, enemies and items only where visible."""
        rows = [list(row) for row in self.tiles]
        if fog:
            for y in range(self.height):
                for x in range(self.width):
                    if (x, y) not in self.explored and (x, y) not in self.visible:
                        rows[y][x] = " "
        for item in self.items:
            if not fog or (item.x, item.y) in self.visible:
                rows[item.y][item.x] = item.glyph
        for enemy in self.enemies:
            if not fog or (enemy.x, enemy.y) in self.visible:
                rows[enemy.y][enemy.x] = enemy.glyph
        rows[self.player.y][self.player.x] = self.player.glyph
        return ["".join(row) for row in rows]
