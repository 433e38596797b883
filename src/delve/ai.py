from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, List, Optional

from .dungeon.level import Level
from .dungeon.pathfinding import find_path
from .entities import Actor
from .fov.fov import has_line_of_sight
from .map.grid import Coord, Grid, Tile

logger = logging.getLogger(__name__)


class EnemyActionKind(str, Enum):
    IDLE = "idle"
    MOVE = "move"
    ATTACK = "attack"
    OPEN_DOOR = "open_door"


@dataclass(frozen=True)
class EnemyAction:
    kind: EnemyActionKind
    target: Optional[Coord] = None


IDLE = EnemyAction(EnemyActionKind.IDLE)


class EnemyBehavior:
    """Idle / pursue / attack decisions for enemies.

    An enemy reacts only when the player is within its aggro range (Euclidean)
    and in line of sight. Orthogonally adjacent enemies attack; others take the
    first step of an A* path toward the player, opening a closed door instead
    of stepping into it. When A* fails the enemy steps greedily along the
    dominant axis, then the other, and idles if both are blocked.
    """

    def __init__(self, max_path_iterations: int = 200) -> None:
        self.max_path_iterations = max_path_iterations

    def aggroed(self, enemy: Actor, player: Actor, grid: Grid) -> bool:
        dx, dy = player.x - enemy.x, player.y - enemy.y
        if dx * dx + dy * dy > enemy.aggro_range * enemy.aggro_range:
            return False
        return has_line_of_sight(grid, enemy.pos, player.pos)

    def decide(self, enemy: Actor, player: Actor, level: Level, occupied: AbstractSet[Coord]) -> EnemyAction:
        if not enemy.alive or not player.alive:
            return IDLE
        grid = level.grid
        if not self.aggroed(enemy, player, grid):
            return IDLE
        if abs(player.x - enemy.x) + abs(player.y - enemy.y) == 1:
            return EnemyAction(EnemyActionKind.ATTACK, player.pos)

        def passable(_src: Coord, dst: Coord) -> bool:
            return grid[dst].passable and dst not in occupied

        result = find_path(grid, enemy.pos, player.pos, self.max_path_iterations, passable)
        if result.ok and result.first_step is not None and result.first_step != player.pos:
            return self._step(grid, result.first_step)

        logger.debug("%s pathing failed (%s); stepping greedily", enemy.name, result.failure)
        for step in self._greedy_steps(enemy.pos, player.pos):
            if grid.in_bounds(*step) and grid[step].passable and step not in occupied and step != player.pos:
                return self._step(grid, step)
        return IDLE

    @staticmethod
    def _step(grid: Grid, step: Coord) -> EnemyAction:
        if grid[step] is Tile.DOOR_CLOSED:
            return EnemyAction(EnemyActionKind.OPEN_DOOR, step)
        return EnemyAction(EnemyActionKind.MOVE, step)

    @staticmethod
    def _greedy_steps(src: Coord, dst: Coord) -> List[Coord]:
        dx, dy = dst[0] - src[0], dst[1] - src[1]
        sx = (dx > 0) - (dx < 0)
        sy = (dy > 0) - (dy < 0)
        horizontal = (src[0] + sx, src[1])
        vertical = (src[0], src[1] + sy)
        steps = [horizontal, vertical] if abs(dx) >= abs(dy) else [vertical, horizontal]
        return [s for s in steps if s != src]


__all__ = ["EnemyAction", "EnemyActionKind", "EnemyBehavior"]
