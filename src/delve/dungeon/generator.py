from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import GauntletParams, GenerationParams
from ..data.loader import DefinitionTables
from ..exceptions import GenerationError
from ..map.grid import Coord, Grid, Tile
from ..rng import DiceRoller, derive_seed
from .level import Level
from .pathfinding import Passable, find_path, manhattan, reachable_from, stepped_path
from .population import Populator
from .rooms import SIDE_BOTTOM, SIDE_LEFT, SIDE_RIGHT, SIDE_TOP, Room, minimum_spanning_edges, ring_index

logger = logging.getLogger(__name__)

CORNER = "corner"


class DungeonGenerator:
    """Deterministic rooms-and-corridors floor generator.

    Identical ``(params, depth, seed)`` always yields an identical level. Rooms are
    placed with a two-tile gap so their wall rings never touch, joined by a
    minimum spanning tree over room centers plus a few random loop edges, and
    corridors are carved by A* under a rule that only lets them pierce a room
    wall straight through (where a door is set). If that rule cannot route a
    corridor, the relaxed rule is tried, then a straight stepped path.

    A finished layout is flood-filled from the entry; a layout with unreachable
    open tiles is regenerated from a derived seed, and after
    ``max_generation_attempts`` a :class:`GenerationError` is raised.
    """

    def __init__(
        self,
        params: Optional[GenerationParams] = None,
        gauntlet: Optional[GauntletParams] = None,
        tables: Optional[DefinitionTables] = None,
    ) -> None:
        self.params = params or GenerationParams()
        self.gauntlet = gauntlet or GauntletParams()
        self.tables = tables

    def generate(self, depth: int, seed: int) -> Level:
        if depth < 1:
            raise ValueError("depth must be >= 1")
        reason = ""
        for attempt in range(self.params.max_generation_attempts):
            attempt_seed = seed if attempt == 0 else derive_seed(seed, "attempt", attempt)
            level, reason = self._attempt(depth, attempt_seed)
            if level is not None:
                logger.info(
                    "Generated depth %d (seed=%d, attempt=%d): %d rooms, gauntlet=%s",
                    depth,
                    seed,
                    attempt,
                    len(level.rooms),
                    level.gauntlet,
                )
                return level
            logger.warning(
                "Generation attempt %d for depth %d (seed=%d) rejected: %s", attempt, depth, seed, reason
            )
        raise GenerationError(depth, seed, self.params.as_dict(), reason)

    # -- single attempt -----------------------------------------------------

    def _attempt(self, depth: int, seed: int) -> Tuple[Optional[Level], str]:
        p = self.params
        roller = DiceRoller(seed)
        grid = Grid(p.width, p.height, Tile.WALL)

        rooms = self.place_rooms(roller)
        if not rooms:
            return None, "no room could be placed"
        for room in rooms:
            for pos in room.floor_points():
                grid[pos] = Tile.FLOOR

        self.connect_rooms(grid, rooms, roller)

        entry = rooms[0].center()
        stairs_down = self._stairs_down_position(rooms, entry)
        if stairs_down is None:
            return None, "no tile available for the down stairs"
        grid[stairs_down] = Tile.STAIRS_DOWN
        stairs_up: Optional[Coord] = None
        if depth > 1:
            grid[entry] = Tile.STAIRS_UP
            stairs_up = entry

        problem = self._verify(grid, entry, depth)
        if problem:
            return None, problem

        level = Level(
            depth=depth,
            grid=grid,
            rooms=rooms,
            entry=entry,
            stairs_down=stairs_down,
            stairs_up=stairs_up,
            gauntlet=self.gauntlet.is_gauntlet(depth),
            seed=seed,
        )
        if self.tables is not None:
            Populator(p, self.gauntlet, self.tables).populate(level, roller.fork("population", depth))
        return level, ""

    # -- rooms ----------------------------------------------------------------

    def place_rooms(self, roller: DiceRoller) -> List[Room]:
        """Rejection-sample rooms inside the frame, keeping ring separation."""
        p = self.params
        target = roller.randint(p.min_room_count, p.max_room_count)
        rooms: List[Room] = []
        attempts = 0
        while len(rooms) < target and attempts < p.placement_attempts:
            attempts += 1
            w = roller.randint(p.min_room_width, p.max_room_width)
            h = roller.randint(p.min_room_height, p.max_room_height)
            # Interior starts at 2: column/row 0 is the frame, 1 is the room's ring.
            x = roller.randint(2, p.width - 2 - p.min_room_width)
            y = roller.randint(2, p.height - 2 - p.min_room_height)
            # Shrink so the ring stays inside the frame.
            w = min(w, p.width - 2 - x)
            h = min(h, p.height - 2 - y)
            if w < p.min_room_width or h < p.min_room_height:
                continue
            room = Room(x, y, w, h)
            if any(room.intersects(other, padding=2) for other in rooms):
                continue
            rooms.append(room)
        if len(rooms) < target:
            logger.debug("Placed %d/%d rooms after %d attempts", len(rooms), target, attempts)
        return rooms

    # -- corridors ----------------------------------------------------------------

    def connect_rooms(self, grid: Grid, rooms: Sequence[Room], roller: DiceRoller) -> int:
        """Carve the spanning tree plus random extra edges; returns corridors carved."""
        tree, rest = minimum_spanning_edges(list(rooms))
        edges = list(tree)
        for edge in rest:
            if roller.percent(self.params.extra_corridor_chance):
                edges.append(edge)
        rings = ring_index(list(rooms))
        for edge in edges:
            self.carve_corridor(grid, rooms[edge.source].center(), rooms[edge.destination].center(), rings)
        return len(edges)

    def carve_corridor(self, grid: Grid, start: Coord, goal: Coord, rings: Dict[Coord, str]) -> List[Coord]:
        limit = self.params.max_path_iterations
        result = find_path(grid, start, goal, limit, self._strict_rule(grid, rings))
        if not result.ok:
            logger.debug("Strict corridor %s->%s failed (%s); relaxing", start, goal, result.failure.value)
            result = find_path(grid, start, goal, limit, self._relaxed_rule(grid))
        if result.ok:
            path = list(result.path)
        else:
            logger.warning(
                "Corridor %s->%s fell back to a stepped path (%s)", start, goal, result.failure.value
            )
            path = stepped_path(start, goal, horizontal_first=True)
        self._carve(grid, path, rings)
        return path

    @staticmethod
    def _interior(grid: Grid, pos: Coord) -> bool:
        x, y = pos
        return 1 <= x <= grid.width - 2 and 1 <= y <= grid.height - 2

    def _strict_rule(self, grid: Grid, rings: Dict[Coord, str]) -> Passable:
        def _ring_ok(side: Optional[str], horizontal: bool) -> bool:
            if side is None:
                return True
            if side == CORNER:
                return False
            if side in (SIDE_TOP, SIDE_BOTTOM):
                return not horizontal
            return horizontal

        def _passable(src: Coord, dst: Coord) -> bool:
            if not self._interior(grid, dst):
                return False
            horizontal = dst[0] != src[0]
            return _ring_ok(rings.get(dst), horizontal) and _ring_ok(rings.get(src), horizontal)

        return _passable

    def _relaxed_rule(self, grid: Grid) -> Passable:
        def _passable(_src: Coord, dst: Coord) -> bool:
            return self._interior(grid, dst)

        return _passable

    def _carve(self, grid: Grid, path: Sequence[Coord], rings: Dict[Coord, str]) -> None:
        for i, pos in enumerate(path):
            if grid[pos] is not Tile.WALL:
                continue
            side = rings.get(pos)
            if side is None:
                grid[pos] = Tile.FLOOR
                self._widen(grid, pos, rings)
            elif 0 < i < len(path) - 1 and self._crosses(side, path[i - 1], pos, path[i + 1]):
                grid[pos] = Tile.DOOR_CLOSED
            else:
                grid[pos] = Tile.FLOOR

    @staticmethod
    def _crosses(side: str, prev: Coord, pos: Coord, nxt: Coord) -> bool:
        if side in (SIDE_TOP, SIDE_BOTTOM):
            return prev[0] == pos[0] == nxt[0]
        if side in (SIDE_LEFT, SIDE_RIGHT):
            return prev[1] == pos[1] == nxt[1]
        return False

    def _widen(self, grid: Grid, pos: Coord, rings: Dict[Coord, str]) -> None:
        x, y = pos
        for k in range(1, self.params.corridor_width):
            for extra in ((x + k, y), (x, y + k)):
                if self._interior(grid, extra) and extra not in rings and grid[extra] is Tile.WALL:
                    grid[extra] = Tile.FLOOR

    # -- stairs & checks ----------------------------------------------------------

    @staticmethod
    def _stairs_down_position(rooms: Sequence[Room], entry: Coord) -> Optional[Coord]:
        if len(rooms) == 1:
            candidates = [p for p in rooms[0].floor_points() if p != entry]
            if not candidates:
                return None
            # Farthest from the entry; row-major order breaks ties.
            return max(candidates, key=lambda p: (manhattan(p, entry), -p[1], -p[0]))
        best = rooms[1].center()
        best_dist = -1
        for room in rooms[1:]:
            cx, cy = room.center()
            dist = (cx - entry[0]) ** 2 + (cy - entry[1]) ** 2
            if dist > best_dist:
                best, best_dist = (cx, cy), dist
        return best

    @staticmethod
    def _verify(grid: Grid, entry: Coord, depth: int) -> str:
        if grid.count(Tile.STAIRS_DOWN) != 1:
            return "expected exactly one down staircase"
        if grid.count(Tile.STAIRS_UP) != (1 if depth > 1 else 0):
            return "unexpected up staircase count"
        open_tiles = set(grid.positions(*(t for t in Tile if t.passable)))
        reached = reachable_from(grid, entry)
        missing = open_tiles - reached
        if missing:
            return f"{len(missing)} open tiles unreachable from entry {entry}"
        return ""


__all__ = ["DungeonGenerator"]
