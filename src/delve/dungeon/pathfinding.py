from __future__ import annotations

import heapq
import itertools
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Set, Tuple

from ..map.grid import Coord, Grid, Tile

logger = logging.getLogger(__name__)

# passable(src, dst) decides whether a single orthogonal step is allowed.
Passable = Callable[[Coord, Coord], bool]

DEFAULT_MAX_ITERATIONS = 2000


class PathFailure(str, Enum):
    NO_PATH_FOUND = "no_path_found"
    ITERATION_LIMIT_EXCEEDED = "iteration_limit_exceeded"


@dataclass(frozen=True)
class PathResult:
    """Either an ordered path from start to goal (inclusive) or a typed failure."""

    path: Tuple[Coord, ...] = ()
    failure: Optional[PathFailure] = None
    expansions: int = 0

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def length(self) -> int:
        """Number of steps; 0 for a failed search or a start == goal path."""
        return max(0, len(self.path) - 1)

    @property
    def first_step(self) -> Optional[Coord]:
        return self.path[1] if len(self.path) > 1 else None


def manhattan(a: Coord, b: Coord) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def walkable_passable(grid: Grid) -> Passable:
    """Default step rule: the destination must not be a wall."""

    def _passable(_src: Coord, dst: Coord) -> bool:
        return grid[dst].passable

    return _passable


def find_path(
    grid: Grid,
    start: Coord,
    goal: Coord,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    passable: Optional[Passable] = None,
) -> PathResult:
    """Bounded A* over 4-connected moves with uniform cost and a Manhattan heuristic.

    The goal tile is always enterable when in bounds, so callers can path onto an
    occupied target. Frontier ties are broken by insertion order, which keeps the
    result stable for a given grid. At most ``max_iterations`` nodes are expanded;
    exceeding that returns ``ITERATION_LIMIT_EXCEEDED`` instead of searching on.
    """
    if max_iterations <= 0:
        raise ValueError("max_iterations must be > 0")
    if not grid.in_bounds(*start) or not grid.in_bounds(*goal):
        return PathResult(failure=PathFailure.NO_PATH_FOUND)
    if start == goal:
        return PathResult(path=(start,))

    step_ok = passable or walkable_passable(grid)
    counter = itertools.count()
    frontier: List[Tuple[int, int, Coord]] = [(manhattan(start, goal), next(counter), start)]
    g_score: Dict[Coord, int] = {start: 0}
    came_from: Dict[Coord, Coord] = {}
    closed: Set[Coord] = set()
    expansions = 0

    while frontier:
        _, _, current = heapq.heappop(frontier)
        if current in closed:
            continue
        if current == goal:
            return PathResult(path=_reconstruct(came_from, goal), expansions=expansions)
        if expansions >= max_iterations:
            logger.debug(
                "A* %s->%s hit iteration limit after %d expansions", start, goal, expansions
            )
            return PathResult(failure=PathFailure.ITERATION_LIMIT_EXCEEDED, expansions=expansions)
        expansions += 1
        closed.add(current)

        tentative = g_score[current] + 1
        for nxt in grid.neighbors4(*current):
            if nxt in closed:
                continue
            if nxt != goal and not step_ok(current, nxt):
                continue
            if tentative < g_score.get(nxt, tentative + 1):
                g_score[nxt] = tentative
                came_from[nxt] = current
                heapq.heappush(frontier, (tentative + manhattan(nxt, goal), next(counter), nxt))

    logger.debug("A* %s->%s exhausted frontier after %d expansions", start, goal, expansions)
    return PathResult(failure=PathFailure.NO_PATH_FOUND, expansions=expansions)


def _reconstruct(came_from: Dict[Coord, Coord], goal: Coord) -> Tuple[Coord, ...]:
    path = [goal]
    while path[-1] in came_from:
        path.append(came_from[path[-1]])
    path.reverse()
    return tuple(path)


def stepped_path(start: Coord, goal: Coord, horizontal_first: bool = True) -> List[Coord]:
    """Straight axis-by-axis path: one axis fully, then the other. Always succeeds."""
    (sx, sy), (gx, gy) = start, goal
    path = [start]
    x, y = sx, sy

    def walk_x() -> None:
        nonlocal x
        step = 1 if gx >= x else -1
        while x != gx:
            x += step
            path.append((x, y))

    def walk_y() -> None:
        nonlocal y
        step = 1 if gy >= y else -1
        while y != gy:
            y += step
            path.append((x, y))

    if horizontal_first:
        walk_x()
        walk_y()
    else:
        walk_y()
        walk_x()
    return path


def reachable_from(
    grid: Grid,
    start: Coord,
    tile_ok: Optional[Callable[[Tile], bool]] = None,
) -> Set[Coord]:
    """Breadth-first flood fill over 4-neighbours; returns every reachable coordinate."""
    accept = tile_ok or (lambda t: t.passable)
    if not grid.in_bounds(*start) or not accept(grid[start]):
        return set()
    seen = {start}
    queue = deque([start])
    while queue:
        cx, cy = queue.popleft()
        for nxt in grid.neighbors4(cx, cy):
            if nxt not in seen and accept(grid[nxt]):
                seen.add(nxt)
                queue.append(nxt)
    return seen


__all__ = [
    "DEFAULT_MAX_ITERATIONS",
    "PathFailure",
    "PathResult",
    "Passable",
    "find_path",
    "manhattan",
    "reachable_from",
    "stepped_path",
    "walkable_passable",
]
