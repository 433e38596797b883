from __future__ import annotations

import logging
import math
from fractions import Fraction
from typing import Callable, List, Set, Tuple

from ..map.grid import Coord, Grid

logger = logging.getLogger(__name__)

# Quadrant transforms: (depth, col) relative to the origin -> absolute offset.
_QUADRANTS: Tuple[Callable[[int, int], Coord], ...] = (
    lambda row, col: (col, -row),  # north
    lambda row, col: (row, col),  # east
    lambda row, col: (col, row),  # south
    lambda row, col: (-row, col),  # west
)


def _round_ties_up(n: Fraction) -> int:
    return math.floor(n + Fraction(1, 2))


def _round_ties_down(n: Fraction) -> int:
    return math.ceil(n - Fraction(1, 2))


def _slope(depth: int, col: int) -> Fraction:
    return Fraction(2 * col - 1, 2 * depth)


def compute_visible(grid: Grid, origin: Coord, radius: int) -> Set[Coord]:
    """Symmetric shadowcasting from ``origin`` within a circular ``radius``.

    Walls and closed doors block sight; the blocking tile itself is visible,
    tiles behind it are not. Cells outside the grid block. The origin is always
    visible. Slopes are exact fractions so results do not drift with float error.
    """
    ox, oy = origin
    if not grid.in_bounds(ox, oy):
        raise ValueError("Origin out of bounds")
    if radius < 0:
        raise ValueError("radius must be >= 0")

    visible: Set[Coord] = {origin}
    r_sq = radius * radius

    for transform in _QUADRANTS:

        def cell(depth: int, col: int) -> Coord:
            dx, dy = transform(depth, col)
            return (ox + dx, oy + dy)

        # Each row: (depth, start_slope, end_slope)
        rows: List[Tuple[int, Fraction, Fraction]] = [(1, Fraction(-1), Fraction(1))]
        while rows:
            depth, start, end = rows.pop()
            if depth > radius:
                continue
            prev_blocked = None
            min_col = _round_ties_up(depth * start)
            max_col = _round_ties_down(depth * end)
            for col in range(min_col, max_col + 1):
                x, y = cell(depth, col)
                blocked = grid.blocks_sight(x, y)
                in_range = depth * depth + col * col <= r_sq
                symmetric = depth * start <= col <= depth * end
                if (blocked or symmetric) and in_range and grid.in_bounds(x, y):
                    visible.add((x, y))
                if prev_blocked is True and not blocked:
                    start = _slope(depth, col)
                if prev_blocked is False and blocked:
                    rows.append((depth + 1, start, _slope(depth, col)))
                prev_blocked = blocked
            if prev_blocked is False:
                rows.append((depth + 1, start, end))

    logger.debug("FOV from (%d,%d) radius %d -> %d visible tiles", ox, oy, radius, len(visible))
    return visible


def bresenham_line(x0: int, y0: int, x1: int, y1: int) -> List[Coord]:
    """Points from (x0, y0) to (x1, y1) inclusive."""
    points: List[Coord] = []

    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    x, y = x0, y0
    while True:
        points.append((x, y))
        if x == x1 and y == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x += sx
        if e2 <= dx:
            err += dx
            y += sy

    return points


def has_line_of_sight(grid: Grid, a: Coord, b: Coord) -> bool:
    """True when no sight-blocking tile lies strictly between ``a`` and ``b``."""
    if not grid.in_bounds(*a) or not grid.in_bounds(*b):
        return False
    line = bresenham_line(a[0], a[1], b[0], b[1])
    for x, y in line[1:-1]:
        if grid.blocks_sight(x, y):
            return False
    return True
