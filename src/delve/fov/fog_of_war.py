from __future__ import annotations

import logging
from enum import Enum
from typing import FrozenSet, Set

from ..map.grid import Coord, Grid
from .fov import compute_visible

logger = logging.getLogger(__name__)


class FogTileState(str, Enum):
    UNKNOWN = "unknown"  # never seen
    REMEMBERED = "remembered"  # explored before, not currently in sight
    VISIBLE = "visible"  # currently in sight


class VisibilitySet:
    """Per-level sight memory.

    ``currently_visible`` is replaced on every update; ``ever_explored`` only
    grows for the lifetime of the level.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._visible: FrozenSet[Coord] = frozenset()
        self._explored: Set[Coord] = set()

    @property
    def currently_visible(self) -> FrozenSet[Coord]:
        return self._visible

    @property
    def ever_explored(self) -> FrozenSet[Coord]:
        return frozenset(self._explored)

    def update(self, grid: Grid, origin: Coord, radius: int) -> FrozenSet[Coord]:
        """Recompute sight from ``origin`` and fold it into the explored record."""
        self._visible = frozenset(compute_visible(grid, origin, radius))
        self._explored |= self._visible
        logger.debug(
            "Visibility updated at %s radius %d: %d visible, %d explored",
            origin,
            radius,
            len(self._visible),
            len(self._explored),
        )
        return self._visible

    def is_visible(self, pos: Coord) -> bool:
        return pos in self._visible

    def state(self, x: int, y: int) -> FogTileState:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError("Tile out of bounds")
        if (x, y) in self._visible:
            return FogTileState.VISIBLE
        if (x, y) in self._explored:
            return FogTileState.REMEMBERED
        return FogTileState.UNKNOWN

    def reveal_all(self) -> None:
        """Debug: mark every tile explored."""
        self._explored.update((x, y) for y in range(self.height) for x in range(self.width))
        logger.debug("Visibility: all tiles marked explored")
