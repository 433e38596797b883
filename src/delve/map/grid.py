from __future__ import annotations

import hashlib
import logging
from enum import Enum
from typing import Iterator, List, Sequence, Tuple

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]

NEIGHBOR_OFFSETS: Tuple[Coord, ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))


class Tile(str, Enum):
    """Tile kinds. Values double as the ASCII glyph used by ``Grid.to_ascii``."""

    WALL = "#"
    FLOOR = "."
    DOOR_CLOSED = "+"
    DOOR_OPEN = "'"
    STAIRS_UP = "<"
    STAIRS_DOWN = ">"

    @property
    def walkable(self) -> bool:
        """Whether an actor can stand on the tile (closed doors must be opened first)."""
        return self not in (Tile.WALL, Tile.DOOR_CLOSED)

    @property
    def passable(self) -> bool:
        """Whether the tile belongs to the traversable layout (doors count, walls do not)."""
        return self is not Tile.WALL

    @property
    def blocks_sight(self) -> bool:
        return self in (Tile.WALL, Tile.DOOR_CLOSED)

    @property
    def is_door(self) -> bool:
        return self in (Tile.DOOR_CLOSED, Tile.DOOR_OPEN)

    @property
    def is_stairs(self) -> bool:
        return self in (Tile.STAIRS_UP, Tile.STAIRS_DOWN)


_GLYPHS = {t.value: t for t in Tile}


class Grid:
    """Fixed-size 2-D tile array.

    Coordinates are (x, y) with (0, 0) at top-left; x grows to the right, y grows
    down. Tiles are stored row-major as ``tiles[y][x]``.
    """

    def __init__(self, width: int, height: int, fill: Tile = Tile.WALL) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Grid width/height must be > 0")
        self.width = width
        self.height = height
        self.tiles: List[List[Tile]] = [[fill for _ in range(width)] for _ in range(height)]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def __getitem__(self, pos: Coord) -> Tile:
        x, y = pos
        if not self.in_bounds(x, y):
            raise IndexError(f"Tile {pos} out of bounds")
        return self.tiles[y][x]

    def __setitem__(self, pos: Coord, tile: Tile) -> None:
        x, y = pos
        if not self.in_bounds(x, y):
            raise IndexError(f"Tile {pos} out of bounds")
        self.tiles[y][x] = tile

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.width == other.width and self.height == other.height and self.tiles == other.tiles

    def blocks_sight(self, x: int, y: int) -> bool:
        """Out-of-bounds cells block sight."""
        if not self.in_bounds(x, y):
            return True
        return self.tiles[y][x].blocks_sight

    def neighbors4(self, x: int, y: int) -> Iterator[Coord]:
        for dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                yield nx, ny

    def positions(self, *kinds: Tile) -> List[Coord]:
        """All coordinates holding one of ``kinds``, in row-major order."""
        wanted = set(kinds)
        return [
            (x, y)
            for y in range(self.height)
            for x in range(self.width)
            if self.tiles[y][x] in wanted
        ]

    def count(self, kind: Tile) -> int:
        return sum(row.count(kind) for row in self.tiles)

    def open_door(self, x: int, y: int) -> bool:
        """Open a closed door; returns False if the tile is not a closed door."""
        if self[(x, y)] is not Tile.DOOR_CLOSED:
            return False
        self.tiles[y][x] = Tile.DOOR_OPEN
        logger.debug("Door opened at (%d,%d)", x, y)
        return True

    def copy(self) -> "Grid":
        clone = Grid(self.width, self.height)
        clone.tiles = [row[:] for row in self.tiles]
        return clone

    def to_ascii(self) -> List[str]:
        return ["".join(t.value for t in row) for row in self.tiles]

    @classmethod
    def from_ascii(cls, rows: Sequence[str]) -> "Grid":
        """Build a grid from glyph rows for tests and tools."""
        if not rows:
            raise ValueError("rows must not be empty")
        width = len(rows[0])
        for r in rows:
            if len(r) != width:
                raise ValueError("All rows must be same width")
        grid = cls(width, len(rows))
        for y, row in enumerate(rows):
            for x, ch in enumerate(row):
                if ch not in _GLYPHS:
                    raise ValueError(f"Unknown tile glyph {ch!r} at ({x},{y})")
                grid.tiles[y][x] = _GLYPHS[ch]
        return grid

    def signature(self) -> str:
        """Deterministic digest of the tile content."""
        raw = "\n".join(self.to_ascii()).encode("utf-8")
        return hashlib.blake2b(raw, digest_size=16).hexdigest()

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height})"
