from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..map.grid import Coord

# Wall sides of a room's ring.
SIDE_TOP = "top"
SIDE_BOTTOM = "bottom"
SIDE_LEFT = "left"
SIDE_RIGHT = "right"


@dataclass(frozen=True)
class Room:
    """Axis-aligned rectangle of floor tiles surrounded by a one-tile wall ring."""

    x: int
    y: int
    w: int
    h: int

    def center(self) -> Coord:
        return (self.x + self.w // 2, self.y + self.h // 2)

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.w and self.y <= y < self.y + self.h

    def intersects(self, other: "Room", padding: int = 2) -> bool:
        return not (
            self.x + self.w + padding <= other.x
            or other.x + other.w + padding <= self.x
            or self.y + self.h + padding <= other.y
            or other.y + other.h + padding <= self.y
        )

    def floor_points(self) -> List[Coord]:
        return [(x, y) for y in range(self.y, self.y + self.h) for x in range(self.x, self.x + self.w)]

    def ring_side(self, x: int, y: int) -> Optional[str]:
        """Which wall side of the ring (x, y) sits on; ``"corner"`` for corners, None off-ring."""
        left, right = self.x - 1, self.x + self.w
        top, bottom = self.y - 1, self.y + self.h
        on_x_edge = x in (left, right)
        on_y_edge = y in (top, bottom)
        inside_x = left <= x <= right
        inside_y = top <= y <= bottom
        if not (inside_x and inside_y) or not (on_x_edge or on_y_edge):
            return None
        if on_x_edge and on_y_edge:
            return "corner"
        if y == top:
            return SIDE_TOP
        if y == bottom:
            return SIDE_BOTTOM
        if x == left:
            return SIDE_LEFT
        return SIDE_RIGHT

    def ring_points(self) -> List[Coord]:
        pts = []
        for x in range(self.x - 1, self.x + self.w + 1):
            pts.append((x, self.y - 1))
            pts.append((x, self.y + self.h))
        for y in range(self.y, self.y + self.h):
            pts.append((self.x - 1, y))
            pts.append((self.x + self.w, y))
        return pts


def ring_index(rooms: List[Room]) -> Dict[Coord, str]:
    """Map every wall-ring tile to its side name across all rooms."""
    index: Dict[Coord, str] = {}
    for room in rooms:
        for x, y in room.ring_points():
            side = room.ring_side(x, y)
            if side is not None:
                # A tile shared by two rings behaves like a corner.
                index[(x, y)] = side if (x, y) not in index else "corner"
    return index


@dataclass(frozen=True)
class Edge:
    source: int
    destination: int
    weight: int


class UnionFind:
    """Disjoint-set forest with path compression and union by size."""

    def __init__(self, size: int) -> None:
        self._parent = list(range(size))
        self._size = [1] * size

    def find(self, element: int) -> int:
        root = element
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[element] != root:
            self._parent[element], element = root, self._parent[element]
        return root

    def union(self, a: int, b: int) -> bool:
        """Merge the sets holding a and b; False if they were already joined."""
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return False
        if self._size[ra] < self._size[rb]:
            ra, rb = rb, ra
        self._parent[rb] = ra
        self._size[ra] += self._size[rb]
        return True


def all_edges(rooms: List[Room]) -> List[Edge]:
    """Complete graph over room centers weighted by squared distance."""
    edges: List[Edge] = []
    centers = [r.center() for r in rooms]
    for i, (ax, ay) in enumerate(centers):
        for j in range(i + 1, len(centers)):
            bx, by = centers[j]
            edges.append(Edge(i, j, (ax - bx) ** 2 + (ay - by) ** 2))
    return edges


def minimum_spanning_edges(rooms: List[Room]) -> Tuple[List[Edge], List[Edge]]:
    """Kruskal over room centers.

    Returns ``(tree, rest)``: the spanning-tree edges in acceptance order and the
    unused edges, both stable for identical room lists (sort is stable on
    insertion order for equal weights).
    """
    edges = sorted(all_edges(rooms), key=lambda e: e.weight)
    uf = UnionFind(len(rooms))
    tree: List[Edge] = []
    rest: List[Edge] = []
    for edge in edges:
        if len(tree) < len(rooms) - 1 and uf.union(edge.source, edge.destination):
            tree.append(edge)
        else:
            rest.append(edge)
    return tree, rest


__all__ = ["Edge", "Room", "UnionFind", "all_edges", "minimum_spanning_edges", "ring_index"]
