from .generator import DungeonGenerator
from .level import FloorItem, Level
from .pathfinding import PathFailure, PathResult, find_path, reachable_from
from .rooms import Room

__all__ = [
    "DungeonGenerator",
    "FloorItem",
    "Level",
    "PathFailure",
    "PathResult",
    "Room",
    "find_path",
    "reachable_from",
]
