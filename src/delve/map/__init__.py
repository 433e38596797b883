from .grid import Coord, Grid, Tile

__all__ = ["Coord", "Grid", "Tile"]
