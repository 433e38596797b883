from .fog_of_war import FogTileState, VisibilitySet
from .fov import bresenham_line, compute_visible, has_line_of_sight

__all__ = ["FogTileState", "VisibilitySet", "bresenham_line", "compute_visible", "has_line_of_sight"]
