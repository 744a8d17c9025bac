"""Geometry kernel: grids and planar polygon operations."""

from structure_builder.geometry.grid import FixedDivisionMode, Grid1d, Grid2d, GridCell
from structure_builder.geometry.polygons import (
    clean_polygon,
    inset_polygon,
    perpendicular_distance,
    ray_intersects_segment,
)

__all__ = [
    "FixedDivisionMode",
    "Grid1d",
    "Grid2d",
    "GridCell",
    "clean_polygon",
    "inset_polygon",
    "perpendicular_distance",
    "ray_intersects_segment",
]
