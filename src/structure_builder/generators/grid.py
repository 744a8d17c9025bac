"""Grid derivation from a reference footprint.

When no gridlines are authored, a local U/V grid is fitted to the first
level's footprint:

- U runs along the footprint's longest boundary segment, from its start
  and for its length.
- V starts at the same origin, perpendicular to U, toward the side of U
  the footprint lies on, as long as the farthest vertex is from the U line.

This is a best-fit heuristic, not a minimal bounding grid.
"""

from __future__ import annotations

import logging

from structure_builder.errors import ConfigurationError, GeometryError
from structure_builder.geometry.grid import Grid1d, Grid2d
from structure_builder.geometry.polygons import clean_polygon, perpendicular_distance
from structure_builder.models.geometry import EPSILON, Line3D, Point3D, Polygon2D, longest_segment
from structure_builder.models.inputs import GridDivisionMode

logger = logging.getLogger(__name__)


def derive_grid(
    footprint: Polygon2D,
    u_divisions: float = 5,
    v_divisions: float = 7,
    mode: GridDivisionMode = GridDivisionMode.COUNT,
) -> Grid2d:
    """Fit a U/V grid to a footprint.

    Args:
        footprint: Reference polygon, normally the first level's footprint.
        u_divisions: Whole span count along U (or span length in LENGTH mode).
        v_divisions: Whole span count along V (or span length in LENGTH mode).
        mode: How the two axes are subdivided.

    Returns:
        Grid2d whose ``longest_edge`` is the reference segment.

    Raises:
        GeometryError: if the footprint is degenerate.
        ConfigurationError: if a span count is not a whole number.
    """
    loop = clean_polygon(footprint)
    edge = longest_segment(loop.segments())
    origin = edge.start
    direction = edge.direction()

    left = Point3D(x=-direction.y, y=direction.x, z=0.0)
    to_centroid = loop.centroid().to_3d() - origin
    perp = left if to_centroid.dot(left) >= 0 else left.negate()

    depth = max(perpendicular_distance(v, edge) for v in loop.vertices)
    if depth < EPSILON:
        raise GeometryError("Footprint has no extent perpendicular to its longest edge")

    u = Grid1d(edge)
    v = Grid1d(Line3D(start=origin, end=origin + perp * depth))
    _divide(u, u_divisions, mode)
    _divide(v, v_divisions, mode)

    logger.info(
        "Derived grid: U %.3f long in %d spans, V %.3f long in %d spans",
        u.length, len(u.parameters) - 1, v.length, len(v.parameters) - 1,
    )
    return Grid2d(u, v)


def _divide(axis: Grid1d, value: float, mode: GridDivisionMode) -> None:
    if mode == GridDivisionMode.LENGTH:
        axis.divide_by_fixed_length(value)
    else:
        if not float(value).is_integer():
            raise ConfigurationError(f"Span count must be a whole number, got {value}")
        axis.divide_by_count(int(value))
