"""Polygon operations backed by shapely.

Conversion between our pydantic polygons and shapely geometries, plus
the handful of planar operations framing derivation consumes: validity
checks, inward offsets, and ray/segment intersection.
"""

from __future__ import annotations

import math

from shapely.geometry import GeometryCollection, MultiPolygon, Polygon
from shapely.geometry.polygon import orient
from shapely.validation import explain_validity

from structure_builder.errors import GeometryError
from structure_builder.models.geometry import EPSILON, Line3D, Point2D, Point3D, Polygon2D


def to_shapely(polygon: Polygon2D) -> Polygon:
    return Polygon([(v.x, v.y) for v in polygon.vertices])


def from_shapely(shape) -> list[Polygon2D]:
    """Counter-clockwise exterior loops of every non-empty polygon in ``shape``.

    Holes are dropped; cells and footprints are described by their outer loop.
    Vertices within EPSILON of the line through their neighbours are removed.
    """
    if shape.is_empty:
        return []
    if isinstance(shape, Polygon):
        parts = [shape]
    elif isinstance(shape, (MultiPolygon, GeometryCollection)):
        parts = [g for g in shape.geoms if isinstance(g, Polygon)]
    else:
        return []

    result: list[Polygon2D] = []
    for part in parts:
        # Overlays leave collinear vertices along shared edges; drop them.
        part = part.simplify(EPSILON)
        if part.is_empty or part.area < EPSILON:
            continue
        coords = list(orient(part, sign=1.0).exterior.coords)[:-1]
        pts = _dedupe([Point2D(x=x, y=y) for x, y in coords])
        if len(pts) >= 3:
            result.append(Polygon2D(vertices=pts))
    return result


def _dedupe(points: list[Point2D]) -> list[Point2D]:
    """Drop consecutive coincident points, including a repeated closing point."""
    out: list[Point2D] = []
    for p in points:
        if out and out[-1] == p:
            continue
        out.append(p)
    while len(out) > 1 and out[0] == out[-1]:
        out.pop()
    return out


def clean_polygon(polygon: Polygon2D) -> Polygon2D:
    """Validate a polygon and return it wound counter-clockwise.

    Raises:
        GeometryError: if the loop has fewer than 3 distinct vertices,
            zero area, or crosses itself.
    """
    pts = _dedupe(list(polygon.vertices))
    if len(pts) < 3:
        raise GeometryError("Polygon has fewer than 3 distinct vertices")
    shape = Polygon([(p.x, p.y) for p in pts])
    if shape.area < EPSILON:
        raise GeometryError("Polygon has zero area")
    if not shape.is_valid:
        raise GeometryError(f"Polygon is not simple: {explain_validity(shape)}")
    return Polygon2D(vertices=pts).counter_clockwise()


def inset_polygon(polygon: Polygon2D, distance: float) -> list[Polygon2D]:
    """Offset a polygon inward by ``distance`` with mitred corners.

    An inset can split a narrow-waisted footprint, so every resulting
    piece is returned.

    Raises:
        GeometryError: if the input is degenerate or the inset consumes it.
    """
    cleaned = clean_polygon(polygon)
    if distance <= 0:
        return [cleaned]
    shape = to_shapely(cleaned).buffer(-distance, join_style="mitre")
    pieces = from_shapely(shape)
    if not pieces:
        raise GeometryError(f"Inset of {distance} leaves nothing of the polygon")
    return pieces


def perpendicular_distance(point: Point2D, line: Line3D) -> float:
    """Distance from ``point`` to the infinite line through ``line`` (XY plane)."""
    dx = line.end.x - line.start.x
    dy = line.end.y - line.start.y
    ln = math.hypot(dx, dy)
    if ln < EPSILON:
        return point.distance_to(line.start.to_2d())
    return abs(dx * (point.y - line.start.y) - dy * (point.x - line.start.x)) / ln


def ray_intersects_segment(
    origin: Point3D, direction: Point3D, segment: Line3D
) -> Point3D | None:
    """Intersection of a ray with a segment in the XY plane.

    The hit takes the ray origin's elevation. Parallel segments never hit.
    """
    rx, ry = direction.x, direction.y
    sx = segment.end.x - segment.start.x
    sy = segment.end.y - segment.start.y
    denom = rx * sy - ry * sx
    if abs(denom) < 1e-12:
        return None
    qx = segment.start.x - origin.x
    qy = segment.start.y - origin.y
    t = (qx * sy - qy * sx) / denom
    u = (qx * ry - qy * rx) / denom
    if t < -EPSILON or u < -EPSILON or u > 1 + EPSILON:
        return None
    return Point3D(x=origin.x + rx * t, y=origin.y + ry * t, z=origin.z)
