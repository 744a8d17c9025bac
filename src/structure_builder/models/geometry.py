"""Geometric primitives for framing derivation."""

from __future__ import annotations

import math

from pydantic import BaseModel, field_validator

# Distance below which two points are the same point.
EPSILON = 1e-5


class Point2D(BaseModel):
    """2D point in the XY plane (meters)."""

    x: float
    y: float

    def distance_to(self, other: Point2D) -> float:
        """Euclidean distance to another point."""
        return math.sqrt((self.x - other.x) ** 2 + (self.y - other.y) ** 2)

    def to_3d(self, z: float = 0.0) -> Point3D:
        return Point3D(x=self.x, y=self.y, z=z)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point2D):
            return NotImplemented
        return math.isclose(self.x, other.x, abs_tol=EPSILON) and math.isclose(
            self.y, other.y, abs_tol=EPSILON
        )

    def __hash__(self) -> int:
        return hash((round(self.x, 5), round(self.y, 5)))


class Point3D(BaseModel):
    """3D point or vector (meters).

    Used for both positions and directions, the same way a single
    vector type is used by most geometry kernels.
    """

    x: float
    y: float
    z: float

    def distance_to(self, other: Point3D) -> float:
        """Euclidean distance to another point."""
        return math.sqrt(
            (self.x - other.x) ** 2
            + (self.y - other.y) ** 2
            + (self.z - other.z) ** 2
        )

    def is_almost_equal_to(self, other: Point3D, tolerance: float = EPSILON) -> bool:
        return self.distance_to(other) <= tolerance

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def unitized(self) -> Point3D:
        ln = self.length()
        if ln < EPSILON:
            return Point3D(x=0.0, y=0.0, z=0.0)
        return Point3D(x=self.x / ln, y=self.y / ln, z=self.z / ln)

    def dot(self, other: Point3D) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Point3D) -> Point3D:
        return Point3D(
            x=self.y * other.z - self.z * other.y,
            y=self.z * other.x - self.x * other.z,
            z=self.x * other.y - self.y * other.x,
        )

    def negate(self) -> Point3D:
        return Point3D(x=-self.x, y=-self.y, z=-self.z)

    def angle_to(self, other: Point3D) -> float:
        """Angle between two vectors in degrees (0..180)."""
        if self.length() < EPSILON or other.length() < EPSILON:
            return 0.0
        return math.degrees(math.atan2(self.cross(other).length(), self.dot(other)))

    def to_2d(self) -> Point2D:
        return Point2D(x=self.x, y=self.y)

    def __add__(self, other: Point3D) -> Point3D:
        return Point3D(x=self.x + other.x, y=self.y + other.y, z=self.z + other.z)

    def __sub__(self, other: Point3D) -> Point3D:
        return Point3D(x=self.x - other.x, y=self.y - other.y, z=self.z - other.z)

    def __mul__(self, scalar: float) -> Point3D:
        return Point3D(x=self.x * scalar, y=self.y * scalar, z=self.z * scalar)


X_AXIS = Point3D(x=1.0, y=0.0, z=0.0)
Z_AXIS = Point3D(x=0.0, y=0.0, z=1.0)


class Line3D(BaseModel):
    """Straight segment between two points."""

    start: Point3D
    end: Point3D

    def length(self) -> float:
        return self.start.distance_to(self.end)

    def direction(self) -> Point3D:
        """Unit vector from start to end."""
        return (self.end - self.start).unitized()

    def point_at(self, t: float) -> Point3D:
        """Point at distance ``t`` from the start, measured along the segment."""
        return self.start + self.direction() * t

    def lowered(self, offset: float) -> Line3D:
        """Copy of the segment moved down along Z by ``offset``."""
        down = Point3D(x=0.0, y=0.0, z=offset)
        return Line3D(start=self.start - down, end=self.end - down)


class Polygon2D(BaseModel):
    """Closed polygon in the XY plane. Minimum 3 vertices. Auto-closes (no need to repeat first vertex)."""

    vertices: list[Point2D]

    @field_validator("vertices")
    @classmethod
    def at_least_3_vertices(cls, v: list[Point2D]) -> list[Point2D]:
        if len(v) < 3:
            raise ValueError("Polygon must have at least 3 vertices")
        return v

    @property
    def signed_area(self) -> float:
        """Shoelace area, positive for counter-clockwise loops."""
        n = len(self.vertices)
        area = 0.0
        for i in range(n):
            j = (i + 1) % n
            area += self.vertices[i].x * self.vertices[j].y
            area -= self.vertices[j].x * self.vertices[i].y
        return area / 2.0

    @property
    def area(self) -> float:
        """Compute area using the shoelace formula. Returns absolute value."""
        return abs(self.signed_area)

    @property
    def perimeter(self) -> float:
        """Total perimeter length."""
        return sum(s.length() for s in self.segments())

    def is_counter_clockwise(self) -> bool:
        return self.signed_area > 0

    def centroid(self) -> Point2D:
        """Area centroid. Falls back to the vertex average for degenerate loops."""
        a = self.signed_area
        if abs(a) < EPSILON:
            n = len(self.vertices)
            return Point2D(
                x=sum(v.x for v in self.vertices) / n,
                y=sum(v.y for v in self.vertices) / n,
            )
        cx = cy = 0.0
        n = len(self.vertices)
        for i in range(n):
            p, q = self.vertices[i], self.vertices[(i + 1) % n]
            cross = p.x * q.y - q.x * p.y
            cx += (p.x + q.x) * cross
            cy += (p.y + q.y) * cross
        return Point2D(x=cx / (6.0 * a), y=cy / (6.0 * a))

    def segments(self, z: float = 0.0) -> list[Line3D]:
        """Boundary segments in loop order, lifted to elevation ``z``."""
        n = len(self.vertices)
        return [
            Line3D(
                start=self.vertices[i].to_3d(z),
                end=self.vertices[(i + 1) % n].to_3d(z),
            )
            for i in range(n)
        ]

    def reversed(self) -> Polygon2D:
        return Polygon2D(vertices=list(reversed(self.vertices)))

    def counter_clockwise(self) -> Polygon2D:
        """Same loop, wound counter-clockwise."""
        return self if self.is_counter_clockwise() else self.reversed()


class Polygon3D(BaseModel):
    """Closed planar loop in 3D, as used for cell faces."""

    vertices: list[Point3D]

    def segments(self) -> list[Line3D]:
        n = len(self.vertices)
        return [
            Line3D(start=self.vertices[i], end=self.vertices[(i + 1) % n])
            for i in range(n)
        ]

    def to_2d(self) -> Polygon2D:
        return Polygon2D(vertices=[v.to_2d() for v in self.vertices])

    @property
    def elevation(self) -> float:
        """Lowest Z of the loop."""
        return min(v.z for v in self.vertices)


def longest_segment(segments: list[Line3D]) -> Line3D:
    """The longest of ``segments``. Ties resolve to the last in order."""
    if not segments:
        raise ValueError("No segments supplied")
    return sorted(segments, key=lambda s: s.length())[-1]
