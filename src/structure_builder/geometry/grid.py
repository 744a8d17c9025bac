"""1D and 2D grids.

Grid1d divides a straight curve into spans and reports its separators.
Grid2d pairs a U and a V axis and, given a boundary polygon, produces
grid cells trimmed to that boundary.
"""

from __future__ import annotations

import bisect
import math
from dataclasses import dataclass, field
from enum import Enum

from shapely.geometry import Polygon

from structure_builder.errors import GeometryError
from structure_builder.geometry.polygons import from_shapely, to_shapely
from structure_builder.models.geometry import EPSILON, Line3D, Point2D, Point3D, Polygon2D

# Outer tiles overhang the boundary by this much so no tile edge runs along it.
TILE_MARGIN = 1.0


class FixedDivisionMode(str, Enum):
    """Where the leftover length goes when dividing by a fixed length."""

    REMAINDER_AT_END = "remainder_at_end"
    REMAINDER_AT_START = "remainder_at_start"
    REMAINDER_AT_BOTH_ENDS = "remainder_at_both_ends"


class Grid1d:
    """A straight curve divided into spans.

    Separators are stored as distances from the curve start and always
    include both ends of the curve.
    """

    def __init__(self, curve: Line3D) -> None:
        length = curve.length()
        if length < EPSILON:
            raise GeometryError("Cannot build a grid on a zero-length curve")
        self.curve = curve
        self.length = length
        self._parameters: list[float] = [0.0, length]

    @property
    def direction(self) -> Point3D:
        return self.curve.direction()

    @property
    def parameters(self) -> list[float]:
        """Separator distances along the curve, ascending."""
        return list(self._parameters)

    def divide_by_count(self, count: int) -> None:
        """Split into ``count`` equal spans."""
        if count < 1:
            raise ValueError("Division count must be at least 1")
        step = self.length / count
        self._parameters = [i * step for i in range(count)] + [self.length]

    def divide_by_fixed_length(
        self,
        span: float,
        mode: FixedDivisionMode = FixedDivisionMode.REMAINDER_AT_END,
    ) -> None:
        """Split into spans of length ``span``, placing the leftover per ``mode``.

        Curves shorter than one span are left undivided.
        """
        if span <= 0:
            raise ValueError("Span length must be positive")
        count = math.floor(self.length / span + 1e-9)
        if count < 1:
            self._parameters = [0.0, self.length]
            return
        remainder = self.length - count * span

        if mode == FixedDivisionMode.REMAINDER_AT_START:
            offset = remainder
        elif mode == FixedDivisionMode.REMAINDER_AT_BOTH_ENDS:
            offset = remainder / 2
        else:
            offset = 0.0

        params = [0.0] + [offset + i * span for i in range(count + 1)] + [self.length]
        self._parameters = _unique_sorted(params)

    def get_cell_separators(self) -> list[Point3D]:
        """Separator points, including both curve ends."""
        return [self.curve.point_at(t) for t in self._parameters]

    def span_index_at(self, t: float) -> int:
        """Index of the span containing distance ``t`` (clamped to the curve)."""
        i = bisect.bisect_right(self._parameters, t) - 1
        return max(0, min(i, len(self._parameters) - 2))


def _unique_sorted(values: list[float]) -> list[float]:
    out: list[float] = []
    for v in sorted(values):
        if out and abs(v - out[-1]) < EPSILON:
            continue
        out.append(v)
    return out


@dataclass
class GridCell:
    """One U/V tile of a 2D grid, optionally trimmed to a boundary."""

    u_index: int
    v_index: int
    geometry: Polygon2D
    boundary: Polygon | None = field(default=None, repr=False)

    def get_trimmed_cell_geometry(self) -> list[Polygon2D]:
        """Pieces of the tile inside the grid boundary (the tile itself if none)."""
        if self.boundary is None:
            return [self.geometry]
        return from_shapely(to_shapely(self.geometry).intersection(self.boundary))


class Grid2d:
    """A pair of U/V axes sharing an origin.

    Local coordinates (a, b) of a plan point p satisfy
    ``p = origin + a * u_dir + b * v_dir``; axes need not be orthogonal.
    """

    def __init__(self, u: Grid1d, v: Grid1d, boundary: Polygon2D | None = None) -> None:
        self.u = u
        self.v = v
        self.boundary = boundary
        self._origin = u.curve.start.to_2d()
        ud, vd = u.direction, v.direction
        self._u_dir = (ud.x, ud.y)
        self._v_dir = (vd.x, vd.y)
        self._det = ud.x * vd.y - ud.y * vd.x
        if abs(self._det) < EPSILON:
            raise GeometryError("Grid axes are parallel")

    @property
    def longest_edge(self) -> Line3D:
        return self.u.curve

    def with_boundary(self, boundary: Polygon2D) -> Grid2d:
        """The same axes trimmed to ``boundary``."""
        return Grid2d(self.u, self.v, boundary=boundary)

    def to_local(self, p: Point2D) -> tuple[float, float]:
        dx, dy = p.x - self._origin.x, p.y - self._origin.y
        (ux, uy), (vx, vy) = self._u_dir, self._v_dir
        a = (dx * vy - dy * vx) / self._det
        b = (ux * dy - uy * dx) / self._det
        return a, b

    def to_world(self, a: float, b: float) -> Point2D:
        (ux, uy), (vx, vy) = self._u_dir, self._v_dir
        return Point2D(
            x=self._origin.x + a * ux + b * vx,
            y=self._origin.y + a * uy + b * vy,
        )

    def _axis_breaks(
        self, axis: Grid1d, use_a: bool, lo: float, hi: float, margin: float = 0.0
    ) -> list[float]:
        local = [self.to_local(p.to_2d()) for p in axis.get_cell_separators()]
        coords = [c[0] if use_a else c[1] for c in local]
        inner = [c for c in coords if lo + EPSILON < c < hi - EPSILON]
        breaks = _unique_sorted([lo, hi] + inner)
        breaks[0] -= margin
        breaks[-1] += margin
        return breaks

    def get_cells(self) -> list[GridCell]:
        """Grid tiles in U-major order.

        With a boundary the tiles span the boundary's extents: separators
        outside it are dropped and the outer tiles stretch past it by
        ``TILE_MARGIN``, so trimming never overlays two coincident edges.
        """
        if self.boundary is None:
            a_lo, a_hi = 0.0, self.u.length
            b_lo, b_hi = 0.0, self.v.length
            clip = None
            margin = 0.0
        else:
            local = [self.to_local(p) for p in self.boundary.vertices]
            a_lo, a_hi = min(c[0] for c in local), max(c[0] for c in local)
            b_lo, b_hi = min(c[1] for c in local), max(c[1] for c in local)
            clip = to_shapely(self.boundary)
            margin = TILE_MARGIN

        a_breaks = self._axis_breaks(self.u, True, a_lo, a_hi, margin)
        b_breaks = self._axis_breaks(self.v, False, b_lo, b_hi, margin)

        cells: list[GridCell] = []
        for i in range(len(a_breaks) - 1):
            for j in range(len(b_breaks) - 1):
                a0, a1 = a_breaks[i], a_breaks[i + 1]
                b0, b1 = b_breaks[j], b_breaks[j + 1]
                rect = Polygon2D(vertices=[
                    self.to_world(a0, b0),
                    self.to_world(a1, b0),
                    self.to_world(a1, b1),
                    self.to_world(a0, b1),
                ]).counter_clockwise()
                u_index, v_index = self.cell_index_at(self.to_world(
                    (max(a0, a_lo) + min(a1, a_hi)) / 2,
                    (max(b0, b_lo) + min(b1, b_hi)) / 2,
                ))
                cells.append(GridCell(
                    u_index=u_index,
                    v_index=v_index,
                    geometry=rect,
                    boundary=clip,
                ))
        return cells

    def cell_index_at(self, p: Point2D) -> tuple[int, int]:
        """(U, V) span indices of the tile containing ``p``."""
        a, b = self.to_local(p)
        return self.u.span_index_at(a), self.v.span_index_at(b)
