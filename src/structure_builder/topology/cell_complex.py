"""Cell complex: a deduplicated 3D partition into cells, faces, edges, vertices.

All records live in id-indexed tables owned by the complex. Cells store
face ids, faces store vertex and edge ids, edges store vertex ids and the
ids of the faces they bound. Nothing holds a direct reference to another
record, so records can be handed out freely.

Vertices are matched by distance (within EPSILON) through a spatial hash,
edges by their unordered vertex pair, and faces by their vertex set, so
neighbouring cells share the boundary they have in common.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field

from structure_builder.errors import GeometryError, TopologyError
from structure_builder.geometry.grid import Grid1d
from structure_builder.geometry.polygons import clean_polygon
from structure_builder.models.geometry import EPSILON, Line3D, Point3D, Polygon2D, Polygon3D

# An edge bounded by fewer faces than this lies on the outside of the complex.
INTERIOR_FACE_COUNT = 4


@dataclass
class Vertex:
    id: int
    point: Point3D


@dataclass
class Edge:
    """An undirected edge between two vertices."""

    id: int
    start_vertex_id: int
    end_vertex_id: int
    face_ids: set[int] = field(default_factory=set)

    def get_faces(self) -> set[int]:
        """Ids of the faces containing this edge."""
        return set(self.face_ids)

    @property
    def is_external(self) -> bool:
        return len(self.face_ids) < INTERIOR_FACE_COUNT

    @property
    def key(self) -> tuple[int, int]:
        return _edge_key(self.start_vertex_id, self.end_vertex_id)


@dataclass
class Face:
    """A planar face bounded by an ordered vertex loop.

    ``u_index``/``v_index`` name the grid tile the face came from.
    """

    id: int
    vertex_ids: list[int]
    edge_ids: list[int]
    u_index: int | None = None
    v_index: int | None = None
    cell_ids: list[int] = field(default_factory=list)


@dataclass
class Cell:
    """A volume between a bottom and a top face."""

    id: int
    bottom_face_id: int
    top_face_id: int
    side_face_ids: list[int]
    base_elevation: float
    height: float

    @property
    def top_elevation(self) -> float:
        return self.base_elevation + self.height

    @property
    def face_ids(self) -> list[int]:
        return [self.bottom_face_id, self.top_face_id, *self.side_face_ids]


def _edge_key(a: int, b: int) -> tuple[int, int]:
    return (a, b) if a < b else (b, a)


class CellComplex:
    """Deduplicating store of vertices, edges, faces, and cells."""

    def __init__(self, name: str = "Cell Complex") -> None:
        self.name = name
        self._vertices: dict[int, Vertex] = {}
        self._edges: dict[int, Edge] = {}
        self._faces: dict[int, Face] = {}
        self._cells: dict[int, Cell] = {}
        self._vertex_buckets: dict[tuple[int, int, int], list[int]] = {}
        self._edge_lookup: dict[tuple[int, int], int] = {}
        self._face_lookup: dict[frozenset[int], int] = {}
        self._frozen = False

    # ── Construction ──────────────────────────────────────────────────

    def freeze(self) -> None:
        """Disallow further mutation."""
        self._frozen = True

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def add_cell(
        self,
        polygon: Polygon2D,
        height: float,
        base_elevation: float,
        u_grid: Grid1d | None = None,
        v_grid: Grid1d | None = None,
    ) -> Cell:
        """Extrude a plan polygon into a cell and add it to the complex.

        The bottom face sits at ``base_elevation`` and the top face at
        ``base_elevation + height``. Vertices, edges, and faces already
        present are reused. When both grids are given, the faces are tagged
        with the U/V span indices of the polygon's centroid.

        Raises:
            GeometryError: for a degenerate polygon or non-positive height.
            TopologyError: if the complex is frozen.
        """
        if self._frozen:
            raise TopologyError(f"{self.name} is frozen")
        if height <= EPSILON:
            raise GeometryError(f"Cell height must be positive, got {height}")
        loop = clean_polygon(polygon)

        uv: tuple[int | None, int | None] = (None, None)
        if u_grid is not None and v_grid is not None:
            uv = _grid_indices(loop, u_grid, v_grid)

        top_z = base_elevation + height
        bottom_points = [p.to_3d(base_elevation) for p in loop.vertices]
        if self._distinct_vertex_count(bottom_points) < 3:
            raise GeometryError("Polygon collapses to fewer than 3 vertices")
        bottom_ids = [self._add_vertex(p) for p in bottom_points]
        top_ids = [self._add_vertex(p.to_3d(top_z)) for p in loop.vertices]

        # Bottom loop runs clockwise seen from above so its normal faces down.
        bottom = self._add_face(list(reversed(bottom_ids)), uv)
        top = self._add_face(top_ids, uv)
        sides: list[int] = []
        n = len(bottom_ids)
        for i in range(n):
            j = (i + 1) % n
            if bottom_ids[i] == bottom_ids[j]:
                continue
            sides.append(self._add_face(
                [bottom_ids[i], bottom_ids[j], top_ids[j], top_ids[i]], uv
            ))

        cell = Cell(
            id=len(self._cells),
            bottom_face_id=bottom,
            top_face_id=top,
            side_face_ids=sides,
            base_elevation=base_elevation,
            height=height,
        )
        self._cells[cell.id] = cell
        for face_id in cell.face_ids:
            self._faces[face_id].cell_ids.append(cell.id)
        return cell

    def _bucket(self, p: Point3D) -> tuple[int, int, int]:
        return (round(p.x / EPSILON), round(p.y / EPSILON), round(p.z / EPSILON))

    def _find_vertex(self, p: Point3D) -> int | None:
        bx, by, bz = self._bucket(p)
        for dx, dy, dz in itertools.product((-1, 0, 1), repeat=3):
            for vid in self._vertex_buckets.get((bx + dx, by + dy, bz + dz), ()):
                if self._vertices[vid].point.distance_to(p) <= EPSILON:
                    return vid
        return None

    def _distinct_vertex_count(self, points: list[Point3D]) -> int:
        """How many vertices ``points`` would resolve to, without adding any."""
        existing: set[int] = set()
        new: list[Point3D] = []
        for p in points:
            vid = self._find_vertex(p)
            if vid is not None:
                existing.add(vid)
            elif not any(q.distance_to(p) <= EPSILON for q in new):
                new.append(p)
        return len(existing) + len(new)

    def _add_vertex(self, p: Point3D) -> int:
        existing = self._find_vertex(p)
        if existing is not None:
            return existing
        vertex = Vertex(id=len(self._vertices), point=p)
        self._vertices[vertex.id] = vertex
        self._vertex_buckets.setdefault(self._bucket(p), []).append(vertex.id)
        return vertex.id

    def _add_edge(self, a: int, b: int) -> int:
        key = _edge_key(a, b)
        existing = self._edge_lookup.get(key)
        if existing is not None:
            return existing
        edge = Edge(id=len(self._edges), start_vertex_id=a, end_vertex_id=b)
        self._edges[edge.id] = edge
        self._edge_lookup[key] = edge.id
        return edge.id

    def _add_face(self, vertex_ids: list[int], uv: tuple[int | None, int | None]) -> int:
        key = frozenset(vertex_ids)
        existing = self._face_lookup.get(key)
        if existing is not None:
            return existing
        n = len(vertex_ids)
        edge_ids = [self._add_edge(vertex_ids[i], vertex_ids[(i + 1) % n]) for i in range(n)]
        face = Face(
            id=len(self._faces),
            vertex_ids=list(vertex_ids),
            edge_ids=edge_ids,
            u_index=uv[0],
            v_index=uv[1],
        )
        self._faces[face.id] = face
        self._face_lookup[key] = face.id
        for edge_id in edge_ids:
            self._edges[edge_id].face_ids.add(face.id)
        return face.id

    # ── Queries ───────────────────────────────────────────────────────

    def get_vertex(self, vertex_id: int) -> Vertex:
        try:
            return self._vertices[vertex_id]
        except KeyError:
            raise TopologyError(f"Unknown vertex id {vertex_id}") from None

    def get_edge(self, edge_id: int) -> Edge:
        try:
            return self._edges[edge_id]
        except KeyError:
            raise TopologyError(f"Unknown edge id {edge_id}") from None

    def get_face(self, face_id: int) -> Face:
        try:
            return self._faces[face_id]
        except KeyError:
            raise TopologyError(f"Unknown face id {face_id}") from None

    def get_cell(self, cell_id: int) -> Cell:
        try:
            return self._cells[cell_id]
        except KeyError:
            raise TopologyError(f"Unknown cell id {cell_id}") from None

    def get_vertices(self) -> list[Vertex]:
        return list(self._vertices.values())

    def get_edges(self) -> list[Edge]:
        """All edges in insertion order."""
        return list(self._edges.values())

    def get_faces(self) -> list[Face]:
        return list(self._faces.values())

    def get_cells(self) -> list[Cell]:
        return list(self._cells.values())

    def get_top_face(self, cell: Cell | int) -> Face:
        """The face capping a cell from above."""
        if isinstance(cell, int):
            cell = self.get_cell(cell)
        return self.get_face(cell.top_face_id)

    def get_bottom_face(self, cell: Cell | int) -> Face:
        if isinstance(cell, int):
            cell = self.get_cell(cell)
        return self.get_face(cell.bottom_face_id)

    def edge_line(self, edge: Edge) -> Line3D:
        return Line3D(
            start=self.get_vertex(edge.start_vertex_id).point,
            end=self.get_vertex(edge.end_vertex_id).point,
        )

    def face_polygon(self, face: Face) -> Polygon3D:
        return Polygon3D(vertices=[self.get_vertex(v).point for v in face.vertex_ids])

    def summary(self) -> dict[str, int]:
        return {
            "vertices": len(self._vertices),
            "edges": len(self._edges),
            "faces": len(self._faces),
            "cells": len(self._cells),
        }


def _grid_indices(loop: Polygon2D, u_grid: Grid1d, v_grid: Grid1d) -> tuple[int, int]:
    """U/V span indices of the polygon centroid, measured along each axis."""
    c = loop.centroid().to_3d(u_grid.curve.start.z)
    u_t = (c - u_grid.curve.start).dot(u_grid.direction)
    v_t = (c - v_grid.curve.start).dot(v_grid.direction)
    return u_grid.span_index_at(u_t), v_grid.span_index_at(v_t)
