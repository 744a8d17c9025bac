"""Tests for building a cell complex from level footprints."""

import logging
import math
from collections import Counter

import pytest

from structure_builder.generators.complex import build_cell_complex
from structure_builder.generators.grid import derive_grid
from structure_builder.models.geometry import Point2D, Polygon2D
from structure_builder.models.inputs import GridSettings, LevelVolume


def _rect(w: float, d: float) -> Polygon2D:
    return Polygon2D(vertices=[
        Point2D(x=0, y=0), Point2D(x=w, y=0), Point2D(x=w, y=d), Point2D(x=0, y=d),
    ])


def _levels(*specs, w=20.0, d=30.0) -> list[LevelVolume]:
    return [
        LevelVolume(name=f"L{i}", profile=_rect(w, d), elevation=e, height=h)
        for i, (e, h) in enumerate(specs)
    ]


class TestBuildCellComplex:
    def test_two_levels_give_two_stories(self):
        cc = build_cell_complex(_levels((0, 10), (10, 10)))
        cells = cc.get_cells()
        assert len(cells) == 70
        assert sorted({c.base_elevation for c in cells}) == [0.0, 10.0]
        assert all(c.height == 10.0 for c in cells)

    def test_cells_cover_inset_footprint(self):
        cc = build_cell_complex(_levels((0, 10), (10, 10)))
        ground = [c for c in cc.get_cells() if c.base_elevation == 0.0]
        area = sum(cc.face_polygon(cc.get_top_face(c)).to_2d().area for c in ground)
        assert math.isclose(area, 19 * 29, rel_tol=1e-9)

    def test_story_below_uses_previous_height(self):
        cc = build_cell_complex(_levels((0, 4), (4, 4), (8, 3)))
        by_base = {}
        for c in cc.get_cells():
            by_base.setdefault(c.base_elevation, set()).add(c.height)
        assert by_base == {0.0: {4.0}, 4.0: {4.0}, 8.0: {3.0}}

    def test_levels_sorted_by_elevation(self):
        shuffled = build_cell_complex(_levels((10, 10), (0, 10)))
        ordered = build_cell_complex(_levels((0, 10), (10, 10)))
        assert shuffled.summary() == ordered.summary()

    def test_single_level_gives_empty_complex(self):
        cc = build_cell_complex(_levels((0, 10)))
        assert cc.summary()["cells"] == 0

    def test_supplied_grid_is_used(self):
        levels = _levels((0, 10), (10, 10))
        grid = derive_grid(levels[0].profile, u_divisions=2, v_divisions=2)
        cc = build_cell_complex(levels, grid=grid)
        assert len(cc.get_cells()) == 2 * 4

    def test_zero_inset(self):
        cc = build_cell_complex(_levels((0, 10), (10, 10)), settings=GridSettings(inset=0))
        ground = [c for c in cc.get_cells() if c.base_elevation == 0.0]
        area = sum(cc.face_polygon(cc.get_top_face(c)).to_2d().area for c in ground)
        assert math.isclose(area, 600.0)

    def test_collapsed_level_is_skipped(self, caplog):
        levels = [
            LevelVolume(profile=_rect(20, 30), elevation=0, height=10),
            LevelVolume(name="sliver", profile=_rect(0.8, 30), elevation=10, height=10),
            LevelVolume(profile=_rect(20, 30), elevation=20, height=10),
        ]
        with caplog.at_level(logging.WARNING):
            cc = build_cell_complex(levels)
        assert "sliver" in caplog.text
        assert sorted({c.base_elevation for c in cc.get_cells()}) == [10.0, 20.0]

    def test_faces_tagged_with_grid_cell(self):
        cc = build_cell_complex(_levels((0, 10), (10, 10)))
        tags = {(f.u_index, f.v_index) for f in cc.get_faces()}
        assert tags == {(i, j) for i in range(5) for j in range(7)}

    def test_adjacent_bays_share_columns(self):
        cc = build_cell_complex(_levels((0, 10), (10, 10)))
        # 6 x 8 plan grid nodes on three elevations
        assert cc.summary()["vertices"] == 6 * 8 * 3


def _placed(points, angle: float, dx: float = 0.0, dy: float = 0.0) -> Polygon2D:
    c, s = math.cos(angle), math.sin(angle)
    return Polygon2D(vertices=[
        Point2D(x=x * c - y * s + dx, y=x * s + y * c + dy) for x, y in points
    ])


RECT = [(0, 0), (20, 0), (20, 30), (0, 30)]
L_SHAPE = [(0, 0), (40, 0), (40, 12), (12, 12), (12, 30), (0, 30)]


def _topology(points, angle: float, dx: float = 0.0, dy: float = 0.0) -> dict:
    footprint = _placed(points, angle, dx, dy)
    cc = build_cell_complex([
        LevelVolume(profile=footprint, elevation=0.0, height=10.0),
        LevelVolume(profile=footprint, elevation=10.0, height=10.0),
    ])
    counts = cc.summary()
    counts["edges_by_face_count"] = dict(Counter(len(e.get_faces()) for e in cc.get_edges()))
    counts["shortest_edge"] = round(min(cc.edge_line(e).length() for e in cc.get_edges()), 6)
    return counts


class TestFootprintOrientation:
    @pytest.mark.parametrize("angle", [0.3, 0.7, 1.1, 2.5])
    def test_rotated_rectangle_matches_axis_aligned(self, angle):
        assert _topology(RECT, angle, 100.0, -40.0) == _topology(RECT, 0.0)

    def test_axis_aligned_rectangle_counts(self):
        counts = _topology(RECT, 0.0)
        assert counts["vertices"] == 6 * 8 * 3
        assert counts["cells"] == 70
        # 24 interior columns per story, plus the 82 - 24 interior plan edges
        # of the middle floor, which have a bay above and below
        assert counts["edges_by_face_count"][4] == 2 * 24 + (82 - 24)
        # corner columns, and the perimeter of the ground and roof plans
        assert counts["edges_by_face_count"][2] == 2 * 4 + 2 * 24
        assert counts["shortest_edge"] > 2.0

    @pytest.mark.parametrize("angle", [0.0, 0.4, 0.9, 1.9])
    def test_rotated_l_shape_matches_axis_aligned(self, angle):
        assert _topology(L_SHAPE, angle, -15.0, 7.5) == _topology(L_SHAPE, 0.0)

    def test_l_shape_cells_cover_inset_footprint(self):
        footprint = _placed(L_SHAPE, 0.6)
        cc = build_cell_complex([
            LevelVolume(profile=footprint, elevation=0.0, height=4.0),
            LevelVolume(profile=footprint, elevation=4.0, height=4.0),
        ])
        ground = [c for c in cc.get_cells() if c.base_elevation == 0.0]
        area = sum(cc.face_polygon(cc.get_top_face(c)).to_2d().area for c in ground)
        inset = 39 * 29 - 28 * 18
        assert math.isclose(area, inset, rel_tol=1e-9)

    def test_l_shape_has_no_slivers(self):
        counts = _topology(L_SHAPE, 0.9)
        assert counts["shortest_edge"] > 0.5
