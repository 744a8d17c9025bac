"""Tests for input, profile, and framing models."""

import json
import math

import pytest
from pydantic import ValidationError

from structure_builder.errors import ConfigurationError
from structure_builder.models import (
    STEEL,
    FramingMember,
    FramingProfiles,
    FramingStats,
    GridDivisionMode,
    GridLine,
    LevelVolume,
    Line3D,
    MemberType,
    Point2D,
    Point3D,
    Polygon2D,
    StructureInputs,
    StructureModels,
    StructureOutputs,
    generate_ifc_id,
    get_profile_by_name,
)
from structure_builder.models.profiles import INCH, available_profiles


def _square() -> Polygon2D:
    return Polygon2D(vertices=[
        Point2D(x=0, y=0), Point2D(x=5, y=0), Point2D(x=5, y=5), Point2D(x=0, y=5),
    ])


class TestProfiles:
    def test_depths(self):
        assert math.isclose(get_profile_by_name("W10x100").depth, 11.1 * INCH)
        assert math.isclose(get_profile_by_name("W16x31").depth, 15.9 * INCH)
        assert math.isclose(get_profile_by_name("W12x26").depth, 12.2 * INCH)

    def test_width(self):
        assert math.isclose(get_profile_by_name("W16x31").width, 5.53 * INCH)

    def test_outline_is_counter_clockwise(self):
        assert get_profile_by_name("W8x31").perimeter.is_counter_clockwise()

    def test_case_insensitive(self):
        assert get_profile_by_name("w10X100").name == "W10x100"

    def test_unknown(self):
        with pytest.raises(ConfigurationError, match="Unknown profile"):
            get_profile_by_name("HEA200")

    def test_every_catalog_entry_builds(self):
        for name in available_profiles():
            assert get_profile_by_name(name).depth > 0

    def test_by_names(self):
        profiles = FramingProfiles.by_names("W10x100", "W16x31", "W12x26")
        assert profiles.girder.name == "W16x31"
        with pytest.raises(ConfigurationError):
            FramingProfiles.by_names("W10x100", "nope", "W12x26")


class TestInputs:
    def test_defaults(self):
        inputs = StructureInputs()
        assert inputs.column_type == "W10x100"
        assert inputs.girder_type == "W16x31"
        assert inputs.beam_type == "W12x26"
        assert inputs.beam_spacing == 1.5
        assert inputs.slab_thickness == 0.2
        assert inputs.insert_columns_at_external_edges is True
        assert inputs.create_beams_on_first_level is False
        assert inputs.min_beam_distance == 1.0
        assert inputs.grid.u_divisions == 5
        assert inputs.grid.v_divisions == 7
        assert inputs.grid.mode == GridDivisionMode.COUNT

    def test_save_load(self, tmp_path):
        inputs = StructureInputs(beam_spacing=2.5, create_beams_on_first_level=True)
        path = inputs.save(tmp_path / "cfg" / "inputs.json")
        loaded = StructureInputs.load(path)
        assert loaded == inputs

    def test_fractional_span_count_rejected(self):
        with pytest.raises(ValidationError, match="whole span count"):
            StructureInputs(grid={"u_divisions": 5.5})

    def test_fractional_span_length_allowed(self):
        inputs = StructureInputs(grid={"mode": "length", "u_divisions": 5.5})
        assert inputs.grid.u_divisions == 5.5

    def test_whole_float_span_count_allowed(self):
        assert StructureInputs(grid={"v_divisions": 4.0}).grid.v_divisions == 4

    def test_partial_json(self, tmp_path):
        path = tmp_path / "inputs.json"
        path.write_text(json.dumps({"grid": {"mode": "length", "u_divisions": 6}}))
        inputs = StructureInputs.load(path)
        assert inputs.grid.mode == GridDivisionMode.LENGTH
        assert inputs.grid.u_divisions == 6
        assert inputs.grid.v_divisions == 7

    def test_spacing_positive(self):
        with pytest.raises(ValidationError):
            StructureInputs(beam_spacing=0)

    def test_level_height_positive(self):
        with pytest.raises(ValidationError):
            LevelVolume(profile=_square(), height=0)

    def test_grid_line_points(self):
        with pytest.raises(ValidationError):
            GridLine(points=[Point3D(x=0, y=0, z=0)])

    def test_models_load(self, tmp_path):
        path = tmp_path / "models.json"
        path.write_text(json.dumps({
            "levels": [{"name": "L1", "profile": _square().model_dump(), "height": 3}],
        }))
        models = StructureModels.load(path)
        assert models.levels[0].name == "L1"
        assert models.levels[0].elevation == 0.0
        assert models.grids is None


class TestFraming:
    def test_ifc_id(self):
        gid = generate_ifc_id()
        assert len(gid) == 22
        assert gid != generate_ifc_id()

    def test_column(self):
        col = FramingMember.column(Point3D(x=1, y=2, z=3), 4.0, "W10x100", "Steel", rotation=90)
        assert col.member_type == MemberType.COLUMN
        assert col.end == Point3D(x=1, y=2, z=7)
        assert math.isclose(col.length, 4.0)
        assert col.rotation == 90

    def test_horizontal(self):
        line = Line3D(start=Point3D(x=0, y=0, z=3), end=Point3D(x=6, y=0, z=3))
        beam = FramingMember.horizontal(MemberType.BEAM, line, "W12x26", STEEL.name)
        assert beam.curve == line
        assert beam.material == "Steel"

    def test_frozen(self):
        col = FramingMember.column(Point3D(x=0, y=0, z=0), 4.0, "W10x100", "Steel")
        with pytest.raises(ValidationError):
            col.profile = "W8x31"

    def test_stats(self):
        p = Point3D
        members = [
            FramingMember.column(p(x=0, y=0, z=0), 4.0, "W10x100", "Steel"),
            FramingMember.column(p(x=5, y=0, z=0), 4.0, "W10x100", "Steel"),
            FramingMember.horizontal(
                MemberType.GIRDER, Line3D(start=p(x=0, y=0, z=4), end=p(x=5, y=0, z=4)),
                "W16x31", "Steel",
            ),
        ]
        stats = FramingStats.from_members(members)
        assert stats.total_members == 3
        assert stats.columns == 2
        assert stats.girders == 1
        assert stats.beams == 0
        assert math.isclose(stats.column_length, 8.0)
        assert math.isclose(stats.girder_length, 5.0)

    def test_outputs_compute_stats(self, tmp_path):
        col = FramingMember.column(Point3D(x=0, y=0, z=0), 4.0, "W10x100", "Steel")
        outputs = StructureOutputs(members=[col], materials=[STEEL])
        assert outputs.stats.columns == 1
        assert outputs.longest_grid_span == 0.0
        saved = json.loads(outputs.save(tmp_path / "out.json").read_text())
        assert saved["stats"]["total_members"] == 1
