"""Secondary beam infill across each cell's top face."""

from __future__ import annotations

import logging

from structure_builder.geometry.grid import FixedDivisionMode, Grid1d
from structure_builder.geometry.polygons import ray_intersects_segment
from structure_builder.models.framing import FramingMember, Material, MemberType
from structure_builder.models.geometry import Line3D, Point3D, longest_segment
from structure_builder.models.inputs import StructureInputs
from structure_builder.models.profiles import Profile
from structure_builder.topology.cell_complex import CellComplex

logger = logging.getLogger(__name__)


def infill_secondary_beams(
    cell_complex: CellComplex,
    beam_profile: Profile,
    material: Material,
    inputs: StructureInputs,
) -> list[FramingMember]:
    """Lay evenly spaced beams across the top face of every cell.

    The longest edge of each top face is divided at ``beam_spacing`` with
    the remainder split between both ends. From each interior separator a
    probe is cast across the face, perpendicular to that edge, and a beam
    runs from the separator to every boundary segment the probe hits.
    Separators near the ends of the edge and hits near the separator are
    dropped (``min_beam_distance``).
    """
    members: list[FramingMember] = []
    drop = inputs.slab_thickness + beam_profile.depth / 2
    for cell in cell_complex.get_cells():
        polygon = cell_complex.face_polygon(cell_complex.get_top_face(cell))
        ccw = polygon.to_2d().is_counter_clockwise()
        for line in _cell_beam_lines(polygon.segments(), ccw, inputs):
            members.append(FramingMember.horizontal(
                MemberType.BEAM, line.lowered(drop), beam_profile.name, material.name
            ))
    logger.info("Secondary infill: %d beams", len(members))
    return members


def _cell_beam_lines(
    segments: list[Line3D], counter_clockwise: bool, inputs: StructureInputs
) -> list[Line3D]:
    edge = longest_segment(segments)
    d = edge.direction()
    # Left of the edge is inside a counter-clockwise loop.
    probe = Point3D(x=-d.y, y=d.x, z=0.0)
    if not counter_clockwise:
        probe = probe.negate()

    grid = Grid1d(edge)
    grid.divide_by_fixed_length(inputs.beam_spacing, FixedDivisionMode.REMAINDER_AT_BOTH_ENDS)
    min_dist = inputs.min_beam_distance

    lines: list[Line3D] = []
    for pt in grid.get_cell_separators()[1:-1]:
        if pt.distance_to(edge.start) < min_dist or pt.distance_to(edge.end) < min_dist:
            logger.debug("Probe at %s too close to edge ends", pt)
            continue
        hits: list[Point3D] = []
        for s in segments:
            if s is edge:
                continue
            hit = ray_intersects_segment(pt, probe, s)
            if hit is None or pt.distance_to(hit) < min_dist:
                continue
            # A probe through a corner hits both segments meeting there.
            if any(hit.is_almost_equal_to(h) for h in hits):
                continue
            hits.append(hit)
            lines.append(Line3D(start=pt, end=hit))
    return lines
