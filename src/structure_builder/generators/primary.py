"""Primary framing: columns and girders along the edges of a cell complex.

Edges are visited from the lowest to the highest elevation. Plumb edges
become columns, every other edge a girder dropped below the slab. The
first non-vertical edge seen marks the lowest tier, which gets no girders
unless ``create_beams_on_first_level`` is set.
"""

from __future__ import annotations

import logging
import math

from structure_builder.errors import TopologyError
from structure_builder.models.framing import FramingMember, Material, MemberType
from structure_builder.models.geometry import EPSILON, X_AXIS, Point3D
from structure_builder.models.inputs import StructureInputs
from structure_builder.models.profiles import FramingProfiles
from structure_builder.topology.cell_complex import CellComplex

logger = logging.getLogger(__name__)

# XY tolerance for the plumb test.
PLUMB_TOLERANCE = 1e-3


def is_vertical(start: Point3D, end: Point3D) -> bool:
    """True if one point is directly above the other."""
    return (
        math.isclose(start.x, end.x, abs_tol=PLUMB_TOLERANCE)
        and math.isclose(start.y, end.y, abs_tol=PLUMB_TOLERANCE)
        and abs(start.z - end.z) > EPSILON
    )


def derive_primary_framing(
    cell_complex: CellComplex,
    primary_direction: Point3D,
    profiles: FramingProfiles,
    material: Material,
    inputs: StructureInputs,
) -> list[FramingMember]:
    """Classify every edge of the complex as a column, a girder, or nothing.

    Args:
        cell_complex: Populated complex; only read.
        primary_direction: Principal grid direction, sets column rotation.
        profiles: Column and girder sections.
        material: Material assigned to every member.
        inputs: Slab thickness and the external-column / first-level flags.

    Returns:
        Columns and girders in visiting order.
    """
    members: list[FramingMember] = []
    rotation = X_AXIS.angle_to(primary_direction)
    drop = inputs.slab_thickness + profiles.girder.depth / 2

    lines = []
    for edge in cell_complex.get_edges():
        try:
            line = cell_complex.edge_line(edge)
        except TopologyError as e:
            logger.debug("Skipping edge %d: %s", edge.id, e)
            continue
        if line.length() < EPSILON:
            logger.debug("Skipping zero-length edge %d", edge.id)
            continue
        lines.append((edge, line))
    # sorted() is stable, so equal elevations keep insertion order.
    lines.sort(key=lambda el: min(el[1].start.z, el[1].end.z))

    lowest_tier: float | None = None
    skipped_external = skipped_ground = 0
    for edge, line in lines:
        if is_vertical(line.start, line.end):
            if edge.is_external and not inputs.insert_columns_at_external_edges:
                skipped_external += 1
                continue
            origin = line.start if line.start.z < line.end.z else line.end
            members.append(FramingMember.column(
                origin, line.length(), profiles.column.name, material.name, rotation=rotation
            ))
            continue

        girder = line.lowered(drop)
        if lowest_tier is None:
            lowest_tier = girder.start.z
        if not inputs.create_beams_on_first_level and girder.start.z <= lowest_tier + EPSILON:
            skipped_ground += 1
            continue
        members.append(FramingMember.horizontal(
            MemberType.GIRDER, girder, profiles.girder.name, material.name
        ))

    logger.info(
        "Primary framing: %d members (%d external columns and %d ground-tier girders skipped)",
        len(members), skipped_external, skipped_ground,
    )
    return members
