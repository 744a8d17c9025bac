"""End-to-end structure derivation.

Pipeline: resolve the input source → (derive grid → build cell complex)
→ freeze complex → primary framing → secondary infill → outputs.

The input source is resolved once, up front, into one of two variants:
an explicit pre-built complex ("Bays") or footprint levels ("Levels").
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from structure_builder.errors import ConfigurationError, GeometryError
from structure_builder.generators.complex import build_cell_complex
from structure_builder.generators.grid import derive_grid
from structure_builder.generators.infill import infill_secondary_beams
from structure_builder.generators.primary import derive_primary_framing
from structure_builder.geometry.grid import Grid2d
from structure_builder.models.framing import STEEL, Material, StructureOutputs
from structure_builder.models.geometry import X_AXIS, Point3D
from structure_builder.models.inputs import GridLine, LevelVolume, StructureInputs, StructureModels
from structure_builder.models.profiles import FramingProfiles
from structure_builder.topology.cell_complex import CellComplex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExplicitComplex:
    """A pre-built complex supplied by the caller."""

    cell_complex: CellComplex


@dataclass(frozen=True)
class FootprintLevels:
    """Stacked level volumes from which a complex is built."""

    levels: list[LevelVolume]


StructureSource = ExplicitComplex | FootprintLevels


def resolve_source(
    models: StructureModels | None, bays: CellComplex | None = None
) -> StructureSource:
    """Pick the input variant. Bays win over levels.

    Raises:
        ConfigurationError: if neither is available, or levels are empty.
    """
    if bays is not None:
        return ExplicitComplex(bays)
    if models is None or models.levels is None:
        raise ConfigurationError("If Bays are not supplied Levels are required.")
    if not models.levels:
        raise ConfigurationError(
            "No LevelVolumes found in your Levels model. "
            "Please supply at least one level volume."
        )
    return FootprintLevels(list(models.levels))


def primary_direction_from(grids: list[GridLine] | None, grid: Grid2d | None) -> Point3D:
    """Direction of the first authored grid line, else the derived U axis, else +X."""
    if grids:
        first = grids[0]
        direction = (first.points[1] - first.points[0]).unitized()
        if direction.length() > 0:
            return direction
        logger.warning("Grid line '%s' has a zero-length first segment", first.name)
    if grid is not None:
        return grid.u.direction
    logger.warning("No grid lines and no derived grid; using +X as the primary direction")
    return X_AXIS


def generate_structure(
    models: StructureModels | None = None,
    inputs: StructureInputs | None = None,
    bays: CellComplex | None = None,
    material: Material = STEEL,
) -> StructureOutputs:
    """Derive columns, girders, and beams for a building.

    Args:
        models: Levels and grid lines from the input model store.
        inputs: Run settings; defaults are used when omitted.
        bays: Pre-built cell complex. Takes precedence over levels.
        material: Material assigned to every member.

    Returns:
        StructureOutputs with every member and summary statistics.

    Raises:
        ConfigurationError: for missing inputs or unknown profile names.
            Raised before any framing is attempted.
    """
    if inputs is None:
        inputs = StructureInputs()
    source = resolve_source(models, bays)
    profiles = FramingProfiles.by_names(inputs.column_type, inputs.girder_type, inputs.beam_type)

    grid: Grid2d | None = None
    if isinstance(source, ExplicitComplex):
        cell_complex = source.cell_complex
    else:
        ordered = sorted(source.levels, key=lambda lv: lv.elevation)
        s = inputs.grid
        try:
            grid = derive_grid(ordered[0].profile, s.u_divisions, s.v_divisions, s.mode)
        except GeometryError as e:
            raise ConfigurationError(f"Cannot derive a grid from the first level: {e}") from e
        cell_complex = build_cell_complex(ordered, grid=grid, settings=s)
    cell_complex.freeze()

    grids = models.grids if models is not None else None
    direction = primary_direction_from(grids, grid)

    members = derive_primary_framing(cell_complex, direction, profiles, material, inputs)
    members.extend(infill_secondary_beams(cell_complex, profiles.beam, material, inputs))

    outputs = StructureOutputs(members=members, materials=[material])
    logger.info("Derived structure: %s", outputs.stats.model_dump())
    return outputs
