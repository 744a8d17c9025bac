"""Cell complex construction from stacked level footprints.

Each consecutive pair of levels (i-1, i) contributes one story of cells:
level i's footprint is inset, trimmed against the U/V grid, and every
trimmed tile is extruded over the story below level i, using level i-1's
height. The topmost level also gets a capping story of its own height.
"""

from __future__ import annotations

import logging

from structure_builder.errors import GeometryError
from structure_builder.generators.grid import derive_grid
from structure_builder.geometry.grid import Grid2d
from structure_builder.geometry.polygons import inset_polygon
from structure_builder.models.geometry import Polygon2D
from structure_builder.models.inputs import GridSettings, LevelVolume
from structure_builder.topology.cell_complex import CellComplex

logger = logging.getLogger(__name__)


def build_cell_complex(
    levels: list[LevelVolume],
    grid: Grid2d | None = None,
    settings: GridSettings | None = None,
) -> CellComplex:
    """Build a cell complex from level volumes.

    Args:
        levels: Level volumes; sorted by elevation before use.
        grid: U/V grid. Derived from the lowest level's footprint if omitted.
        settings: Grid derivation and inset settings.

    Returns:
        A populated (unfrozen) CellComplex.

    Raises:
        GeometryError: if no grid is given and the lowest footprint
            cannot yield one.
    """
    if settings is None:
        settings = GridSettings()
    ordered = sorted(levels, key=lambda lv: lv.elevation)
    if grid is None and ordered:
        grid = derive_grid(
            ordered[0].profile,
            u_divisions=settings.u_divisions,
            v_divisions=settings.v_divisions,
            mode=settings.mode,
        )

    complex_ = CellComplex(name="Temporary Cell Complex")
    if len(ordered) < 2:
        logger.warning("Need at least 2 levels to build cells, got %d", len(ordered))
        return complex_

    for i in range(1, len(ordered)):
        level = ordered[i]
        below = ordered[i - 1]
        is_top = i == len(ordered) - 1
        try:
            pieces = inset_polygon(level.profile, settings.inset)
        except GeometryError as e:
            logger.warning("Skipping level %s: %s", level.name or i, e)
            continue

        for piece in pieces:
            for polygon in _trimmed_cells(grid, piece):
                _add(complex_, polygon, below.height, level.elevation - below.height, grid)
                if is_top:
                    _add(complex_, polygon, level.height, level.elevation, grid)

    logger.info("Built cell complex: %s", complex_.summary())
    return complex_


def _trimmed_cells(grid: Grid2d, boundary: Polygon2D) -> list[Polygon2D]:
    polygons: list[Polygon2D] = []
    for cell in grid.with_boundary(boundary).get_cells():
        polygons.extend(cell.get_trimmed_cell_geometry())
    return polygons


def _add(
    complex_: CellComplex, polygon: Polygon2D, height: float, elevation: float, grid: Grid2d
) -> None:
    try:
        complex_.add_cell(polygon, height, elevation, grid.u, grid.v)
    except GeometryError as e:
        logger.warning("Skipping cell at elevation %.3f: %s", elevation, e)
