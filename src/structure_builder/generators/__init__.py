"""Structure generation tools.

- grid: fit a U/V grid to a footprint
- complex: extrude level footprints into a cell complex
- primary: columns and girders from complex edges
- infill: secondary beams across cell top faces
- structure: the end-to-end pipeline
"""

from structure_builder.generators.grid import derive_grid
from structure_builder.generators.complex import build_cell_complex
from structure_builder.generators.primary import derive_primary_framing, is_vertical
from structure_builder.generators.infill import infill_secondary_beams
from structure_builder.generators.structure import (
    ExplicitComplex,
    FootprintLevels,
    generate_structure,
    resolve_source,
)

__all__ = [
    "derive_grid",
    "build_cell_complex",
    "derive_primary_framing",
    "is_vertical",
    "infill_secondary_beams",
    "ExplicitComplex",
    "FootprintLevels",
    "generate_structure",
    "resolve_source",
]
