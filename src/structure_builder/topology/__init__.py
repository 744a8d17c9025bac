"""Cell complex topology."""

from structure_builder.topology.cell_complex import Cell, CellComplex, Edge, Face, Vertex

__all__ = ["Cell", "CellComplex", "Edge", "Face", "Vertex"]
