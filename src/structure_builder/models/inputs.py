"""Input models: level volumes, grid lines, and run settings.

Levels and grids arrive as JSON records from an upstream model store.
StructureInputs holds the user-facing knobs of one derivation run.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

from structure_builder.models.geometry import Point3D, Polygon2D


class LevelVolume(BaseModel):
    """A floor plate: footprint at an elevation with a floor-to-floor height."""

    name: str = ""
    profile: Polygon2D = Field(description="Level footprint")
    elevation: float = Field(default=0.0, description="Absolute elevation of the level")
    height: float = Field(gt=0, description="Floor-to-floor height")


class GridLine(BaseModel):
    """An authored grid line. Only its first segment's direction is used."""

    name: str = ""
    points: list[Point3D]

    @field_validator("points")
    @classmethod
    def at_least_2_points(cls, v: list[Point3D]) -> list[Point3D]:
        if len(v) < 2:
            raise ValueError("Grid line must have at least 2 points")
        return v


class GridDivisionMode(str, Enum):
    """How derived grid axes are subdivided.

    COUNT: the axis is split into N equal spans.
    LENGTH: the axis is split into spans of a fixed length, remainder at the end.
    """

    COUNT = "count"
    LENGTH = "length"


class GridSettings(BaseModel):
    """Settings for deriving a U/V grid and trimming level footprints."""

    u_divisions: float = Field(
        default=5, gt=0, description="Span count (whole number) or span length along U"
    )
    v_divisions: float = Field(
        default=7, gt=0, description="Span count (whole number) or span length along V"
    )
    mode: GridDivisionMode = GridDivisionMode.COUNT
    inset: float = Field(
        default=0.5, ge=0, description="Inward offset of each footprint before trimming"
    )

    @model_validator(mode="after")
    def whole_span_counts(self) -> GridSettings:
        if self.mode == GridDivisionMode.COUNT:
            for name in ("u_divisions", "v_divisions"):
                if not float(getattr(self, name)).is_integer():
                    raise ValueError(f"{name} must be a whole span count in count mode")
        return self


class StructureInputs(BaseModel):
    """Parameters of one framing derivation run."""

    column_type: str = Field(default="W10x100", description="Wide-flange shape for columns")
    girder_type: str = Field(default="W16x31", description="Wide-flange shape for girders")
    beam_type: str = Field(default="W12x26", description="Wide-flange shape for infill beams")
    beam_spacing: float = Field(default=1.5, gt=0, description="Secondary beam spacing")
    slab_thickness: float = Field(default=0.2, ge=0, description="Slab thickness above framing")
    insert_columns_at_external_edges: bool = True
    create_beams_on_first_level: bool = False
    min_beam_distance: float = Field(
        default=1.0, ge=0, description="Probes and hits closer than this produce no beam"
    )
    grid: GridSettings = Field(default_factory=GridSettings)

    @classmethod
    def load(cls, path: str | Path) -> StructureInputs:
        """Load inputs from a JSON file."""
        path = Path(path)
        return cls.model_validate_json(path.read_text())

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2))
        return path


class StructureModels(BaseModel):
    """Named input categories, each optional.

    ``levels`` maps to the "Levels" model and ``grids`` to the "Grids"
    model. A pre-built "Bays" complex is passed to the pipeline directly.
    """

    levels: list[LevelVolume] | None = None
    grids: list[GridLine] | None = None

    @classmethod
    def load(cls, path: str | Path) -> StructureModels:
        path = Path(path)
        return cls.model_validate(json.loads(path.read_text()))
