"""Framing output models: members, materials, and run summaries."""

from __future__ import annotations

import uuid
from enum import Enum
from pathlib import Path

import ifcopenshell.guid
from pydantic import BaseModel, ConfigDict, Field

from structure_builder.models.geometry import Line3D, Point3D


def generate_ifc_id() -> str:
    """22-character compressed GUID, keyed the way an IFC file would key elements."""
    return ifcopenshell.guid.compress(uuid.uuid4().hex)


class Material(BaseModel):
    """A display material referenced by name from framing members."""

    global_id: str = Field(default_factory=generate_ifc_id, description="IFC GlobalId")
    name: str
    color: str = Field(default="#808080", description="Hex RGB color")
    specular_factor: float = Field(default=0.5, ge=0, le=1)
    glossiness_factor: float = Field(default=0.3, ge=0, le=1)


STEEL = Material(name="Steel", color="#808080", specular_factor=0.5, glossiness_factor=0.3)


class MemberType(str, Enum):
    """Framing member classification.

    COLUMN: vertical member on a plumb edge
    GIRDER: primary horizontal member on a grid edge
    BEAM: secondary horizontal member infilled across a bay
    """

    COLUMN = "column"
    GIRDER = "girder"
    BEAM = "beam"


class FramingMember(BaseModel):
    """A single linear structural member positioned in 3D space.

    Columns run from their base ``start`` straight up to ``end``;
    ``rotation`` turns the section about the member axis (degrees).
    """

    model_config = ConfigDict(frozen=True)

    global_id: str = Field(default_factory=generate_ifc_id, description="IFC GlobalId")
    member_type: MemberType
    start: Point3D
    end: Point3D
    profile: str = Field(description="Profile name, e.g. 'W10x100'")
    material: str = Field(default="Steel", description="Material name")
    rotation: float = Field(default=0.0, description="Rotation about the member axis, degrees")

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    @property
    def curve(self) -> Line3D:
        return Line3D(start=self.start, end=self.end)

    @classmethod
    def column(
        cls, origin: Point3D, height: float, profile: str, material: str, rotation: float = 0.0
    ) -> FramingMember:
        top = Point3D(x=origin.x, y=origin.y, z=origin.z + height)
        return cls(
            member_type=MemberType.COLUMN,
            start=origin,
            end=top,
            profile=profile,
            material=material,
            rotation=rotation,
        )

    @classmethod
    def horizontal(
        cls, member_type: MemberType, line: Line3D, profile: str, material: str
    ) -> FramingMember:
        return cls(
            member_type=member_type,
            start=line.start,
            end=line.end,
            profile=profile,
            material=material,
        )


class FramingStats(BaseModel):
    """Summary statistics for a derived structure."""

    total_members: int = 0
    columns: int = 0
    girders: int = 0
    beams: int = 0
    column_length: float = 0.0
    girder_length: float = 0.0
    beam_length: float = 0.0

    @classmethod
    def from_members(cls, members: list[FramingMember]) -> FramingStats:
        def of(t: MemberType) -> list[FramingMember]:
            return [m for m in members if m.member_type == t]

        columns, girders, beams = of(MemberType.COLUMN), of(MemberType.GIRDER), of(MemberType.BEAM)
        return cls(
            total_members=len(members),
            columns=len(columns),
            girders=len(girders),
            beams=len(beams),
            column_length=round(sum(m.length for m in columns), 6),
            girder_length=round(sum(m.length for m in girders), 6),
            beam_length=round(sum(m.length for m in beams), 6),
        )


class StructureOutputs(BaseModel):
    """The complete derived structure."""

    members: list[FramingMember] = Field(default_factory=list)
    materials: list[Material] = Field(default_factory=list)
    stats: FramingStats = None  # type: ignore[assignment]
    longest_grid_span: float = Field(
        default=0.0, description="Reserved; always 0.0 until grid span tracking exists"
    )

    def model_post_init(self, __context: object) -> None:
        if self.stats is None:
            self.stats = FramingStats.from_members(self.members)

    def members_of_type(self, member_type: MemberType) -> list[FramingMember]:
        return [m for m in self.members if m.member_type == member_type]

    def save(self, path: str | Path) -> Path:
        """Save the outputs to a JSON file. Creates parent dirs if needed."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2))
        return path
