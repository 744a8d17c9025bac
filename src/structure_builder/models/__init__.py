"""Data models for framing derivation."""

from structure_builder.models.geometry import (
    EPSILON,
    Line3D,
    Point2D,
    Point3D,
    Polygon2D,
    Polygon3D,
)
from structure_builder.models.inputs import (
    GridDivisionMode,
    GridLine,
    GridSettings,
    LevelVolume,
    StructureInputs,
    StructureModels,
)
from structure_builder.models.profiles import FramingProfiles, Profile, get_profile_by_name
from structure_builder.models.framing import (
    STEEL,
    FramingMember,
    FramingStats,
    Material,
    MemberType,
    StructureOutputs,
    generate_ifc_id,
)

__all__ = [
    "generate_ifc_id",
    "EPSILON",
    "Line3D",
    "Point2D",
    "Point3D",
    "Polygon2D",
    "Polygon3D",
    "GridDivisionMode",
    "GridLine",
    "GridSettings",
    "LevelVolume",
    "StructureInputs",
    "StructureModels",
    "FramingProfiles",
    "Profile",
    "get_profile_by_name",
    "STEEL",
    "FramingMember",
    "FramingStats",
    "Material",
    "MemberType",
    "StructureOutputs",
]
