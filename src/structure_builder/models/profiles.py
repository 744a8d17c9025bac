"""Wide-flange cross-section profiles.

A small catalog of AISC W-shapes, stored as nominal dimensions in inches
and built into an I-shaped outline in meters. Only the outline bounds
matter to framing derivation: members are dropped below the slab by
half the profile depth.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field

from structure_builder.errors import ConfigurationError
from structure_builder.models.geometry import Point2D, Polygon2D

INCH = 0.0254

# name: (depth d, flange width bf, web thickness tw, flange thickness tf), inches
WIDE_FLANGE_SHAPES: dict[str, tuple[float, float, float, float]] = {
    "W8x31": (8.00, 8.00, 0.285, 0.435),
    "W10x49": (10.0, 10.0, 0.340, 0.560),
    "W10x100": (11.1, 10.3, 0.680, 1.120),
    "W12x26": (12.2, 6.49, 0.230, 0.380),
    "W12x53": (12.1, 10.0, 0.345, 0.575),
    "W14x90": (14.0, 14.5, 0.440, 0.710),
    "W16x31": (15.9, 5.53, 0.275, 0.440),
    "W18x40": (17.9, 6.02, 0.315, 0.525),
    "W21x44": (20.7, 6.50, 0.350, 0.450),
    "W24x55": (23.6, 7.01, 0.395, 0.505),
}


class Profile(BaseModel):
    """A named cross-section with its outline centred on the origin."""

    name: str
    perimeter: Polygon2D = Field(description="Section outline in meters")

    @property
    def depth(self) -> float:
        """Bounding depth of the outline along its local Y axis."""
        ys = [v.y for v in self.perimeter.vertices]
        return max(ys) - min(ys)

    @property
    def width(self) -> float:
        xs = [v.x for v in self.perimeter.vertices]
        return max(xs) - min(xs)


def _i_section(d: float, bf: float, tw: float, tf: float) -> Polygon2D:
    """Counter-clockwise I outline, starting at the bottom-left flange corner."""
    hd, hb, hw = d / 2, bf / 2, tw / 2
    pts = [
        (-hb, -hd), (hb, -hd), (hb, -hd + tf), (hw, -hd + tf),
        (hw, hd - tf), (hb, hd - tf), (hb, hd), (-hb, hd),
        (-hb, hd - tf), (-hw, hd - tf), (-hw, -hd + tf), (-hb, -hd + tf),
    ]
    return Polygon2D(vertices=[Point2D(x=x, y=y) for x, y in pts])


def available_profiles() -> list[str]:
    """Names of every shape in the catalog."""
    return list(WIDE_FLANGE_SHAPES)


def get_profile_by_name(name: str) -> Profile:
    """Look up a wide-flange profile (case-insensitive)."""
    key = next((k for k in WIDE_FLANGE_SHAPES if k.lower() == name.lower()), None)
    if key is None:
        raise ConfigurationError(
            f"Unknown profile '{name}'. Available: {available_profiles()}"
        )
    d, bf, tw, tf = (v * INCH for v in WIDE_FLANGE_SHAPES[key])
    return Profile(name=key, perimeter=_i_section(d, bf, tw, tf))


@dataclass(frozen=True)
class FramingProfiles:
    """The three sections used by one derivation run."""

    column: Profile
    girder: Profile
    beam: Profile

    @classmethod
    def by_names(cls, column: str, girder: str, beam: str) -> FramingProfiles:
        return cls(
            column=get_profile_by_name(column),
            girder=get_profile_by_name(girder),
            beam=get_profile_by_name(beam),
        )
