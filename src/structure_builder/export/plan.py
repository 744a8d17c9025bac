"""Top-down framing plan rendering using matplotlib.

Columns are drawn as square markers; girders and beams as lines coloured
by length through a gradient palette (short → long). The palette is an
explicit argument, never module state.
"""

from __future__ import annotations

from pathlib import Path

import matplotlib
matplotlib.use("Agg")  # headless rendering
import matplotlib.pyplot as plt
import numpy as np
from pydantic import BaseModel, Field, field_validator

from structure_builder.models.framing import FramingMember, MemberType, StructureOutputs


class GradientPalette(BaseModel):
    """Ordered colours used to bin members by length."""

    colors: list[str] = Field(
        default_factory=lambda: [
            "#00FF00",  # green
            "#00FFFF",  # cyan
            "#BFFF00",  # lime
            "#FFFF00",  # yellow
            "#FFA500",  # orange
            "#FF0000",  # red
        ]
    )

    @field_validator("colors")
    @classmethod
    def not_empty(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("Palette needs at least one colour")
        return v

    def colors_for(self, lengths: list[float]) -> list[str]:
        """Colour per length, binned evenly between the shortest and longest."""
        if not lengths:
            return []
        values = np.asarray(lengths, dtype=float)
        lo, hi = values.min(), values.max()
        if hi - lo < 1e-9:
            return [self.colors[0]] * len(lengths)
        idx = np.floor((values - lo) / (hi - lo) * len(self.colors)).astype(int)
        idx = np.clip(idx, 0, len(self.colors) - 1)
        return [self.colors[i] for i in idx]


def _top_elevation(members: list[FramingMember]) -> float | None:
    horizontal = [m for m in members if m.member_type != MemberType.COLUMN]
    if not horizontal:
        return None
    return max(m.start.z for m in horizontal)


def render_framing_plan(
    outputs: StructureOutputs,
    output_path: str | Path,
    elevation: float | None = None,
    palette: GradientPalette | None = None,
    title: str | None = None,
    dpi: int = 150,
    tolerance: float = 1e-3,
) -> Path:
    """Render one framing tier of a derived structure to PNG.

    Args:
        outputs: Derived structure.
        output_path: Output image path.
        elevation: Tier to draw (member start Z); defaults to the highest tier.
        palette: Length gradient for girders and beams.
        title: Plot title.
        dpi: Image resolution.
        tolerance: Z tolerance when selecting the tier.

    Returns:
        Path to the output image.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if palette is None:
        palette = GradientPalette()
    if elevation is None:
        elevation = _top_elevation(outputs.members)

    horizontal = [
        m for m in outputs.members
        if m.member_type != MemberType.COLUMN
        and elevation is not None
        and abs(m.start.z - elevation) <= tolerance
    ]
    columns = outputs.members_of_type(MemberType.COLUMN)

    fig, ax = plt.subplots(1, 1, figsize=(12, 10))
    ax.set_aspect("equal")
    ax.set_facecolor("#FAFAFA")
    fig.patch.set_facecolor("white")

    colors = palette.colors_for([m.length for m in horizontal])
    for member, color in zip(horizontal, colors):
        width = 2.5 if member.member_type == MemberType.GIRDER else 1.0
        ax.plot(
            [member.start.x, member.end.x], [member.start.y, member.end.y],
            color=color, linewidth=width, zorder=2 if member.member_type == MemberType.BEAM else 3,
        )

    if columns:
        xs = np.array([c.start.x for c in columns])
        ys = np.array([c.start.y for c in columns])
        ax.scatter(xs, ys, marker="s", s=30, color="#424242", zorder=4)

    stats = outputs.stats
    if title is None:
        title = "Framing plan" if elevation is None else f"Framing plan @ {elevation:.2f}"
    ax.set_title(title)
    ax.text(
        0.01, 0.01,
        f"columns {stats.columns}  girders {stats.girders}  beams {stats.beams}",
        transform=ax.transAxes, fontsize=8, color="#424242",
    )
    ax.autoscale()
    fig.savefig(output_path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    return output_path
