"""L-shaped three-story frame — proof of concept.

Three levels, 4m floor-to-floor:
- ground and first floor: full L footprint
- second floor: the long wing only

Layout (top view):
   (0,30) --- (12,30)
     |          |
     |   wing   |
     |          |
     |        (12,12) -------- (30,12)
     |                            |
   (0,0) ---------------------- (30,0)
"""

from pathlib import Path

from structure_builder.export.plan import render_framing_plan
from structure_builder.generators.structure import generate_structure
from structure_builder.models import (
    LevelVolume,
    Point2D,
    Polygon2D,
    StructureInputs,
    StructureModels,
)

HEIGHT = 4.0

L_SHAPE = Polygon2D(vertices=[
    Point2D(x=0, y=0), Point2D(x=30, y=0), Point2D(x=30, y=12),
    Point2D(x=12, y=12), Point2D(x=12, y=30), Point2D(x=0, y=30),
])
WING = Polygon2D(vertices=[
    Point2D(x=0, y=0), Point2D(x=30, y=0), Point2D(x=30, y=12), Point2D(x=0, y=12),
])

models = StructureModels(levels=[
    LevelVolume(name="Ground Floor", profile=L_SHAPE, elevation=0.0, height=HEIGHT),
    LevelVolume(name="First Floor", profile=L_SHAPE, elevation=HEIGHT, height=HEIGHT),
    LevelVolume(name="Second Floor", profile=WING, elevation=2 * HEIGHT, height=HEIGHT),
])
inputs = StructureInputs(beam_spacing=2.0, insert_columns_at_external_edges=True)

# --- Derive ---
outputs = generate_structure(models, inputs)

# --- Export ---
output = Path(__file__).parent / "output"
output.mkdir(exist_ok=True)
members_file = outputs.save(output / "l_shaped_frame.json")
plan_file = render_framing_plan(outputs, output / "l_shaped_frame.png")

stats = outputs.stats
print(f"Members written to: {members_file}")
print(f"Plan rendered to: {plan_file}")
print(f"   Columns: {stats.columns} ({stats.column_length:.1f} m)")
print(f"   Girders: {stats.girders} ({stats.girder_length:.1f} m)")
print(f"   Beams: {stats.beams} ({stats.beam_length:.1f} m)")
