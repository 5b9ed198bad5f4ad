"""
Property definitions for Dither Terrain.
All user-configurable settings live in one Blender property group attached to
the scene. Every property forwards its change to the scene's terrain session.

Ranges here are the only validation the generator gets.
"""

import bpy
from bpy.props import (
    BoolProperty,
    EnumProperty,
    FloatProperty,
    FloatVectorProperty,
    IntProperty,
    PointerProperty,
)
from bpy.types import PropertyGroup

from .params import DEFAULTS, DISTANCE_METRICS, NOISE_KINDS


def _forward(name):
    """Build an update callback that sends `name` to the scene's session."""

    def update(self, context):
        from .operators import session_for_scene
        session_for_scene(context.scene).on_parameter_changed(name, getattr(self, name))

    return update


# ---------------------------------------------------------------------------
# Property Group
# ---------------------------------------------------------------------------

class DITHERTERRAIN_PG_Settings(PropertyGroup):
    """Noise, geometry and display settings for the dithered terrain."""

    # Noise
    noise_kind: EnumProperty(
        name="Noise",
        description="Noise family the height field is sampled from",
        items=NOISE_KINDS,
        default=DEFAULTS.noise_kind,
        update=_forward("noise_kind"),
    )
    max_height: FloatProperty(
        name="Max Height",
        description="Height of the highest possible terrain level",
        default=DEFAULTS.max_height,
        min=1.0,
        max=50.0,
        step=200,
        precision=0,
        update=_forward("max_height"),
    )

    # OpenSimplex
    offsets: FloatVectorProperty(
        name="Offsets",
        description="X and Y scale applied to vertex positions before sampling",
        size=2,
        default=DEFAULTS.offsets,
        min=0.0,
        max=1.0,
        step=10,
        precision=1,
        update=_forward("offsets"),
    )

    # Worley
    worley_points: IntProperty(
        name="Worley Points",
        description="Number of feature points; changing it reseeds the field",
        default=DEFAULTS.worley_points,
        min=1,
        max=20,
        update=_forward("worley_points"),
    )
    distance_metric: EnumProperty(
        name="Distance",
        description="Distance measure to the nearest feature point",
        items=DISTANCE_METRICS,
        default=DEFAULTS.distance_metric,
        update=_forward("distance_metric"),
    )

    # Geometry
    segments_x: IntProperty(
        name="Segments X",
        description="Grid subdivisions along X",
        default=DEFAULTS.segments_x,
        min=1,
        max=300,
        update=_forward("segments_x"),
    )
    segments_y: IntProperty(
        name="Segments Y",
        description="Grid subdivisions along Y",
        default=DEFAULTS.segments_y,
        min=1,
        max=300,
        update=_forward("segments_y"),
    )
    dither_levels: IntProperty(
        name="Steps",
        description="Number of height levels; 1 keeps the terrain smooth",
        default=DEFAULTS.dither_levels,
        min=1,
        max=50,
        update=_forward("dither_levels"),
    )
    plane_width: FloatProperty(
        name="Width",
        description="Terrain extent along X",
        default=DEFAULTS.plane_width,
        min=1.0,
        max=200.0,
        step=100,
        precision=0,
        update=_forward("plane_width"),
    )
    plane_height: FloatProperty(
        name="Depth",
        description="Terrain extent along Y",
        default=DEFAULTS.plane_height,
        min=1.0,
        max=200.0,
        step=100,
        precision=0,
        update=_forward("plane_height"),
    )
    color: FloatVectorProperty(
        name="Color",
        description="Base color of the solid terrain",
        subtype='COLOR',
        size=3,
        default=DEFAULTS.color,
        min=0.0,
        max=1.0,
        update=_forward("color"),
    )

    # Toggles
    wireframe: BoolProperty(
        name="Wireframe",
        description="Show the terrain as a see-through wireframe",
        default=DEFAULTS.wireframe,
        update=_forward("wireframe"),
    )
    show_axes: BoolProperty(
        name="Axes",
        description="Show an axes helper sized to the terrain",
        default=DEFAULTS.show_axes,
        update=_forward("show_axes"),
    )


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

_classes = (
    DITHERTERRAIN_PG_Settings,
)


def register():
    for cls in _classes:
        bpy.utils.register_class(cls)
    bpy.types.Scene.dither_terrain = PointerProperty(type=DITHERTERRAIN_PG_Settings)


def unregister():
    del bpy.types.Scene.dither_terrain
    for cls in reversed(_classes):
        bpy.utils.unregister_class(cls)
