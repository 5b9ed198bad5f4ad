"""
UI Panels for Dither Terrain.
Organized as a sidebar panel in the 3D Viewport under the 'Dither Terrain' tab.
"""

import bpy
from bpy.types import Panel


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------

class DITHERTERRAIN_PT_Base:
    bl_space_type = 'VIEW_3D'
    bl_region_type = 'UI'
    bl_category = 'Dither Terrain'


# ---------------------------------------------------------------------------
# Main panel
# ---------------------------------------------------------------------------

class DITHERTERRAIN_PT_Main(DITHERTERRAIN_PT_Base, Panel):
    bl_idname = "DITHERTERRAIN_PT_main"
    bl_label = "Dither Terrain"

    def draw(self, context):
        layout = self.layout
        dt = context.scene.dither_terrain

        row = layout.row(align=True)
        row.operator("dither_terrain.rebuild", icon='FILE_REFRESH')
        row.operator("dither_terrain.reset", icon='MOD_NOISE')

        col = layout.column(align=True)
        col.prop(dt, "wireframe")
        col.prop(dt, "show_axes")


# ---------------------------------------------------------------------------
# Noise variables
# ---------------------------------------------------------------------------

class DITHERTERRAIN_PT_Noise(DITHERTERRAIN_PT_Base, Panel):
    bl_idname = "DITHERTERRAIN_PT_noise"
    bl_label = "Noise Variables"
    bl_parent_id = "DITHERTERRAIN_PT_main"

    def draw(self, context):
        layout = self.layout
        dt = context.scene.dither_terrain

        layout.use_property_split = True
        layout.use_property_decorate = False

        layout.prop(dt, "noise_kind")
        layout.prop(dt, "max_height")

        # Only the active family's settings are shown
        box = layout.box()
        if dt.noise_kind == 'OPEN_SIMPLEX':
            box.label(text="OpenSimplex Variables", icon='FORCE_TURBULENCE')
            col = box.column(align=True)
            col.prop(dt, "offsets", index=0, text="X Offset")
            col.prop(dt, "offsets", index=1, text="Y Offset")
        else:
            box.label(text="Worley Variables", icon='MESH_ICOSPHERE')
            col = box.column(align=True)
            col.prop(dt, "distance_metric")
            col.prop(dt, "worley_points")


# ---------------------------------------------------------------------------
# Geometry variables
# ---------------------------------------------------------------------------

class DITHERTERRAIN_PT_Geometry(DITHERTERRAIN_PT_Base, Panel):
    bl_idname = "DITHERTERRAIN_PT_geometry"
    bl_label = "Geometry Variables"
    bl_parent_id = "DITHERTERRAIN_PT_main"

    def draw(self, context):
        layout = self.layout
        dt = context.scene.dither_terrain

        layout.use_property_split = True
        layout.use_property_decorate = False

        col = layout.column(align=True)
        col.prop(dt, "segments_x")
        col.prop(dt, "segments_y")

        layout.prop(dt, "dither_levels")

        col = layout.column(align=True)
        col.prop(dt, "plane_width")
        col.prop(dt, "plane_height")

        row = layout.row()
        row.enabled = not dt.wireframe
        row.prop(dt, "color")

        verts = (dt.segments_x + 1) * (dt.segments_y + 1)
        layout.label(text=f"{verts:,} vertices", icon='VERTEXSEL')


# ---------------------------------------------------------------------------
# Scene helpers
# ---------------------------------------------------------------------------

class DITHERTERRAIN_PT_Scene(DITHERTERRAIN_PT_Base, Panel):
    bl_idname = "DITHERTERRAIN_PT_scene"
    bl_label = "Scene"
    bl_parent_id = "DITHERTERRAIN_PT_main"
    bl_options = {'DEFAULT_CLOSED'}

    def draw(self, context):
        layout = self.layout
        col = layout.column(align=True)
        col.operator("dither_terrain.setup_stage", icon='CAMERA_DATA')
        col.operator("dither_terrain.cleanup", icon='TRASH')


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

_classes = (
    DITHERTERRAIN_PT_Main,
    DITHERTERRAIN_PT_Noise,
    DITHERTERRAIN_PT_Geometry,
    DITHERTERRAIN_PT_Scene,
)


def register():
    for cls in _classes:
        bpy.utils.register_class(cls)


def unregister():
    for cls in reversed(_classes):
        bpy.utils.unregister_class(cls)
