"""
Operators for Dither Terrain.
Each operator corresponds to one action on the settings panel.
"""

import bpy
from bpy.app.handlers import persistent
from bpy.types import Operator

from . import params
from .mesh_gen import TerrainMeshBuilder
from .session import TerrainSession


# One session per scene, keyed by the scene's RNA pointer so renames keep it
_sessions = {}


def session_for_scene(scene):
    """Return the terrain session of scene, creating it on first use.

    A cached session whose builder no longer points at this scene's master
    collection (freed by undo, or a reused pointer) is dropped and replaced.
    """
    key = scene.as_pointer()
    session = _sessions.get(key)
    if session is not None and not session.builder.is_bound_to(scene):
        del _sessions[key]
        session = None
    if session is None:
        builder = TerrainMeshBuilder(scene.collection)
        builder.clear()
        session = TerrainSession(builder, params=params.from_settings(scene.dither_terrain))
        _sessions[key] = session
    return session


def close_session(scene):
    """Release the scene's terrain and forget its session. Returns True if one existed."""
    session = _sessions.pop(scene.as_pointer(), None)
    if session is None:
        return False
    session.close()
    return True


def close_all_sessions():
    for key in list(_sessions):
        _sessions.pop(key).close()


@persistent
def _forget_sessions(*_args):
    # The loaded file brings its own scenes; the old ones are about to be freed
    _sessions.clear()


# ---------------------------------------------------------------------------
# Rebuild / reset
# ---------------------------------------------------------------------------

class DITHERTERRAIN_OT_Rebuild(Operator):
    """Regenerate the terrain from the current settings"""
    bl_idname = "dither_terrain.rebuild"
    bl_label = "Rebuild Terrain"
    bl_options = {'REGISTER', 'UNDO'}

    def execute(self, context):
        session = session_for_scene(context.scene)
        session.params = params.from_settings(context.scene.dither_terrain)
        try:
            drawable = session.rebuild()
        except ValueError as e:
            self.report({'ERROR'}, str(e))
            return {'CANCELLED'}

        p = session.params
        self.report(
            {'INFO'},
            f"Built {drawable.kind.lower()} terrain: "
            f"{p.plane_width:.0f} x {p.plane_height:.0f}, {p.segments_x} x {p.segments_y} segments",
        )
        return {'FINISHED'}


class DITHERTERRAIN_OT_Reset(Operator):
    """Reseed both noise fields from the clock and regenerate"""
    bl_idname = "dither_terrain.reset"
    bl_label = "Reset"
    bl_options = {'REGISTER', 'UNDO'}

    def execute(self, context):
        session = session_for_scene(context.scene)
        session.params = params.from_settings(context.scene.dither_terrain)
        try:
            session.reset()
        except ValueError as e:
            self.report({'ERROR'}, str(e))
            return {'CANCELLED'}

        self.report({'INFO'}, f"Reseeded terrain (seed {session.open_simplex.seed})")
        return {'FINISHED'}


# ---------------------------------------------------------------------------
# Stage
# ---------------------------------------------------------------------------

class DITHERTERRAIN_OT_SetupStage(Operator):
    """Add a camera and point light framing the terrain"""
    bl_idname = "dither_terrain.setup_stage"
    bl_label = "Set Up Camera & Light"
    bl_options = {'REGISTER', 'UNDO'}

    def execute(self, context):
        session = session_for_scene(context.scene)
        cam, light = session.builder.setup_stage(context.scene)
        self.report({'INFO'}, f"Added {cam.name} and {light.name}")
        return {'FINISHED'}


# ---------------------------------------------------------------------------
# Cleanup utility
# ---------------------------------------------------------------------------

class DITHERTERRAIN_OT_Cleanup(Operator):
    """Remove the generated terrain and axes helper from the scene"""
    bl_idname = "dither_terrain.cleanup"
    bl_label = "Clean Up Terrain"
    bl_options = {'REGISTER', 'UNDO'}

    def execute(self, context):
        closed = close_session(context.scene)
        leftovers = TerrainMeshBuilder(context.scene.collection).clear()
        if not closed and not leftovers:
            self.report({'WARNING'}, "No terrain to clean up")
            return {'CANCELLED'}
        self.report({'INFO'}, "Removed terrain")
        return {'FINISHED'}


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

_classes = (
    DITHERTERRAIN_OT_Rebuild,
    DITHERTERRAIN_OT_Reset,
    DITHERTERRAIN_OT_SetupStage,
    DITHERTERRAIN_OT_Cleanup,
)


def register():
    for cls in _classes:
        bpy.utils.register_class(cls)
    bpy.app.handlers.load_pre.append(_forget_sessions)


def unregister():
    if _forget_sessions in bpy.app.handlers.load_pre:
        bpy.app.handlers.load_pre.remove(_forget_sessions)
    close_all_sessions()
    for cls in reversed(_classes):
        bpy.utils.unregister_class(cls)
