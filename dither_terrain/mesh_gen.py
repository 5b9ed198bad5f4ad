"""
Blender mesh building for Dither Terrain.

Turns generated heights into scene objects and owns their lifecycle:
- a solid, smooth-shaded quad mesh with its own material, or
- an edges-only wireframe object drawn in front of the scene

Exactly one of the two is linked at a time. Blender is Z-up, so the planar
grid lies in XY and heights go straight into Z; no extra rotation is needed
to put the terrain on the ground.
"""

import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass

import bpy
from mathutils import Vector

from .heightfield import build_grid

log = logging.getLogger(__name__)


TERRAIN_NAME = "DT_Terrain"
WIREFRAME_NAME = "DT_Wireframe"
AXES_NAME = "DT_Axes"
STAGE_PREFIX = "DT_Stage"

WIREFRAME_ALPHA = 0.25

# Original viewer layout (Y-up) converted to Blender's Z-up: (x, y, z) -> (x, -z, y)
CAMERA_LOCATION = (0.0, -40.0, 25.0)
CAMERA_FOV_DEG = 70.0
CAMERA_CLIP = (1.0, 1000.0)
LIGHT_LOCATION = (0.0, -30.0, 40.0)
LIGHT_POWER_W = 50000.0
LIGHT_RANGE = 200.0


@dataclass
class TerrainDrawable:
    """Handle to the terrain datablocks currently in the scene."""

    kind: str  # 'SOLID' or 'WIREFRAME'
    obj: object
    mesh: object
    material: object = None


# ---------------------------------------------------------------------------
# Datablock helpers
# ---------------------------------------------------------------------------

def _remove_datablock(block):
    """Remove an object, mesh, material, camera or light from bpy.data."""
    if block is None:
        return
    try:
        if isinstance(block, bpy.types.Object):
            bpy.data.objects.remove(block, do_unlink=True)
        elif isinstance(block, bpy.types.Mesh):
            bpy.data.meshes.remove(block)
        elif isinstance(block, bpy.types.Material):
            bpy.data.materials.remove(block)
        elif isinstance(block, bpy.types.Camera):
            bpy.data.cameras.remove(block)
        elif isinstance(block, bpy.types.Light):
            bpy.data.lights.remove(block)
    except ReferenceError:
        # Already removed by the user or by undo
        pass


@contextmanager
def _scoped_datablocks():
    """Collect datablocks created inside the block; remove them all on error."""
    created = []
    try:
        yield created
    except BaseException:
        for block in reversed(created):
            _remove_datablock(block)
        raise


def remove_objects_by_prefix(prefix, objects=None):
    """
    Remove all objects whose name starts with prefix (a string or a tuple of
    strings), plus the object data
    nothing else uses any more. Returns count removed.

    `objects` narrows the search (e.g. one collection's objects); the default
    is every object in bpy.data.
    """
    if objects is None:
        objects = bpy.data.objects
    to_remove = [obj for obj in objects if obj.name.startswith(prefix)]
    for obj in to_remove:
        data = obj.data
        _remove_datablock(obj)
        if data is not None and data.users == 0:
            _remove_datablock(data)
    return len(to_remove)


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class TerrainMeshBuilder:
    """Builds terrain objects into one collection."""

    def __init__(self, collection):
        self.collection = collection

    def is_bound_to(self, scene):
        """True while our collection is still alive and is scene's master collection."""
        try:
            self.collection.name
        except ReferenceError:
            # Freed by loading a file or by undo
            return False
        return self.collection == scene.collection

    def clear(self):
        """Remove terrain and axes objects left in the collection by an earlier session."""
        removed = remove_objects_by_prefix(
            (TERRAIN_NAME, WIREFRAME_NAME, AXES_NAME), list(self.collection.objects)
        )
        if removed:
            log.info("Removed %d leftover terrain object(s) from %s", removed, self.collection.name)
        return removed

    def rebuild(self, params, generator, previous=None):
        """
        Generate a fresh terrain and swap it in for `previous`.

        Heights are computed before any Blender data is touched, so a
        generation error leaves the scene as it was. Datablocks created for
        the new drawable are removed again if building it fails.

        Args:
            params: TerrainParameters
            generator: HeightFieldGenerator
            previous: TerrainDrawable currently in the scene, or None

        Returns:
            TerrainDrawable now in the scene
        """
        grid = build_grid(params)
        heights = generator.generate(grid, params)
        verts = [(x, y, float(z)) for (x, y), z in zip(grid.vertices, heights)]

        with _scoped_datablocks() as created:
            if params.wireframe:
                drawable = self._build_wireframe(grid, verts, created)
            else:
                drawable = self._build_solid(grid, verts, params.color, created)
            self.collection.objects.link(drawable.obj)

        self.release(previous)
        # Copies an undo step brought back while `previous` went stale
        remove_objects_by_prefix(
            (TERRAIN_NAME, WIREFRAME_NAME),
            [obj for obj in self.collection.objects if obj != drawable.obj],
        )
        drawable.obj.name = TERRAIN_NAME if drawable.kind == 'SOLID' else WIREFRAME_NAME
        return drawable

    def _build_solid(self, grid, verts, color, created):
        mesh = bpy.data.meshes.new(f"{TERRAIN_NAME}_mesh")
        created.append(mesh)
        mesh.from_pydata(verts, [], list(grid.faces))
        # update() recalculates edges plus face and vertex normals
        mesh.update(calc_edges=True)
        mesh.shade_smooth()

        mat = bpy.data.materials.new(name=f"{TERRAIN_NAME}_material")
        created.append(mat)
        rgba = (*color, 1.0)
        mat.diffuse_color = rgba
        mat.use_backface_culling = False
        mat.use_nodes = True
        bsdf = mat.node_tree.nodes.get("Principled BSDF")
        if bsdf:
            bsdf.inputs["Base Color"].default_value = rgba
        mesh.materials.append(mat)

        obj = bpy.data.objects.new(TERRAIN_NAME, mesh)
        created.append(obj)
        return TerrainDrawable('SOLID', obj, mesh, mat)

    def _build_wireframe(self, grid, verts, created):
        mesh = bpy.data.meshes.new(f"{WIREFRAME_NAME}_mesh")
        created.append(mesh)
        mesh.from_pydata(verts, grid.edges(), [])
        mesh.update()

        obj = bpy.data.objects.new(WIREFRAME_NAME, mesh)
        created.append(obj)
        obj.display_type = 'WIRE'
        obj.show_in_front = True
        obj.color = (1.0, 1.0, 1.0, WIREFRAME_ALPHA)
        return TerrainDrawable('WIREFRAME', obj, mesh)

    def release(self, drawable):
        """Unlink and free every datablock of drawable."""
        if drawable is None:
            return
        _remove_datablock(drawable.obj)
        _remove_datablock(drawable.material)
        _remove_datablock(drawable.mesh)

    # -----------------------------------------------------------------------
    # Overlays
    # -----------------------------------------------------------------------

    def show_axes(self, size):
        """Add an arrows empty of the given size at the origin."""
        empty = bpy.data.objects.new(AXES_NAME, None)
        empty.empty_display_type = 'ARROWS'
        empty.empty_display_size = size
        self.collection.objects.link(empty)
        return empty

    def hide_axes(self, axes):
        _remove_datablock(axes)

    def setup_stage(self, scene):
        """
        Add the camera and point light the terrain is meant to be viewed with.

        Replaces any stage added before. Returns (camera_obj, light_obj).
        """
        remove_objects_by_prefix(STAGE_PREFIX)

        cam_data = bpy.data.cameras.new(f"{STAGE_PREFIX}_Camera")
        cam_data.sensor_fit = 'VERTICAL'
        cam_data.angle_y = math.radians(CAMERA_FOV_DEG)
        cam_data.clip_start, cam_data.clip_end = CAMERA_CLIP
        cam = bpy.data.objects.new(f"{STAGE_PREFIX}_Camera", cam_data)
        cam.location = CAMERA_LOCATION
        direction = Vector((0.0, 0.0, 0.0)) - cam.location
        cam.rotation_euler = direction.to_track_quat('-Z', 'Y').to_euler()
        self.collection.objects.link(cam)
        scene.camera = cam

        light_data = bpy.data.lights.new(f"{STAGE_PREFIX}_Light", type='POINT')
        light_data.energy = LIGHT_POWER_W
        light_data.use_shadow = True
        light_data.shadow_soft_size = 0.25
        light_data.use_custom_distance = True
        light_data.cutoff_distance = LIGHT_RANGE
        light = bpy.data.objects.new(f"{STAGE_PREFIX}_Light", light_data)
        light.location = LIGHT_LOCATION
        self.collection.objects.link(light)

        log.info("Stage set up: camera at %s, light at %s", CAMERA_LOCATION, LIGHT_LOCATION)
        return cam, light
