"""Tests against real Blender data; skipped where bpy is not importable."""

import dataclasses

import numpy as np
import pytest

bpy = pytest.importorskip("bpy")

from dither_terrain import mesh_gen  # noqa: E402
from dither_terrain.heightfield import build_grid  # noqa: E402
from dither_terrain.params import TerrainConfigError  # noqa: E402


def _terrain_objects():
    return [obj for obj in bpy.data.objects if obj.name.startswith("DT_")]


@pytest.fixture
def mesh_builder():
    builder = mesh_gen.TerrainMeshBuilder(bpy.context.scene.collection)
    yield builder
    mesh_gen.remove_objects_by_prefix("DT_")


def test_solid_rebuild_writes_heights_into_z(mesh_builder, generator, params):
    drawable = mesh_builder.rebuild(params, generator)

    assert drawable.kind == 'SOLID'
    assert [obj.name for obj in _terrain_objects()] == [mesh_gen.TERRAIN_NAME]
    expected = generator.generate(build_grid(params), params)
    z = [v.co.z for v in drawable.mesh.vertices]
    np.testing.assert_allclose(z, expected, rtol=1e-6, atol=1e-6)
    assert len(drawable.mesh.polygons) == params.segments_x * params.segments_y
    assert tuple(drawable.material.diffuse_color)[:3] == pytest.approx(params.color)


def test_wireframe_replaces_solid_and_back(mesh_builder, generator, params):
    solid = mesh_builder.rebuild(params, generator)
    solid_mesh_name = solid.mesh.name

    wire = mesh_builder.rebuild(dataclasses.replace(params, wireframe=True), generator, solid)
    assert wire.kind == 'WIREFRAME'
    assert [obj.name for obj in _terrain_objects()] == [mesh_gen.WIREFRAME_NAME]
    assert len(wire.mesh.polygons) == 0
    assert solid_mesh_name not in bpy.data.meshes

    solid = mesh_builder.rebuild(params, generator, wire)
    assert [obj.name for obj in _terrain_objects()] == [mesh_gen.TERRAIN_NAME]
    assert solid.kind == 'SOLID'


def test_failed_generation_leaves_scene_untouched(mesh_builder, generator, params):
    previous = mesh_builder.rebuild(params, generator)
    meshes_before = len(bpy.data.meshes)

    with pytest.raises(TerrainConfigError):
        mesh_builder.rebuild(dataclasses.replace(params, noise_kind="PERLIN"), generator, previous)

    assert [obj.name for obj in _terrain_objects()] == [mesh_gen.TERRAIN_NAME]
    assert len(bpy.data.meshes) == meshes_before


def test_release_frees_all_datablocks(mesh_builder, generator, params):
    drawable = mesh_builder.rebuild(params, generator)
    mesh_name, mat_name = drawable.mesh.name, drawable.material.name

    mesh_builder.release(drawable)
    mesh_builder.release(drawable)

    assert _terrain_objects() == []
    assert mesh_name not in bpy.data.meshes
    assert mat_name not in bpy.data.materials


def test_axes_helper(mesh_builder):
    axes = mesh_builder.show_axes(30.0)
    assert axes.empty_display_size == pytest.approx(30.0)
    mesh_builder.hide_axes(axes)
    assert mesh_gen.AXES_NAME not in bpy.data.objects


def test_stage_setup_replaces_previous_stage(mesh_builder):
    scene = bpy.context.scene
    mesh_builder.setup_stage(scene)
    cam, light = mesh_builder.setup_stage(scene)

    assert scene.camera == cam
    stage = mesh_gen.STAGE_PREFIX
    assert sorted(o.name for o in bpy.data.objects if o.name.startswith(stage)) == [cam.name, light.name]
    assert [c.name for c in bpy.data.cameras if c.name.startswith(stage)] == [cam.data.name]
    assert [li.name for li in bpy.data.lights if li.name.startswith(stage)] == [light.data.name]


def test_clear_removes_leftover_terrain_only(mesh_builder, generator, params):
    mesh_builder.rebuild(params, generator)
    mesh_builder.show_axes(10.0)
    keep = bpy.data.objects.new("Unrelated", None)
    mesh_builder.collection.objects.link(keep)

    assert mesh_builder.clear() == 2
    assert _terrain_objects() == []
    assert "Unrelated" in bpy.data.objects
    bpy.data.objects.remove(keep, do_unlink=True)


def test_builder_bound_to_its_scene(mesh_builder):
    assert mesh_builder.is_bound_to(bpy.context.scene)


def test_rebuild_without_handle_replaces_stray_terrain(mesh_builder, generator, params):
    mesh_builder.rebuild(params, generator)
    # A lost handle (e.g. after undo) leaves the old object in the scene
    drawable = mesh_builder.rebuild(params, generator, None)

    assert [obj.name for obj in _terrain_objects()] == [mesh_gen.TERRAIN_NAME]
    assert drawable.obj.name == mesh_gen.TERRAIN_NAME
