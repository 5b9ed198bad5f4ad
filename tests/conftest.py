import itertools

import pytest

from dither_terrain.heightfield import HeightFieldGenerator, build_grid
from dither_terrain.noise_fields import OpenSimplexField, WorleyField
from dither_terrain.params import TerrainParameters
from dither_terrain.session import TerrainSession


class FakeDrawable:
    def __init__(self, kind, heights):
        self.kind = kind
        self.heights = heights
        self.released = False


class FakeBuilder:
    """In-memory stand-in for TerrainMeshBuilder; `scene` lists linked drawables."""

    def __init__(self):
        self.scene = []
        self.axes = []
        self.calls = 0

    def rebuild(self, params, generator, previous=None):
        self.calls += 1
        heights = generator.generate(build_grid(params), params)
        drawable = FakeDrawable('WIREFRAME' if params.wireframe else 'SOLID', heights)
        self.scene.append(drawable)
        self.release(previous)
        return drawable

    def release(self, drawable):
        if drawable is None:
            return
        if any(d is drawable for d in self.scene):
            self.scene = [d for d in self.scene if d is not drawable]
        drawable.released = True

    def show_axes(self, size):
        handle = ("axes", size)
        self.axes.append(handle)
        return handle

    def hide_axes(self, handle):
        self.axes.remove(handle)


@pytest.fixture
def params():
    return TerrainParameters(segments_x=6, segments_y=4, plane_width=30.0, plane_height=20.0)


@pytest.fixture
def generator():
    return HeightFieldGenerator({
        "OPEN_SIMPLEX": OpenSimplexField(1234),
        "WORLEY": WorleyField(10, 1234),
    })


@pytest.fixture
def builder():
    return FakeBuilder()


@pytest.fixture
def session(builder, params):
    seeds = itertools.count(100)
    return TerrainSession(builder, params=params, seed=1234, seed_source=lambda: next(seeds))
