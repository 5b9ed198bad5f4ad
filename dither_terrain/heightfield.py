"""
Planar grid layout and per-vertex height generation for Dither Terrain.

Pipeline per vertex:
    planar (x, y) -> field coordinates -> raw noise -> 0..1 -> dither -> * max height
"""

from dataclasses import dataclass

import numpy as np

from .dither import dither
from .params import TerrainConfigError


# ---------------------------------------------------------------------------
# Grid
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Grid:
    """Row-major vertex layout plus quad topology of a subdivided plane."""

    segments_x: int
    segments_y: int
    vertices: tuple
    faces: tuple

    @property
    def shape(self):
        """(rows, columns) of the vertex lattice."""
        return self.segments_y + 1, self.segments_x + 1

    def edges(self):
        """Unique undirected edges of all quads, in first-seen order."""
        seen = set()
        out = []
        for face in self.faces:
            for i in range(4):
                a, b = face[i], face[(i + 1) % 4]
                key = (a, b) if a < b else (b, a)
                if key not in seen:
                    seen.add(key)
                    out.append(key)
        return out


def build_grid(params):
    """
    Lay out a plane of segments_x by segments_y quads centered at the origin.

    Rows run from +plane_height/2 down to -plane_height/2, columns from
    -plane_width/2 to +plane_width/2.

    Args:
        params: TerrainParameters

    Returns:
        Grid
    """
    gx = params.segments_x
    gy = params.segments_y
    half_w = params.plane_width / 2.0
    half_h = params.plane_height / 2.0
    seg_w = params.plane_width / gx
    seg_h = params.plane_height / gy

    vertices = []
    for iy in range(gy + 1):
        y = half_h - iy * seg_h
        for ix in range(gx + 1):
            vertices.append((ix * seg_w - half_w, y))

    # Counter-clockwise seen from +Z so normals face up
    faces = []
    row = gx + 1
    for iy in range(gy):
        for ix in range(gx):
            a = iy * row + ix
            b = a + row
            faces.append((a, b, b + 1, a + 1))

    return Grid(gx, gy, tuple(vertices), tuple(faces))


# ---------------------------------------------------------------------------
# Height field
# ---------------------------------------------------------------------------

class HeightFieldGenerator:
    """Turns a grid into per-vertex heights using the active noise field."""

    def __init__(self, fields):
        """
        Args:
            fields: Mapping of noise kind identifier -> NoiseField
        """
        self.fields = dict(fields)

    def field_for(self, kind):
        field = self.fields.get(kind)
        if field is None:
            raise TerrainConfigError(f"Unknown noise kind: {kind}")
        return field

    def height_at(self, field, x, y, params):
        return params.max_height * dither(field.sample(x, y, params), params.dither_levels)

    def generate(self, grid, params):
        """
        Compute the height of every vertex of grid.

        Args:
            grid: Grid from build_grid()
            params: TerrainParameters

        Returns:
            float64 array, one height per grid vertex in vertex order
        """
        field = self.field_for(params.noise_kind)
        heights = np.empty(len(grid.vertices), dtype=np.float64)
        for i, (x, y) in enumerate(grid.vertices):
            heights[i] = self.height_at(field, x, y, params)
        return heights
