"""
Noise fields for Dither Terrain.

Each field maps a planar vertex position into its own sampling space, reads a
raw value and normalizes it to 0..1:

- OpenSimplexField: anisotropic scale of the raw position, raw output -1..1
- WorleyField: position re-projected onto the unit square, raw output is the
  distance to the nearest feature point (already 0..1-ish, used as is)
"""

import numpy as np
from opensimplex import OpenSimplex

from .params import TerrainConfigError


class NoiseField:
    """Common shape of a noise family."""

    kind = None

    def map_coords(self, x, y, params):
        raise NotImplementedError

    def raw(self, u, v, params):
        raise NotImplementedError

    def normalize(self, raw):
        raise NotImplementedError

    def sample(self, x, y, params):
        """Normalized 0..1 value for the vertex at planar (x, y)."""
        u, v = self.map_coords(x, y, params)
        return self.normalize(self.raw(u, v, params))


# ---------------------------------------------------------------------------
# OpenSimplex
# ---------------------------------------------------------------------------

class OpenSimplexField(NoiseField):
    """Seeded 2D OpenSimplex noise."""

    kind = "OPEN_SIMPLEX"

    def __init__(self, seed):
        self.seed = seed
        self._noise = OpenSimplex(seed=seed)

    def map_coords(self, x, y, params):
        xoff, yoff = params.offsets
        return x * xoff, y * yoff

    def raw(self, u, v, params):
        return self._noise.noise2(u, v)

    def normalize(self, raw):
        return (raw + 1.0) / 2.0


# ---------------------------------------------------------------------------
# Worley
# ---------------------------------------------------------------------------

class WorleyField(NoiseField):
    """Nearest-point distance field over a seeded point set in the unit square."""

    kind = "WORLEY"

    def __init__(self, num_points, seed):
        self.seed = seed
        rng = np.random.default_rng(seed)
        self.points = rng.random((num_points, 2))

    def map_coords(self, x, y, params):
        # plane_width/plane_height > 0 is the caller's job
        w = params.plane_width
        h = params.plane_height
        return (x + w / 2.0) / w, (y + h / 2.0) / h

    def raw(self, u, v, params):
        metric = params.distance_metric
        if metric == "EUCLIDEAN":
            return self.euclidean(u, v)
        if metric == "MANHATTAN":
            return self.manhattan(u, v)
        raise TerrainConfigError(f"Unknown distance metric: {metric}")

    def normalize(self, raw):
        return raw

    def euclidean(self, u, v, k=1):
        """Distance from (u, v) to its k-th nearest point."""
        d = np.hypot(self.points[:, 0] - u, self.points[:, 1] - v)
        return float(np.partition(d, k - 1)[k - 1])

    def manhattan(self, u, v, k=1):
        """Taxicab distance from (u, v) to its k-th nearest point."""
        d = np.abs(self.points[:, 0] - u) + np.abs(self.points[:, 1] - v)
        return float(np.partition(d, k - 1)[k - 1])

    def render_image(self, size, normalize=True):
        """Euclidean distance image over the unit square.

        Args:
            size: Pixels along each side
            normalize: Min-max scale the result to 0..1

        Returns:
            (size, size) float array, row index = v, column index = u
        """
        coords = np.arange(size) / size
        uu, vv = np.meshgrid(coords, coords)
        dx = uu[..., None] - self.points[:, 0]
        dy = vv[..., None] - self.points[:, 1]
        img = np.sqrt(dx * dx + dy * dy).min(axis=-1)
        if normalize:
            lo, hi = img.min(), img.max()
            img = (img - lo) / max(hi - lo, 1e-12)
        return img
