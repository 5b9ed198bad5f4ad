"""
Terrain session: the state one Blender scene's terrain lives in.

A session owns both noise fields, the current parameter snapshot and the
handle of the drawable currently in the scene. Settings changes come in as
explicit on_parameter_changed() commands; every scene mutation goes through
the mesh builder handed in at construction.
"""

import dataclasses
import logging
import time

from .heightfield import HeightFieldGenerator
from .noise_fields import OpenSimplexField, WorleyField
from .params import TerrainParameters, coerce

log = logging.getLogger(__name__)


def clock_seed():
    """Milliseconds since the epoch, the seed a reset uses."""
    return int(time.time() * 1000)


class TerrainSession:
    """
    Regeneration state for one terrain.

    The builder must provide:
        rebuild(params, generator, previous) -> drawable
        release(drawable)
        show_axes(size) -> handle
        hide_axes(handle)
    """

    def __init__(self, builder, params=None, seed=None, seed_source=clock_seed):
        self.builder = builder
        self.params = params if params is not None else TerrainParameters()
        self.seed_source = seed_source
        self.drawable = None
        self.axes = None
        self._rebuilding = False
        self._pending = False

        seed = self.seed_source() if seed is None else seed
        self.open_simplex = OpenSimplexField(seed)
        self.worley = WorleyField(self.params.worley_points, seed)

    @property
    def generator(self):
        return HeightFieldGenerator({
            self.open_simplex.kind: self.open_simplex,
            self.worley.kind: self.worley,
        })

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def on_parameter_changed(self, field, value):
        """Apply one settings change and react to it.

        worley_points reseeds the Worley field before rebuilding, show_axes
        only toggles the axes helper, anything else rebuilds once.
        """
        value = coerce(field, value)
        self.params = dataclasses.replace(self.params, **{field: value})

        if field == "show_axes":
            self._sync_axes()
            return self.drawable

        if field == "worley_points":
            self.reseed_worley()
        return self.rebuild()

    def reset(self, seed=None):
        """Reseed both fields (clock seed by default) and rebuild."""
        seed = self.seed_source() if seed is None else seed
        log.info("Reseeding terrain fields with seed %d", seed)
        self.open_simplex = OpenSimplexField(seed)
        self.worley = WorleyField(self.params.worley_points, seed)
        return self.rebuild()

    def reseed_worley(self, seed=None):
        seed = self.seed_source() if seed is None else seed
        log.debug("Reseeding Worley field: %d points, seed %d",
                  self.params.worley_points, seed)
        self.worley = WorleyField(self.params.worley_points, seed)

    def rebuild(self):
        """Replace the current drawable with one built from self.params.

        A rebuild requested while one runs is queued (depth one) and run
        right after, never interleaved.
        """
        if self._rebuilding:
            self._pending = True
            return self.drawable

        self._rebuilding = True
        try:
            while True:
                self._pending = False
                self.drawable = self.builder.rebuild(
                    self.params, self.generator, self.drawable
                )
                if not self._pending:
                    break
        finally:
            self._rebuilding = False

        log.debug(
            "Rebuilt %s terrain %dx%d (%s, %d levels)",
            "wireframe" if self.params.wireframe else "solid",
            self.params.segments_x, self.params.segments_y,
            self.params.noise_kind, self.params.dither_levels,
        )
        return self.drawable

    def close(self):
        """Release everything this session put into the scene."""
        if self.axes is not None:
            self.builder.hide_axes(self.axes)
            self.axes = None
        if self.drawable is not None:
            self.builder.release(self.drawable)
            self.drawable = None

    def _sync_axes(self):
        if self.axes is not None:
            self.builder.hide_axes(self.axes)
            self.axes = None
        if self.params.show_axes:
            self.axes = self.builder.show_axes(self.params.axes_size)
