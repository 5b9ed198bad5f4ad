"""
Terrain parameter snapshot for Dither Terrain.

The Blender settings panel owns the live values; the core only ever sees an
immutable TerrainParameters snapshot built from them. Ranges are enforced by
the panel (see properties.py), not here.
"""

from dataclasses import dataclass, fields


# ---------------------------------------------------------------------------
# Enums (Blender EnumProperty item tuples)
# ---------------------------------------------------------------------------

NOISE_KINDS = [
    ("OPEN_SIMPLEX", "OpenSimplex", "Smooth continuous gradient noise"),
    ("WORLEY", "Worley", "Cellular distance to the nearest feature point"),
]

DISTANCE_METRICS = [
    ("EUCLIDEAN", "Euclidean", "Straight-line distance to the nearest point"),
    ("MANHATTAN", "Manhattan", "Axis-aligned (taxicab) distance to the nearest point"),
]


class TerrainConfigError(ValueError):
    """Raised for settings the generator cannot act on."""


@dataclass(frozen=True)
class TerrainParameters:
    """Everything one regeneration cycle reads."""

    noise_kind: str = "OPEN_SIMPLEX"
    max_height: float = 6.0
    offsets: tuple = (0.2, 0.2)
    worley_points: int = 10
    distance_metric: str = "EUCLIDEAN"
    segments_x: int = 100
    segments_y: int = 100
    dither_levels: int = 1
    plane_width: float = 50.0
    plane_height: float = 50.0
    color: tuple = (0.0, 1.0, 0.0)
    wireframe: bool = False
    show_axes: bool = False

    @property
    def axes_size(self):
        """Axes helper size, just past the half-extent of the plane."""
        return max(self.plane_width, self.plane_height) / 2.0 + 5.0


DEFAULTS = TerrainParameters()

FIELD_NAMES = tuple(f.name for f in fields(TerrainParameters))

# Fields Blender hands over as bpy_prop_array; stored as plain tuples.
_VECTOR_FIELDS = ("offsets", "color")


def coerce(name, value):
    """Convert a raw settings value into the form TerrainParameters stores."""
    if name not in FIELD_NAMES:
        raise TerrainConfigError(f"Unknown terrain parameter: {name}")
    if name in _VECTOR_FIELDS:
        return tuple(float(v) for v in value)
    return value


def from_settings(settings):
    """Snapshot any object carrying the TerrainParameters attribute names.

    Args:
        settings: DITHERTERRAIN_PG_Settings, or anything duck-typed like it

    Returns:
        TerrainParameters
    """
    return TerrainParameters(**{
        name: coerce(name, getattr(settings, name)) for name in FIELD_NAMES
    })
