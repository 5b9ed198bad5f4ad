"""
Dither Terrain - Blender Extension
Generate a noise-displaced terrain grid with stepped ("dithered") heights.

Supports OpenSimplex and Worley (Euclidean or Manhattan) height fields,
live-adjustable grid resolution and size, and solid or wireframe display.

The height-field core (params, dither, noise_fields, heightfield, session)
imports no Blender module; the Blender modules are loaded on register().
"""


def register():
    from . import properties
    from . import operators
    from . import ui

    properties.register()
    operators.register()
    ui.register()


def unregister():
    from . import properties
    from . import operators
    from . import ui

    ui.unregister()
    operators.unregister()
    properties.unregister()
