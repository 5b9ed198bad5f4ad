"""
Height quantization ("dithering") for Dither Terrain.
"""

import math


def dither(c, levels):
    """Snap c in [0, 1] to the nearest of `levels` evenly spaced steps.

    One level means smooth mode and returns c untouched. Otherwise the two
    neighbouring steps are compared and an exact tie goes to the upper one,
    so dither(0.25, 3) is 0.5, not 0.0. The upper level is c0 + step as a
    float sum and may sit an ulp off the exact grid point (0.9999999999999999
    for dither(0.9167, 7)).

    Args:
        c: Normalized height, expected in 0..1 (not checked)
        levels: Number of steps including both 0 and 1

    Returns:
        Quantized value in 0..1
    """
    if levels == 1:
        return c
    step = 1.0 / (levels - 1)
    c0 = step * math.floor(c * (levels - 1))
    c1 = c0 + step
    if (c1 - c) <= (c - c0):
        return c1
    return c0
