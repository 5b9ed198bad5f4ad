import numpy as np
import pytest

from dither_terrain.noise_fields import OpenSimplexField, WorleyField
from dither_terrain.params import TerrainConfigError, TerrainParameters


# ---------------------------------------------------------------------------
# Coordinate mapping
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("width, height", [(1.0, 1.0), (50.0, 50.0), (200.0, 3.0), (7.5, 120.0)])
def test_worley_maps_plane_center_to_unit_center(width, height):
    params = TerrainParameters(plane_width=width, plane_height=height)
    assert WorleyField(5, 1).map_coords(0.0, 0.0, params) == (0.5, 0.5)


def test_worley_maps_plane_corners_to_unit_square_corners():
    params = TerrainParameters(plane_width=40.0, plane_height=10.0)
    field = WorleyField(5, 1)
    assert field.map_coords(-20.0, -5.0, params) == (0.0, 0.0)
    assert field.map_coords(20.0, 5.0, params) == (1.0, 1.0)


def test_open_simplex_scales_each_axis_by_its_offset():
    params = TerrainParameters(offsets=(0.2, 0.5))
    u, v = OpenSimplexField(1).map_coords(10.0, -4.0, params)
    assert u == pytest.approx(2.0)
    assert v == pytest.approx(-2.0)


def test_open_simplex_zero_offsets_collapse_to_origin():
    params = TerrainParameters(offsets=(0.0, 0.0))
    u, v = OpenSimplexField(1).map_coords(13.0, -7.0, params)
    assert u == 0.0 and v == 0.0


# ---------------------------------------------------------------------------
# OpenSimplex
# ---------------------------------------------------------------------------

def test_open_simplex_is_deterministic_per_seed():
    params = TerrainParameters()
    a = OpenSimplexField(42)
    b = OpenSimplexField(42)
    for x, y in [(0.3, 1.7), (-12.0, 4.5), (25.0, -25.0)]:
        assert a.sample(x, y, params) == b.sample(x, y, params)


def test_open_simplex_normalized_range():
    params = TerrainParameters(offsets=(0.37, 0.21))
    field = OpenSimplexField(7)
    values = [field.sample(x, y, params) for x in range(-25, 26, 3) for y in range(-25, 26, 3)]
    assert min(values) >= 0.0
    assert max(values) <= 1.0
    assert max(values) > min(values)


def test_open_simplex_normalize():
    field = OpenSimplexField(0)
    assert field.normalize(-1.0) == 0.0
    assert field.normalize(0.0) == 0.5
    assert field.normalize(1.0) == 1.0


# ---------------------------------------------------------------------------
# Worley
# ---------------------------------------------------------------------------

def test_worley_points_are_seeded_in_unit_square():
    a = WorleyField(12, 99)
    b = WorleyField(12, 99)
    assert a.points.shape == (12, 2)
    np.testing.assert_array_equal(a.points, b.points)
    assert np.all((a.points >= 0.0) & (a.points < 1.0))


def test_worley_distance_is_zero_on_a_feature_point():
    field = WorleyField(6, 3)
    u, v = field.points[2]
    assert field.euclidean(u, v) == 0.0
    assert field.manhattan(u, v) == 0.0


def test_worley_manhattan_never_below_euclidean():
    field = WorleyField(10, 5)
    for u in np.linspace(0.0, 1.0, 9):
        for v in np.linspace(0.0, 1.0, 9):
            assert field.manhattan(u, v) >= field.euclidean(u, v) - 1e-12


def test_worley_second_nearest_is_farther():
    field = WorleyField(10, 5)
    assert field.euclidean(0.4, 0.6, 2) >= field.euclidean(0.4, 0.6, 1)


def test_worley_raw_follows_distance_metric():
    field = WorleyField(4, 11)
    euclid = TerrainParameters(distance_metric="EUCLIDEAN")
    taxi = TerrainParameters(distance_metric="MANHATTAN")
    assert field.raw(0.1, 0.9, euclid) == field.euclidean(0.1, 0.9)
    assert field.raw(0.1, 0.9, taxi) == field.manhattan(0.1, 0.9)
    assert field.normalize(0.3) == 0.3


def test_worley_unknown_metric_fails():
    field = WorleyField(4, 11)
    with pytest.raises(TerrainConfigError, match="CHEBYSHEV"):
        field.raw(0.5, 0.5, TerrainParameters(distance_metric="CHEBYSHEV"))


def test_worley_single_point_distance():
    field = WorleyField(1, 0)
    px, py = field.points[0]
    assert field.euclidean(0.0, 0.0) == pytest.approx(np.hypot(px, py))
    assert field.manhattan(0.0, 0.0) == pytest.approx(px + py)


def test_render_image_normalized():
    img = WorleyField(10, 8).render_image(16)
    assert img.shape == (16, 16)
    assert img.min() == pytest.approx(0.0)
    assert img.max() == pytest.approx(1.0)


def test_render_image_raw_matches_euclidean():
    field = WorleyField(4, 2)
    img = field.render_image(8, normalize=False)
    assert img[3, 5] == pytest.approx(field.euclidean(5 / 8, 3 / 8))
