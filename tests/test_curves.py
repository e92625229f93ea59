"""Tests for the centripetal Catmull-Rom sampling and arc-length polyline."""

import numpy as np
import pytest

from lane_balance.geometry.curves import (
    SAMPLES_PER_SPAN,
    Polyline,
    bezier_controls,
    path_length,
    sample_catmull_rom,
)


def test_sample_shape_and_interpolation():
    points = [(0.0, 0.0), (10.0, 5.0), (20.0, -5.0), (30.0, 0.0)]
    samples = sample_catmull_rom(points)
    assert samples.shape == (3 * SAMPLES_PER_SPAN + 1, 2)
    # The curve passes through every input point.
    for i, point in enumerate(points):
        np.testing.assert_allclose(samples[i * SAMPLES_PER_SPAN], point, atol=1e-12)


def test_collinear_points_give_straight_segment():
    samples = sample_catmull_rom([(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)])
    assert np.all(samples[:, 1] == 0.0)
    assert np.all(np.diff(samples[:, 0]) >= 0)
    assert path_length([(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)]) == pytest.approx(2.0)


def test_end_controls_coincide_with_end_points():
    points = [(0.0, 0.0), (10.0, 10.0), (20.0, 0.0)]
    c1, c2 = bezier_controls(points)
    np.testing.assert_array_equal(c1[0], points[0])
    np.testing.assert_array_equal(c2[-1], points[-1])


def test_two_points():
    c1, c2 = bezier_controls([(0.0, 0.0), (3.0, 4.0)])
    assert c1.shape == c2.shape == (1, 2)
    assert path_length([(0.0, 0.0), (3.0, 4.0)]) == pytest.approx(5.0)


def test_invalid_points():
    with pytest.raises(ValueError):
        sample_catmull_rom([(0.0, 0.0)])
    with pytest.raises(ValueError):
        sample_catmull_rom([(0.0, 0.0, 0.0), (1.0, 1.0, 1.0)])
    with pytest.raises(ValueError):
        sample_catmull_rom([(0.0, 0.0), (1.0, 1.0)], samples_per_span=0)


def test_polyline_point_at():
    line = Polyline(np.array([[0.0, 0.0], [3.0, 4.0]]))
    assert line.length == 5.0
    assert line.point_at(2.5) == pytest.approx((1.5, 2.0))
    assert line.point_at(-1.0) == (0.0, 0.0)
    assert line.point_at(99.0) == (3.0, 4.0)
    np.testing.assert_allclose(
        line.points_at(np.array([0.0, 2.5, 5.0])),
        [[0.0, 0.0], [1.5, 2.0], [3.0, 4.0]],
    )


def test_curve_is_longer_than_chord():
    points = [(0.0, 0.0), (10.0, 10.0), (20.0, 0.0), (30.0, 10.0)]
    chord = sum(np.hypot(*np.subtract(b, a)) for a, b in zip(points, points[1:]))
    assert path_length(points) >= chord - 1e-9
