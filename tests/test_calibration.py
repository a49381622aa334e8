"""
Tests for screenfit.calibration (similarity transform estimation).
"""

import math

import numpy as np
import pytest

from screenfit.calibration import (
    build_calibration_system,
    calibration_residuals,
    estimate_transform,
)
from screenfit.errors import DegenerateCalibrationError
from screenfit.regression import LineSegment
from screenfit.types import Point, Transform, transform_point


def assert_transform_close(actual: Transform, expected: Transform, tol: float = 1e-9):
    assert actual.alpha == pytest.approx(expected.alpha, abs=tol)
    assert actual.beta == pytest.approx(expected.beta, abs=tol)
    assert actual.dx == pytest.approx(expected.dx, abs=tol)
    assert actual.dy == pytest.approx(expected.dy, abs=tol)


class TestBuildCalibrationSystem:
    def test_shape_and_rows(self):
        s1, w1 = Point(1.0, 2.0), Point(10.0, 20.0)
        s2, w2 = Point(3.0, 4.0), Point(30.0, 40.0)
        a, b = build_calibration_system((s1, w1), (s2, w2))

        assert a.shape == (4, 4)
        assert b.shape == (4,)
        np.testing.assert_array_equal(a[0], [1.0, 2.0, 1.0, 0.0])
        np.testing.assert_array_equal(a[1], [-2.0, 1.0, 0.0, 1.0])
        np.testing.assert_array_equal(a[2], [3.0, 4.0, 1.0, 0.0])
        np.testing.assert_array_equal(a[3], [-4.0, 3.0, 0.0, 1.0])
        np.testing.assert_array_equal(b, [10.0, 20.0, 30.0, 40.0])

    def test_consistent_with_transform(self, sample_transform):
        s1, s2 = Point(5.0, -2.0), Point(40.0, 17.0)
        pair1 = (s1, transform_point(s1, sample_transform))
        pair2 = (s2, transform_point(s2, sample_transform))
        a, b = build_calibration_system(pair1, pair2)

        t = sample_transform
        params = np.array([t.alpha, t.beta, t.dx, t.dy])
        np.testing.assert_allclose(a @ params, b)


class TestEstimateTransform:
    def test_round_trip(self, sample_transform):
        s1, s2 = Point(0.0, 0.0), Point(100.0, 50.0)
        w1 = transform_point(s1, sample_transform)
        w2 = transform_point(s2, sample_transform)

        estimated = estimate_transform((s1, w1), (s2, w2))
        assert_transform_close(estimated, sample_transform)

    def test_round_trip_screen_pixels(self):
        # 180 degree rotation with scale 0.1
        t = Transform(alpha=-0.1, beta=0.0, dx=50.0, dy=30.0)
        s1, s2 = Point(120.0, 800.0), Point(1500.0, 90.0)
        estimated = estimate_transform(
            (s1, transform_point(s1, t)),
            (s2, transform_point(s2, t)),
        )
        assert_transform_close(estimated, t)
        assert estimated.scale == pytest.approx(0.1)
        assert abs(estimated.rotation) == pytest.approx(math.pi)

    def test_identity_from_mirrored_screen(self):
        s1, s2 = Point(10.0, 10.0), Point(20.0, 35.0)
        estimated = estimate_transform(
            (s1, Point(s1.x, -s1.y)),
            (s2, Point(s2.x, -s2.y)),
        )
        assert_transform_close(estimated, Transform.identity())

    def test_pure_scale(self):
        # Two points 100 px apart measured as 1 unit apart
        estimated = estimate_transform(
            (Point(0.0, 0.0), Point(0.0, 0.0)),
            (Point(100.0, 0.0), Point(1.0, 0.0)),
        )
        assert estimated.scale == pytest.approx(0.01)
        assert estimated.rotation == pytest.approx(0.0)

    def test_graph_axes(self):
        # Screen y grows downwards: origin at the bottom left, (10, 10) up
        # and to the right
        estimated = estimate_transform(
            (Point(100.0, 500.0), Point(0.0, 0.0)),
            (Point(500.0, 100.0), Point(10.0, 10.0)),
        )
        assert estimated.rotation == pytest.approx(0.0, abs=1e-12)
        assert estimated.scale == pytest.approx(0.025)

        x_tick = transform_point(Point(500.0, 500.0), estimated)
        assert x_tick.x == pytest.approx(10.0)
        assert x_tick.y == pytest.approx(0.0, abs=1e-9)

        y_tick = transform_point(Point(100.0, 100.0), estimated)
        assert y_tick.x == pytest.approx(0.0, abs=1e-9)
        assert y_tick.y == pytest.approx(10.0)

    def test_graph_axes_lines(self):
        estimated = estimate_transform(
            (Point(100.0, 500.0), Point(0.0, 0.0)),
            (Point(500.0, 100.0), Point(10.0, 10.0)),
        )
        x_axis = LineSegment([Point(100.0, 500.0), Point(300.0, 500.0), Point(500.0, 500.0)])
        fit = x_axis.refit(estimated)
        assert not fit.is_degenerate
        assert fit.slope == pytest.approx(0.0, abs=1e-5)
        assert fit.intercept == pytest.approx(0.0, abs=1e-5)

        diagonal = LineSegment([Point(100.0, 500.0), Point(300.0, 300.0), Point(500.0, 100.0)])
        fit = diagonal.refit(estimated)
        assert fit.slope == pytest.approx(1.0, rel=1e-5)

    def test_identical_screen_points_rejected(self):
        s = Point(42.0, 17.0)
        with pytest.raises(DegenerateCalibrationError):
            estimate_transform((s, Point(0.0, 0.0)), (s, Point(1.0, 1.0)))

    def test_identical_world_points_rejected(self):
        w = Point(1.0, 1.0)
        with pytest.raises(DegenerateCalibrationError):
            estimate_transform((Point(0.0, 0.0), w), (Point(10.0, 0.0), w))

    def test_returns_new_transform(self, sample_transform):
        s1, s2 = Point(1.0, 1.0), Point(2.0, 3.0)
        estimated = estimate_transform(
            (s1, transform_point(s1, sample_transform)),
            (s2, transform_point(s2, sample_transform)),
        )
        assert isinstance(estimated, Transform)
        assert isinstance(estimated.alpha, float)


class TestCalibrationResiduals:
    def test_zero_for_exact_fit(self, sample_transform):
        pairs = [
            (Point(0.0, 0.0), transform_point(Point(0.0, 0.0), sample_transform)),
            (Point(3.0, 4.0), transform_point(Point(3.0, 4.0), sample_transform)),
        ]
        residuals = calibration_residuals(pairs, sample_transform)
        assert residuals == pytest.approx([0.0, 0.0], abs=1e-12)

    def test_distance(self):
        pairs = [(Point(0.0, 0.0), Point(3.0, 4.0))]
        assert calibration_residuals(pairs, Transform.identity()) == [5.0]
