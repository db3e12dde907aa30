"""Unit tests for the fit error evaluators.

Tests the functions in segment_lib.fitting:
    - fit_line, line_fit_error: Least-squares line
    - fit_curve, curve_fit_error: Least-squares polynomial
    - fit_arc, arc_fit_error: Three-point circle
    - segment_fit_error, total_fit_error: Per-segment objective
    - polyline_mse, rank_results: Whole-segmentation scoring
"""

import math
import unittest

import numpy as np

from segment_lib.domain.geometry import Point, Stroke
from segment_lib.domain.results import SegmentationResult
from segment_lib.errors import NumericDegeneracyError
from segment_lib.fitting import (
    MAX_ERROR,
    arc_fit_error,
    curve_fit_error,
    fit_arc,
    fit_curve,
    fit_line,
    line_fit_error,
    polyline_fit_error,
    polyline_mse,
    rank_results,
    segment_fit_error,
    total_fit_error,
)
from segment_lib.utils.series import path_lengths


def right_angle():
    """Cleaned right angle with its corner at index 9."""
    xy = [(i, 0) for i in range(10)] + [(9, j) for j in range(1, 10)]
    return Stroke.from_xy([x for x, _ in xy], [y for _, y in xy])


def quarter_circle(radius=10.0, count=9):
    """Points on a quarter circle at equal angular steps."""
    angles = [k * math.pi / (2 * (count - 1)) for k in range(count)]
    return Stroke.from_xy([radius * math.cos(a) for a in angles],
                          [radius * math.sin(a) for a in angles])


class TestLineFit(unittest.TestCase):
    """Tests for fit_line and line_fit_error."""

    def test_fit_line_exact(self):
        """Noise-free samples recover intercept and slope."""
        xs = np.array([0.0, 1.0, 2.0, 3.0])
        intercept, slope = fit_line(xs, 1.0 + 2.0 * xs)
        self.assertAlmostEqual(intercept, 1.0)
        self.assertAlmostEqual(slope, 2.0)

    def test_fit_line_singular(self):
        """A single distinct x value has no unique line."""
        with self.assertRaises(NumericDegeneracyError):
            fit_line(np.array([1.0, 1.0, 1.0]), np.array([0.0, 1.0, 2.0]))

    def test_collinear_zero_error(self):
        """Points on a line have no error."""
        stroke = Stroke.from_xy([float(i) for i in range(10)], [0.5 * i for i in range(10)])
        self.assertAlmostEqual(line_fit_error(stroke, 0, 9), 0.0)

    def test_vertical_line(self):
        """Vertical runs fit along the y axis."""
        stroke = Stroke.from_xy([3.0] * 8, [float(i) for i in range(8)])
        self.assertAlmostEqual(line_fit_error(stroke, 0, 7), 0.0)

    def test_two_points(self):
        """Two points always lie on a line."""
        self.assertEqual(line_fit_error(right_angle(), 8, 9), 0.0)

    def test_coincident_points(self):
        """Coincident points give the sentinel error."""
        stroke = Stroke.from_xy([1.0, 1.0, 1.0], [1.0, 1.0, 1.0])
        self.assertEqual(line_fit_error(stroke, 0, 2), MAX_ERROR)

    def test_offset_point_positive(self):
        """A point off the line raises the error."""
        ys = [0.0] * 21
        ys[10] = 1.0
        stroke = Stroke.from_xy([2.0 * i for i in range(21)], ys)
        error = line_fit_error(stroke, 0, 20)
        self.assertGreater(error, 0.0)
        self.assertLess(error, 2.0)


class TestCurveFit(unittest.TestCase):
    """Tests for fit_curve and curve_fit_error."""

    def test_parabola_exact(self):
        """A quadratic fits a degree-4 polynomial exactly."""
        xs = [float(x) for x in range(-4, 5)]
        stroke = Stroke.from_xy(xs, [x * x for x in xs])
        self.assertLess(curve_fit_error(stroke, 0, 8, degree=4), 1e-6)

    def test_too_few_points(self):
        """Fewer distinct x values than coefficients is singular."""
        stroke = Stroke.from_xy([0.0, 1.0, 2.0], [0.0, 1.0, 4.0])
        self.assertEqual(curve_fit_error(stroke, 0, 2, degree=4), MAX_ERROR)

    def test_vertical_segment(self):
        """Zero x extent gives the sentinel error."""
        stroke = Stroke.from_xy([2.0] * 6, [float(i) for i in range(6)])
        self.assertEqual(curve_fit_error(stroke, 0, 5), MAX_ERROR)

    def test_fit_curve_singular(self):
        """fit_curve raises on a singular system."""
        with self.assertRaises(NumericDegeneracyError):
            fit_curve(np.array([1.0, 1.0, 1.0]), np.array([0.0, 1.0, 2.0]), 2)


class TestArcFit(unittest.TestCase):
    """Tests for fit_arc and arc_fit_error."""

    def test_unit_circle(self):
        """Three points on the unit circle."""
        center, radius = fit_arc(Point(1, 0), Point(0, 1), Point(-1, 0))
        self.assertAlmostEqual(center.x, 0.0)
        self.assertAlmostEqual(center.y, 0.0)
        self.assertAlmostEqual(radius, 1.0)

    def test_collinear_raises(self):
        """Collinear points have no circle."""
        with self.assertRaises(NumericDegeneracyError):
            fit_arc(Point(0, 0), Point(1, 1), Point(2, 2))

    def test_points_on_arc(self):
        """Samples on a circle fit with negligible error."""
        self.assertLess(arc_fit_error(quarter_circle(), 0, 8), 1e-6)

    def test_straight_line_sentinel(self):
        """A straight segment is degenerate for an arc."""
        stroke = Stroke.from_xy([float(i) for i in range(6)], [0.0] * 6)
        self.assertEqual(arc_fit_error(stroke, 0, 5), MAX_ERROR)

    def test_two_points_sentinel(self):
        """Two points cannot define an arc."""
        self.assertEqual(arc_fit_error(quarter_circle(), 0, 1), MAX_ERROR)


class TestObjective(unittest.TestCase):
    """Tests for segment_fit_error and the polyline scores."""

    def setUp(self):
        self.stroke = right_angle()
        self.lengths = path_lengths(self.stroke)

    def test_line_segment_uses_line_error(self):
        """A straight segment is scored by its line fit."""
        self.assertAlmostEqual(segment_fit_error(self.stroke, 0, 9, self.lengths), 0.0)

    def test_bent_segment_uses_curve(self):
        """A bent segment is scored by the best of curve and arc."""
        error = segment_fit_error(self.stroke, 0, 18, self.lengths)
        self.assertTrue(math.isfinite(error))
        self.assertGreater(error, 0.0)

    def test_total_at_true_corner(self):
        """Splitting at the true corner leaves no error."""
        self.assertAlmostEqual(total_fit_error(self.stroke, [0, 9, 18], self.lengths), 0.0)

    def test_polyline_mse(self):
        """The true polyline has zero error, the bare chord does not."""
        self.assertAlmostEqual(polyline_mse(self.stroke, [0, 9, 18]), 0.0)
        self.assertGreater(polyline_mse(self.stroke, [0, 18]), 0.0)

    def test_polyline_fit_error_zero_length(self):
        """Zero total length scores zero."""
        self.assertEqual(polyline_fit_error(self.stroke, [0, 18], 0.0), 0.0)

    def test_rank_results(self):
        """Better fitting, then fewer corners, comes first."""
        coarse = SegmentationResult(self.stroke, (0, 18), 'A', 0.8)
        exact = SegmentationResult(self.stroke, (0, 9, 18), 'B', 0.8)
        busy = SegmentationResult(self.stroke, (0, 4, 9, 18), 'C', 0.8)
        ranked = rank_results([coarse, busy, exact])
        self.assertEqual([r.algorithm for r in ranked], ['B', 'C', 'A'])


if __name__ == '__main__':
    unittest.main()
