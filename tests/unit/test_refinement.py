"""Unit tests for fit-error driven segment merging.

Tests refine_corners in segment_lib.refinement:
    - Spurious corners on straight strokes are merged away
    - True corners survive
    - The iteration cap is reported as non-convergence
    - The default cap scales with the number of starting corners
"""

import unittest

from segment_lib.config import SegmentationConfig
from segment_lib.domain.geometry import Point, Stroke
from segment_lib.refinement import RefinementResult, refine_corners


def clean_right_angle():
    """Right angle after cleaning: corner at index 9 of 19 points."""
    xy = [(i, 0) for i in range(10)] + [(9, j) for j in range(1, 10)]
    times = [10.0 * k for k in range(10)] + [10.0 * k for k in range(11, 20)]
    return Stroke(tuple(Point(float(x), float(y), t) for (x, y), t in zip(xy, times)))


def noisy_line():
    """Horizontal stroke with a 1 px bump at index 10."""
    ys = [0.0] * 21
    ys[10] = 1.0
    return Stroke.from_xy([2.0 * i for i in range(21)], ys, [10.0 * i for i in range(21)])


class TestRefineCorners(unittest.TestCase):
    """Tests for refine_corners."""

    def test_noise_corner_merged(self):
        """A corner on a 1 px bump is merged away."""
        result = refine_corners(noisy_line(), [0, 10, 20])
        self.assertEqual(result.corners, [0, 20])
        self.assertTrue(result.converged)
        self.assertAlmostEqual(result.error, 40.0 / 21.0, places=6)

    def test_true_corner_kept(self):
        """The right-angle corner is not merged."""
        result = refine_corners(clean_right_angle(), [0, 9, 18])
        self.assertEqual(result.corners, [0, 9, 18])
        self.assertTrue(result.converged)
        self.assertAlmostEqual(result.error, 0.0)

    def test_endpoints_only(self):
        """Nothing to merge with only two corners."""
        result = refine_corners(noisy_line(), [0, 20])
        self.assertEqual(result.corners, [0, 20])
        self.assertEqual(result.iterations, 0)

    def test_missing_endpoints_added(self):
        """Endpoints are added to the starting list."""
        result = refine_corners(clean_right_angle(), [9])
        self.assertEqual(result.corners, [0, 9, 18])

    def test_iteration_cap(self):
        """Hitting max_iterations is reported, not raised."""
        config = SegmentationConfig(max_iterations=1)
        result = refine_corners(noisy_line(), [0, 10, 20], config)
        self.assertFalse(result.converged)
        self.assertEqual(result.iterations, 1)

    def test_many_corners_converge_with_default_cap(self):
        """Long corner lists get enough iterations to examine every segment."""
        line = Stroke.from_xy([float(i) for i in range(300)], [0.0] * 300)
        corners = list(range(100)) + [299]
        result = refine_corners(line, corners)
        self.assertTrue(result.converged)
        self.assertEqual(result.iterations, 136)

    def test_explicit_cap_still_applies(self):
        """An explicit max_iterations below the schedule length stops early."""
        line = Stroke.from_xy([float(i) for i in range(300)], [0.0] * 300)
        corners = list(range(100)) + [299]
        result = refine_corners(line, corners, SegmentationConfig(max_iterations=100))
        self.assertFalse(result.converged)
        self.assertEqual(result.iterations, 100)

    def test_result_type(self):
        """A RefinementResult is returned."""
        self.assertIsInstance(refine_corners(clean_right_angle(), [0, 18]), RefinementResult)

    def test_input_list_untouched(self):
        """The caller's corner list is not modified."""
        corners = [0, 10, 20]
        refine_corners(noisy_line(), corners)
        self.assertEqual(corners, [0, 10, 20])


if __name__ == '__main__':
    unittest.main()
