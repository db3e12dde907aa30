"""Unit tests for kernel density corner combination.

Tests the classes and functions in segment_lib.combination:
    - UnivariateKDE: Density evaluation, grid and local maxima
    - combine_corners: Consensus of several detectors' candidates
"""

import unittest

import numpy as np

from segment_lib.combination import UnivariateKDE, combine_corners
from segment_lib.domain.geometry import Point, Stroke
from segment_lib.domain.results import CornerCandidates
from segment_lib.errors import InvalidInputError


def clean_right_angle():
    """Right angle after cleaning: corner at index 9 of 19 points."""
    xy = [(i, 0) for i in range(10)] + [(9, j) for j in range(1, 10)]
    times = [10.0 * k for k in range(10)] + [10.0 * k for k in range(11, 20)]
    return Stroke(tuple(Point(float(x), float(y), t) for (x, y), t in zip(xy, times)))


def candidates(*lists):
    return [CornerCandidates(tuple(indices), 'test') for indices in lists]


class TestUnivariateKDE(unittest.TestCase):
    """Tests for UnivariateKDE."""

    def test_single_sample_peak(self):
        """One sample gives one peak at the sample."""
        self.assertEqual(UnivariateKDE([5]).local_maxima(), [5.0])

    def test_density_integrates_to_one(self):
        """The estimate is a probability density."""
        kde = UnivariateKDE([0, 3, 10], bandwidth=2.0)
        xs = np.linspace(-30, 40, 7001)
        area = float(np.sum(kde.evaluate(xs)) * (xs[1] - xs[0]))
        self.assertAlmostEqual(area, 1.0, places=3)

    def test_grid_spacing(self):
        """Grid positions are evenly spaced by step."""
        grid = UnivariateKDE([0, 20], step=0.5).grid()
        np.testing.assert_allclose(np.diff(grid), 0.5)
        self.assertLessEqual(grid[0], 0.0)
        self.assertGreaterEqual(grid[-1], 20.0 - 0.5)

    def test_separate_clusters(self):
        """Well separated clusters each give a peak."""
        kde = UnivariateKDE([10, 10, 10, 50, 50], bandwidth=2.0)
        self.assertEqual([round(x) for x in kde.local_maxima()], [10, 50])

    def test_close_samples_merge(self):
        """Samples closer than the bandwidth share one peak."""
        kde = UnivariateKDE([20, 21, 22], bandwidth=4.0)
        self.assertEqual([round(x) for x in kde.local_maxima()], [21])

    def test_empty_rejected(self):
        """At least one sample is needed."""
        with self.assertRaises(InvalidInputError):
            UnivariateKDE([])

    def test_bad_bandwidth_rejected(self):
        """Bandwidth must be positive."""
        with self.assertRaises(InvalidInputError):
            UnivariateKDE([1, 2], bandwidth=0.0)


class TestCombineCorners(unittest.TestCase):
    """Tests for combine_corners."""

    def setUp(self):
        self.stroke = clean_right_angle()

    def test_agreement(self):
        """Four detectors agreeing on a corner keep it."""
        lists = [[0, 9, 18]] * 4
        self.assertEqual(combine_corners(candidates(*lists), self.stroke), [0, 9, 18])

    def test_peaks_near_ends_absorbed(self):
        """Density peaks pulled inward from the endpoints are not corners."""
        lists = [[0, 18]] * 4
        self.assertEqual(combine_corners(candidates(*lists), self.stroke), [0, 18])

    def test_no_candidates(self):
        """No candidates yields just the endpoints."""
        self.assertEqual(combine_corners([], self.stroke), [0, 18])

    def test_nearby_votes_agree(self):
        """Votes one index apart still reach consensus at the corner."""
        lists = [[0, 9, 18], [0, 9, 18], [0, 8, 18], [0, 10, 18]]
        self.assertEqual(combine_corners(candidates(*lists), self.stroke), [0, 9, 18])


if __name__ == '__main__':
    unittest.main()
