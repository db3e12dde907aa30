"""Shared pytest fixtures for the segment_lib test suite.

Fixtures:
    right_angle_stroke: 10 points along +x then 10 along +y (corner at 9)
    straight_strokes: Horizontal, vertical and diagonal collinear strokes
    noisy_line_stroke: Straight stroke with one point nudged 1 px off the chord
    square_stroke: Closed-ish square path with three interior corners
    default_config: SegmentationConfig with default thresholds

Markers:
    slow: Mark test as slow-running (skip with -m "not slow")
"""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from segment_lib.config import SegmentationConfig  # noqa: E402
from segment_lib.domain.geometry import Point, Stroke  # noqa: E402


# -----------------------------------------------------------------------------
# Pytest Markers
# -----------------------------------------------------------------------------

def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow-running (deselect with '-m \"not slow\"')"
    )


# -----------------------------------------------------------------------------
# Stroke Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def right_angle_stroke():
    """Return a right-angle stroke sampled every 10 time units.

    Points 0-9 run from (0, 0) to (9, 0); points 10-19 run from (9, 0) to
    (9, 9). Point 10 repeats point 9, so cleaning drops it.

    Returns:
        Stroke: 20-point stroke whose only corner is index 9.
    """
    xy = [(i, 0) for i in range(10)] + [(9, j) for j in range(10)]
    return Stroke(tuple(Point(float(x), float(y), 10.0 * k) for k, (x, y) in enumerate(xy)))


@pytest.fixture
def straight_strokes():
    """Return collinear strokes in three orientations.

    Returns:
        dict[str, Stroke]: 'horizontal', 'vertical' and 'diagonal' strokes.
    """
    return {
        'horizontal': Stroke.from_xy([2.0 * i for i in range(30)], [0.0] * 30,
                                     [10.0 * i for i in range(30)]),
        'vertical': Stroke.from_xy([5.0] * 20, [3.0 * i for i in range(20)],
                                   [10.0 * i for i in range(20)]),
        'diagonal': Stroke.from_xy([float(i) for i in range(25)], [float(i) for i in range(25)],
                                   [10.0 * i for i in range(25)]),
    }


@pytest.fixture
def noisy_line_stroke():
    """Return a 21-point horizontal stroke with point 10 lifted by 1 px.

    Returns:
        Stroke: Points (2i, 0) except (20, 1) at index 10.
    """
    ys = [0.0] * 21
    ys[10] = 1.0
    return Stroke.from_xy([2.0 * i for i in range(21)], ys, [10.0 * i for i in range(21)])


@pytest.fixture
def square_stroke():
    """Return a square path traced with 10 samples per side.

    Returns:
        Stroke: 41 points with corners at indices 10, 20 and 30.
    """
    xy = ([(4.0 * i, 0.0) for i in range(10)]
          + [(40.0, 4.0 * i) for i in range(10)]
          + [(40.0 - 4.0 * i, 40.0) for i in range(10)]
          + [(0.0, 40.0 - 4.0 * i) for i in range(11)])
    return Stroke(tuple(Point(x, y, 10.0 * k) for k, (x, y) in enumerate(xy)))


@pytest.fixture
def noisy_l_stroke():
    """Return an L with 0.05 px zigzag jitter and uneven sample timing.

    Returns:
        Stroke: 31 points, 2 px apart, with the corner at (30, 0), index 15.
            Time steps cycle through 8, 12, 10, 15 and 9.
    """
    jitter = [0.05 * (-1) ** k for k in range(16)]
    xy = ([(2.0 * i, jitter[i]) for i in range(15)]
          + [(30.0, 0.0)]
          + [(30.0 + jitter[j], 2.0 * j) for j in range(1, 16)])
    steps = [8.0, 12.0, 10.0, 15.0, 9.0]
    times = [0.0]
    for k in range(1, len(xy)):
        times.append(times[-1] + steps[k % len(steps)])
    return Stroke(tuple(Point(x, y, t) for (x, y), t in zip(xy, times)))


# -----------------------------------------------------------------------------
# Configuration Fixture
# -----------------------------------------------------------------------------

@pytest.fixture
def default_config():
    """Return a SegmentationConfig with default thresholds."""
    return SegmentationConfig()
