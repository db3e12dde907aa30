"""Curvature and local-monotonicity corner detector.

Runs on a resampled stroke. The raw signal is the signed turning angle at
each vertex. A point's curvature score adds the turning of neighbours (up
to kim_window on each side) as long as they bend the same way and their
magnitude keeps shrinking away from the point, so a corner rounded over a
few samples scores as one sharp turn. Local maxima of the score above
kim_curvature_ratio times the peak score are corners.
"""

from __future__ import annotations

import logging
from typing import List

import numpy as np

from ..config import DEFAULT_CONFIG, SegmentationConfig
from ..domain.geometry import Stroke
from ..domain.results import CornerCandidates
from ..utils.series import (
    map_indices,
    nearest_indices,
    normalize_corners,
    resample,
    resample_spacing,
    turning_angles,
)
from .filters import post_filter

logger = logging.getLogger(__name__)

NAME = 'KimSquared'


def monotonic_curvature(turns: np.ndarray, window: int) -> np.ndarray:
    """Turning angle accumulated over locally convex, monotonic neighbours.

    Args:
        turns: Signed turning angle per point.
        window: Maximum neighbours added on each side.

    Returns:
        Signed curvature score per point.
    """
    n = len(turns)
    curvature = np.array(turns, dtype=float)
    for i in range(n):
        base = turns[i]
        if base == 0:
            continue
        for step_dir in (-1, 1):
            prev = abs(base)
            for step in range(1, window + 1):
                j = i + step_dir * step
                if j < 0 or j >= n:
                    break
                value = turns[j]
                if value * base <= 0 or abs(value) > prev:
                    break
                curvature[i] += value
                prev = abs(value)
    return curvature


def _curvature_peaks(curvature: np.ndarray, ratio: float) -> List[int]:
    magnitude = np.abs(curvature)
    if magnitude.size < 3:
        return []
    threshold = ratio * float(magnitude.max())
    peaks = []
    for i in range(1, len(magnitude) - 1):
        if (magnitude[i] > threshold and magnitude[i] >= magnitude[i - 1]
                and magnitude[i] >= magnitude[i + 1]):
            peaks.append(i)
    return peaks


def kim_strengths(stroke: Stroke, resampled: Stroke, curvature: np.ndarray) -> np.ndarray:
    """Curvature magnitude per point of stroke, taken from the resampled score.

    Each resampled point hands its |curvature| to the stroke point nearest
    in time; a stroke point keeps the largest value it receives.
    """
    strengths = np.zeros(len(stroke))
    targets = nearest_indices(resampled, stroke, range(len(resampled)))
    np.maximum.at(strengths, targets, np.abs(curvature))
    return strengths


def kim_corners(stroke: Stroke, config: SegmentationConfig = DEFAULT_CONFIG) -> CornerCandidates:
    """Find corners at peaks of the monotonic curvature score.

    Args:
        stroke: Cleaned stroke. It is resampled internally.
        config: Thresholds.

    Returns:
        CornerCandidates over the indices of ``stroke``.
    """
    spacing = resample_spacing(stroke, config.kim_pts_per_diagonal, config.min_resample_spacing)
    resampled = resample(stroke, spacing)

    curvature = monotonic_curvature(turning_angles(resampled), config.kim_window)
    peaks = _curvature_peaks(curvature, config.kim_curvature_ratio)
    logger.debug("kim_corners: spacing=%.3f resampled=%d peaks=%s",
                 spacing, len(resampled), peaks)

    corners = normalize_corners(peaks, len(resampled))
    corners = map_indices(resampled, stroke, corners)
    strengths = kim_strengths(stroke, resampled, curvature)
    corners = post_filter(stroke, corners, config, line_ratio=config.kim_line_ratio,
                          strengths=strengths)
    return CornerCandidates(tuple(corners), NAME)
