"""Straw (local-minimum-gap) corner detector.

The stroke is resampled to uniform spacing, then for every point the
"straw" (the chord between the points straw_window steps before and after)
is measured. On a straight run the straw is as long as it can be; around
a corner it shortens. Runs of straws below a fraction of the median straw
mark corners, one per run at the shortest straw.
"""

from __future__ import annotations

import logging
from typing import List

import numpy as np

from ..config import DEFAULT_CONFIG, SegmentationConfig
from ..domain.geometry import Stroke
from ..domain.results import CornerCandidates
from ..utils.series import (
    is_line,
    map_indices,
    normalize_corners,
    path_lengths,
    resample,
    resample_spacing,
)
from .filters import post_filter

logger = logging.getLogger(__name__)

NAME = 'ShortStraw'


def straw_lengths(stroke: Stroke, window: int) -> np.ndarray:
    """Chord length between points i - window and i + window.

    Points within window of either end have no straw and get infinity.
    """
    n = len(stroke)
    straws = np.full(n, np.inf)
    if n > 2 * window:
        xs, ys = stroke.xs, stroke.ys
        straws[window:n - window] = np.hypot(
            xs[2 * window:] - xs[:n - 2 * window],
            ys[2 * window:] - ys[:n - 2 * window],
        )
    return straws


def _initial_corners(straws: np.ndarray, window: int, median_percentage: float) -> List[int]:
    n = len(straws)
    corners = [0]
    finite = straws[np.isfinite(straws)]
    if finite.size:
        threshold = float(np.median(finite)) * median_percentage
        i = window
        while i < n - window:
            if straws[i] < threshold:
                local_min, local_idx = straws[i], i
                while i < n - window and straws[i] < threshold:
                    if straws[i] < local_min:
                        local_min, local_idx = straws[i], i
                    i += 1
                corners.append(local_idx)
            i += 1
    corners.append(n - 1)
    return normalize_corners(corners, n)


def _add_missed_corners(stroke: Stroke, corners: List[int], straws: np.ndarray,
                        lengths: np.ndarray, config: SegmentationConfig) -> List[int]:
    """Split segments that fail the line test at their shortest straw.

    The search is limited to the middle half of the segment so the new
    corner cannot land on top of an existing one.
    """
    corners = list(corners)
    changed = True
    while changed:
        changed = False
        for k in range(1, len(corners)):
            a, b = corners[k - 1], corners[k]
            if is_line(a, b, stroke, lengths, config.straw_line_ratio,
                       config.line_size_floor, config.line_point_floor):
                continue
            quarter = (b - a) // 4
            lo, hi = a + quarter, b - quarter
            if hi < lo:
                continue
            best = lo + int(np.argmin(straws[lo:hi + 1]))
            if not np.isfinite(straws[best]) or best <= a or best >= b:
                continue
            corners.insert(k, best)
            changed = True
            break
    return corners


def _drop_chord_lines(stroke: Stroke, corners: List[int], lengths: np.ndarray,
                      config: SegmentationConfig) -> List[int]:
    """Remove corners whose neighbours are joined by a straight line."""
    corners = list(corners)
    changed = True
    while changed and len(corners) > 2:
        changed = False
        for k in range(1, len(corners) - 1):
            if is_line(corners[k - 1], corners[k + 1], stroke, lengths, config.straw_line_ratio,
                       config.line_size_floor, config.line_point_floor):
                del corners[k]
                changed = True
                break
    return corners


def short_straw_corners(stroke: Stroke,
                        config: SegmentationConfig = DEFAULT_CONFIG) -> CornerCandidates:
    """Find corners at the shortest straws of a resampled stroke.

    Args:
        stroke: Cleaned stroke. It is resampled internally; the caller's
            stroke is not modified.
        config: Thresholds.

    Returns:
        CornerCandidates over the indices of ``stroke``.
    """
    spacing = resample_spacing(stroke, config.pts_per_diagonal, config.min_resample_spacing)
    resampled = resample(stroke, spacing)
    straws = straw_lengths(resampled, config.straw_window)
    lengths = path_lengths(resampled)

    corners = _initial_corners(straws, config.straw_window, config.median_percentage)
    corners = _add_missed_corners(resampled, corners, straws, lengths, config)
    corners = _drop_chord_lines(resampled, corners, lengths, config)
    logger.debug("short_straw_corners: spacing=%.3f resampled=%d raw_corners=%d",
                 spacing, len(resampled), len(corners))

    corners = map_indices(resampled, stroke, corners)
    corners = post_filter(stroke, corners, config, line_ratio=config.straw_line_ratio)
    return CornerCandidates(tuple(corners), NAME)
