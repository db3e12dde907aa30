"""Post-filters shared by every corner detector.

Detectors over-report; these passes prune their candidate lists. They run
in a fixed order through post_filter():

    1. drop_hooks: interior corners too close (by path) to either endpoint.
    2. merge_similar: pairs closer than the similarity threshold collapse
       to one corner.
    3. drop_collinear: a corner between two straight, nearly parallel
       segments is removed.

Every pass keeps both stroke endpoints.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np

from ..config import DEFAULT_CONFIG, SegmentationConfig
from ..domain.geometry import Stroke
from ..utils.series import (
    angle_between,
    is_line,
    normalize_corners,
    path_lengths,
    turning_angles,
)

logger = logging.getLogger(__name__)


def drop_hooks(corners: Sequence[int], lengths: Sequence[float], hook_distance: float) -> List[int]:
    """Remove interior corners within hook_distance (path) of either end."""
    if len(corners) <= 2:
        return list(corners)
    total = lengths[-1]
    first, last = corners[0], corners[-1]
    kept = [first]
    for c in corners[1:-1]:
        if lengths[c] < hook_distance or total - lengths[c] < hook_distance:
            continue
        kept.append(c)
    kept.append(last)
    return kept


def merge_similar(corners: Sequence[int], lengths: Sequence[float], strengths: Sequence[float],
                  max_index_gap: int, min_distance: float) -> List[int]:
    """Collapse neighbouring corners that are too close together.

    Two adjacent corners are similar when their index gap is at most
    max_index_gap or their path separation is below min_distance. When
    one of them is a stroke endpoint the other is dropped; otherwise the
    one with the lower strength goes, the later one on a tie.

    Args:
        corners: Sorted corner indices including both endpoints.
        lengths: path_lengths of the stroke.
        strengths: Per-point corner strength (e.g. absolute curvature).
        max_index_gap: Largest index gap that counts as similar.
        min_distance: Path separation below which corners are similar.

    Returns:
        Filtered corner list.
    """
    result = list(corners)
    if len(result) <= 2:
        return result
    first, last = result[0], result[-1]

    changed = True
    while changed and len(result) > 2:
        changed = False
        for k in range(len(result) - 1):
            a, b = result[k], result[k + 1]
            if b - a > max_index_gap and lengths[b] - lengths[a] >= min_distance:
                continue
            if a == first and b == last:
                continue
            if a == first:
                result.remove(b)
            elif b == last:
                result.remove(a)
            elif strengths[a] >= strengths[b]:
                result.remove(b)
            else:
                result.remove(a)
            changed = True
            break
    return result


def drop_collinear(corners: Sequence[int], stroke: Stroke, lengths: Sequence[float],
                   line_ratio: float, max_angle: float,
                   config: SegmentationConfig = DEFAULT_CONFIG) -> List[int]:
    """Remove corners joining two straight segments that point the same way.

    A corner c with neighbours p and q goes when both p..c and c..q pass
    is_line and the angle between their chord directions is below
    max_angle. The pass repeats until nothing changes.
    """
    result = list(corners)
    changed = True
    while changed and len(result) > 2:
        changed = False
        for k in range(1, len(result) - 1):
            p, c, q = result[k - 1], result[k], result[k + 1]
            if not is_line(p, c, stroke, lengths, line_ratio,
                           config.line_size_floor, config.line_point_floor):
                continue
            if not is_line(c, q, stroke, lengths, line_ratio,
                           config.line_size_floor, config.line_point_floor):
                continue
            angle = angle_between(stroke[c] - stroke[p], stroke[q] - stroke[c])
            if angle < max_angle:
                del result[k]
                changed = True
                break
    return result


def corner_strengths(stroke: Stroke) -> np.ndarray:
    """Absolute turning angle at every point."""
    return np.abs(turning_angles(stroke))


def post_filter(stroke: Stroke, corners: Sequence[int],
                config: SegmentationConfig = DEFAULT_CONFIG,
                line_ratio: Optional[float] = None,
                strengths: Optional[Sequence[float]] = None) -> List[int]:
    """Run hook, similarity and collinearity filtering in order.

    Args:
        stroke: Stroke the corners index into.
        corners: Candidate corner indices, in any order.
        config: Thresholds.
        line_ratio: Line test ratio for the collinearity pass. Defaults to
            config.line_ratio; detectors with their own ratio pass it here.
        strengths: Per-point strengths for similarity tie-breaks.
            Defaults to the absolute turning angle.

    Returns:
        Sorted corner list containing both endpoints.
    """
    n = len(stroke)
    corners = normalize_corners(corners, n)
    if len(corners) <= 2:
        return corners

    lengths = path_lengths(stroke)
    diagonal = stroke.bbox.diagonal
    if line_ratio is None:
        line_ratio = config.line_ratio
    if strengths is None:
        strengths = corner_strengths(stroke)

    before = len(corners)
    corners = drop_hooks(corners, lengths, config.hook_distance(diagonal))
    corners = merge_similar(corners, lengths, strengths, config.close_corner_indices,
                            config.close_corner_distance(diagonal))
    corners = drop_collinear(corners, stroke, lengths, line_ratio, config.collinear_angle, config)
    logger.debug("post_filter: %d -> %d corners", before, len(corners))
    return corners
