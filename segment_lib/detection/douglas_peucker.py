"""Extremal-distance splitting (Douglas-Peucker) corner detector."""

from __future__ import annotations

import logging

import numpy as np

from ..config import DEFAULT_CONFIG, SegmentationConfig
from ..domain.geometry import Stroke
from ..domain.results import CornerCandidates
from ..utils.series import chord_distances
from .filters import post_filter

logger = logging.getLogger(__name__)

NAME = 'Douglas-Peucker'


def douglas_peucker_corners(stroke: Stroke,
                            config: SegmentationConfig = DEFAULT_CONFIG) -> CornerCandidates:
    """Split the stroke at points far from the chord of their range.

    An anchor starts at the first point and a stack of floaters at the
    last. The interior point farthest from the anchor-floater chord is
    pushed as a new floater whenever its distance exceeds
    dp_distance_ratio times the chord length; otherwise the floater is
    accepted as a corner, becomes the anchor, and is popped.

    Args:
        stroke: Cleaned stroke.
        config: Thresholds.

    Returns:
        CornerCandidates over the indices of ``stroke``.
    """
    n = len(stroke)
    corners = [0]
    if n > 1:
        anchor = 0
        stack = [n - 1]
        while stack:
            floater = stack[-1]
            split = None
            if floater - anchor > 1:
                distances = chord_distances(stroke, anchor, floater)[1:-1]
                best = int(np.argmax(distances))
                chord = stroke[anchor].distance_to(stroke[floater])
                if distances[best] > config.dp_distance_ratio * chord:
                    split = anchor + 1 + best
            if split is None:
                corners.append(floater)
                anchor = floater
                stack.pop()
            else:
                stack.append(split)

    corners = post_filter(stroke, corners, config)
    logger.debug("douglas_peucker_corners: %d points -> %d corners", n, len(corners))
    return CornerCandidates(tuple(corners), NAME)
