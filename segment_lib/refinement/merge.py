"""Iterative segment merging driven by fit error.

The refiner starts from a combined corner list and removes corners whose
removal does not make the fit meaningfully worse. Short segments are
examined first: each iteration raises a segment-length threshold by one
unit (half of one over the initial corner count), and every segment whose
share of the stroke length is below it is offered a merge with its left
or right neighbour. The cheaper side is merged when the merged segment's
error is below the pair's combined error times merge_slack.

Iteration stops once every segment has been examined, or when total
error grows past error_growth_limit times its starting value (the step
that crossed the limit is undone). An iteration cap bounds the work; by
default it is the schedule length, 2 * corners + 1, so only an explicit
max_iterations can cut a run short. Hitting the cap is reported as
non-convergence, not raised. A final pass removes corners that sit between
two collinear lines.

Example usage::

    from segment_lib.refinement import refine_corners

    result = refine_corners(clean, [0, 10, 20])
    print(result.corners, result.error, result.converged)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from ..config import DEFAULT_CONFIG, SegmentationConfig
from ..detection.filters import drop_collinear
from ..domain.geometry import Stroke
from ..fitting.objective import segment_fit_error
from ..utils.series import normalize_corners, path_lengths

logger = logging.getLogger(__name__)

NAME = 'KDEMerge'


@dataclass
class RefinementResult:
    """Result of refining a corner list.

    Attributes:
        corners: Refined, sorted corner indices including both endpoints.
        error: Total fit error of the refined segmentation.
        iterations: Merge iterations performed.
        converged: False when the iteration cap stopped refinement early.
    """
    corners: List[int]
    error: float
    iterations: int = 0
    converged: bool = True


class _ErrorCache:
    """Memoized segment_fit_error keyed by (start, end)."""

    def __init__(self, stroke: Stroke, lengths, config: SegmentationConfig):
        self.stroke = stroke
        self.lengths = lengths
        self.config = config
        self._errors: Dict[Tuple[int, int], float] = {}

    def segment(self, start: int, end: int) -> float:
        key = (start, end)
        if key not in self._errors:
            self._errors[key] = segment_fit_error(self.stroke, start, end, self.lengths, self.config)
        return self._errors[key]

    def total(self, corners: Sequence[int]) -> float:
        return float(sum(self.segment(a, b) for a, b in zip(corners[:-1], corners[1:])))


def _plan_removals(corners: List[int], threshold: float, total_length: float,
                   lengths, errors: _ErrorCache, slack: float) -> Tuple[List[int], bool]:
    """Corners to remove this iteration, and whether every segment was examined."""
    n_segments = len(corners) - 1
    ratios = [
        (lengths[corners[k + 1]] - lengths[corners[k]]) / total_length
        for k in range(n_segments)
    ]
    order = sorted(range(n_segments), key=lambda k: ratios[k])
    below = [k for k in order if ratios[k] < threshold]

    removals: List[int] = []
    for k in below:
        start, end = corners[k], corners[k + 1]
        here = errors.segment(start, end)
        options = []
        if k > 0:
            left = corners[k - 1]
            pair = errors.segment(left, start) + here
            merged = errors.segment(left, end)
            options.append((merged - pair, merged, pair, k, start))
        if k < n_segments - 1:
            right = corners[k + 2]
            pair = here + errors.segment(end, right)
            merged = errors.segment(start, right)
            options.append((merged - pair, merged, pair, k + 1, end))
        if not options:
            continue

        _, merged, pair, pos, corner = min(options, key=lambda o: (o[0], o[3]))
        if not merged < pair * slack:
            continue
        # Merges must not overlap, or the cached pair errors no longer apply
        if corner in removals or corners[pos - 1] in removals or corners[pos + 1] in removals:
            continue
        removals.append(corner)

    return removals, len(below) == n_segments


def refine_corners(stroke: Stroke, corners: Sequence[int],
                   config: SegmentationConfig = DEFAULT_CONFIG) -> RefinementResult:
    """Merge segments while doing so does not significantly increase fit error.

    Args:
        stroke: Cleaned stroke the corners index into.
        corners: Starting corner indices; endpoints are added if missing.
        config: Supplies merge_slack, error_growth_limit, max_iterations
            and the fit and line-test thresholds.

    Returns:
        RefinementResult with the refined corners and total error.
    """
    n = len(stroke)
    corners = normalize_corners(corners, n)
    lengths = path_lengths(stroke)
    total_length = float(lengths[-1]) if n else 0.0
    errors = _ErrorCache(stroke, lengths, config)

    initial_error = errors.total(corners)
    error = initial_error
    iterations = 0
    converged = True

    if len(corners) > 2 and total_length > 0:
        unit = 1.0 / len(corners) / 2.0
        limit = config.error_growth_limit * initial_error
        cap = config.iteration_cap(len(corners))
        run = 1
        everything_checked = False
        while not everything_checked and error <= limit:
            if iterations >= cap:
                converged = False
                logger.warning("refine_corners: iteration cap %d reached with %d corners",
                               cap, len(corners))
                break
            iterations += 1
            threshold = unit * run
            run += 1

            removals, everything_checked = _plan_removals(
                corners, threshold, total_length, lengths, errors, config.merge_slack)
            if not removals:
                continue

            candidate = [c for c in corners if c not in removals]
            candidate_error = errors.total(candidate)
            logger.debug("refine_corners: iteration=%d threshold=%.3f removed=%s error=%.4f",
                         iterations, threshold, removals, candidate_error)
            if candidate_error > limit:
                break
            corners = candidate
            error = candidate_error
            if len(corners) <= 2:
                break

    corners = drop_collinear(corners, stroke, lengths, config.line_ratio,
                             config.collinear_angle, config)
    error = errors.total(corners)
    return RefinementResult(corners=corners, error=error, iterations=iterations, converged=converged)
