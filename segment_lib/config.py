"""Tunable thresholds for corner detection, combination and refinement.

Every threshold used by the engine lives on one frozen SegmentationConfig
instance that is passed explicitly to each call. Defaults reproduce the
constants the detectors were originally tuned with.

Example usage::

    from segment_lib.config import SegmentationConfig

    config = SegmentationConfig(kde_bandwidth=3.0, max_iterations=50)
    strict = config.replace(line_ratio=0.97)
"""

from __future__ import annotations

import dataclasses
import math
import numbers
from dataclasses import dataclass
from typing import Optional

from .errors import InvalidInputError


# Fields used as window lengths, indices or counts
_INTEGER_FIELDS = frozenset({
    'straw_window', 'kim_window', 'speed_window', 'certainty_window',
    'curve_degree', 'max_iterations', 'max_workers',
})


@dataclass(frozen=True)
class SegmentationConfig:
    """Thresholds shared by every stage of the segmentation pipeline.

    Distances are in stroke units (pixels for pen input). Ratios are
    dimensionless. ``speed_window`` is a filter length and must be odd.

    Attributes:
        short_stroke_length: Strokes with a shorter path skip detection.
        short_stroke_points: Strokes with fewer cleaned points skip detection.
        line_size_floor: Path distance below which any span counts as a line.
        line_point_floor: Index gap below which any span counts as a line.
        pts_per_diagonal: Resampling density for the straw detector.
        kim_pts_per_diagonal: Resampling density for the monotonicity detector.
        min_resample_spacing: Lower bound on the resampling interval.
        dp_distance_ratio: Split threshold as a fraction of the chord length.
        straw_window: Index offset between the two ends of a straw.
        median_percentage: Straws below this fraction of the median qualify.
        straw_line_ratio: Line test ratio used by the straw detector.
        kim_window: Neighbourhood searched for monotonic curvature.
        kim_curvature_ratio: Fraction of the peak curvature a corner needs.
        kim_line_ratio: Line test ratio used by the monotonicity detector.
        curvature_threshold: Multiple of the average curvature a corner needs.
        speed_threshold: Multiple of the average speed a corner must stay under.
        speed_window: Mean filter window applied to pen speed.
        curvature_sigma: Gaussian sigma applied to curvature.
        hybrid_error_ratio: Blend between the initial and full fit errors.
        certainty_window: Neighbourhood used by the corner certainty metrics.
        line_ratio: Line test ratio used by the shared filters and refiner.
        hook_ratio: Hook distance as a fraction of the bounding box diagonal.
        max_hook_distance: Upper bound on the hook distance.
        close_corner_ratio: Similarity distance as a fraction of the diagonal.
        max_close_corner_distance: Upper bound on the similarity distance.
        close_corner_indices: Corners this many indices apart are similar.
        collinear_angle: Direction change (radians) below which two lines merge.
        kde_bandwidth: Gaussian kernel bandwidth, in index units.
        kde_step: Density grid spacing, in index units.
        curve_degree: Degree of the least-squares polynomial fit.
        merge_slack: Merged error must stay below pair error times this.
        error_growth_limit: Refinement stops once error exceeds this multiple.
        max_iterations: Cap on refinement iterations. None scales the cap
            with the starting corner count (see iteration_cap).
        max_workers: Thread pool size for running detectors.
        single_confidence: Confidence reported for bypassed short strokes.
        default_confidence: Confidence reported for detected segmentations.
        nonconvergence_penalty: Confidence multiplier when refinement is capped.
    """
    short_stroke_length: float = 10.0
    short_stroke_points: int = 5
    line_size_floor: float = 10.0
    line_point_floor: int = 5
    pts_per_diagonal: float = 80.0
    kim_pts_per_diagonal: float = 50.0
    min_resample_spacing: float = 0.1
    dp_distance_ratio: float = 0.10
    straw_window: int = 3
    median_percentage: float = 0.95
    straw_line_ratio: float = 0.95
    kim_window: int = 3
    kim_curvature_ratio: float = 0.25
    kim_line_ratio: float = 0.90
    curvature_threshold: float = 1.0
    speed_threshold: float = 0.90
    speed_window: int = 3
    curvature_sigma: float = 1.0
    hybrid_error_ratio: float = 0.10
    certainty_window: int = 3
    line_ratio: float = 0.92
    hook_ratio: float = 0.10
    max_hook_distance: float = 15.0
    close_corner_ratio: float = 0.025
    max_close_corner_distance: float = 15.0
    close_corner_indices: int = 2
    collinear_angle: float = math.pi / 9
    kde_bandwidth: float = 4.0
    kde_step: float = 0.25
    curve_degree: int = 4
    merge_slack: float = 2.0
    error_growth_limit: float = 3.0
    max_iterations: Optional[int] = None
    max_workers: int = 4
    single_confidence: float = 0.95
    default_confidence: float = 0.80
    nonconvergence_penalty: float = 0.5

    def __post_init__(self):
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if f.name in _INTEGER_FIELDS:
                if value is None and f.name == 'max_iterations':
                    continue
                if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                    raise InvalidInputError(f"{f.name} must be an integer, got {value!r}")
            elif isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise InvalidInputError(f"{f.name} must be a number, got {value!r}")

        positive = (
            'short_stroke_length', 'pts_per_diagonal', 'kim_pts_per_diagonal',
            'min_resample_spacing', 'dp_distance_ratio', 'curvature_sigma',
            'kde_bandwidth', 'kde_step', 'merge_slack', 'error_growth_limit',
            'collinear_angle',
        )
        for name in positive:
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise InvalidInputError(f"{name} must be a positive number, got {value!r}")

        non_negative = (
            'line_size_floor', 'line_point_floor', 'short_stroke_points',
            'max_hook_distance', 'max_close_corner_distance', 'hook_ratio',
            'close_corner_ratio', 'close_corner_indices', 'curvature_threshold',
            'hybrid_error_ratio',
        )
        for name in non_negative:
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise InvalidInputError(f"{name} must be non-negative, got {value!r}")

        unit_interval = (
            'median_percentage', 'straw_line_ratio', 'kim_curvature_ratio',
            'kim_line_ratio', 'speed_threshold', 'line_ratio',
            'single_confidence', 'default_confidence', 'nonconvergence_penalty',
        )
        for name in unit_interval:
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidInputError(f"{name} must lie in [0, 1], got {value!r}")

        for name in ('straw_window', 'kim_window', 'speed_window', 'certainty_window'):
            value = getattr(self, name)
            if value < 1:
                raise InvalidInputError(f"{name} must be at least 1, got {value!r}")
        if self.speed_window % 2 == 0:
            raise InvalidInputError(f"speed_window must be odd, got {self.speed_window!r}")

        if self.curve_degree < 1:
            raise InvalidInputError(f"curve_degree must be at least 1, got {self.curve_degree!r}")
        if self.max_iterations is not None and self.max_iterations < 1:
            raise InvalidInputError(f"max_iterations must be at least 1, got {self.max_iterations!r}")
        if self.max_workers < 1:
            raise InvalidInputError(f"max_workers must be at least 1, got {self.max_workers!r}")

    def iteration_cap(self, corner_count: int) -> int:
        """Refinement iteration cap for a start list of corner_count corners.

        The merge threshold grows by 1 / (2 * corner_count) per iteration,
        so examining every segment takes up to 2 * corner_count + 1
        iterations. When max_iterations is unset that schedule length is
        the cap; an explicit value is used as given.
        """
        if self.max_iterations is not None:
            return self.max_iterations
        return 2 * max(corner_count, 1) + 1

    def replace(self, **changes) -> SegmentationConfig:
        """Return a validated copy with the given fields changed."""
        try:
            return dataclasses.replace(self, **changes)
        except TypeError as e:
            raise InvalidInputError(str(e)) from e

    def hook_distance(self, diagonal: float) -> float:
        """Hook distance for a stroke with the given bounding box diagonal."""
        return min(diagonal * self.hook_ratio, self.max_hook_distance)

    def close_corner_distance(self, diagonal: float) -> float:
        """Path distance under which two corners count as the same corner."""
        return min(diagonal * self.close_corner_ratio, self.max_close_corner_distance)


DEFAULT_CONFIG = SegmentationConfig()
