"""Utility functions for stroke segmentation.

This module provides the point series helpers every detector, fit and
refinement step builds on.

Point series functions (from series module):
    path_lengths: Cumulative arc length at each point.
    is_line: Straight-line test on the span between two indices.
    resample_spacing: Resampling interval for a target point density.
    resample: Arc-length uniform copy of a stroke.
    get_window: Centered window with clamp-and-repeat edges.
    median_filter: Windowed median.
    average_filter: Windowed mean.
    mode_filter: Windowed mode.
    turning_angles: Signed direction change at each vertex.
    nearest_indices: Nearest-timestamp index lookup between two strokes.
    map_indices: Move corner indices between a stroke and a derived copy.

Example usage:
    Resampling before detection::

        from segment_lib.utils import resample, resample_spacing

        spacing = resample_spacing(stroke, pts_per_diagonal=80, min_spacing=0.1)
        uniform = resample(stroke, spacing)

    Windowing::

        from segment_lib.utils import get_window

        get_window([1, 2, 3, 4, 5], 3, 0)   # [1, 1, 2]
"""

from .series import (
    LINE_POINT_FLOOR,
    LINE_SIZE_FLOOR,
    angle_between,
    average_filter,
    chord_distances,
    default_window_size,
    get_window,
    is_line,
    map_indices,
    median_filter,
    mode_filter,
    nearest_indices,
    normalize_corners,
    path_lengths,
    resample,
    resample_spacing,
    segment_directions,
    turning_angles,
    wrap_angle,
)

__all__ = [
    'LINE_SIZE_FLOOR', 'LINE_POINT_FLOOR',
    'path_lengths', 'is_line', 'resample_spacing', 'resample',
    'default_window_size', 'get_window',
    'median_filter', 'average_filter', 'mode_filter',
    'wrap_angle', 'segment_directions', 'turning_angles', 'angle_between',
    'chord_distances', 'normalize_corners', 'nearest_indices', 'map_indices',
]
