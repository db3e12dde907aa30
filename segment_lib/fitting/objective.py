"""Fit objectives used to compare competing segmentations.

segment_fit_error is the per-segment cost the refiner minimizes: a
segment that passes the straight-line test is scored by its line fit
alone, anything else by the better of the polynomial and arc fits.

polyline_fit_error and polyline_mse score a whole corner list by how far
points stray from the chords joining consecutive corners; rank_results
orders finished segmentations with it.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

import numpy as np

from ..config import DEFAULT_CONFIG, SegmentationConfig
from ..domain.geometry import Stroke
from ..domain.results import SegmentationResult
from ..utils.series import chord_distances, is_line
from .arc import arc_fit_error
from .curve import curve_fit_error
from .line import MAX_ERROR, line_fit_error


def segment_fit_error(stroke: Stroke, start: int, end: int, lengths: Sequence[float],
                      config: SegmentationConfig = DEFAULT_CONFIG) -> float:
    """Fit error of the segment start..end.

    Args:
        stroke: Stroke the indices refer to.
        start: First index of the segment.
        end: Last index of the segment.
        lengths: path_lengths(stroke).
        config: Supplies the line ratio, line floors and curve degree.

    Returns:
        Line error when the segment is a line, otherwise
        min(curve error, arc error). MAX_ERROR when no fit is possible.
    """
    if is_line(start, end, stroke, lengths, config.line_ratio,
               config.line_size_floor, config.line_point_floor):
        return line_fit_error(stroke, start, end)
    return min(curve_fit_error(stroke, start, end, config.curve_degree),
               arc_fit_error(stroke, start, end))


def total_fit_error(stroke: Stroke, corners: Sequence[int], lengths: Sequence[float],
                    config: SegmentationConfig = DEFAULT_CONFIG) -> float:
    """Sum of segment_fit_error over every segment of a corner list."""
    return float(sum(
        segment_fit_error(stroke, a, b, lengths, config)
        for a, b in zip(corners[:-1], corners[1:])
    ))


def _squared_chord_residuals(stroke: Stroke, corners: Sequence[int]) -> np.ndarray:
    parts = [chord_distances(stroke, a, b) ** 2 for a, b in zip(corners[:-1], corners[1:])]
    if not parts:
        return np.zeros(0)
    return np.concatenate(parts)


def polyline_fit_error(stroke: Stroke, corners: Sequence[int], total_length: float) -> float:
    """Squared orthogonal distances to the corner polyline, per unit length."""
    if total_length <= 0:
        return 0.0
    return float(np.sum(_squared_chord_residuals(stroke, corners))) / total_length


def polyline_mse(stroke: Stroke, corners: Sequence[int]) -> float:
    """Mean squared orthogonal distance of the stroke to its corner polyline."""
    residuals = _squared_chord_residuals(stroke, corners)
    if residuals.size == 0:
        return MAX_ERROR
    return float(np.mean(residuals))


def rank_results(results: Iterable[SegmentationResult]) -> List[SegmentationResult]:
    """Order segmentations by polyline error, then by fewer segments."""
    return sorted(
        results,
        key=lambda r: (polyline_mse(r.stroke, r.corners), len(r.corners)),
    )
