"""Fit error evaluators.

Each evaluator scores how well the points between two indices of a stroke
are explained by a primitive. Degenerate fits (coincident points, a
singular system, collinear arc points) score MAX_ERROR instead of raising,
so a comparison such as min(curve, arc) still picks the usable fit.

The module provides:
    line_fit_error: Least-squares line, sum of perpendicular distances.
    curve_fit_error: Least-squares polynomial, sum of absolute residuals.
    arc_fit_error: Three-point circle, sum of radial deviations.
    segment_fit_error: Line error for straight segments, else best curve.
    total_fit_error: Sum of segment errors over a corner list.

Example usage::

    from segment_lib.fitting import segment_fit_error
    from segment_lib.utils.series import path_lengths

    lengths = path_lengths(stroke)
    error = segment_fit_error(stroke, 0, len(stroke) - 1, lengths)
"""

from .arc import arc_fit_error, bisector_point, fit_arc
from .curve import curve_fit_error, fit_curve
from .line import MAX_ERROR, fit_line, line_fit_error
from .objective import (
    polyline_fit_error,
    polyline_mse,
    rank_results,
    segment_fit_error,
    total_fit_error,
)

__all__ = [
    'MAX_ERROR',
    'fit_line', 'line_fit_error',
    'fit_curve', 'curve_fit_error',
    'fit_arc', 'arc_fit_error', 'bisector_point',
    'segment_fit_error', 'total_fit_error',
    'polyline_fit_error', 'polyline_mse', 'rank_results',
]
