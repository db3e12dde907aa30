"""Least-squares line fit over a stroke range."""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np

from ..domain.geometry import Stroke
from ..errors import NumericDegeneracyError

MAX_ERROR = math.inf


def fit_line(xs: np.ndarray, ys: np.ndarray) -> Tuple[float, float]:
    """Fit y = intercept + slope * x by least squares.

    Solves the 2x2 normal equations built from sum(x), sum(x^2), sum(y)
    and sum(xy).

    Returns:
        (intercept, slope)

    Raises:
        NumericDegeneracyError: If fewer than two distinct x values make
            the system singular.
    """
    n = float(len(xs))
    sum_x = float(np.sum(xs))
    sum_xx = float(np.sum(xs * xs))
    sum_y = float(np.sum(ys))
    sum_xy = float(np.sum(xs * ys))

    det = n * sum_xx - sum_x * sum_x
    if n < 2 or abs(det) <= 1e-12 * max(1.0, n * sum_xx):
        raise NumericDegeneracyError("line fit needs at least two distinct x values")

    intercept = (sum_xx * sum_y - sum_x * sum_xy) / det
    slope = (n * sum_xy - sum_x * sum_y) / det
    return intercept, slope


def line_fit_error(stroke: Stroke, start: int, end: int) -> float:
    """Sum of perpendicular distances from points start..end to their best line.

    The fit runs along whichever axis the points spread over most, so
    vertical runs fit as well as horizontal ones.

    Returns:
        Non-negative error, or MAX_ERROR when every point coincides.
    """
    if end - start < 2:
        return 0.0

    xs = stroke.xs[start:end + 1]
    ys = stroke.ys[start:end + 1]
    if np.ptp(ys) > np.ptp(xs):
        xs, ys = ys, xs

    # Center for conditioning; the perpendicular distance is unaffected
    xs = xs - xs.mean()
    ys = ys - ys.mean()
    try:
        intercept, slope = fit_line(xs, ys)
    except NumericDegeneracyError:
        return MAX_ERROR

    residuals = np.abs(slope * xs - ys + intercept) / math.sqrt(1.0 + slope * slope)
    return float(np.sum(residuals))
