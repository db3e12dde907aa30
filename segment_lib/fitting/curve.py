"""Least-squares polynomial curve fit over a stroke range."""

from __future__ import annotations

import numpy as np

from ..domain.geometry import Stroke
from ..errors import NumericDegeneracyError
from .line import MAX_ERROR


def fit_curve(xs: np.ndarray, ys: np.ndarray, degree: int) -> np.ndarray:
    """Fit y = f(x) with a degree-k polynomial via the normal equations.

    Args:
        xs: Sample abscissas.
        ys: Sample ordinates.
        degree: Polynomial degree.

    Returns:
        Coefficients, lowest order first.

    Raises:
        NumericDegeneracyError: If the normal-equations matrix is singular,
            e.g. there are fewer distinct x values than coefficients.
    """
    vander = np.vander(xs, degree + 1, increasing=True)
    normal = vander.T @ vander
    rhs = vander.T @ ys
    if np.linalg.matrix_rank(normal) < degree + 1:
        raise NumericDegeneracyError(f"singular normal equations for degree {degree}")
    try:
        coeffs = np.linalg.solve(normal, rhs)
    except np.linalg.LinAlgError as e:
        raise NumericDegeneracyError(str(e)) from e
    if not np.all(np.isfinite(coeffs)):
        raise NumericDegeneracyError("non-finite polynomial coefficients")
    return coeffs


def curve_fit_error(stroke: Stroke, start: int, end: int, degree: int = 4) -> float:
    """Sum of absolute residuals of a degree-k polynomial fit to start..end.

    Returns:
        Non-negative error, or MAX_ERROR when the fit is singular.
    """
    xs = stroke.xs[start:end + 1]
    ys = stroke.ys[start:end + 1]

    # Scale x to [-1, 1] so high powers stay well conditioned
    center = (xs.max() + xs.min()) / 2.0
    scale = (xs.max() - xs.min()) / 2.0
    if scale == 0:
        return MAX_ERROR
    u = (xs - center) / scale

    try:
        coeffs = fit_curve(u, ys, degree)
    except NumericDegeneracyError:
        return MAX_ERROR

    residuals = ys - np.vander(u, degree + 1, increasing=True) @ coeffs
    error = float(np.sum(np.abs(residuals)))
    return error if np.isfinite(error) else MAX_ERROR
