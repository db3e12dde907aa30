"""Circular-arc fit through a segment's endpoints and its bisector crossing.

The circle is fixed by three points: both segment endpoints and the point
where the perpendicular bisector of their chord crosses the stroke,
choosing the crossing nearest the middle of the segment's path. The
center comes from the closed-form circumscribed-circle equations.
"""

from __future__ import annotations

import logging
import math
from typing import Tuple

import numpy as np

from ..domain.geometry import Point, Stroke
from ..errors import NumericDegeneracyError
from .line import MAX_ERROR

logger = logging.getLogger(__name__)


def bisector_point(stroke: Stroke, start: int, end: int) -> Point:
    """Point where the chord's perpendicular bisector crosses the stroke.

    Each point is projected onto the chord direction relative to the chord
    midpoint; a sign change between neighbours marks a crossing, which is
    linearly interpolated. With several crossings the one closest to the
    middle of the path wins. Without any (zero-length chord) the point
    halfway along the path is returned.
    """
    xs = stroke.xs[start:end + 1]
    ys = stroke.ys[start:end + 1]
    steps = np.hypot(np.diff(xs), np.diff(ys))
    lengths = np.concatenate(([0.0], np.cumsum(steps)))
    half = lengths[-1] / 2.0

    p1, p2 = stroke[start], stroke[end]
    dx, dy = p2.x - p1.x, p2.y - p1.y
    mx, my = (p1.x + p2.x) / 2.0, (p1.y + p2.y) / 2.0
    proj = (xs - mx) * dx + (ys - my) * dy

    best = None
    best_gap = math.inf
    if dx != 0 or dy != 0:
        for i in range(len(proj) - 1):
            a, b = proj[i], proj[i + 1]
            if a == 0:
                frac = 0.0
            elif a * b < 0:
                frac = a / (a - b)
            else:
                continue
            pos = lengths[i] + frac * (lengths[i + 1] - lengths[i])
            if abs(pos - half) < best_gap:
                best_gap = abs(pos - half)
                best = Point(xs[i] + frac * (xs[i + 1] - xs[i]),
                             ys[i] + frac * (ys[i + 1] - ys[i]))

    if best is None:
        x = float(np.interp(half, lengths, xs))
        y = float(np.interp(half, lengths, ys))
        best = Point(x, y)
    return best


def fit_arc(p1: Point, p2: Point, p3: Point) -> Tuple[Point, float]:
    """Circle through three points.

    Returns:
        (center, radius)

    Raises:
        NumericDegeneracyError: If the points are collinear or coincide,
            leaving the bisectors parallel.
    """
    a, b = p1.x, p1.y
    c, d = p2.x, p2.y
    e, f = p3.x, p3.y

    denom_k = b * (e - c) + d * (a - e) + f * (c - a)
    denom_h = a * (f - d) + c * (b - f) + e * (d - b)
    scale = max(abs(a), abs(b), abs(c), abs(d), abs(e), abs(f), 1.0)
    if abs(denom_k) <= 1e-12 * scale * scale or abs(denom_h) <= 1e-12 * scale * scale:
        raise NumericDegeneracyError("arc points are collinear")

    s1 = a * a + b * b
    s2 = c * c + d * d
    s3 = e * e + f * f
    k = 0.5 * (s1 * (e - c) + s2 * (a - e) + s3 * (c - a)) / denom_k
    h = 0.5 * (s1 * (f - d) + s2 * (b - f) + s3 * (d - b)) / denom_h

    center = Point(h, k)
    radius = center.distance_to(p1)
    if not (math.isfinite(h) and math.isfinite(k) and math.isfinite(radius)):
        raise NumericDegeneracyError("arc center is not finite")
    return center, radius


def arc_fit_error(stroke: Stroke, start: int, end: int) -> float:
    """Sum of |radius - distance to center| over points start..end.

    Returns:
        Non-negative error, or MAX_ERROR when no unique circle exists.
    """
    if end - start < 2:
        return MAX_ERROR
    try:
        center, radius = fit_arc(stroke[start], bisector_point(stroke, start, end), stroke[end])
    except NumericDegeneracyError as e:
        logger.debug("arc_fit_error: degenerate arc %d..%d: %s", start, end, e)
        return MAX_ERROR

    xs = stroke.xs[start:end + 1]
    ys = stroke.ys[start:end + 1]
    dist = np.hypot(xs - center.x, ys - center.y)
    error = float(np.sum(np.abs(radius - dist)))
    return error if math.isfinite(error) else MAX_ERROR
