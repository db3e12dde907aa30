"""Curvature and pen-speed corner detector.

Pens slow down at corners. This detector smooths two per-point signals,
curvature (turning angle per unit length) and speed (path length per unit
time), and looks for index runs where speed is below speed_threshold times
the average AND curvature is above curvature_threshold times the average.
Each run contributes its point of maximal curvature.

The initial corners are then extended by a hybrid fit: curvature-only
and speed-only candidates are added one at a time, best certainty first,
and the smallest corner set whose polyline error is close enough to the
error of using every candidate wins.
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

import numpy as np
from scipy.ndimage import gaussian_filter1d

from ..config import DEFAULT_CONFIG, SegmentationConfig
from ..domain.geometry import Stroke
from ..domain.results import CornerCandidates
from ..fitting.objective import polyline_fit_error
from ..utils.series import average_filter, normalize_corners, path_lengths, turning_angles
from .filters import post_filter

logger = logging.getLogger(__name__)

NAME = 'Sezgin'


def _neighbours(n: int) -> Tuple[np.ndarray, np.ndarray]:
    prev = np.concatenate(([0], np.arange(n - 1)))
    nxt = np.concatenate((np.arange(1, n), [n - 1]))
    return prev, nxt


def pen_speed(stroke: Stroke, lengths: np.ndarray, window: int) -> np.ndarray:
    """Centered path-length-per-time speed, mean filtered over window."""
    n = len(stroke)
    prev, nxt = _neighbours(n)
    times = stroke.times
    ds = lengths[nxt] - lengths[prev]
    dt = times[nxt] - times[prev]
    speed = np.divide(ds, dt, out=np.zeros(n), where=dt > 0)
    return average_filter(speed, window)


def curvature(stroke: Stroke, lengths: np.ndarray, sigma: float) -> np.ndarray:
    """Absolute turning angle per unit path length, Gaussian smoothed."""
    n = len(stroke)
    prev, nxt = _neighbours(n)
    ds = (lengths[nxt] - lengths[prev]) / 2.0
    turns = np.abs(turning_angles(stroke))
    raw = np.divide(turns, ds, out=np.zeros(n), where=ds > 0)
    return gaussian_filter1d(raw, sigma=sigma, mode='nearest')


def _runs(mask: np.ndarray) -> List[Tuple[int, int]]:
    """(start, end) inclusive index ranges where mask is True."""
    runs = []
    i = 0
    n = len(mask)
    while i < n:
        if mask[i]:
            start = i
            while i + 1 < n and mask[i + 1]:
                i += 1
            runs.append((start, i))
        i += 1
    return runs


def _run_representatives(mask: np.ndarray, score: np.ndarray, largest: bool) -> List[int]:
    picks = []
    for start, end in _runs(mask):
        segment = score[start:end + 1]
        offset = int(np.argmax(segment)) if largest else int(np.argmin(segment))
        picks.append(start + offset)
    return picks


def curvature_certainty(i: int, turns: np.ndarray, lengths: np.ndarray, window: int) -> float:
    """Direction change across i's neighbourhood per unit path length."""
    n = len(turns)
    lo = max(i - window, 0)
    hi = min(i + window, n - 1)
    path = lengths[hi] - lengths[lo]
    if path <= 0:
        return 0.0
    return float(abs(np.sum(turns[lo + 1:hi]))) / path


def speed_certainty(i: int, speed: np.ndarray) -> float:
    """1 - speed / max speed; slower points are more certain corners."""
    top = float(np.max(speed))
    if top <= 0:
        return 0.0
    return 1.0 - float(speed[i]) / top


def hybrid_fit(stroke: Stroke, initial: Sequence[int], curvature_candidates: Sequence[int],
               speed_candidates: Sequence[int], lengths: np.ndarray, speed: np.ndarray,
               config: SegmentationConfig = DEFAULT_CONFIG) -> List[int]:
    """Grow the initial corner set with the most certain extra candidates.

    At each step the best remaining curvature candidate and the best
    remaining speed candidate are each tried; the one giving the lower
    polyline error is kept. The fit with the fewest corners whose error
    is at most errorAll + hybrid_error_ratio * (error0 - errorAll) wins,
    where error0 is the initial fit's error and errorAll the error with
    every candidate added.

    Returns:
        Sorted corner list including both endpoints.
    """
    n = len(stroke)
    total = float(lengths[-1])
    current = normalize_corners(initial, n)
    fits = [(current, polyline_fit_error(stroke, current, total))]

    window = config.certainty_window
    turns = turning_angles(stroke)
    fc = sorted((c for c in set(curvature_candidates) if c not in current),
                key=lambda c: -curvature_certainty(c, turns, lengths, window))
    fs = sorted((c for c in set(speed_candidates) if c not in current),
                key=lambda c: -speed_certainty(c, speed))

    while fc or fs:
        options = []
        if fc:
            trial = normalize_corners(current + [fc[0]], n)
            options.append((polyline_fit_error(stroke, trial, total), 0, fc[0], trial))
        if fs:
            trial = normalize_corners(current + [fs[0]], n)
            options.append((polyline_fit_error(stroke, trial, total), 1, fs[0], trial))
        error, _, added, trial = min(options, key=lambda o: (o[0], o[1]))
        fc = [c for c in fc if c != added]
        fs = [c for c in fs if c != added]
        current = trial
        fits.append((current, error))

    error0 = fits[0][1]
    error_all = fits[-1][1]
    threshold = error_all + config.hybrid_error_ratio * (error0 - error_all)
    for corners, error in fits:
        if error <= threshold:
            return corners
    return fits[-1][0]


def sezgin_corners(stroke: Stroke, config: SegmentationConfig = DEFAULT_CONFIG) -> CornerCandidates:
    """Find corners where the pen slows down while turning sharply.

    Args:
        stroke: Cleaned stroke with strictly increasing timestamps.
        config: Thresholds.

    Returns:
        CornerCandidates over the indices of ``stroke``.
    """
    n = len(stroke)
    if n < 3:
        return CornerCandidates(tuple(normalize_corners([], max(n, 1))), NAME)

    lengths = path_lengths(stroke)
    speed = pen_speed(stroke, lengths, config.speed_window)
    curv = curvature(stroke, lengths, config.curvature_sigma)

    high_curvature = curv > config.curvature_threshold * float(np.mean(curv))
    low_speed = speed < config.speed_threshold * float(np.mean(speed))

    initial = _run_representatives(high_curvature & low_speed, curv, largest=True)
    fc = _run_representatives(high_curvature, curv, largest=True)
    fs = _run_representatives(low_speed, speed, largest=False)
    logger.debug("sezgin_corners: initial=%s curvature=%s speed=%s", initial, fc, fs)

    corners = hybrid_fit(stroke, initial, fc, fs, lengths, speed, config)
    corners = post_filter(stroke, corners, config, strengths=curv)
    return CornerCandidates(tuple(corners), NAME)
