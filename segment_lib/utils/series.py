"""Point series utilities shared by every detector and fit.

This module holds the low-level signal helpers the engine is built on:
cumulative path length, the straight-line test, arc-length resampling,
clamp-and-repeat windowing with the filters built on it, direction and
turning-angle signals, and mapping corner indices between a stroke and
its derived copies.

The module provides the following functions:
    path_lengths: Cumulative arc length at each point.
    is_line: Decide whether the span between two indices is straight.
    resample_spacing: Interval giving a target density per bbox diagonal.
    resample: Arc-length uniform copy of a stroke.
    get_window: Centered window with repeated boundary values.
    median_filter, average_filter, mode_filter: Windowed filters.
    segment_directions, turning_angles: Direction signals.
    chord_distances: Perpendicular distances to a chord.
    map_indices: Move corner indices to another stroke by timestamp.
    normalize_corners: Sort, deduplicate and force both endpoints.

Example usage:
    Straight-line test on a sub-range::

        from segment_lib.utils.series import is_line, path_lengths

        lengths = path_lengths(stroke)
        if is_line(0, len(stroke) - 1, stroke, lengths, 0.92):
            print("stroke is a single line")

    Filtering a signal::

        from segment_lib.utils.series import get_window, median_filter

        get_window([1, 2, 3, 4, 5], 3, 0)   # [1, 1, 2]
        smooth = median_filter(speeds, 5)
"""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence

import numpy as np
from scipy import ndimage

from ..domain.geometry import Point, Stroke
from ..errors import InvalidInputError

# Spans shorter than this (path distance) are always treated as lines
LINE_SIZE_FLOOR = 10.0
# Spans with fewer points between them than this are always treated as lines
LINE_POINT_FLOOR = 5


def path_lengths(stroke: Stroke) -> np.ndarray:
    """Cumulative Euclidean path length up to each point.

    Args:
        stroke: Stroke to measure.

    Returns:
        Float array of len(stroke) values; index 0 is 0.0.
    """
    if len(stroke) == 0:
        return np.zeros(0)
    steps = np.hypot(np.diff(stroke.xs), np.diff(stroke.ys))
    return np.concatenate(([0.0], np.cumsum(steps)))


def is_line(p1: int, p2: int, stroke: Stroke, lengths: Sequence[float],
            ratio_threshold: float, size_floor: float = LINE_SIZE_FLOOR,
            point_floor: int = LINE_POINT_FLOOR) -> bool:
    """Decide whether the stroke between two indices is a straight line.

    The span is a line when the chord to path length ratio exceeds
    ratio_threshold, or when the span is too small to judge: its path
    distance is below size_floor or its index gap is below point_floor.
    The result does not depend on the order of p1 and p2.

    Args:
        p1: First index.
        p2: Second index.
        stroke: Stroke the indices refer to.
        lengths: path_lengths(stroke).
        ratio_threshold: Minimum chord / path ratio for a line.
        size_floor: Path distance below which any span is a line.
        point_floor: Index gap below which any span is a line.

    Returns:
        True when the span should be treated as a straight line.
    """
    path = abs(lengths[p2] - lengths[p1])
    if path < size_floor or abs(p2 - p1) < point_floor:
        return True
    chord = stroke[p1].distance_to(stroke[p2])
    return chord / path > ratio_threshold


def resample_spacing(stroke: Stroke, pts_per_diagonal: float, min_spacing: float) -> float:
    """Resampling interval giving pts_per_diagonal samples per bbox diagonal."""
    return max(stroke.bbox.diagonal / pts_per_diagonal, min_spacing)


def resample(stroke: Stroke, spacing: float) -> Stroke:
    """Arc-length uniform copy of a stroke.

    Walks the stroke and emits a point every ``spacing`` units of path
    length, linearly interpolating x, y and time. The first and last input
    points are always kept. A final interval shorter than half the spacing
    is folded into the previous one so the tail carries no near-duplicate
    sample.

    Args:
        stroke: Stroke to resample. It is not modified.
        spacing: Target distance between consecutive output points.

    Returns:
        New stroke. Strokes with fewer than 2 points or zero length come
        back as an unchanged copy.

    Raises:
        InvalidInputError: If spacing is not a positive finite number.
    """
    if not math.isfinite(spacing) or spacing <= 0:
        raise InvalidInputError(f"resample spacing must be positive, got {spacing!r}")

    lengths = path_lengths(stroke)
    if len(stroke) < 2 or lengths[-1] <= 0:
        return Stroke(stroke.points)

    total = float(lengths[-1])
    count = int(math.floor(total / spacing))
    targets = spacing * np.arange(count + 1)
    targets = targets[targets < total]
    if len(targets) > 1 and total - targets[-1] < spacing / 2:
        targets = targets[:-1]
    targets = np.append(targets, total)

    xs = np.interp(targets, lengths, stroke.xs)
    ys = np.interp(targets, lengths, stroke.ys)
    ts = np.interp(targets, lengths, stroke.times)

    points = [Point(float(x), float(y), float(t)) for x, y, t in zip(xs, ys, ts)]
    points[0] = stroke.start
    points[-1] = stroke.end
    return Stroke(tuple(points))


def default_window_size(n: int) -> int:
    """Odd window size close to sqrt(n)."""
    size = max(int(round(math.sqrt(n))), 1)
    if size % 2 == 0:
        size += 1
    return size


def _check_window(window_size: int) -> int:
    if window_size is None or int(window_size) != window_size:
        raise InvalidInputError(f"window size must be an integer, got {window_size!r}")
    window_size = int(window_size)
    if window_size < 1 or window_size % 2 == 0:
        raise InvalidInputError(f"window size must be a positive odd number, got {window_size}")
    return window_size


def get_window(data: Sequence, window_size: int, i: int) -> List:
    """Centered window of data around index i.

    Positions that fall off either end repeat the boundary value, so the
    window always holds exactly window_size values.

    Args:
        data: Sequence to window.
        window_size: Positive odd window length.
        i: Center index, 0 <= i < len(data).

    Returns:
        List of window_size values.

    Raises:
        InvalidInputError: If the window size is not a positive odd
            integer or i is out of range.

    Example:
        >>> get_window([1, 2, 3, 4, 5], 3, 4)
        [4, 5, 5]
    """
    window_size = _check_window(window_size)
    n = len(data)
    if not 0 <= i < n:
        raise InvalidInputError(f"window center {i} outside 0..{n - 1}")
    half = window_size // 2
    return [data[min(max(j, 0), n - 1)] for j in range(i - half, i + half + 1)]


def _as_signal(data: Iterable[float]) -> np.ndarray:
    values = np.asarray(data, dtype=float)
    if values.ndim != 1:
        raise InvalidInputError(f"expected a 1-D signal, got shape {values.shape}")
    return values


def median_filter(data: Iterable[float], window_size: Optional[int] = None) -> np.ndarray:
    """Windowed median with repeated boundary values.

    Args:
        data: 1-D signal.
        window_size: Odd window length. Defaults to default_window_size.

    Returns:
        Filtered float array of the same length.
    """
    values = _as_signal(data)
    if values.size == 0:
        return values.copy()
    if window_size is None:
        window_size = default_window_size(values.size)
    window_size = _check_window(window_size)
    return ndimage.median_filter(values, size=window_size, mode='nearest')


def average_filter(data: Iterable[float], window_size: Optional[int] = None) -> np.ndarray:
    """Windowed mean with repeated boundary values."""
    values = _as_signal(data)
    if values.size == 0:
        return values.copy()
    if window_size is None:
        window_size = default_window_size(values.size)
    window_size = _check_window(window_size)
    return ndimage.uniform_filter1d(values, size=window_size, mode='nearest')


def mode_filter(data: Iterable[float], window_size: Optional[int] = None) -> np.ndarray:
    """Windowed mode with repeated boundary values; ties pick the smallest value."""
    values = _as_signal(data)
    if values.size == 0:
        return values.copy()
    if window_size is None:
        window_size = default_window_size(values.size)
    result = np.empty_like(values)
    for i in range(values.size):
        uniq, counts = np.unique(get_window(values, window_size, i), return_counts=True)
        result[i] = uniq[np.argmax(counts)]
    return result


def wrap_angle(angle):
    """Wrap an angle (or array of angles) into [-pi, pi)."""
    return (angle + math.pi) % (2 * math.pi) - math.pi


def segment_directions(stroke: Stroke) -> np.ndarray:
    """Direction (radians) of each segment i -> i + 1; len(stroke) - 1 values."""
    return np.arctan2(np.diff(stroke.ys), np.diff(stroke.xs))


def turning_angles(stroke: Stroke) -> np.ndarray:
    """Signed direction change at each vertex.

    Value i is the wrapped difference between the direction of segment
    i -> i + 1 and segment i - 1 -> i. Both endpoints get 0.
    """
    turns = np.zeros(len(stroke))
    if len(stroke) < 3:
        return turns
    turns[1:-1] = wrap_angle(np.diff(segment_directions(stroke)))
    return turns


def angle_between(d1: Point, d2: Point) -> float:
    """Angle between two direction vectors in radians, 0 to pi.

    Example:
        >>> angle_between(Point(1, 0), Point(0, 1))
        1.5707963267948966
    """
    dot = d1.normalized().dot(d2.normalized())
    return math.acos(max(-1.0, min(1.0, dot)))


def chord_distances(stroke: Stroke, start: int, end: int) -> np.ndarray:
    """Perpendicular distance of points start..end to the start-end chord.

    When the chord has zero length the distance to the start point is
    used instead.
    """
    xs = stroke.xs[start:end + 1]
    ys = stroke.ys[start:end + 1]
    ax, ay = stroke[start].x, stroke[start].y
    dx = stroke[end].x - ax
    dy = stroke[end].y - ay
    chord = math.hypot(dx, dy)
    if chord == 0:
        return np.hypot(xs - ax, ys - ay)
    return np.abs(dx * (ys - ay) - dy * (xs - ax)) / chord


def normalize_corners(indices: Iterable[int], n: int) -> List[int]:
    """Sorted, deduplicated corner list holding 0 and n - 1.

    Raises:
        InvalidInputError: If an index falls outside 0..n - 1.
    """
    if n < 1:
        raise InvalidInputError("cannot place corners on an empty stroke")
    result = {0, n - 1}
    for i in indices:
        i = int(i)
        if not 0 <= i < n:
            raise InvalidInputError(f"corner index {i} outside 0..{n - 1}")
        result.add(i)
    return sorted(result)


def nearest_indices(source: Stroke, target: Stroke, indices: Iterable[int]) -> List[int]:
    """Target index with the nearest timestamp for each source index.

    Ties go to the earlier target point. Order and duplicates are kept.
    """
    target_times = target.times
    source_times = source.times
    last = len(target_times) - 1
    nearest = []
    for i in indices:
        t = source_times[i]
        j = int(np.searchsorted(target_times, t))
        if j > last:
            j = last
        elif j > 0 and t - target_times[j - 1] <= target_times[j] - t:
            j -= 1
        nearest.append(j)
    return nearest


def map_indices(source: Stroke, target: Stroke, indices: Iterable[int]) -> List[int]:
    """Map corner indices from a derived stroke onto another stroke.

    Each index moves to the target point with the nearest timestamp (see
    nearest_indices). The result is passed through normalize_corners, so
    both target endpoints are always present.

    Args:
        source: Stroke the indices refer to.
        target: Stroke to map onto, typically the stroke source was
            derived from.
        indices: Corner indices into source.

    Returns:
        Sorted corner indices into target.
    """
    return normalize_corners(nearest_indices(source, target, indices), len(target))
