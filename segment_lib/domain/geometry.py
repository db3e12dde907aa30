"""Geometric value objects for stroke segmentation.

Points carry a timestamp next to their coordinates; strokes are immutable
tuples of points. Every transform (cleaning, resampling, sub-ranges)
returns a new stroke, so detectors running side by side never see each
other's intermediate data.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple
import math

import numpy as np

from ..errors import InvalidInputError


@dataclass(frozen=True)
class Point:
    """Pen sample at (x, y) recorded at time t."""
    x: float
    y: float
    t: float = 0.0

    def distance_to(self, other: Point) -> float:
        """Planar distance to another sample; timestamps play no part."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def same_position(self, other: Point) -> bool:
        """True when both samples sit on the same (x, y)."""
        return self.x == other.x and self.y == other.y

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def dot(self, other: Point) -> float:
        return self.x * other.x + self.y * other.y

    def length(self) -> float:
        """Norm of the (x, y) part."""
        return math.hypot(self.x, self.y)

    def normalized(self) -> Point:
        """Direction with unit norm; near-zero vectors give (0, 0)."""
        norm = self.length()
        if norm < 1e-4:
            return Point(0.0, 0.0)
        return Point(self.x / norm, self.y / norm)

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.t)

    def to_list(self) -> List[float]:
        """[x, y, t] as plain floats, ready for json.dumps."""
        return [float(self.x), float(self.y), float(self.t)]

    @classmethod
    def from_tuple(cls, values: Sequence[float]) -> Point:
        """Build from (x, y) or (x, y, t)."""
        return cls(*values[:3])


@dataclass(frozen=True)
class BBox:
    """Axis-aligned extent of a set of samples."""
    x_min: float
    y_min: float
    x_max: float
    y_max: float

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    @property
    def diagonal(self) -> float:
        """Length of the box diagonal, the engine's scale reference."""
        return math.hypot(self.width, self.height)

    def to_tuple(self) -> Tuple[float, float, float, float]:
        return (self.x_min, self.y_min, self.x_max, self.y_max)

    @classmethod
    def from_points(cls, points: Sequence[Point]) -> BBox:
        """Smallest box holding every point; an empty sequence gives a zero box."""
        if not points:
            return cls(0, 0, 0, 0)
        return cls(
            min(p.x for p in points), min(p.y for p in points),
            max(p.x for p in points), max(p.y for p in points),
        )


@dataclass(frozen=True)
class Stroke:
    """A completed pen stroke as an ordered sequence of timestamped points.

    Strokes are never modified in place. cleaned() and resampled() return
    new derived strokes, so a caller's stroke can be shared freely between
    detectors running on different threads.
    """
    points: Tuple[Point, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not isinstance(self.points, tuple):
            object.__setattr__(self, 'points', tuple(self.points))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def __getitem__(self, idx) -> Point:
        return self.points[idx]

    @property
    def start(self) -> Optional[Point]:
        return self.points[0] if self.points else None

    @property
    def end(self) -> Optional[Point]:
        return self.points[-1] if self.points else None

    @property
    def bbox(self) -> BBox:
        return BBox.from_points(self.points)

    @property
    def xs(self) -> np.ndarray:
        return np.array([p.x for p in self.points], dtype=float)

    @property
    def ys(self) -> np.ndarray:
        return np.array([p.y for p in self.points], dtype=float)

    @property
    def times(self) -> np.ndarray:
        return np.array([p.t for p in self.points], dtype=float)

    def length(self) -> float:
        """Arc length: the sum of distances between consecutive samples."""
        if len(self.points) < 2:
            return 0.0
        return float(np.sum(np.hypot(np.diff(self.xs), np.diff(self.ys))))

    @property
    def path_length(self) -> float:
        return self.length()

    def substroke(self, start: int, end: int) -> Stroke:
        """Points from start to end, both inclusive."""
        return Stroke(self.points[start:end + 1])

    def cleaned(self) -> Stroke:
        """Drop samples that repeat a position or do not advance in time.

        A sample is dropped when its (x, y) equals the previously kept
        sample or its timestamp is not greater than the previously kept
        timestamp. The last sample always survives; when it collides with
        the sample kept before it, that earlier sample is dropped instead
        unless it is the first one.

        Returns:
            New stroke whose timestamps strictly increase. A stroke whose
            samples all collide collapses to its first sample.
        """
        if len(self.points) < 2:
            return Stroke(self.points)

        kept = [self.points[0]]
        for p in self.points[1:-1]:
            prev = kept[-1]
            if p.same_position(prev) or p.t <= prev.t:
                continue
            kept.append(p)

        last = self.points[-1]
        if last.same_position(kept[-1]) or last.t <= kept[-1].t:
            if len(kept) == 1:
                return Stroke(tuple(kept))
            kept.pop()
        kept.append(last)
        return Stroke(tuple(kept))

    def resampled(self, spacing: float) -> Stroke:
        """Arc-length uniform copy of this stroke (see utils.series.resample)."""
        from ..utils.series import resample
        return resample(self, spacing)

    @classmethod
    def from_tuples(cls, tuples: Iterable[Sequence[float]]) -> Stroke:
        """Create from (x, y) or (x, y, t) tuples.

        A tuple without a timestamp gets its sample index as t, matching
        from_xy, so untimed input still cleans to a moving stroke.
        """
        points = []
        for i, values in enumerate(tuples):
            if len(values) < 3:
                values = (values[0], values[1], float(i))
            points.append(Point.from_tuple(values))
        return cls(tuple(points))

    @classmethod
    def from_xy(cls, xs: Sequence[float], ys: Sequence[float],
                times: Optional[Sequence[float]] = None) -> Stroke:
        """Create from coordinate arrays.

        Args:
            xs: X coordinates.
            ys: Y coordinates, same length as xs.
            times: Optional timestamps. When omitted, samples are spaced
                one time unit apart starting at 0.

        Raises:
            InvalidInputError: If the array lengths differ.
        """
        if times is None:
            times = range(len(xs))
        if not (len(xs) == len(ys) == len(times)):
            raise InvalidInputError(
                f"coordinate arrays differ in length: {len(xs)}, {len(ys)}, {len(times)}"
            )
        return cls(tuple(
            Point(float(x), float(y), float(t)) for x, y, t in zip(xs, ys, times)
        ))


def validate_stroke(stroke: Optional[Stroke]) -> Stroke:
    """Check that a caller-supplied stroke can be segmented.

    Args:
        stroke: Stroke to check.

    Returns:
        The same stroke, for chaining.

    Raises:
        InvalidInputError: If the stroke is None, has fewer than 2 points,
            holds non-finite values, or has decreasing timestamps.
    """
    if stroke is None:
        raise InvalidInputError("stroke is None")
    if not isinstance(stroke, Stroke):
        raise InvalidInputError(f"expected a Stroke, got {type(stroke).__name__}")
    if len(stroke) < 2:
        raise InvalidInputError(f"stroke needs at least 2 points, got {len(stroke)}")

    values = np.array([p.to_tuple() for p in stroke.points], dtype=float)
    if not np.all(np.isfinite(values)):
        raise InvalidInputError("stroke contains non-finite coordinates or timestamps")
    if np.any(np.diff(values[:, 2]) < 0):
        raise InvalidInputError("stroke timestamps must not decrease")
    return stroke
