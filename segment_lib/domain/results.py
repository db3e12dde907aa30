"""Corner candidates, segments and segmentation results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from .geometry import Point, Stroke


@dataclass(frozen=True)
class CornerCandidates:
    """Corner indices proposed by one detector.

    Indices refer to the stroke the detector ran on. The list is sorted,
    free of duplicates and holds both stroke endpoints.

    Attributes:
        indices: Sorted corner indices.
        detector: Name of the detector that produced them.
    """
    indices: Tuple[int, ...]
    detector: str

    def __len__(self) -> int:
        return len(self.indices)

    def __iter__(self):
        return iter(self.indices)


@dataclass(frozen=True)
class Segment:
    """Stroke points between two adjacent corners, both ends inclusive."""
    stroke: Stroke = field(repr=False)
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start + 1

    @property
    def points(self) -> Tuple[Point, ...]:
        return self.stroke.points[self.start:self.end + 1]

    @property
    def start_point(self) -> Point:
        return self.stroke[self.start]

    @property
    def end_point(self) -> Point:
        return self.stroke[self.end]

    def path_length(self) -> float:
        """Arc length of the segment."""
        return self.stroke.substroke(self.start, self.end).length()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'start': self.start,
            'end': self.end,
            'points': [p.to_list() for p in self.points],
        }


@dataclass(frozen=True)
class SegmentationResult:
    """Final segmentation of a caller's stroke.

    Segment boundaries always equal ``corners``: segment k spans
    ``corners[k]..corners[k + 1]`` of ``stroke``. The first corner is 0 and
    the last is ``len(stroke) - 1``.

    Attributes:
        stroke: The stroke that was segmented, as supplied by the caller.
        corners: Sorted corner indices into ``stroke``.
        algorithm: Name of the algorithm that produced the corners.
        confidence: Confidence in [0, 1].
        converged: False when refinement hit its iteration cap.
        iterations: Refinement iterations performed (0 when not refined).
    """
    stroke: Stroke = field(repr=False)
    corners: Tuple[int, ...]
    algorithm: str
    confidence: float
    converged: bool = True
    iterations: int = 0

    @property
    def segments(self) -> List[Segment]:
        return [
            Segment(self.stroke, a, b)
            for a, b in zip(self.corners[:-1], self.corners[1:])
        ]

    @property
    def num_corners(self) -> int:
        return len(self.corners)

    @property
    def corner_points(self) -> List[Point]:
        return [self.stroke[i] for i in self.corners]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'algorithm': self.algorithm,
            'confidence': self.confidence,
            'converged': self.converged,
            'iterations': self.iterations,
            'corners': list(self.corners),
            'segments': [[s.start, s.end] for s in self.segments],
        }
