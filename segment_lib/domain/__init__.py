"""Domain objects for stroke segmentation.

This module provides the value objects shared by every stage of the
engine: timestamped points, strokes and their derived copies, and the
corner lists and segmentations the engine produces.

Geometry classes:
    Point: Immutable timestamped 2D sample with vector operations.
    BBox: Immutable bounding box.
    Stroke: Immutable ordered sequence of points.

Result classes:
    CornerCandidates: Corner indices proposed by one detector.
    Segment: Points between two adjacent corners.
    SegmentationResult: Final corner list, segments and confidence.

Example usage:
    Working with strokes::

        from segment_lib.domain import Point, Stroke

        stroke = Stroke([Point(0, 0, 0), Point(5, 0, 10), Point(5, 0, 20)])
        clean = stroke.cleaned()        # drops the repeated sample
        print(f"Stroke length: {clean.length()}")
"""

from .geometry import BBox, Point, Stroke, validate_stroke
from .results import CornerCandidates, Segment, SegmentationResult

__all__ = [
    'Point', 'BBox', 'Stroke', 'validate_stroke',
    'CornerCandidates', 'Segment', 'SegmentationResult',
]
