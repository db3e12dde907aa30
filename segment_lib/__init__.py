"""Stroke Segmentation Package.

Corner detection and segmentation combination for freehand pen strokes.
Given a completed stroke (timestamped 2D samples), the package decides
where the stroke bends sharply enough to be split into straight or curved
primitive segments. Shape recognizers, feature extractors and renderers
consume the result; they are not part of this package.

Architecture Overview:
    Four independent corner detectors each propose corner indices on the
    cleaned stroke. A kernel density consensus step pools their proposals
    and keeps the corners they agree on, and a refinement step merges
    segments while fit error allows. Corners are finally mapped back onto
    the caller's own point indices.

The package is organized into the following modules:
    domain: Value objects (Point, BBox, Stroke) and results
        (CornerCandidates, Segment, SegmentationResult).
    utils: Point series helpers (path length, line test, resampling,
        windowed filters).
    fitting: Line, polynomial and arc fit errors.
    detection: Douglas-Peucker, ShortStraw, Kim and Sezgin detectors
        plus their shared post-filters.
    combination: Kernel density consensus of several corner lists.
    refinement: Fit-error driven segment merging.
    api: The ``segment`` operation and the StrokeSegmenter service.
    config: SegmentationConfig, every tunable threshold in one place.
    errors: Exception types.
    log: Logging setup for applications.

Example usage:
    Segmenting a stroke::

        from segment_lib import Algorithm, Stroke, segment

        stroke = Stroke.from_xy(xs, ys, times)
        result = segment(stroke, Algorithm.KDE_MERGE)
        print(f"corners: {result.corners} ({result.confidence:.2f})")

    Comparing algorithms::

        from segment_lib import StrokeSegmenter

        for result in StrokeSegmenter().segment_all(stroke):
            print(result.algorithm, result.corners)

Attributes:
    __version__ (str): Package version string.
    __all__ (list): List of public symbols exported by this package.
"""

from .api import Algorithm, StrokeSegmenter, segment
from .config import DEFAULT_CONFIG, SegmentationConfig
from .domain import BBox, CornerCandidates, Point, Segment, SegmentationResult, Stroke
from .errors import InvalidInputError, NumericDegeneracyError, SegmentationError

__all__ = [
    # Domain objects
    'Point', 'BBox', 'Stroke', 'CornerCandidates', 'Segment', 'SegmentationResult',
    # Configuration and errors
    'SegmentationConfig', 'DEFAULT_CONFIG',
    'SegmentationError', 'InvalidInputError', 'NumericDegeneracyError',
    # Services
    'Algorithm', 'StrokeSegmenter', 'segment',
]

__version__ = '1.0.0'
