"""Public API for stroke segmentation.

This module provides the high-level entry points collaborators use:
shape recognizers read ``SegmentationResult.segments``, feature
extraction reads ``corners``, and renderers read segment boundaries.

Classes:
    Algorithm: Selects a detector or pipeline.
    StrokeSegmenter: Configured service with detector fan-out.

Functions:
    segment: Segment one stroke.

Example usage::

    from segment_lib.api import Algorithm, segment

    result = segment(stroke, Algorithm.SHORT_STRAW)
    print(result.algorithm, result.corners, result.confidence)
"""

from .segmenter import Algorithm, StrokeSegmenter, segment

__all__ = ['Algorithm', 'StrokeSegmenter', 'segment']
