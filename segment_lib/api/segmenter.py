"""Segmentation service: the engine's single external operation.

This module exposes ``segment(stroke, algorithm, config)``, which cleans
the caller's stroke, runs the selected detector or pipeline, and maps the
resulting corners back onto the caller's own point indices.

The module contains:
    Algorithm: Enum selecting a single detector, the consensus combiner
        pipeline, or the combiner + refiner pipeline.
    StrokeSegmenter: Service holding a configuration; runs the four
        detectors on a thread pool and joins them in a fixed order.
    segment: Convenience function around a StrokeSegmenter.

Example usage:
    One-off segmentation::

        from segment_lib.api import Algorithm, segment

        result = segment(stroke, Algorithm.KDE_MERGE)
        for seg in result.segments:
            print(seg.start, seg.end)

    Reusing a configured service::

        from segment_lib.api import StrokeSegmenter
        from segment_lib.config import SegmentationConfig

        segmenter = StrokeSegmenter(SegmentationConfig(max_workers=2))
        ranked = segmenter.segment_all(stroke)
        best = ranked[0]
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from ..combination.kde import NAME as COMBINATION_NAME
from ..combination.kde import combine_corners
from ..config import DEFAULT_CONFIG, SegmentationConfig
from ..detection import DETECTORS
from ..domain.geometry import Stroke, validate_stroke
from ..domain.results import CornerCandidates, SegmentationResult
from ..errors import InvalidInputError
from ..fitting.objective import rank_results
from ..refinement.merge import NAME as REFINEMENT_NAME
from ..refinement.merge import refine_corners
from ..utils.series import map_indices, normalize_corners

_logger = logging.getLogger(__name__)


class Algorithm(Enum):
    """Segmentation algorithms; values are the names written on results."""
    DOUGLAS_PEUCKER = 'Douglas-Peucker'
    SHORT_STRAW = 'ShortStraw'
    KIM = 'KimSquared'
    SEZGIN = 'Sezgin'
    KDE_COMBINATION = COMBINATION_NAME
    KDE_MERGE = REFINEMENT_NAME

    @property
    def is_detector(self) -> bool:
        return self.value in DETECTORS

    @classmethod
    def from_name(cls, name: Union[str, Algorithm]) -> Algorithm:
        """Look up an algorithm by enum member name or by value.

        Raises:
            InvalidInputError: If no algorithm matches.
        """
        if isinstance(name, cls):
            return name
        for member in cls:
            if name in (member.name, member.value) or str(name).upper() == member.name:
                return member
        raise InvalidInputError(f"unknown segmentation algorithm: {name!r}")


@dataclass
class StrokeSegmenter:
    """Service that segments strokes with a fixed configuration.

    The service holds no per-stroke state, so one instance can segment
    strokes from several threads at once.

    Attributes:
        config: Thresholds used for every call.

    Example:
        >>> segmenter = StrokeSegmenter()
        >>> result = segmenter.segment(stroke, Algorithm.KDE_COMBINATION)
        >>> result.corners
        (0, 9, 19)
    """
    config: SegmentationConfig = field(default_factory=lambda: DEFAULT_CONFIG)

    def detect_all(self, clean: Stroke) -> List[CornerCandidates]:
        """Run every detector on a cleaned stroke.

        Detectors run on a thread pool of config.max_workers threads (inline
        when it is 1). Results are joined in the fixed DETECTORS order, so
        the output does not depend on scheduling.
        """
        detectors = list(DETECTORS.values())
        if self.config.max_workers == 1:
            return [detector(clean, self.config) for detector in detectors]

        workers = min(self.config.max_workers, len(detectors))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(detector, clean, self.config) for detector in detectors]
            return [future.result() for future in futures]

    def _is_short(self, clean: Stroke) -> bool:
        return (len(clean) < self.config.short_stroke_points
                or clean.length() < self.config.short_stroke_length)

    def segment(self, stroke: Stroke,
                algorithm: Union[Algorithm, str] = Algorithm.KDE_MERGE) -> SegmentationResult:
        """Segment a stroke into corner-delimited pieces.

        Args:
            stroke: Caller's stroke. It is never modified.
            algorithm: Detector or pipeline to run.

        Returns:
            SegmentationResult whose corners index into ``stroke``.

        Raises:
            InvalidInputError: If the stroke is None, has fewer than 2
                points, holds non-finite values or decreasing timestamps,
                fewer than 2 distinct samples survive cleaning, or the
                algorithm is unknown.
        """
        validate_stroke(stroke)
        algorithm = Algorithm.from_name(algorithm)
        config = self.config

        clean = stroke.cleaned()
        if len(clean) < 2:
            raise InvalidInputError("stroke collapses to a single sample after cleaning")
        if self._is_short(clean):
            _logger.debug("segment: short stroke (%d points) bypasses detection", len(stroke))
            return SegmentationResult(
                stroke=stroke,
                corners=tuple(normalize_corners([], len(stroke))),
                algorithm=algorithm.value,
                confidence=config.single_confidence,
            )

        confidence = config.default_confidence
        converged = True
        iterations = 0

        if algorithm.is_detector:
            corners = list(DETECTORS[algorithm.value](clean, config).indices)
        else:
            candidates = self.detect_all(clean)
            corners = combine_corners(candidates, clean, config)
            if algorithm is Algorithm.KDE_MERGE:
                refined = refine_corners(clean, corners, config)
                corners = refined.corners
                converged = refined.converged
                iterations = refined.iterations
                if not converged:
                    confidence *= config.nonconvergence_penalty

        mapped = map_indices(clean, stroke, corners)
        _logger.debug("segment: algorithm=%s points=%d corners=%s",
                      algorithm.value, len(stroke), mapped)
        return SegmentationResult(
            stroke=stroke,
            corners=tuple(mapped),
            algorithm=algorithm.value,
            confidence=confidence,
            converged=converged,
            iterations=iterations,
        )

    def segment_all(self, stroke: Stroke) -> List[SegmentationResult]:
        """Run every algorithm and return results best first.

        Results are ordered by polyline error, then by fewer segments.
        """
        results = [self.segment(stroke, algorithm) for algorithm in Algorithm]
        return rank_results(results)


def segment(stroke: Stroke, algorithm: Union[Algorithm, str] = Algorithm.KDE_MERGE,
            config: Optional[SegmentationConfig] = None) -> SegmentationResult:
    """Segment a stroke with the given algorithm and configuration.

    Args:
        stroke: Caller's stroke. It is never modified.
        algorithm: Detector or pipeline to run. Defaults to the full
            combiner + refiner pipeline.
        config: Thresholds. Defaults to SegmentationConfig().

    Returns:
        SegmentationResult whose corners index into ``stroke``.
    """
    return StrokeSegmenter(config or DEFAULT_CONFIG).segment(stroke, algorithm)
