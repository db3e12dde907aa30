"""Exception types raised by the segmentation engine.

All errors derive from SegmentationError so collaborators can catch the
whole family with one clause. InvalidInputError is also a ValueError, and
NumericDegeneracyError is also an ArithmeticError, so code written against
the builtin hierarchy keeps working.

NumericDegeneracyError never reaches the caller of ``segment``: the fit
error wrappers in ``segment_lib.fitting`` catch it and substitute the
``MAX_ERROR`` sentinel.
"""


class SegmentationError(Exception):
    """Base class for segmentation engine errors."""


class InvalidInputError(SegmentationError, ValueError):
    """Stroke, window or threshold outside its documented valid range."""


class NumericDegeneracyError(SegmentationError, ArithmeticError):
    """A fit has no unique solution (singular system, coincident points)."""
