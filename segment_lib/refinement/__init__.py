"""Segmentation refinement.

Merges neighbouring segments of a combined corner list while the fit
error allows it, then removes corners between collinear lines.
"""

from .merge import NAME, RefinementResult, refine_corners

__all__ = ['NAME', 'RefinementResult', 'refine_corners']
