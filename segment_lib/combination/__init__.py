"""Corner consensus combination.

Pools the candidate lists of several detectors and keeps the corners
they agree on, using a fixed-bandwidth Gaussian kernel density estimate
over index position.

Example usage::

    from segment_lib.combination import combine_corners
    from segment_lib.detection import DETECTORS

    clean = stroke.cleaned()
    candidates = [detector(clean) for detector in DETECTORS.values()]
    corners = combine_corners(candidates, clean)
"""

from .kde import NAME, UnivariateKDE, combine_corners

__all__ = ['NAME', 'UnivariateKDE', 'combine_corners']
