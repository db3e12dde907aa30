"""Corner detectors.

Every detector is a plain function with the signature
``(stroke, config) -> CornerCandidates``. It takes a cleaned stroke and
returns sorted, duplicate-free corner indices into that stroke, always
including the first and last index. Detectors that need uniform sampling
resample internally and map their corners back by timestamp; none of them
modify the stroke they are given.

Detectors:
    douglas_peucker_corners: Recursive extremal-distance splitting.
    short_straw_corners: Local minima of the straw length.
    kim_corners: Peaks of locally monotonic curvature.
    sezgin_corners: Low pen speed combined with high curvature.

Shared post-filters (from filters module):
    post_filter: Hook, similarity and collinearity filtering, in order.

Example usage::

    from segment_lib.detection import DETECTORS

    clean = stroke.cleaned()
    for name, detector in DETECTORS.items():
        print(name, detector(clean).indices)
"""

from .douglas_peucker import douglas_peucker_corners
from .filters import drop_collinear, drop_hooks, merge_similar, post_filter
from .kim import kim_corners
from .sezgin import sezgin_corners
from .short_straw import short_straw_corners

# Fixed order; detector results are always combined in this order
DETECTORS = {
    'Douglas-Peucker': douglas_peucker_corners,
    'ShortStraw': short_straw_corners,
    'KimSquared': kim_corners,
    'Sezgin': sezgin_corners,
}

__all__ = [
    'DETECTORS',
    'douglas_peucker_corners', 'short_straw_corners', 'kim_corners', 'sezgin_corners',
    'post_filter', 'drop_hooks', 'merge_similar', 'drop_collinear',
]
