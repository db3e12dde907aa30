"""Kernel density consensus over pooled corner candidates.

Each detector's corner indices are pooled into one multiset and treated
as samples of a 1-D distribution over index position. A Gaussian kernel
density estimate with a fixed bandwidth is evaluated on a regular grid,
and the grid positions where the density stops rising and starts falling
become the agreed corners. Places where several detectors agree pile up
into one peak; lone outliers contribute only a shallow bump.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, List

import numpy as np

from ..config import DEFAULT_CONFIG, SegmentationConfig
from ..domain.geometry import Stroke
from ..domain.results import CornerCandidates
from ..detection.filters import post_filter
from ..errors import InvalidInputError
from ..utils.series import normalize_corners

logger = logging.getLogger(__name__)

NAME = 'KDE Combination'


@dataclass
class UnivariateKDE:
    """Gaussian kernel density estimate with a fixed bandwidth.

    Attributes:
        samples: Observed values.
        bandwidth: Kernel standard deviation.
        step: Spacing of the evaluation grid.
        padding: Fraction of the sample range added on each side of the grid.

    Example:
        >>> kde = UnivariateKDE([0, 0, 9, 9, 18, 18], bandwidth=4.0)
        >>> [round(x) for x in kde.local_maxima()]
        [1, 9, 17]
    """
    samples: np.ndarray
    bandwidth: float = 4.0
    step: float = 0.25
    padding: float = 0.10
    _norm: float = field(init=False, repr=False, default=0.0)

    def __post_init__(self):
        self.samples = np.asarray(self.samples, dtype=float).ravel()
        if self.samples.size == 0:
            raise InvalidInputError("density estimate needs at least one sample")
        if not np.all(np.isfinite(self.samples)):
            raise InvalidInputError("density samples must be finite")
        if self.bandwidth <= 0 or self.step <= 0:
            raise InvalidInputError(
                f"bandwidth and step must be positive, got {self.bandwidth}, {self.step}"
            )
        self._norm = 1.0 / (self.samples.size * self.bandwidth * math.sqrt(2.0 * math.pi))

    def evaluate(self, x) -> np.ndarray:
        """Density at each position in x."""
        x = np.atleast_1d(np.asarray(x, dtype=float))
        z = (x[:, None] - self.samples[None, :]) / self.bandwidth
        return self._norm * np.sum(np.exp(-0.5 * z * z), axis=1)

    def grid(self) -> np.ndarray:
        """Evaluation positions: the padded sample range on a fixed step.

        A degenerate range (all samples equal) is padded by one bandwidth.
        """
        lo = float(self.samples.min())
        hi = float(self.samples.max())
        pad = (hi - lo) * self.padding
        if pad <= 0:
            pad = self.bandwidth
        start = lo - pad
        count = int(math.floor((hi + pad - start) / self.step + 1e-9))
        # Positions as start + step * k, so rounding error does not accumulate
        return start + self.step * np.arange(count + 1)

    def local_maxima(self) -> List[float]:
        """Grid positions where the density stops increasing and starts decreasing.

        The grid is scanned left to right; on a flat top the last position
        of the plateau is reported.
        """
        xs = self.grid()
        density = self.evaluate(xs)
        maxima = []
        rising = False
        for k in range(1, len(density)):
            if density[k] > density[k - 1]:
                rising = True
            elif density[k] < density[k - 1]:
                if rising:
                    maxima.append(float(xs[k - 1]))
                rising = False
        return maxima


def combine_corners(candidates: Iterable[CornerCandidates], stroke: Stroke,
                    config: SegmentationConfig = DEFAULT_CONFIG) -> List[int]:
    """Reconcile several detectors' corner lists into one.

    Density peaks are rounded to the nearest index. Peaks within one
    bandwidth of either end of the stroke are absorbed by that endpoint,
    both endpoints are forced, and the shared post-filters run on the
    result.

    Args:
        candidates: Corner lists over the indices of ``stroke``.
        stroke: Stroke every candidate list refers to.
        config: Supplies the kernel bandwidth, grid step and filter
            thresholds.

    Returns:
        Sorted corner list including both endpoints.
    """
    n = len(stroke)
    pooled = [i for c in candidates for i in c.indices]
    if not pooled:
        return normalize_corners([], n)

    kde = UnivariateKDE(pooled, bandwidth=config.kde_bandwidth, step=config.kde_step)
    peaks = [int(round(x)) for x in kde.local_maxima()]
    last = n - 1
    interior = [p for p in peaks
                if p > config.kde_bandwidth and last - p > config.kde_bandwidth]
    logger.debug("combine_corners: pooled=%d peaks=%s interior=%s", len(pooled), peaks, interior)

    corners = normalize_corners(interior, n)
    return post_filter(stroke, corners, config)
