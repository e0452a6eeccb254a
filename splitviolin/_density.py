"""Kernel density curves for one subgroup of observations."""
from __future__ import annotations

import logging

import numpy as np
from matplotlib import mlab

from ._config import RenderConfig
from ._types import DensityCurve

logger = logging.getLogger(__name__)


def estimate_density(values, config: RenderConfig) -> DensityCurve:
    """Evaluate a Gaussian KDE over ``values`` on ``config.gridsize`` points.

    With ``trim`` the grid spans exactly ``[min, max]`` of the data, otherwise
    it extends ``cut`` bandwidths past both ends.  Empty input gives an empty
    curve; a single point or zero-variance input gives a collapsed curve at
    that value with zero density, since no bandwidth can be estimated.
    """
    data = np.asarray(values, dtype=float)
    if data.size == 0:
        return DensityCurve(np.empty(0), np.empty(0))

    lo, hi = float(data.min()), float(data.max())
    if data.size < 2 or hi <= lo:
        logger.debug("Degenerate subgroup (n=%d, value=%g); collapsing",
                     data.size, lo)
        return DensityCurve(np.array([lo, hi]), np.zeros(2))

    kde = mlab.GaussianKDE(data, bw_method=config.bw_method)
    if not config.trim:
        bandwidth = kde.factor * data.std(ddof=1)
        lo -= config.cut * bandwidth
        hi += config.cut * bandwidth
    grid = np.linspace(lo, hi, config.gridsize)
    density = np.asarray(kde.evaluate(grid), dtype=float)
    return DensityCurve(grid, density)


def empirical_quantiles(values, quantiles) -> np.ndarray:
    return np.quantile(np.asarray(values, dtype=float), list(quantiles))


def density_quantiles(curve: DensityCurve, quantiles) -> np.ndarray:
    """Quantiles read off the cumulative area under the density curve."""
    steps = np.diff(curve.values) * (curve.density[1:] + curve.density[:-1]) / 2
    cdf = np.concatenate([[0.0], np.cumsum(steps)])
    if cdf[-1] <= 0:
        return np.full(len(quantiles), curve.values[0])
    cdf /= cdf[-1]
    return np.interp(list(quantiles), cdf, curve.values)
