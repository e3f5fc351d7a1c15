"""
Continuous uniform distribution on :math:`[\\text{low}, \\text{high}]`.

Used as a box kernel by :class:`~statix.density.KernelDensity`;
:meth:`Uniform.set_location` recentres the box without changing its width.
"""

import numpy as np
from numpy.typing import ArrayLike

from statix.base import Distribution
from statix.base.distribution import _get_rng
from statix.params import UniformParams


class Uniform(Distribution):
    """
    Uniform distribution with support :math:`[\\text{low}, \\text{high}]`.

    Examples
    --------
    >>> box = Uniform.from_classical_params(low=-0.5, high=0.5)
    >>> box.set_location(3.0).classical_params
    UniformParams(low=2.5, high=3.5)
    """

    def __init__(self):
        super().__init__()
        self._low = None
        self._high = None

    def _set_from_classical(self, *, low, high) -> None:
        if not high > low:
            raise ValueError(f"high must exceed low, got low={low}, high={high}")
        self._low = float(low)
        self._high = float(high)
        self._fitted = True
        self._invalidate_cache()

    def _compute_classical_params(self):
        return UniformParams(low=self._low, high=self._high)

    def set_location(self, loc: float) -> 'Uniform':
        """Centre the support on ``loc``, keeping its width."""
        self._check_fitted()
        half = (self._high - self._low) / 2
        return self.set_classical_params(low=loc - half, high=loc + half)

    def pdf(self, x: ArrayLike):
        self._check_fitted()
        x = np.asarray(x, dtype=float)
        inside = (x >= self._low) & (x <= self._high)
        result = np.where(inside, 1.0 / (self._high - self._low), 0.0)
        if result.ndim == 0:
            return float(result)
        return result

    def cdf(self, x: ArrayLike):
        self._check_fitted()
        x = np.asarray(x, dtype=float)
        result = np.clip((x - self._low) / (self._high - self._low), 0.0, 1.0)
        if result.ndim == 0:
            return float(result)
        return result

    def rvs(self, size=None, random_state=None):
        self._check_fitted()
        rng = _get_rng(random_state)
        return rng.uniform(self._low, self._high, size=size)

    def fit(self, X: ArrayLike, *args, **kwargs) -> 'Uniform':
        """Maximum likelihood fit: the sample minimum and maximum."""
        X = np.asarray(X, dtype=float)
        return self.set_classical_params(low=X.min(), high=X.max())

    def mean(self) -> float:
        self._check_fitted()
        return (self._low + self._high) / 2

    def var(self) -> float:
        self._check_fitted()
        return (self._high - self._low) ** 2 / 12
