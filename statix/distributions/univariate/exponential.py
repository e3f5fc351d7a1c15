"""
Exponential distribution.

.. math::
    f(x \\mid C) = \\frac{1}{C} e^{-x/C}, \\quad x \\geq 0, \\; C > 0

As a likelihood model the observation matrix holds counts by column: the
cell at ``(row, j)`` says how many observations took the value ``j``
(columns are zero-based), so

.. math::
    -\\log L = -\\sum_{i,j} n_{ij} \\left(-\\log C - \\frac{j}{C}\\right)

and a matrix whose only non-zero column is the first contributes
:math:`N \\log C` for :math:`N` observations at zero.
"""

import numpy as np
from numpy.typing import NDArray

from statix.base import RankModel
from statix.base.distribution import _get_rng
from statix.params import ExponentialParams
from statix.utils.boundary import Bound


class Exponential(RankModel):
    """
    Exponential distribution with scale (mean) :math:`C`.

    Parameter vector: ``[scale]``.

    Examples
    --------
    >>> Exponential().log_likelihood([2.0], [[5], [3], [0]])
    5.545177444479562
    """

    name = "Exponential"
    n_params = 1

    def __init__(self):
        super().__init__()
        self._scale = None

    def _set_from_classical(self, *, scale) -> None:
        if scale <= 0:
            raise ValueError(f"scale must be positive, got {scale}")
        self._scale = float(scale)
        self._fitted = True
        self._invalidate_cache()

    def _compute_classical_params(self):
        return ExponentialParams(scale=self._scale)

    def _params_from_vector(self, x: NDArray) -> dict:
        return {'scale': x[0]}

    def _get_param_support(self):
        return [Bound(lower=0.0)]

    def _ranks(self, n_columns: int) -> NDArray:
        return np.arange(n_columns, dtype=float)

    def _default_start(self, data: NDArray) -> NDArray:
        counts = data.sum(axis=0)
        total = counts.sum()
        if total > 0:
            mean = counts @ self._ranks(len(counts)) / total
            if mean > 0:
                return np.array([mean])
        return np.array([1.0])

    def _log_terms(self, params: NDArray, ranks: NDArray) -> NDArray:
        scale = params[0]
        return -np.log(scale) - ranks / scale

    def _gradient_terms(self, params: NDArray, ranks: NDArray) -> NDArray:
        scale = params[0]
        return np.atleast_2d(-1.0 / scale + ranks / scale ** 2)

    def _in_support(self, x: NDArray) -> NDArray:
        return x >= 0

    def cdf(self, x):
        """:math:`1 - e^{-x/C}` for :math:`x \\geq 0`."""
        self._check_fitted()
        x = np.asarray(x, dtype=float)
        result = np.where(x < 0, 0.0, -np.expm1(-np.maximum(x, 0.0) / self._scale))
        if result.ndim == 0:
            return float(result)
        return result

    def rvs(self, size=None, random_state=None):
        """Draw samples with ``Generator.exponential``."""
        self._check_fitted()
        rng = _get_rng(random_state)
        return rng.exponential(self._scale, size=size)

    def mean(self) -> float:
        self._check_fitted()
        return self._scale

    def var(self) -> float:
        self._check_fitted()
        return self._scale ** 2
