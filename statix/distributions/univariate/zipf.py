"""
Zipf distribution over ranks.

.. math::
    p(r \\mid a) = \\frac{r^{-a}}{\\zeta(a)}, \\quad r = 1, 2, \\ldots, \\; a > 1

The gradient needs :math:`\\zeta'(a) / \\zeta(a)`, the derivative of
:math:`\\log \\zeta`. ``scipy.special`` has no closed form for it, so it is
computed with ``scipy.differentiate.derivative`` using one-sided steps away
from the pole at :math:`a = 1`.

Random variates use Devroye's rejection algorithm (Non-Uniform Random
Variate Generation, 1986, p. 551).
"""

import numpy as np
from numpy.typing import NDArray
from scipy.differentiate import derivative
from scipy.special import zeta

from statix.base import RankModel
from statix.base.distribution import MAX_REJECTION_TRIES, _get_rng
from statix.params import ZipfParams
from statix.utils.boundary import Bound

_INT_LIMIT = float(np.iinfo(np.int64).max)


def _log_zeta(s):
    return np.log(zeta(s))


def dlog_zeta(a: float) -> float:
    """
    Derivative of :math:`\\log \\zeta(a)`, i.e. :math:`\\zeta'(a)/\\zeta(a)`.

    Parameters
    ----------
    a : float
        Point of evaluation, :math:`a > 1`.

    Returns
    -------
    value : float
        Always negative.
    """
    return float(derivative(_log_zeta, a, step_direction=1).df)


class Zipf(RankModel):
    """
    Zipf distribution over ranks :math:`r \\geq 1`.

    Parameter vector: ``[a]``.
    """

    name = "Zipf"
    n_params = 1

    def __init__(self):
        super().__init__()
        self._a = None

    def _set_from_classical(self, *, a) -> None:
        if a <= 1:
            raise ValueError(f"a must be greater than 1, got {a}")
        self._a = float(a)
        self._fitted = True
        self._invalidate_cache()

    def _compute_classical_params(self):
        return ZipfParams(a=self._a)

    def _params_from_vector(self, x: NDArray) -> dict:
        return {'a': x[0]}

    def _get_param_support(self):
        return [Bound(lower=1.0)]

    def _log_terms(self, params: NDArray, ranks: NDArray) -> NDArray:
        a = params[0]
        return -np.log(zeta(a)) - a * np.log(ranks)

    def _gradient_terms(self, params: NDArray, ranks: NDArray) -> NDArray:
        a = params[0]
        return np.atleast_2d(-dlog_zeta(a) - np.log(ranks))

    def cdf(self, x):
        """:math:`1 - \\zeta(a, \\lfloor x \\rfloor + 1) / \\zeta(a)` (Hurwitz zeta)."""
        self._check_fitted()
        x = np.asarray(x, dtype=float)
        r = np.floor(np.maximum(x, 1.0))
        result = np.where(x < 1, 0.0, 1.0 - zeta(self._a, r + 1) / zeta(self._a))
        if result.ndim == 0:
            return float(result)
        return result

    def rvs(self, size=None, random_state=None, max_tries=MAX_REJECTION_TRIES):
        """
        Draw ranks with Devroye's rejection sampler.

        With :math:`b = 2^{a-1}`, propose :math:`X = \\lfloor U^{-1/(a-1)} \\rfloor`
        and accept when :math:`V X (T - 1)/(b - 1) \\leq T / b`, where
        :math:`T = (1 + 1/X)^{a-1}`.

        Raises
        ------
        RuntimeError
            If some draws are still pending after ``max_tries`` rounds.
        """
        self._check_fitted()
        rng = _get_rng(random_state)
        am1 = self._a - 1
        b = 2.0 ** am1
        n = 1 if size is None else int(np.prod(size))
        samples = np.zeros(n, dtype=np.int64)
        pending = np.arange(n)

        for _ in range(max_tries):
            if len(pending) == 0:
                break
            u = rng.random(len(pending))
            v = rng.random(len(pending))
            with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
                x = np.floor(u ** (-1.0 / am1))
                t = (1.0 + 1.0 / x) ** am1
                accept = (v * x * (t - 1) / (b - 1) <= t / b) & (x < _INT_LIMIT)
            samples[pending[accept]] = x[accept].astype(np.int64)
            pending = pending[~accept]
        else:
            if len(pending):
                raise RuntimeError(
                    f"Zipf sampler gave up after {max_tries} tries (a={self._a})"
                )

        if size is None:
            return int(samples[0])
        return samples.reshape(size)

    def mean(self) -> float:
        """:math:`\\zeta(a-1)/\\zeta(a)` for :math:`a > 2`, else infinite."""
        self._check_fitted()
        if self._a <= 2:
            return np.inf
        return float(zeta(self._a - 1) / zeta(self._a))

    def var(self) -> float:
        """:math:`\\zeta(a-2)/\\zeta(a) - \\text{mean}^2` for :math:`a > 3`."""
        self._check_fitted()
        if self._a <= 3:
            return np.inf
        return float(zeta(self._a - 2) / zeta(self._a) - self.mean() ** 2)
