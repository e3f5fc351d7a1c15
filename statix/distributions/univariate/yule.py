"""
Yule distribution over ranks.

.. math::
    p(r \\mid b) = (b - 1)\\, B(r, b) = \\frac{(b-1)\\,\\Gamma(r)\\,\\Gamma(b)}{\\Gamma(r+b)}

for :math:`r = 1, 2, \\ldots` and :math:`b > 1`. It is the Waring
distribution with :math:`a = 0`.

Random variates use Devroye's construction from two independent standard
exponentials :math:`E_1, E_2`, redrawing values beyond the 64-bit integer
range:

.. math::
    R = \\left\\lceil \\frac{-E_1}{\\log(1 - e^{-E_2 / (b-1)})} \\right\\rceil
"""

import numpy as np
from numpy.typing import NDArray
from scipy.special import gammaln, digamma

from statix.base import RankModel
from statix.base.distribution import MAX_REJECTION_TRIES, _get_rng
from statix.params import YuleParams
from statix.utils.boundary import Bound

_INT_LIMIT = float(np.iinfo(np.int64).max)


class Yule(RankModel):
    """
    Yule distribution over ranks :math:`r \\geq 1`.

    Parameter vector: ``[b]``.
    """

    name = "Yule"
    n_params = 1

    def __init__(self):
        super().__init__()
        self._b = None

    def _set_from_classical(self, *, b) -> None:
        if b <= 1:
            raise ValueError(f"b must be greater than 1, got {b}")
        self._b = float(b)
        self._fitted = True
        self._invalidate_cache()

    def _compute_classical_params(self):
        return YuleParams(b=self._b)

    def _params_from_vector(self, x: NDArray) -> dict:
        return {'b': x[0]}

    def _get_param_support(self):
        return [Bound(lower=1.0)]

    def _log_terms(self, params: NDArray, ranks: NDArray) -> NDArray:
        b = params[0]
        return np.log(b - 1) + gammaln(ranks) + gammaln(b) - gammaln(ranks + b)

    def _gradient_terms(self, params: NDArray, ranks: NDArray) -> NDArray:
        b = params[0]
        d_b = 1.0 / (b - 1) + digamma(b) - digamma(ranks + b)
        return np.atleast_2d(d_b)

    def rvs(self, size=None, random_state=None, max_tries=MAX_REJECTION_TRIES):
        """
        Draw ranks with Devroye's exponential-pair construction.

        Draws too large for a 64-bit integer are redrawn, at most
        ``max_tries`` rounds.

        Raises
        ------
        RuntimeError
            If some draws still overflow after ``max_tries`` rounds.
        """
        self._check_fitted()
        rng = _get_rng(random_state)
        n = 1 if size is None else int(np.prod(size))
        samples = np.zeros(n, dtype=np.int64)
        pending = np.arange(n)

        for _ in range(max_tries):
            if len(pending) == 0:
                break
            e1 = rng.standard_exponential(len(pending))
            e2 = rng.standard_exponential(len(pending))
            with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
                # log(1 - exp(-t)) without cancellation for small t
                denom = np.log(-np.expm1(-e2 / (self._b - 1)))
                x = np.floor(-e1 / denom) + 1
            accept = (x >= 1) & (x < _INT_LIMIT)
            samples[pending[accept]] = x[accept].astype(np.int64)
            pending = pending[~accept]
        else:
            if len(pending):
                raise RuntimeError(
                    f"Yule sampler gave up after {max_tries} tries (b={self._b})"
                )

        if size is None:
            return int(samples[0])
        return samples.reshape(size)

    def cdf(self, x):
        """
        :math:`P(R \\leq x) = 1 - \\lfloor x \\rfloor B(\\lfloor x \\rfloor, b)`.
        """
        self._check_fitted()
        x = np.asarray(x, dtype=float)
        r = np.floor(np.maximum(x, 1.0))
        tail = r * np.exp(gammaln(r) + gammaln(self._b) - gammaln(r + self._b))
        result = np.where(x < 1, 0.0, 1.0 - tail)
        if result.ndim == 0:
            return float(result)
        return result

    def mean(self) -> float:
        """:math:`(b-1)/(b-2)` for :math:`b > 2`, else infinite."""
        self._check_fitted()
        if self._b <= 2:
            return np.inf
        rho = self._b - 1
        return rho / (rho - 1)

    def var(self) -> float:
        """:math:`\\rho^2 / ((\\rho-1)^2 (\\rho-2))` with :math:`\\rho = b-1`, for :math:`b > 3`."""
        self._check_fitted()
        if self._b <= 3:
            return np.inf
        rho = self._b - 1
        return rho ** 2 / ((rho - 1) ** 2 * (rho - 2))
