"""
Waring distribution over ranks.

The Waring distribution has probability mass

.. math::
    p(r \\mid b, a) = \\frac{(b-1)\\,\\Gamma(b+a)\\,\\Gamma(r+a)}
    {\\Gamma(a+1)\\,\\Gamma(r+a+b)}

for ranks :math:`r = 1, 2, \\ldots`, with :math:`b > 1` and :math:`a \\geq 0`.
Setting :math:`a = 0` gives the Yule distribution.

Log-likelihood and gradient, per rank:

.. math::
    \\log p = \\log(b-1) + \\log\\Gamma(r+a) + \\log\\Gamma(b+a)
    - \\log\\Gamma(a+1) - \\log\\Gamma(r+a+b)

.. math::
    \\partial_b \\log p = \\frac{1}{b-1} + \\psi(b+a) - \\psi(r+a+b)

.. math::
    \\partial_a \\log p = \\psi(b+a) + \\psi(r+a) - \\psi(a+1) - \\psi(r+a+b)

Random variates use the generalized hypergeometric type B3 construction of
Devroye (1992): with :math:`G_1 \\sim \\Gamma(a+1)`, :math:`G_2 \\sim \\Gamma(1)`,
:math:`G_3 \\sim \\Gamma(b-1)` and :math:`N \\sim \\text{Poisson}(G_1 G_2 / G_3)`,
:math:`N + 1` is Waring distributed.

References
----------
Devroye, L. (1992). Random variate generation for the digamma and trigamma
distributions. Journal of Statistical Computation and Simulation, 43, 197-216.
"""

import numpy as np
from numpy.typing import NDArray
from scipy.special import gammaln, digamma

from statix.base import RankModel
from statix.base.distribution import MAX_REJECTION_TRIES, _get_rng
from statix.params import WaringParams
from statix.utils.boundary import Bound

# numpy's Poisson sampler rejects larger rates
_MAX_POISSON_LAM = 1e18


class Waring(RankModel):
    """
    Waring distribution over ranks :math:`r \\geq 1`.

    Parameter vector: ``[b, a]``.

    Examples
    --------
    >>> counts = np.array([[60, 20, 9, 5, 3, 2, 1]])
    >>> model = Waring()
    >>> model.log_likelihood([3.0, 0.5], counts)   # negated log-likelihood
    >>> model.fit(counts).classical_params
    WaringParams(b=..., a=...)

    See Also
    --------
    Yule : The special case :math:`a = 0`.
    """

    name = "Waring"
    n_params = 2

    def __init__(self):
        super().__init__()
        self._b = None
        self._a = None

    def _set_from_classical(self, *, b, a) -> None:
        if b <= 1:
            raise ValueError(f"b must be greater than 1, got {b}")
        if a < 0:
            raise ValueError(f"a must be non-negative, got {a}")
        self._b = float(b)
        self._a = float(a)
        self._fitted = True
        self._invalidate_cache()

    def _compute_classical_params(self):
        return WaringParams(b=self._b, a=self._a)

    def _params_from_vector(self, x: NDArray) -> dict:
        return {'b': x[0], 'a': x[1]}

    def _get_param_support(self):
        """b > 1, a >= 0."""
        return [Bound(lower=1.0), Bound(lower=0.0, closed_lower=True)]

    def _default_start(self, data: NDArray) -> NDArray:
        return np.array([3.0, 0.5])

    def _log_terms(self, params: NDArray, ranks: NDArray) -> NDArray:
        b, a = params
        return (np.log(b - 1) + gammaln(ranks + a) + gammaln(b + a)
                - gammaln(a + 1) - gammaln(ranks + a + b))

    def _gradient_terms(self, params: NDArray, ranks: NDArray) -> NDArray:
        b, a = params
        psi_ba = digamma(b + a)
        psi_rab = digamma(ranks + a + b)
        d_b = 1.0 / (b - 1) + psi_ba - psi_rab
        d_a = psi_ba + digamma(ranks + a) - digamma(a + 1) - psi_rab
        return np.vstack([d_b, d_a])

    def rvs(self, size=None, random_state=None, max_tries=MAX_REJECTION_TRIES):
        """
        Draw ranks from the Waring distribution.

        Parameters
        ----------
        size : int or tuple of ints, optional
            Shape of samples to generate.
        random_state : int or Generator, optional
            Random number generator seed or instance.
        max_tries : int, optional
            Bound on the number of redraw rounds.

        Returns
        -------
        samples : int or ndarray of int
            Ranks, all at least 1.

        Raises
        ------
        RuntimeError
            If a valid Poisson rate cannot be drawn within ``max_tries``
            rounds.
        """
        self._check_fitted()
        rng = _get_rng(random_state)
        n = 1 if size is None else int(np.prod(size))
        rates = self._ghgb3_rates(rng, n)

        for _ in range(max_tries):
            bad = ~np.isfinite(rates) | (rates > _MAX_POISSON_LAM)
            if not bad.any():
                break
            rates[bad] = self._ghgb3_rates(rng, int(bad.sum()))
        else:
            if (~np.isfinite(rates) | (rates > _MAX_POISSON_LAM)).any():
                raise RuntimeError(
                    f"Waring sampler gave up after {max_tries} tries "
                    f"(b={self._b}, a={self._a})"
                )

        samples = rng.poisson(rates) + 1
        if size is None:
            return int(samples[0])
        return samples.reshape(size)

    def _ghgb3_rates(self, rng: np.random.Generator, n: int) -> NDArray:
        g1 = rng.gamma(self._a + 1, 1.0, size=n)
        g2 = rng.gamma(1.0, 1.0, size=n)
        g3 = rng.gamma(self._b - 1, 1.0, size=n)
        with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
            return g1 * g2 / g3

    def mean(self) -> float:
        """
        Mean rank: :math:`(b - 1 + a) / (b - 2)` for :math:`b > 2`, else infinite.
        """
        self._check_fitted()
        if self._b <= 2:
            return np.inf
        return (self._b - 1 + self._a) / (self._b - 2)

    def var(self) -> float:
        """
        Variance of the rank, finite for :math:`b > 3`.

        With :math:`\\rho = b - 1`:

        .. math::
            E[R^2] = \\frac{2(\\rho+a)(\\rho+a-1)}{(\\rho-1)(\\rho-2)}
            - \\frac{\\rho+a}{\\rho-1}
        """
        self._check_fitted()
        if self._b <= 3:
            return np.inf
        rho, a = self._b - 1, self._a
        second = (2 * (rho + a) * (rho + a - 1) / ((rho - 1) * (rho - 2))
                  - (rho + a) / (rho - 1))
        return second - self.mean() ** 2
