"""
Univariate Normal distribution.

.. math::
    p(x \\mid \\mu, \\sigma) = \\frac{1}{\\sqrt{2\\pi}\\,\\sigma}
    \\exp\\left(-\\frac{(x-\\mu)^2}{2\\sigma^2}\\right)

Every cell of the observation matrix is one observation. Besides being a
likelihood model, ``Normal`` is the default smoothing kernel of
:class:`~statix.density.KernelDensity`, which moves it around with
:meth:`Normal.set_location`.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.special import ndtr

from statix.base import LikelihoodModel
from statix.base.distribution import _get_rng
from statix.params import NormalParams
from statix.utils.boundary import Bound

_LOG_2PI = np.log(2 * np.pi)


class Normal(LikelihoodModel):
    """
    Normal distribution with location :math:`\\mu` and scale :math:`\\sigma`.

    Parameter vector: ``[mu, sigma]``.

    Examples
    --------
    >>> kernel = Normal.from_classical_params(mu=0.0, sigma=1.0)
    >>> kernel.set_location(2.5).mean()
    2.5
    """

    name = "Normal"
    n_params = 2

    def __init__(self):
        super().__init__()
        self._mu = None
        self._sigma = None

    def _set_from_classical(self, *, mu, sigma) -> None:
        if sigma <= 0:
            raise ValueError(f"sigma must be positive, got {sigma}")
        self._mu = float(mu)
        self._sigma = float(sigma)
        self._fitted = True
        self._invalidate_cache()

    def _compute_classical_params(self):
        return NormalParams(mu=self._mu, sigma=self._sigma)

    def _params_from_vector(self, x: NDArray) -> dict:
        return {'mu': x[0], 'sigma': x[1]}

    def _get_param_support(self):
        return [Bound(), Bound(lower=0.0)]

    def set_location(self, loc: float) -> 'Normal':
        """Move the distribution to mean ``loc``, keeping :math:`\\sigma`."""
        self._check_fitted()
        return self.set_classical_params(mu=loc, sigma=self._sigma)

    def _cell_terms(self, params: NDArray, data: NDArray) -> NDArray:
        mu, sigma = params
        z = (data - mu) / sigma
        return -0.5 * _LOG_2PI - np.log(sigma) - 0.5 * z ** 2

    def _log_likelihood(self, params: NDArray, data: NDArray) -> float:
        return -float(self._cell_terms(params, data).sum())

    def _row_log_likelihood(self, params: NDArray, data: NDArray) -> NDArray:
        return -self._cell_terms(params, data).sum(axis=1)

    def _gradient(self, params: NDArray, data: NDArray) -> NDArray:
        mu, sigma = params
        resid = data - mu
        d_mu = np.sum(resid) / sigma ** 2
        d_sigma = np.sum(-1.0 / sigma + resid ** 2 / sigma ** 3)
        return -np.array([d_mu, d_sigma])

    def _default_start(self, data: NDArray) -> NDArray:
        sigma = data.std()
        return np.array([data.mean(), sigma if sigma > 0 else 1.0])

    def logpdf(self, x: ArrayLike):
        self._check_fitted()
        x = np.asarray(x, dtype=float)
        z = (x - self._mu) / self._sigma
        result = -0.5 * _LOG_2PI - np.log(self._sigma) - 0.5 * z ** 2
        if result.ndim == 0:
            return float(result)
        return result

    def pdf(self, x: ArrayLike):
        return np.exp(self.logpdf(x))

    def cdf(self, x: ArrayLike):
        self._check_fitted()
        result = ndtr((np.asarray(x, dtype=float) - self._mu) / self._sigma)
        if result.ndim == 0:
            return float(result)
        return result

    def rvs(self, size=None, random_state=None):
        self._check_fitted()
        rng = _get_rng(random_state)
        return rng.normal(self._mu, self._sigma, size=size)

    def mean(self) -> float:
        self._check_fitted()
        return self._mu

    def var(self) -> float:
        self._check_fitted()
        return self._sigma ** 2
