"""
Probit binary-outcome model.

Column 0 of the observation matrix is the outcome :math:`y_i \\in \\{0, 1\\}`
and the remaining columns are the covariates :math:`x_i`. With
:math:`z_i = x_i \\cdot \\beta`, outcome 0 has probability :math:`\\Phi(z_i)`
and outcome 1 has probability :math:`1 - \\Phi(z_i)`:

.. math::
    -\\log L(\\beta) = -\\sum_{y_i = 0} \\log \\Phi(z_i)
    - \\sum_{y_i = 1} \\log \\Phi(-z_i)

.. math::
    \\partial_{\\beta_j} (-\\log L) = -\\sum_i x_{ij}\\, \\lambda_i, \\quad
    \\lambda_i = \\begin{cases}
        \\phi(z_i) / \\Phi(z_i) & y_i = 0 \\\\
        \\phi(z_i) / (\\Phi(z_i) - 1) & y_i = 1
    \\end{cases}

All ratios are evaluated in log space with ``scipy.special.log_ndtr`` so that
extreme :math:`z_i` do not underflow.
"""

from typing import Tuple
import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.special import log_ndtr, ndtr

from statix.base import LikelihoodModel
from statix.base.distribution import _get_rng
from statix.params import ProbitParams

_LOG_SQRT_2PI = 0.5 * np.log(2 * np.pi)


def _split(data: NDArray) -> Tuple[NDArray, NDArray]:
    """Outcome mask (``True`` for outcome 1) and covariate block."""
    return data[:, 0] != 0, data[:, 1:]


def _row_terms(z: NDArray, y: NDArray) -> NDArray:
    """Log probability of each observed outcome."""
    return np.where(y, log_ndtr(-z), log_ndtr(z))


def _ratios(z: NDArray, y: NDArray) -> NDArray:
    """Derivative of each row's log probability with respect to ``z``."""
    log_phi = -0.5 * z ** 2 - _LOG_SQRT_2PI
    return np.where(
        y,
        -np.exp(log_phi - log_ndtr(-z)),
        np.exp(log_phi - log_ndtr(z)),
    )


class Probit(LikelihoodModel):
    """
    Probit regression with coefficient vector :math:`\\beta`.

    The parameter vector has one entry per covariate column, i.e.
    ``data.shape[1] - 1`` entries. Coefficients are unconstrained.

    Examples
    --------
    >>> data = np.array([[0, 1.0, -0.5], [1, 1.0, 0.8], [1, 1.0, 1.5]])
    >>> model = Probit()
    >>> value, grad = model.fdf([0.1, -0.4], data)
    >>> model.fit(data).predict_proba(data[:, 1:])
    """

    name = "Probit"
    n_params = None

    def __init__(self):
        super().__init__()
        self._beta = None

    def _set_from_classical(self, *, beta) -> None:
        beta = np.atleast_1d(np.asarray(beta, dtype=float)).copy()
        if beta.ndim != 1:
            raise ValueError(f"beta must be a vector, got shape {beta.shape}")
        self._beta = beta
        self._fitted = True
        self._invalidate_cache()

    def _compute_classical_params(self):
        return ProbitParams(beta=self._beta.copy())

    def _params_from_vector(self, x: NDArray) -> dict:
        return {'beta': x}

    def _get_param_support(self):
        return []

    def _expected_arity(self, data: NDArray) -> int:
        return data.shape[1] - 1

    def _default_start(self, data: NDArray) -> NDArray:
        return np.zeros(data.shape[1] - 1)

    # ============================================================
    # Likelihood
    # ============================================================

    def _log_likelihood(self, params: NDArray, data: NDArray) -> float:
        y, X = _split(data)
        return -float(_row_terms(X @ params, y).sum())

    def _row_log_likelihood(self, params: NDArray, data: NDArray) -> NDArray:
        y, X = _split(data)
        return -_row_terms(X @ params, y)

    def _gradient(self, params: NDArray, data: NDArray) -> NDArray:
        y, X = _split(data)
        return -(X.T @ _ratios(X @ params, y))

    def fdf(self, params: ArrayLike, data: ArrayLike) -> Tuple[float, NDArray]:
        """
        Negated log-likelihood and its gradient from a single ``X @ beta``.

        Nothing is kept between calls; :meth:`log_likelihood` and
        :meth:`gradient` stay independent entry points.
        """
        data = self._as_data(data)
        params = self._as_params(params, data)
        if np.isnan(params).any():
            return np.inf, np.full(len(params), np.nan)
        y, X = _split(data)
        z = X @ params
        value = -float(_row_terms(z, y).sum())
        grad = -(X.T @ _ratios(z, y))
        return value, grad

    # ============================================================
    # Prediction and density API
    # ============================================================

    def predict_proba(self, X: ArrayLike) -> NDArray:
        """
        :math:`\\Phi(x \\cdot \\beta)` for each covariate row, the probability
        of outcome 0.
        """
        self._check_fitted()
        X = np.atleast_2d(np.asarray(X, dtype=float))
        return ndtr(X @ self._beta)

    def logpdf(self, x: ArrayLike) -> NDArray:
        """Log probability of each row's observed outcome given its covariates."""
        self._check_fitted()
        data = self._as_data(x)
        y, X = _split(data)
        return _row_terms(X @ self._beta, y)

    def pdf(self, x: ArrayLike) -> NDArray:
        return np.exp(self.logpdf(x))

    def rvs(self, size=None, random_state=None, covariates=None):
        """
        Draw outcomes for the given covariate rows.

        Parameters
        ----------
        size : int, optional
            Number of independent draws per row. If None, one draw.
        random_state : int or Generator, optional
            Random number generator seed or instance.
        covariates : array_like
            Covariate matrix, shape ``(n, k)``.

        Returns
        -------
        outcomes : ndarray of int
            Shape ``(n,)``, or ``(size, n)`` when ``size`` is given.
        """
        self._check_fitted()
        if covariates is None:
            raise ValueError("Probit draws need a covariate matrix")
        rng = _get_rng(random_state)
        p_zero = self.predict_proba(covariates)
        shape = p_zero.shape if size is None else (size,) + p_zero.shape
        return (rng.random(shape) >= p_zero).astype(int)
