"""
Base class for models fitted by maximum likelihood.

A likelihood model exposes three pure functions of an explicit parameter
vector and observation matrix, in the form a minimizer expects:

- :meth:`LikelihoodModel.log_likelihood`: the **negated** log-likelihood
- :meth:`LikelihoodModel.gradient`: its gradient
- :meth:`LikelihoodModel.fdf`: both at once

Parameters outside the model's support never raise. They are answered with
a barrier surface

.. math::
    e^{d} \\cdot |k_a|

where :math:`d` is the distance of the offending coordinates from their
limits and :math:`k_a` is the negated log-likelihood at the nearest feasible
point, with :math:`d` capped at ``MAX_BARRIER_EXPONENT``. The reference values
:math:`k_a` and their gradients are cached per instance, tied to the
observation matrix they were computed on, and dropped by :meth:`reset`.
"""

import logging
import warnings
from abc import abstractmethod
from typing import Dict, List, Optional, Tuple
import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.optimize import minimize

from statix.utils.boundary import Bound, project_to_support
from .distribution import Distribution

log = logging.getLogger(__name__)

BOUNDARY_EPSILON = 1e-6
MAX_BARRIER_EXPONENT = 300.0


class LikelihoodModel(Distribution):
    """
    Abstract base class for named parametric likelihood models.

    Subclasses implement:

    - ``_get_param_support()``: list of :class:`~statix.utils.boundary.Bound`,
      one per parameter (empty for unconstrained models).
    - ``_log_likelihood(params, data)``: negated log-likelihood at a
      feasible point.
    - ``_gradient(params, data)``: its gradient at a feasible point.
    - ``_row_log_likelihood(params, data)``: negated log-likelihood of each
      row.
    - ``_params_from_vector(x)``: classical-parameter keyword arguments for
      a parameter vector.
    - ``_default_start(data)``: starting point for :meth:`fit`.

    Attributes
    ----------
    name : str
        Human-readable model name.
    n_params : int or None
        Length of the parameter vector; ``None`` when it depends on the data.
    optimize_result_ : scipy.optimize.OptimizeResult or None
        Result of the last :meth:`fit`.
    """

    name: str = ""
    n_params: Optional[int] = None

    def __init__(self):
        super().__init__()
        self._reference_cache: Dict[Tuple[float, ...], Tuple[float, NDArray]] = {}
        self._reference_token = None
        self.optimize_result_ = None

    # ============================================================
    # Subclass contract
    # ============================================================

    @abstractmethod
    def _get_param_support(self) -> List[Bound]:
        """Feasible interval of each parameter."""
        pass

    @abstractmethod
    def _log_likelihood(self, params: NDArray, data: NDArray) -> float:
        """Negated log-likelihood at a feasible point."""
        pass

    @abstractmethod
    def _gradient(self, params: NDArray, data: NDArray) -> NDArray:
        """Gradient of the negated log-likelihood at a feasible point."""
        pass

    @abstractmethod
    def _row_log_likelihood(self, params: NDArray, data: NDArray) -> NDArray:
        """Negated log-likelihood of every row at a feasible point."""
        pass

    @abstractmethod
    def _params_from_vector(self, x: NDArray) -> dict:
        """Classical-parameter keyword arguments for a parameter vector."""
        pass

    @abstractmethod
    def _default_start(self, data: NDArray) -> NDArray:
        """Starting point used by :meth:`fit` when none is given."""
        pass

    def _expected_arity(self, data: NDArray) -> Optional[int]:
        return self.n_params

    # ============================================================
    # Input handling
    # ============================================================

    @staticmethod
    def _as_data(data: ArrayLike) -> NDArray:
        """Promote observations to a 2-D float matrix."""
        data = np.asarray(data, dtype=float)
        if data.ndim == 1:
            data = data[np.newaxis, :]
        if data.ndim != 2:
            raise ValueError(
                f"Observation matrix must be 2-D, got {data.ndim} dimensions"
            )
        return data

    def _as_params(self, params: ArrayLike, data: NDArray) -> NDArray:
        params = np.atleast_1d(np.asarray(params, dtype=float)).ravel()
        expected = self._expected_arity(data)
        if expected is not None and len(params) != expected:
            raise ValueError(
                f"{self.name or self.__class__.__name__} takes {expected} "
                f"parameter(s), got {len(params)}"
            )
        return params

    # ============================================================
    # Boundary guard
    # ============================================================

    def reset(self) -> None:
        """Forget cached boundary reference values (start of a new run)."""
        self._reference_cache.clear()
        self._reference_token = None

    def _reference_value(self, point: NDArray, data: NDArray) -> Tuple[float, NDArray]:
        """
        Negated log-likelihood and its gradient at a feasible reference
        point, cached.

        The cache is tied to a fingerprint of ``data`` and is emptied as soon
        as a different observation matrix shows up.
        """
        token = (data.shape, hash(data.tobytes()))
        if token != self._reference_token:
            self._reference_cache.clear()
            self._reference_token = token
        key = tuple(point)
        if key not in self._reference_cache:
            ka = self.log_likelihood(point, data)
            self._reference_cache[key] = (ka, self.gradient(point, data))
            log.debug(
                "%s: boundary reference at %s is %g",
                self.__class__.__name__, key, ka,
            )
        return self._reference_cache[key]

    def _barrier(self, params: NDArray, data: NDArray) -> Optional[Tuple[float, NDArray]]:
        """
        Barrier value and gradient for infeasible parameters.

        Returns ``None`` when ``params`` lies inside the support.

        The reference point keeps the feasible coordinates, so those pick up
        ``exp(d) * sign(ka) * grad(ka)``. The exponent is capped at
        ``MAX_BARRIER_EXPONENT``.
        """
        support = self._get_param_support()
        point, direction, distance = project_to_support(
            params, support, BOUNDARY_EPSILON
        )
        if not direction.any():
            return None
        ka, ka_grad = self._reference_value(point, data)
        scale = np.exp(min(distance, MAX_BARRIER_EXPONENT))
        if np.isfinite(ka) and ka != 0:
            penalty = float(scale * abs(ka))
            feasible = (direction == 0) & np.isfinite(ka_grad)
            grad = np.where(feasible, scale * np.sign(ka) * ka_grad, 0.0)
        else:
            penalty = float(scale)
            grad = np.zeros(len(params))
        return penalty, grad + direction * penalty

    # ============================================================
    # Optimizer-facing functions
    # ============================================================

    def log_likelihood(self, params: ArrayLike, data: ArrayLike) -> float:
        """
        Negated log-likelihood of ``data`` under ``params``.

        Smaller is better. Infeasible parameters return the barrier value
        instead of raising; NaN parameters return ``inf``.

        Parameters
        ----------
        params : array_like
            Parameter vector.
        data : array_like
            Observation matrix.

        Returns
        -------
        value : float
        """
        data = self._as_data(data)
        params = self._as_params(params, data)
        if np.isnan(params).any():
            return np.inf
        barrier = self._barrier(params, data)
        if barrier is not None:
            return barrier[0]
        return float(self._log_likelihood(params, data))

    def gradient(self, params: ArrayLike, data: ArrayLike) -> NDArray:
        """
        Gradient of :meth:`log_likelihood` with respect to ``params``.

        Infeasible parameters return the gradient of the barrier surface;
        NaN parameters return a NaN vector.
        """
        data = self._as_data(data)
        params = self._as_params(params, data)
        if np.isnan(params).any():
            return np.full(len(params), np.nan)
        barrier = self._barrier(params, data)
        if barrier is not None:
            return barrier[1]
        return np.asarray(self._gradient(params, data), dtype=float)

    def fdf(self, params: ArrayLike, data: ArrayLike) -> Tuple[float, NDArray]:
        """Value and gradient together, as ``(log_likelihood, gradient)``."""
        return self.log_likelihood(params, data), self.gradient(params, data)

    def log_likelihood_vector(self, params: ArrayLike, data: ArrayLike) -> NDArray:
        """
        Negated log-likelihood of each row of ``data``.

        The entries sum to :meth:`log_likelihood`. Comparing two models row by
        row (e.g. with a paired t-test) is the usual use.
        """
        data = self._as_data(data)
        params = self._as_params(params, data)
        n_rows = data.shape[0]
        if np.isnan(params).any():
            return np.full(n_rows, np.inf)
        barrier = self._barrier(params, data)
        if barrier is not None:
            return np.full(n_rows, barrier[0] / n_rows)
        return np.asarray(self._row_log_likelihood(params, data), dtype=float)

    # ============================================================
    # Fitted parameters
    # ============================================================

    @property
    def parameter_vector(self) -> NDArray:
        """Fitted classical parameters as a parameter vector."""
        return self.classical_params.as_array()

    def fit(self, X: ArrayLike, x0: Optional[ArrayLike] = None,
            method: str = 'L-BFGS-B', options: Optional[dict] = None,
            **kwargs) -> 'LikelihoodModel':
        """
        Maximum likelihood fit through ``scipy.optimize.minimize``.

        Starts a fresh run (the boundary cache is reset), minimizes
        :meth:`fdf` with the gradient as Jacobian, and stores the minimizer
        as the classical parameters.

        Parameters
        ----------
        X : array_like
            Observation matrix.
        x0 : array_like, optional
            Starting point. Defaults to a model-specific guess.
        method : str, optional
            ``scipy.optimize.minimize`` method. Default ``'L-BFGS-B'``.
        options : dict, optional
            Passed to ``scipy.optimize.minimize``.
        **kwargs
            Further keyword arguments for ``scipy.optimize.minimize``.

        Returns
        -------
        self : LikelihoodModel
        """
        data = self._as_data(X)
        self.reset()
        if x0 is None:
            x0 = self._default_start(data)
        x0 = self._as_params(x0, data)

        result = minimize(
            self.fdf, x0, args=(data,), jac=True, method=method,
            options=options, **kwargs
        )
        log.debug(
            "%s fit: x=%s fun=%g nit=%s success=%s",
            self.__class__.__name__, result.x, result.fun,
            getattr(result, 'nit', None), result.success,
        )
        if not result.success:
            warnings.warn(
                f"{self.__class__.__name__} fit may not have converged: "
                f"{result.message}"
            )
        self.optimize_result_ = result
        self.set_classical_params(**self._params_from_vector(result.x))
        return self
