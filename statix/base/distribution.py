"""
Base class for probability distributions with scipy-like API.

This module provides an abstract base class that defines the standard interface
for probability distributions, similar to ``scipy.stats``.

The API includes:

- **Density functions**: :meth:`pdf`, :meth:`logpdf`
- **Cumulative distribution**: :meth:`cdf`
- **Random sampling**: :meth:`rvs`
- **Fitting**: :meth:`fit` (returns self for method chaining)
- **Moments**: :meth:`mean`, :meth:`var`, :meth:`std`

Classical parameters are stored as named private attributes by each subclass.
Derived quantities are exposed through ``functools.cached_property`` and
listed in ``_cached_attrs`` so that :meth:`_invalidate_cache` can drop them
whenever the parameters change.
"""

import dataclasses
from abc import ABC, abstractmethod
from functools import cached_property
from typing import Optional, Tuple, Union
import numpy as np
from numpy.typing import ArrayLike, NDArray


MAX_REJECTION_TRIES = 10_000


def _get_rng(random_state: Optional[Union[int, np.random.Generator]] = None) -> np.random.Generator:
    """Turn ``None``, an integer seed, or a Generator into a Generator."""
    if random_state is None:
        return np.random.default_rng()
    if isinstance(random_state, (int, np.integer)):
        return np.random.default_rng(random_state)
    return random_state


class Distribution(ABC):
    """
    Abstract base class for probability distributions.

    Subclasses implement the state contract:

    - ``_set_from_classical(**kwargs)``: validate, store named attributes,
      set ``self._fitted = True`` and call ``self._invalidate_cache()``.
    - ``_compute_classical_params()``: build the frozen dataclass of
      classical parameters from the named attributes.

    and the density API (:meth:`pdf`, :meth:`rvs`, :meth:`fit`).

    Attributes
    ----------
    _fitted : bool
        Whether parameters have been set.
    _cached_attrs : tuple of str
        Names of cached properties cleared by :meth:`_invalidate_cache`.
        Subclasses extend it with ``Parent._cached_attrs + ('name',)``.
    """

    _cached_attrs: Tuple[str, ...] = ('classical_params',)

    def __init__(self):
        self._fitted = False

    # ============================================================
    # Cache infrastructure
    # ============================================================

    def _check_fitted(self) -> None:
        """Raise ``ValueError`` if parameters have not been set."""
        if not self._fitted:
            raise ValueError(
                f"{self.__class__.__name__} parameters not set. "
                "Use from_classical_params() or fit()."
            )

    def _invalidate_cache(self) -> None:
        """Drop every cached property listed in ``_cached_attrs``."""
        for attr in self._cached_attrs:
            self.__dict__.pop(attr, None)

    # ============================================================
    # Classical parameters
    # ============================================================

    @classmethod
    def from_classical_params(cls, **kwargs) -> 'Distribution':
        """
        Create distribution from classical parameters.

        Parameters
        ----------
        **kwargs
            Distribution-specific classical parameters,
            e.g. ``scale=2.0`` for Exponential, ``b=3.0, a=0.5`` for Waring.

        Returns
        -------
        dist : Distribution
            Distribution instance with parameters set.
        """
        instance = cls()
        instance.set_classical_params(**kwargs)
        return instance

    def set_classical_params(self, **kwargs) -> 'Distribution':
        """
        Set parameters from the classical parametrization.

        Returns
        -------
        self : Distribution
            Returns self for method chaining.
        """
        if not kwargs:
            return self
        self._set_from_classical(**kwargs)
        return self

    @abstractmethod
    def _set_from_classical(self, **kwargs) -> None:
        """Set internal state from classical parameters."""
        pass

    @abstractmethod
    def _compute_classical_params(self):
        """Build the frozen dataclass of classical parameters."""
        pass

    @cached_property
    def classical_params(self):
        """
        Classical parameters as a frozen dataclass (cached).

        Returns
        -------
        params : dataclass
            Classical parameters, e.g. ``params.scale``.
        """
        self._check_fitted()
        return self._compute_classical_params()

    # ============================================================
    # Density API
    # ============================================================

    @abstractmethod
    def pdf(self, x: ArrayLike) -> Union[float, NDArray[np.floating]]:
        """
        Probability density (or mass) function.

        Parameters
        ----------
        x : array_like
            Points at which to evaluate the PDF.

        Returns
        -------
        pdf : float or ndarray
            Probability density at each point.
        """
        pass

    def logpdf(self, x: ArrayLike) -> Union[float, NDArray[np.floating]]:
        """
        Log of the probability density function.

        Default implementation: ``log(pdf(x))``.
        Subclasses override it for numerical stability.
        """
        with np.errstate(divide='ignore'):
            return np.log(self.pdf(x))

    def cdf(self, x: ArrayLike) -> Union[float, NDArray[np.floating]]:
        """Cumulative distribution function."""
        raise NotImplementedError("CDF not implemented for this distribution")

    @abstractmethod
    def rvs(self, size: Optional[Union[int, tuple]] = None,
            random_state: Optional[Union[int, np.random.Generator]] = None):
        """
        Random variate sampling.

        Parameters
        ----------
        size : int or tuple of ints, optional
            Shape of the output. If None, returns a scalar.
        random_state : int or numpy.random.Generator, optional
            Random state for reproducibility.

        Returns
        -------
        rvs : ndarray or scalar
            Random variates.
        """
        pass

    @abstractmethod
    def fit(self, data: ArrayLike, *args, **kwargs) -> 'Distribution':
        """
        Fit distribution parameters to data (sklearn-style).

        Returns
        -------
        self : Distribution
            The fitted distribution instance (for method chaining).
        """
        pass

    def mean(self) -> float:
        """Mean of the distribution."""
        raise NotImplementedError("Mean not implemented for this distribution")

    def var(self) -> float:
        """Variance of the distribution."""
        raise NotImplementedError("Variance not implemented for this distribution")

    def std(self) -> float:
        """Standard deviation of the distribution."""
        return float(np.sqrt(self.var()))

    def score(self, X: ArrayLike, y: Optional[ArrayLike] = None) -> float:
        """
        Compute the mean log-likelihood (sklearn-style scoring).

        Higher scores are better (sklearn convention).

        Parameters
        ----------
        X : array_like
            Data samples.
        y : array_like, optional
            Ignored. Present for sklearn API compatibility.

        Returns
        -------
        score : float
            Mean log-likelihood.
        """
        X = np.asarray(X)
        return float(np.mean(self.logpdf(X)))

    def __repr__(self) -> str:
        """String representation of the distribution."""
        if not self._fitted:
            return f"{self.__class__.__name__}(not fitted)"

        classical = self.classical_params
        if not dataclasses.is_dataclass(classical):
            return f"{self.__class__.__name__}({classical})"
        param_str = ", ".join(
            f"{f.name}={getattr(classical, f.name):.4f}"
            if isinstance(getattr(classical, f.name), (int, float, np.number))
            else f"{f.name}=..."
            for f in dataclasses.fields(classical)
        )
        return f"{self.__class__.__name__}({param_str})"
