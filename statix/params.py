"""
Frozen dataclass parameter containers for all distributions.

Each distribution's classical parameters are represented as a frozen dataclass
with ``slots=True`` for memory efficiency. This provides:

- **IDE autocompletion**: ``params.shape`` instead of ``params['shape']``
- **Immutability**: Prevents accidental mutation of fitted parameters
- **Parameter vectors**: ``params.as_array()`` gives the ordered vector that
  the likelihood functions consume

Examples
--------
>>> from statix.params import WaringParams
>>> p = WaringParams(b=3.0, a=0.5)
>>> p.b
3.0
>>> p.as_array()
array([3. , 0.5])
>>> p.b = 4.0  # Raises FrozenInstanceError

Notes
-----
The field order of every dataclass is the order of the parameter vector
used by the matching likelihood model.
"""

from dataclasses import dataclass, fields
import numpy as np


class _ParamsBase:
    """Mixin providing dict-style access on frozen dataclass params.

    Allows both ``params.b`` and ``params['b']`` access styles,
    plus ``items()``, ``keys()``, ``values()`` for iteration.
    """

    __slots__ = ()

    def __getitem__(self, key: str):
        try:
            return getattr(self, key)
        except AttributeError:
            raise KeyError(key)

    def __contains__(self, key: str) -> bool:
        return hasattr(self, key)

    def keys(self):
        """Yield field names."""
        return (f.name for f in fields(self))

    def values(self):
        """Yield field values."""
        return (getattr(self, f.name) for f in fields(self))

    def items(self):
        """Yield ``(name, value)`` pairs."""
        return ((f.name, getattr(self, f.name)) for f in fields(self))

    def as_array(self) -> np.ndarray:
        """Flatten the fields, in declaration order, into a parameter vector."""
        return np.concatenate(
            [np.atleast_1d(np.asarray(v, dtype=float)) for v in self.values()]
        )


# ============================================================================
# Continuous distribution parameters
# ============================================================================

@dataclass(frozen=True, slots=True)
class ExponentialParams(_ParamsBase):
    """
    Classical parameters for the Exponential distribution.

    Attributes
    ----------
    scale : float
        Scale parameter :math:`C > 0` (the mean).
    """
    scale: float


@dataclass(frozen=True, slots=True)
class GammaParams(_ParamsBase):
    """
    Classical parameters for the Gamma distribution.

    Attributes
    ----------
    shape : float
        Shape parameter :math:`a > 0`.
    scale : float
        Scale parameter :math:`b > 0`.
    """
    shape: float
    scale: float


@dataclass(frozen=True, slots=True)
class NormalParams(_ParamsBase):
    """
    Classical parameters for the Normal distribution.

    Attributes
    ----------
    mu : float
        Location.
    sigma : float
        Standard deviation :math:`\\sigma > 0`.
    """
    mu: float
    sigma: float


@dataclass(frozen=True, slots=True)
class UniformParams(_ParamsBase):
    """
    Classical parameters for the continuous Uniform distribution.

    Attributes
    ----------
    low : float
        Lower end of the support.
    high : float
        Upper end of the support, ``high > low``.
    """
    low: float
    high: float


# ============================================================================
# Rank distribution parameters
# ============================================================================

@dataclass(frozen=True, slots=True)
class WaringParams(_ParamsBase):
    """
    Classical parameters for the Waring distribution.

    Attributes
    ----------
    b : float
        Tail parameter :math:`b > 1`.
    a : float
        Shift parameter :math:`a \\geq 0`. ``a = 0`` is the Yule distribution.
    """
    b: float
    a: float


@dataclass(frozen=True, slots=True)
class YuleParams(_ParamsBase):
    """
    Classical parameters for the Yule distribution.

    Attributes
    ----------
    b : float
        Tail parameter :math:`b > 1`.
    """
    b: float


@dataclass(frozen=True, slots=True)
class ZipfParams(_ParamsBase):
    """
    Classical parameters for the Zipf distribution.

    Attributes
    ----------
    a : float
        Exponent :math:`a > 1`.
    """
    a: float


# ============================================================================
# Regression model parameters
# ============================================================================

@dataclass(frozen=True, slots=True)
class ProbitParams(_ParamsBase):
    """
    Coefficients of the Probit model.

    Attributes
    ----------
    beta : np.ndarray
        Coefficient vector, one entry per covariate column, shape ``(k,)``.
    """
    beta: np.ndarray


# ============================================================================
# Histogram parameters
# ============================================================================

@dataclass(frozen=True, slots=True)
class HistogramParams(_ParamsBase):
    """
    Bin layout and masses of a histogram.

    Attributes
    ----------
    edges : np.ndarray
        Increasing bin edges, shape ``(n + 1,)``. The outer edges may be
        infinite for open-ended tail bins.
    bins : np.ndarray
        Non-negative mass of each bin, shape ``(n,)``.
    """
    edges: np.ndarray
    bins: np.ndarray


__all__ = [
    "ExponentialParams",
    "GammaParams",
    "NormalParams",
    "UniformParams",
    "WaringParams",
    "YuleParams",
    "ZipfParams",
    "ProbitParams",
    "HistogramParams",
]
