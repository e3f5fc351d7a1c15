"""
Descriptive statistics for vectors and matrices.

Vector functions treat their input as a flat sample. Variances and
covariances of vectors are sample (``n - 1``) estimates; the whole-matrix
summaries :func:`matrix_mean_and_var` and :func:`matrix_var_m` are
population estimates over every element.

Size mismatches in the distance functions are numerical degeneracies, not
errors: they warn and return 0.
"""

import warnings
from typing import Optional, Tuple, Union
import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.stats import chi2

from statix.base.distribution import _get_rng
from .linalg import det_and_inv, x_prime_sigma_x
from .scaling import vector_normalize

RandomState = Optional[Union[int, np.random.Generator]]


# ============================================================================
# Vector moments
# ============================================================================

def vector_sum(v: Optional[ArrayLike]) -> float:
    """Sum of the elements; 0 for ``None``."""
    if v is None:
        return 0.0
    return float(np.sum(v))


def vector_mean(v: ArrayLike) -> float:
    return float(np.mean(v))


def vector_var(v: ArrayLike) -> float:
    """Sample variance."""
    return float(np.var(v, ddof=1))


def vector_var_m(v: ArrayLike, mean: float) -> float:
    """Sample variance around a mean that is already known."""
    v = np.asarray(v, dtype=float)
    return float(np.sum((v - mean) ** 2) / (v.size - 1))


def vector_kurtosis(v: ArrayLike) -> float:
    """
    Excess kurtosis, standardized by the sample standard deviation.

    .. math::
        \\frac{1}{n} \\sum_i \\left(\\frac{x_i - \\bar{x}}{s}\\right)^4 - 3
    """
    v = np.asarray(v, dtype=float)
    z = (v - v.mean()) / np.std(v, ddof=1)
    return float(np.mean(z ** 4) - 3.0)


def vector_cov(a: ArrayLike, b: ArrayLike) -> float:
    """Sample covariance of two equally long vectors."""
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    if a.shape != b.shape:
        raise ValueError(f"Covariance needs equal lengths, got {a.shape} and {b.shape}")
    return float(np.sum((a - a.mean()) * (b - b.mean())) / (a.size - 1))


def vector_correlation(a: ArrayLike, b: ArrayLike) -> float:
    """:math:`\\text{cov}(a, b) / \\sqrt{\\text{var}(a)\\,\\text{var}(b)}`."""
    return vector_cov(a, b) / np.sqrt(vector_var(a) * vector_var(b))


def _same_size(a: NDArray, b: NDArray, caller: str) -> bool:
    if a.size != b.size:
        warnings.warn(
            f"{caller} got vectors of size {a.size} and {b.size}; returning 0"
        )
        return False
    return True


def vector_distance(a: ArrayLike, b: ArrayLike) -> float:
    """Euclidean distance :math:`\\sqrt{\\sum_i (a_i - b_i)^2}`."""
    a = np.ravel(np.asarray(a, dtype=float))
    b = np.ravel(np.asarray(b, dtype=float))
    if not _same_size(a, b, "vector_distance"):
        return 0.0
    return float(np.sqrt(np.sum((a - b) ** 2)))


def vector_grid_distance(a: ArrayLike, b: ArrayLike) -> float:
    """Manhattan distance :math:`\\sum_i |a_i - b_i|`."""
    a = np.ravel(np.asarray(a, dtype=float))
    b = np.ravel(np.asarray(b, dtype=float))
    if not _same_size(a, b, "vector_grid_distance"):
        return 0.0
    return float(np.sum(np.abs(a - b)))


def vector_percentiles(v: ArrayLike, rounding: str = 'd') -> NDArray:
    """
    The 0th through 100th percentiles of a sample.

    Parameters
    ----------
    v : array_like
        Sample.
    rounding : {'d', 'u'}
        When a percentile falls between two order statistics, ``'d'`` takes
        the lower one and ``'u'`` the upper one. Element 0 is always the
        minimum and element 100 the maximum.

    Returns
    -------
    percentiles : ndarray, shape (101,)
    """
    if rounding not in ('d', 'u'):
        raise ValueError(f"rounding must be 'd' or 'u', got {rounding!r}")
    ordered = np.sort(np.ravel(np.asarray(v, dtype=float)))
    if ordered.size == 0:
        raise ValueError("Percentiles of an empty sample are undefined")
    position = np.arange(101) * (ordered.size - 1) / 100.0
    index = np.floor(position).astype(int)
    if rounding == 'u':
        index = np.ceil(position).astype(int)
    return ordered[index]


# ============================================================================
# Matrix moments
# ============================================================================

def matrix_sum(m: ArrayLike) -> float:
    return float(np.sum(m))


def matrix_mean(m: ArrayLike) -> float:
    """Mean of every element."""
    return float(np.mean(m))


def matrix_var_m(m: ArrayLike, mean: float) -> float:
    """Population variance of every element, given their mean."""
    m = np.asarray(m, dtype=float)
    return float(np.mean(m ** 2) - mean ** 2)


def matrix_mean_and_var(m: ArrayLike) -> Tuple[float, float]:
    """Mean and population variance of every element."""
    mean = matrix_mean(m)
    return mean, matrix_var_m(m, mean)


def matrix_summarize(m: ArrayLike) -> NDArray:
    """
    Per-column summary table.

    Returns
    -------
    summary : ndarray, shape (k, 3)
        One row per column of ``m``: mean, standard deviation and sample
        variance.
    """
    m = np.atleast_2d(np.asarray(m, dtype=float))
    mean = m.mean(axis=0)
    var = m.var(axis=0, ddof=1)
    return np.column_stack([mean, np.sqrt(var), var])


def matrix_covariance(m: ArrayLike) -> NDArray:
    """Sample covariance matrix of the columns, shape ``(k, k)``."""
    m = np.atleast_2d(np.asarray(m, dtype=float))
    return np.atleast_2d(np.cov(m, rowvar=False))


# ============================================================================
# Tests and densities
# ============================================================================

def test_chi_squared_var_not_zero(v: ArrayLike) -> float:
    """
    Confidence with which a zero variance can be rejected.

    Standardizes the sample, sums the squares and returns the
    :math:`\\chi^2_n` CDF at that sum (one minus the p-value).
    """
    v = np.asarray(v, dtype=float)
    normed = vector_normalize(v, 'standard')
    return float(chi2.cdf(np.sum(normed ** 2), v.size))


test_chi_squared_var_not_zero.__test__ = False


def multivariate_normal_prob(x: ArrayLike, mu: ArrayLike, sigma: ArrayLike) -> float:
    """
    Multivariate normal density at ``x``.

    .. math::
        \\frac{\\exp\\left(-\\tfrac{1}{2}(x-\\mu)' \\Sigma^{-1} (x-\\mu)\\right)}
        {\\sqrt{(2\\pi)^n \\det\\Sigma}}

    A singular ``sigma`` has no density; 0.0 is returned so that a
    minimizer looks elsewhere.
    """
    x = np.ravel(np.asarray(x, dtype=float))
    mu = np.ravel(np.asarray(mu, dtype=float))
    det, inv = det_and_inv(sigma)
    if det == 0 or not np.isfinite(det):
        warnings.warn("multivariate_normal_prob: singular covariance, returning 0")
        return 0.0
    q = x_prime_sigma_x(x - mu, inv)
    return float(np.exp(-q / 2) / np.sqrt((2 * np.pi) ** x.size * det))


# ============================================================================
# Random draws
# ============================================================================

def random_beta(mean: float, var: float, random_state: RandomState = None) -> float:
    """
    One Beta draw parametrized by its mean and variance.

    With :math:`k = m(1-m)/v - 1` the draw is
    :math:`\\text{Beta}(m k, (1-m) k)`.

    Parameters
    ----------
    mean : float
        In (0, 1).
    var : float
        In (0, mean * (1 - mean)); at most 1/12 for a unimodal shape.
    random_state : int or Generator, optional
    """
    if not 0 < mean < 1:
        raise ValueError(f"mean must be in (0, 1), got {mean}")
    if not 0 < var < mean * (1 - mean):
        raise ValueError(
            f"var must be in (0, {mean * (1 - mean)}) for mean {mean}, got {var}"
        )
    k = mean * (1 - mean) / var - 1
    return float(_get_rng(random_state).beta(mean * k, k * (1 - mean)))


def random_double(low: float, high: float, random_state: RandomState = None) -> float:
    """Uniform draw from ``[low, high)``."""
    return float(_get_rng(random_state).uniform(low, high))


def random_int(low: int, high: int, random_state: RandomState = None) -> int:
    """Uniform integer draw from ``low`` to ``high`` inclusive."""
    return int(_get_rng(random_state).integers(low, high, endpoint=True))
