"""
Data scaling utilities.

Vector and column normalizations used before fitting and by the
statistics helpers. Inputs are never modified in place.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray


def vector_normalize(v: ArrayLike, kind: str = 'standard') -> NDArray:
    """
    Shift and scale a vector.

    Parameters
    ----------
    v : array_like
        Data. Not modified.
    kind : {'range', 'standard', 'sum'}
        - ``'range'``: :math:`(x - \\min) / (\\max - \\min)`, so the result
          spans [0, 1].
        - ``'standard'``: :math:`(x - \\bar{x}) / s` with the sample standard
          deviation, so the result has mean 0 and variance 1.
        - ``'sum'``: :math:`x / \\sum x`, e.g. counts in bins to shares.

    Returns
    -------
    normalized : ndarray
    """
    v = np.array(v, dtype=float)
    if kind == 'range':
        lo, hi = v.min(), v.max()
        return (v - lo) / (hi - lo)
    if kind == 'standard':
        return (v - v.mean()) / np.std(v, ddof=1)
    if kind == 'sum':
        return v / v.sum()
    raise ValueError(f"kind must be 'range', 'standard' or 'sum', got {kind!r}")


def matrix_normalize(m: ArrayLike, kind: str = 'mean') -> NDArray:
    """
    Normalize each column of a matrix.

    Parameters
    ----------
    m : array_like, shape (n, k)
        Data matrix. Not modified.
    kind : {'mean', 'standard'}
        ``'mean'`` removes each column's mean; ``'standard'`` also divides by
        the column's sample standard deviation.

    Returns
    -------
    normalized : ndarray, shape (n, k)
    """
    m = np.atleast_2d(np.asarray(m, dtype=float))
    if kind not in ('mean', 'standard'):
        raise ValueError(f"kind must be 'mean' or 'standard', got {kind!r}")
    out = m - m.mean(axis=0)
    if kind == 'standard':
        out = out / m.std(axis=0, ddof=1)
    return out
