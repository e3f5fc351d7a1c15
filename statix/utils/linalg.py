"""Linear algebra utilities for statix.

Thin, shape-checked wrappers around ``scipy.linalg`` and numpy for the
operations the models and statistics helpers share: LU-based determinants
and inverses, principal components of :math:`X'X`, stacking, column
removal and a flexible dot product.

All functions return new arrays; their inputs are never modified.
Structural misuse (non-square inversion, mismatched shapes) raises
``ValueError`` with the offending shapes in the message.
"""

from typing import Optional, Sequence, Tuple, Union
import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.linalg import lu_factor, lu_solve, svd


def _require_square(m: NDArray, what: str) -> None:
    if m.ndim != 2 or m.shape[0] != m.shape[1]:
        raise ValueError(
            f"{what} requires a square matrix, got shape {m.shape}"
        )


def det_and_inv(m: ArrayLike, calc_det: bool = True,
                calc_inv: bool = True) -> Tuple[float, Optional[NDArray]]:
    r"""
    Determinant and inverse from a single LU factorization.

    Parameters
    ----------
    m : array_like, shape (d, d)
        Square matrix. Not modified.
    calc_det : bool, optional
        Compute the determinant. If False, 0.0 is returned in its place.
    calc_inv : bool, optional
        Compute the inverse. If False, None is returned in its place.

    Returns
    -------
    det : float
        :math:`\det(m)`, or 0.0 when ``calc_det`` is False.
    inv : ndarray or None
        :math:`m^{-1}`, or None when ``calc_inv`` is False.

    Raises
    ------
    ValueError
        If ``m`` is not square.

    Examples
    --------
    >>> det, inv = det_and_inv([[2.0, 0.0], [0.0, 4.0]])
    >>> det
    8.0
    """
    m = np.asarray(m, dtype=float)
    _require_square(m, "Inversion")
    lu, piv = lu_factor(m, check_finite=False)

    det = 0.0
    if calc_det:
        # each pivot that swaps rows flips the sign
        sign = (-1.0) ** np.sum(piv != np.arange(len(piv)))
        det = float(sign * np.prod(np.diag(lu)))

    inv = None
    if calc_inv:
        inv = lu_solve((lu, piv), np.eye(m.shape[0]), check_finite=False)
    return det, inv


def matrix_inverse(m: ArrayLike) -> NDArray:
    """Inverse of a square matrix. See :func:`det_and_inv`."""
    return det_and_inv(m, calc_det=False, calc_inv=True)[1]


def matrix_determinant(m: ArrayLike) -> float:
    """Determinant of a square matrix. See :func:`det_and_inv`."""
    return det_and_inv(m, calc_det=True, calc_inv=False)[0]


def normalize_for_svd(m: ArrayLike) -> NDArray:
    r"""
    Scale a cross-product matrix to unit diagonal.

    Rows and columns are divided by :math:`\sqrt{\text{diag}(m)}`, so
    :math:`X'X` becomes the correlation-like matrix of Greene
    (Econometric Analysis, 2nd ed., p. 271). Zero diagonal entries are left
    unscaled.
    """
    m = np.asarray(m, dtype=float)
    _require_square(m, "SVD normalization")
    d = np.sqrt(np.diag(m))
    d = np.where(d > 0, d, 1.0)
    return m / np.outer(d, d)


def sv_decomposition(data: ArrayLike, dimensions: int) -> Tuple[NDArray, NDArray]:
    """
    Principal components of the normalized :math:`X'X`.

    Parameters
    ----------
    data : array_like, shape (n, k)
        Data matrix :math:`X`.
    dimensions : int
        Number of leading components to keep, at most ``k``.

    Returns
    -------
    components : ndarray, shape (k, dimensions)
        Eigenvectors ordered by decreasing eigenvalue, one per column.
    shares : ndarray, shape (dimensions,)
        Each kept eigenvalue divided by the total of all eigenvalues; their
        sum is the share of variance explained.
    """
    data = np.asarray(data, dtype=float)
    if data.ndim != 2:
        raise ValueError(f"data must be 2-D, got shape {data.shape}")
    if not 0 < dimensions <= data.shape[1]:
        raise ValueError(
            f"dimensions must be in 1..{data.shape[1]}, got {dimensions}"
        )
    square = normalize_for_svd(data.T @ data)
    u, s, _ = svd(square)
    return u[:, :dimensions], s[:dimensions] / s.sum()


def vector_stack(v1: Optional[ArrayLike], v2: Optional[ArrayLike]) -> Optional[NDArray]:
    """
    Concatenate two vectors into a new one.

    Either argument may be None, in which case a copy of the other is
    returned; if both are None the result is None.
    """
    if v1 is None and v2 is None:
        return None
    if v1 is None:
        return np.array(v2, dtype=float).ravel()
    if v2 is None:
        return np.array(v1, dtype=float).ravel()
    return np.concatenate([np.ravel(v1), np.ravel(v2)]).astype(float)


def matrix_stack(m1: Optional[ArrayLike], m2: Optional[ArrayLike],
                 how: str = 'r') -> Optional[NDArray]:
    """
    Stack two matrices into a new one.

    Parameters
    ----------
    m1, m2 : array_like or None
        Matrices to stack; ``m1`` goes on top (``how='r'``) or on the left
        (``how='c'``). A None side yields a copy of the other.
    how : {'r', 'c'}
        ``'r'`` stacks rows on top of rows, ``'c'`` puts columns beside
        columns.

    Raises
    ------
    ValueError
        If the shared dimension differs or ``how`` is unknown.
    """
    if how not in ('r', 'c'):
        raise ValueError(f"how must be 'r' or 'c', got {how!r}")
    if m1 is None and m2 is None:
        return None
    if m1 is None:
        return np.array(m2, dtype=float, ndmin=2)
    if m2 is None:
        return np.array(m1, dtype=float, ndmin=2)

    m1 = np.asarray(m1, dtype=float)
    m2 = np.asarray(m2, dtype=float)
    if how == 'r':
        if m1.shape[1] != m2.shape[1]:
            raise ValueError(
                "Stacking rows needs the same number of columns, got "
                f"{m1.shape} and {m2.shape}"
            )
        return np.vstack([m1, m2])
    if m1.shape[0] != m2.shape[0]:
        raise ValueError(
            "Stacking columns needs the same number of rows, got "
            f"{m1.shape} and {m2.shape}"
        )
    return np.hstack([m1, m2])


def matrix_rm_columns(m: ArrayLike, drop: Sequence[Union[bool, int]]) -> NDArray:
    """
    Copy of ``m`` without the flagged columns.

    ``drop`` has one flag per column; a truthy flag removes that column.
    """
    m = np.asarray(m, dtype=float)
    drop = np.asarray(drop, dtype=bool)
    if drop.shape != (m.shape[1],):
        raise ValueError(
            f"Need one drop flag per column: {m.shape[1]} columns, "
            f"{drop.size} flags"
        )
    return m[:, ~drop].copy()


def vector_bounded(v: ArrayLike, max_abs: float = np.inf) -> bool:
    """
    True when every element is finite and within ``[-max_abs, max_abs]``.

    With the default ``max_abs=inf`` it only checks finiteness, which is the
    usual test for an iteration that is about to diverge.
    """
    v = np.asarray(v, dtype=float)
    if not np.all(np.isfinite(v)):
        return False
    return bool(np.all(np.abs(v) <= max_abs))


def x_prime_sigma_x(x: ArrayLike, sigma: ArrayLike) -> float:
    r"""Quadratic form :math:`x' \Sigma x`."""
    x = np.asarray(x, dtype=float).ravel()
    sigma = np.asarray(sigma, dtype=float)
    if sigma.shape != (len(x), len(x)):
        raise ValueError(
            f"sigma must be {len(x)}x{len(x)} for x of length {len(x)}, "
            f"got {sigma.shape}"
        )
    return float(x @ sigma @ x)


def dot(left: ArrayLike, right: ArrayLike, transpose_left: bool = False,
        transpose_right: bool = False) -> Union[float, NDArray]:
    """
    Dot product of any mix of vectors and matrices.

    Vectors are oriented to fit: a vector on the left acts as a row, on the
    right as a column. Transposition flags apply to matrix operands only.

    Returns
    -------
    out : float or ndarray
        A float for vector-vector, a vector for matrix-vector in either
        order, and a matrix for matrix-matrix.

    Raises
    ------
    ValueError
        If the inner dimensions do not match.

    Examples
    --------
    >>> dot([[1, 2], [3, 4]], [1, 1])
    array([3., 7.])
    >>> dot([[1, 2], [3, 4]], [1, 1], transpose_left=True)
    array([4., 6.])
    """
    left = np.asarray(left, dtype=float)
    right = np.asarray(right, dtype=float)
    for operand in (left, right):
        if operand.ndim not in (1, 2):
            raise ValueError(f"dot takes vectors or matrices, got shape {operand.shape}")
    if left.ndim == 2 and transpose_left:
        left = left.T
    if right.ndim == 2 and transpose_right:
        right = right.T

    inner_left = left.shape[-1]
    inner_right = right.shape[0]
    if inner_left != inner_right:
        raise ValueError(
            f"Inner dimensions differ: {left.shape} . {right.shape}"
        )
    out = left @ right
    if out.ndim == 0:
        return float(out)
    return out
