"""
Base class for likelihood models over ranked counts.

Observation matrices for these models hold multiplicities: the cell at
``(row, j)`` says how many items of record ``row`` sit at rank
:math:`r_j`. The negated log-likelihood is

.. math::
    -\\sum_{i, j} n_{ij} \\log p(r_j \\mid \\theta)

so only the per-rank log probabilities and their derivatives are
model-specific. Column sums are taken once, which makes the evaluation
linear in the number of cells and then linear in the number of ranks.
"""

from abc import abstractmethod
from typing import Union
import numpy as np
from numpy.typing import ArrayLike, NDArray

from .likelihood_model import LikelihoodModel


class RankModel(LikelihoodModel):
    """
    Likelihood model whose observation columns are ranks.

    Subclasses implement ``_log_terms(params, ranks)`` (log probability of
    each rank, shape ``(m,)``) and ``_gradient_terms(params, ranks)``
    (its derivative with respect to each parameter, shape
    ``(n_params, m)``). By default column ``j`` is rank ``j + 1``.
    """

    def _ranks(self, n_columns: int) -> NDArray:
        return np.arange(1, n_columns + 1, dtype=float)

    @abstractmethod
    def _log_terms(self, params: NDArray, ranks: NDArray) -> NDArray:
        """Log probability of each rank."""
        pass

    @abstractmethod
    def _gradient_terms(self, params: NDArray, ranks: NDArray) -> NDArray:
        """Derivative of each rank's log probability, one row per parameter."""
        pass

    def _log_likelihood(self, params: NDArray, data: NDArray) -> float:
        counts = data.sum(axis=0)
        terms = self._log_terms(params, self._ranks(data.shape[1]))
        return -float(counts @ terms)

    def _row_log_likelihood(self, params: NDArray, data: NDArray) -> NDArray:
        terms = self._log_terms(params, self._ranks(data.shape[1]))
        return -(data @ terms)

    def _gradient(self, params: NDArray, data: NDArray) -> NDArray:
        counts = data.sum(axis=0)
        terms = self._gradient_terms(params, self._ranks(data.shape[1]))
        return -(terms @ counts)

    def _default_start(self, data: NDArray) -> NDArray:
        return np.full(self.n_params, 2.0)

    # ============================================================
    # Density API at the fitted parameters
    # ============================================================

    def _in_support(self, x: NDArray) -> NDArray:
        """Mask of points where the probability is non-zero."""
        return (x >= 1) & (x == np.floor(x))

    def logpdf(self, x: ArrayLike) -> Union[float, NDArray[np.floating]]:
        """
        Log probability of rank ``x`` at the fitted parameters.

        Points outside the support give ``-inf``.
        """
        self._check_fitted()
        x = np.asarray(x, dtype=float)
        mask = self._in_support(x)
        safe = np.where(mask, x, 1.0)
        result = np.where(mask, self._log_terms(self.parameter_vector, safe), -np.inf)

        # Return scalar if input was scalar
        if result.ndim == 0:
            return float(result)
        return result

    def pdf(self, x: ArrayLike) -> Union[float, NDArray[np.floating]]:
        """Probability mass of rank ``x``: ``exp(logpdf(x))``."""
        return np.exp(self.logpdf(x))
