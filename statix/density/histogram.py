"""
Histograms as discrete distributions.

A :class:`Histogram` holds ``n + 1`` increasing edges and ``n`` non-negative
bin masses. Its outer edges may be infinite: such open-ended bins collect
tail mass, which is treated as sitting at the bin's finite edge.

Bin representatives (midpoints) follow the same rule:

- the first bin is represented by its upper edge,
- the last bin by its lower edge,
- every other bin by the mean of its edges.

:meth:`Histogram.widen` pads a histogram with empty bins and open-ended
tails, which is the output grid of :class:`~statix.density.KernelDensity`.
"""

import logging
from functools import cached_property
from typing import Optional, Union
import numpy as np
from numpy.typing import ArrayLike, NDArray

from statix.base import Distribution
from statix.base.distribution import _get_rng
from statix.params import HistogramParams

log = logging.getLogger(__name__)

DEFAULT_PADDING = 0.1


class Histogram(Distribution):
    """
    Histogram over increasing edges with non-negative bin masses.

    Parameters
    ----------
    edges : array_like, optional
        Bin edges, shape ``(n + 1,)``, strictly increasing.
    bins : array_like, optional
        Bin masses, shape ``(n,)``.

    Examples
    --------
    >>> h = Histogram.from_samples(np.random.default_rng(0).normal(size=500), 20)
    >>> h.n_bins
    20
    >>> h.widen(0.1).n_bins
    24
    >>> h.pdf(0.0)  # mass share of the bin holding 0
    """

    _cached_attrs = Distribution._cached_attrs + ('_cumulative',)

    def __init__(self, edges: Optional[ArrayLike] = None,
                 bins: Optional[ArrayLike] = None):
        super().__init__()
        self._edges = None
        self._bins = None
        if edges is not None or bins is not None:
            self._set_from_classical(edges=edges, bins=bins)

    def _set_from_classical(self, *, edges, bins) -> None:
        edges = np.array(edges, dtype=float).ravel()
        bins = np.array(bins, dtype=float).ravel()
        if len(edges) < 2:
            raise ValueError(f"A histogram needs at least two edges, got {len(edges)}")
        if len(bins) != len(edges) - 1:
            raise ValueError(
                f"{len(edges)} edges need {len(edges) - 1} bins, got {len(bins)}"
            )
        if np.isnan(edges).any() or not np.all(np.diff(edges) > 0):
            raise ValueError("Histogram edges must be strictly increasing")
        if not np.all(bins >= 0):
            raise ValueError("Histogram bins must be non-negative")
        edges.flags.writeable = False
        bins.flags.writeable = False
        self._edges = edges
        self._bins = bins
        self._fitted = True
        self._invalidate_cache()

    def _compute_classical_params(self):
        return HistogramParams(edges=self._edges, bins=self._bins)

    # ============================================================
    # Construction
    # ============================================================

    @classmethod
    def from_samples(cls, samples: ArrayLike, n_bins: int) -> 'Histogram':
        """
        Equal-width histogram of raw samples over ``[min, max]``.

        The maximum falls in the last bin. A constant sample is spread over
        ``[x - 0.5, x + 0.5]``.

        Raises
        ------
        ValueError
            If ``samples`` is empty or ``n_bins`` is not positive.
        """
        samples = np.ravel(np.asarray(samples, dtype=float))
        if samples.size == 0:
            raise ValueError("Cannot build a histogram from an empty sample")
        if n_bins < 1:
            raise ValueError(f"n_bins must be positive, got {n_bins}")
        lo, hi = samples.min(), samples.max()
        if lo == hi:
            lo, hi = lo - 0.5, hi + 0.5
        bins, edges = np.histogram(samples, bins=n_bins, range=(lo, hi))
        log.debug("histogram of %d samples in %d bins over [%g, %g]",
                  samples.size, n_bins, lo, hi)
        return cls(edges, bins)

    def fit(self, X: ArrayLike, n_bins: int = 10, **kwargs) -> 'Histogram':
        """Rebuild from raw samples. See :meth:`from_samples`."""
        fitted = self.from_samples(X, n_bins)
        return self.set_classical_params(edges=fitted.edges, bins=fitted.bins)

    # ============================================================
    # Layout
    # ============================================================

    @property
    def edges(self) -> NDArray:
        self._check_fitted()
        return self._edges

    @property
    def bins(self) -> NDArray:
        self._check_fitted()
        return self._bins

    @property
    def n_bins(self) -> int:
        return len(self.bins)

    def total(self) -> float:
        """Total mass of all bins."""
        return float(self.bins.sum())

    def normalized(self) -> 'Histogram':
        """Copy whose masses sum to 1."""
        total = self.total()
        if total <= 0:
            raise ValueError("Cannot normalize a histogram with no mass")
        return Histogram(self.edges, self.bins / total)

    def midpoint(self, i: int) -> float:
        """
        Representative point of bin ``i``.

        The first bin returns its upper edge and the last bin its lower
        edge, so open-ended tails have a finite representative.
        """
        n = self.n_bins
        if not 0 <= i < n:
            raise IndexError(f"bin {i} out of range for {n} bins")
        if i == 0:
            return float(self.edges[1])
        if i == n - 1:
            return float(self.edges[n - 1])
        return float((self.edges[i] + self.edges[i + 1]) / 2)

    def midpoints(self) -> NDArray:
        """:meth:`midpoint` of every bin."""
        edges = self.edges
        mids = (edges[:-1] + edges[1:]) / 2
        mids[-1] = edges[-2]
        mids[0] = edges[1]
        return mids

    def widths(self) -> NDArray:
        return np.diff(self.edges)

    def widen(self, padding: float = DEFAULT_PADDING) -> 'Histogram':
        """
        Pad with empty bins on both sides and open-ended tails.

        The result has ``max(round(n * (1 + 2 * padding)), n + 2)`` bins. When
        ``n * padding`` is small this is more than ``round(n * (1 + 2 * padding))``
        (``n = 10, padding = 0`` gives 12) since each side needs at least one
        open-ended bin. The original bins keep their masses and sit in the
        middle; new edges are spaced at the interior bin width, and the
        outermost edges are ``-inf`` and ``inf``.

        Parameters
        ----------
        padding : float, optional
            Share of ``n`` added on each side. Default 0.1.

        Returns
        -------
        wider : Histogram
        """
        if padding < 0:
            raise ValueError(f"padding must be non-negative, got {padding}")
        n = self.n_bins
        steps = np.diff(self.edges)
        width = steps[1] if n >= 3 else steps[0]
        if not np.isfinite(width):
            finite = steps[np.isfinite(steps)]
            if finite.size == 0:
                raise ValueError("Cannot widen a histogram without a finite bin")
            width = finite[0]

        core = np.array(self.edges)
        if np.isinf(core[0]):
            core[0] = core[1] - width
        if np.isinf(core[-1]):
            core[-1] = core[-2] + width

        new_n = max(int(round(n * (1 + 2 * padding))), n + 2)
        left = (new_n - n) // 2
        right = new_n - n - left

        edges = np.concatenate([
            core[0] - width * np.arange(left, 0, -1),
            core,
            core[-1] + width * np.arange(1, right + 1),
        ])
        edges[0] = -np.inf
        edges[-1] = np.inf

        bins = np.zeros(new_n)
        bins[left:left + n] = self.bins
        log.debug("widened %d bins to %d (%d left, %d right)", n, new_n, left, right)
        return Histogram(edges, bins)

    def find_bin(self, x: ArrayLike) -> Union[int, NDArray]:
        """
        Index of the bin holding ``x``, or -1 outside the edges.

        Bins are half-open ``[lo, hi)`` except the last, which also holds its
        upper edge.
        """
        edges = self.edges
        x = np.asarray(x, dtype=float)
        idx = np.searchsorted(edges, x, side='right') - 1
        idx = np.where(x == edges[-1], self.n_bins - 1, idx)
        outside = (x < edges[0]) | (x > edges[-1]) | np.isnan(x)
        idx = np.where(outside, -1, idx)
        if idx.ndim == 0:
            return int(idx)
        return idx

    # ============================================================
    # Density API
    # ============================================================

    def pdf(self, x: ArrayLike):
        """Mass share of the bin holding ``x``; 0 outside the edges."""
        idx = self.find_bin(x)
        shares = self.bins / self.total()
        result = np.where(np.asarray(idx) >= 0, shares[np.maximum(idx, 0)], 0.0)
        if result.ndim == 0:
            return float(result)
        return result

    def logpdf(self, x: ArrayLike):
        """Log of :meth:`pdf`; ``-inf`` for empty bins and outside."""
        with np.errstate(divide='ignore'):
            return np.log(self.pdf(x))

    @cached_property
    def _cumulative(self) -> NDArray:
        """Running bin mass, starting with 0."""
        return np.concatenate([[0.0], np.cumsum(self.bins)])

    def cdf(self, x: ArrayLike):
        """
        Mass share of the bins whose representative point is at most ``x``.
        """
        mids = self.midpoints()
        k = np.searchsorted(mids, np.asarray(x, dtype=float), side='right')
        result = self._cumulative[k] / self.total()
        if np.ndim(result) == 0:
            return float(result)
        return result

    def rvs(self, size=None, random_state=None):
        """
        Inverse-CDF draws, uniform within the chosen bin.

        A draw that lands in an open-ended bin returns that bin's finite
        edge.
        """
        rng = _get_rng(random_state)
        cumulative = self._cumulative[1:]
        total = cumulative[-1]
        if total <= 0:
            raise ValueError("Cannot sample from a histogram with no mass")
        u = rng.random(size) * total
        idx = np.minimum(np.searchsorted(cumulative, u, side='right'), self.n_bins - 1)
        lo = self.edges[idx]
        hi = self.edges[idx + 1]
        offset = rng.random(np.shape(idx))
        with np.errstate(invalid='ignore'):
            inside = lo + offset * (hi - lo)
        samples = np.where(np.isinf(lo), hi, np.where(np.isinf(hi), lo, inside))
        if size is None:
            return float(samples)
        return samples

    def mean(self) -> float:
        """Mass-weighted mean of the bin midpoints."""
        return float(np.average(self.midpoints(), weights=self.bins))

    def var(self) -> float:
        """Mass-weighted variance of the bin midpoints."""
        mids = self.midpoints()
        return float(np.average((mids - self.mean()) ** 2, weights=self.bins))

    def __repr__(self) -> str:
        if not self._fitted:
            return f"{self.__class__.__name__}(not fitted)"
        return (f"{self.__class__.__name__}(n_bins={self.n_bins}, "
                f"range=[{self.edges[0]:.4g}, {self.edges[-1]:.4g}], "
                f"total={self.total():.4g})")
