"""
Kernel density estimation over histograms.

A kernel density is a smoothed histogram: a copy of the kernel is centred on
every non-empty bin of a base histogram, weighted by that bin's mass, and
the copies are summed on a wider output grid.

Construction (:meth:`KernelDensity.from_histogram`):

1. The output grid is ``base.widen(padding)``: the base bins plus empty pad
   bins and two open-ended tail bins.
2. Each interior output bin :math:`j` receives

   .. math::
       \\frac{1}{M} \\sum_i m_i \\, k_i(c_j) \\, w_j

   where :math:`m_i` is the mass of base bin :math:`i`, :math:`M` the base
   total, :math:`k_i` the kernel placed at base midpoint :math:`i`,
   :math:`c_j` the output midpoint and :math:`w_j` the output bin width.
3. The tail bins share :math:`1 - \\sum_j` in the ratio of the first and
   last interior bins, so the result sums to 1.
"""

import copy
import logging
from typing import Callable, Optional
import numpy as np
from numpy.typing import ArrayLike

from statix.base import Distribution
from statix.distributions.univariate import Normal
from .histogram import DEFAULT_PADDING, Histogram

log = logging.getLogger(__name__)

DEFAULT_KDE_BINS = 1000


def _set_location(loc: float, kernel: Distribution) -> None:
    kernel.set_location(loc)


class KernelDensity(Histogram):
    """
    Histogram smoothed with a location-settable kernel.

    The result is a normalized histogram with open-ended tails, so
    :meth:`pdf`, :meth:`logpdf`, :meth:`cdf` and :meth:`rvs` come from
    :class:`~statix.density.Histogram`.

    Attributes
    ----------
    kernel : Distribution
        Private copy of the smoothing kernel.
    base : Histogram
        The histogram that was smoothed.

    Examples
    --------
    >>> samples = np.random.default_rng(0).normal(size=2000)
    >>> kde = KernelDensity().fit(samples, n_bins=200)
    >>> kde.bins.sum()
    1.0

    >>> box = Uniform.from_classical_params(low=-0.25, high=0.25)
    >>> smooth = KernelDensity.from_histogram(Histogram.from_samples(samples, 50),
    ...                                       kernel=box)
    """

    def __init__(self):
        super().__init__()
        self.kernel = None
        self.base = None

    @classmethod
    def from_histogram(
        cls,
        base: Histogram,
        kernel: Optional[Distribution] = None,
        set_params: Optional[Callable[[float, Distribution], None]] = None,
        padding: float = DEFAULT_PADDING,
    ) -> 'KernelDensity':
        """
        Smooth ``base`` with ``kernel``.

        Parameters
        ----------
        base : Histogram
            Histogram to smooth; must carry some mass.
        kernel : Distribution, optional
            Kernel with parameters set and a ``pdf``. Deep-copied, so the
            caller's instance is never moved. Defaults to
            ``Normal(mu=0, sigma=1)``.
        set_params : callable, optional
            ``set_params(location, kernel)`` centres the kernel on a base
            midpoint. Defaults to ``kernel.set_location(location)``.
        padding : float, optional
            Share of the base bin count added on each side of the output.

        Returns
        -------
        kde : KernelDensity
        """
        if kernel is None:
            kernel = Normal.from_classical_params(mu=0.0, sigma=1.0)
        kernel = copy.deepcopy(kernel)
        if set_params is None:
            set_params = _set_location

        total = base.total()
        if total <= 0:
            raise ValueError("Cannot smooth a histogram with no mass")

        grid = base.widen(padding)
        out_mids = grid.midpoints()[1:-1]
        out_widths = grid.widths()[1:-1]
        base_mids = base.midpoints()

        dens = np.zeros(grid.n_bins)
        for i in np.flatnonzero(base.bins):
            set_params(base_mids[i], kernel)
            dens[1:-1] += base.bins[i] * kernel.pdf(out_mids) * out_widths

        dens[1:-1] /= total
        interior = dens[1:-1].sum()
        if interior > 1:
            dens[1:-1] /= interior
            dens[0] = dens[-1] = 0.0
        else:
            edge_sum = dens[1] + dens[-2]
            ratio = dens[1] / edge_sum if edge_sum > 0 else 0.5
            dens[0] = (1 - interior) * ratio
            dens[-1] = (1 - interior) * (1 - ratio)

        log.debug(
            "smoothed %d bins into %d with %s; interior mass %.6g",
            base.n_bins, grid.n_bins, kernel.__class__.__name__, interior,
        )

        kde = cls()
        kde._set_from_classical(edges=grid.edges, bins=dens)
        kde.kernel = kernel
        kde.base = base
        return kde

    def fit(self, X: ArrayLike, n_bins: int = DEFAULT_KDE_BINS,
            kernel: Optional[Distribution] = None,
            set_params: Optional[Callable[[float, Distribution], None]] = None,
            padding: float = DEFAULT_PADDING, **kwargs) -> 'KernelDensity':
        """
        Histogram raw samples into ``n_bins`` bins, then smooth.

        See :meth:`from_histogram` for the remaining arguments.
        """
        base = Histogram.from_samples(X, n_bins)
        fitted = self.from_histogram(base, kernel=kernel,
                                     set_params=set_params, padding=padding)
        self._set_from_classical(edges=fitted.edges, bins=fitted.bins)
        self.kernel = fitted.kernel
        self.base = fitted.base
        return self
