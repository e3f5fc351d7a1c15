"""
Barrier helpers that keep a minimizer inside a parameter domain.

Returning ``inf`` at a domain boundary leaves a gradient-based minimizer
with nothing to follow. :func:`keep_away` instead builds a steep but
continuous surface whose slope points back towards the feasible region.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple
import numpy as np
from numpy.typing import NDArray


def keep_away(value: float, limit: float, base: float) -> float:
    """
    Barrier penalty :math:`e^{|v - \\ell|} \\cdot \\text{base}`.

    The penalty equals ``base`` at the limit and grows exponentially with
    the distance from it. It is its own derivative on the far side of an
    upper limit; below a lower limit the derivative is its negation.

    Parameters
    ----------
    value : float
        The offending parameter value.
    limit : float
        The boundary of the feasible region.
    base : float
        Penalty at the boundary, usually the magnitude of the negated
        log-likelihood at the nearest feasible point.

    Returns
    -------
    penalty : float

    Examples
    --------
    >>> keep_away(0.0, 1.0, 2.0)
    5.43656365691809
    """
    return float(np.exp(abs(value - limit)) * base)


@dataclass(frozen=True)
class Bound:
    """
    Feasible interval for one parameter.

    Attributes
    ----------
    lower, upper : float
        Interval ends; ``-inf``/``inf`` for unbounded.
    closed_lower, closed_upper : bool
        Whether the end itself is feasible.
    """
    lower: float = -np.inf
    upper: float = np.inf
    closed_lower: bool = False
    closed_upper: bool = False

    def below(self, value: float) -> bool:
        return value < self.lower or (value == self.lower and not self.closed_lower)

    def above(self, value: float) -> bool:
        return value > self.upper or (value == self.upper and not self.closed_upper)


def project_to_support(
    params: NDArray, support: Sequence[Bound], margin: float
) -> Tuple[NDArray, NDArray, float]:
    """
    Project an infeasible parameter vector onto its support.

    Violated coordinates move to their limit plus (or minus) ``margin``.

    Parameters
    ----------
    params : ndarray
        Parameter vector.
    support : sequence of Bound
        One bound per parameter. An empty sequence means unconstrained.
    margin : float
        Distance kept from each limit.

    Returns
    -------
    point : ndarray
        The projected, feasible vector.
    direction : ndarray
        ``-1`` for coordinates below their lower limit, ``+1`` above their
        upper limit, ``0`` for feasible coordinates.
    distance : float
        Summed distance of the violated coordinates from their limits.
    """
    point = np.array(params, dtype=float)
    direction = np.zeros(len(point))
    distance = 0.0
    for i, bound in enumerate(support):
        if bound.below(point[i]):
            distance += bound.lower - point[i]
            point[i] = bound.lower + margin
            direction[i] = -1.0
        elif bound.above(point[i]):
            distance += point[i] - bound.upper
            point[i] = bound.upper - margin
            direction[i] = 1.0
    return point, direction, distance
