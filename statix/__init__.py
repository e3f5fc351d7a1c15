"""
statix: maximum likelihood models and density smoothing on numpy/scipy.

Key features:
- Named likelihood models (Gamma, Waring, Yule, Zipf, Exponential, Probit)
  exposing the negated log-likelihood, its analytic gradient and a combined
  evaluator in the form ``scipy.optimize.minimize`` expects
- A barrier surface that steers minimizers back into each model's
  parameter domain instead of failing at the boundary
- Histograms and kernel-smoothed densities with open-ended tail bins
- Linear-algebra and descriptive-statistics helpers
- Frozen dataclass parameter containers (statix.params)
"""

from statix.params import (
    ExponentialParams,
    GammaParams,
    NormalParams,
    UniformParams,
    WaringParams,
    YuleParams,
    ZipfParams,
    ProbitParams,
    HistogramParams,
)
from statix.distributions.univariate import (
    Exponential,
    Gamma,
    Normal,
    Uniform,
    Waring,
    Yule,
    Zipf,
)
from statix.distributions.regression import Probit
from statix.density import Histogram, KernelDensity
from statix.utils.boundary import keep_away

__all__ = [
    # Models
    "Exponential",
    "Gamma",
    "Normal",
    "Uniform",
    "Waring",
    "Yule",
    "Zipf",
    "Probit",
    # Densities
    "Histogram",
    "KernelDensity",
    "keep_away",
    # Parameter dataclasses
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
