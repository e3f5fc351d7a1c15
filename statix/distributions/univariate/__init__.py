"""Univariate distributions and rank models."""

from .exponential import Exponential
from .gamma import Gamma
from .normal import Normal
from .uniform import Uniform
from .waring import Waring
from .yule import Yule
from .zipf import Zipf

__all__ = ['Exponential', 'Gamma', 'Normal', 'Uniform',
           'Waring', 'Yule', 'Zipf']
