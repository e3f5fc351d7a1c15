"""Base classes for distributions and likelihood models."""

from .distribution import Distribution
from .likelihood_model import LikelihoodModel
from .rank_model import RankModel

__all__ = [
    "Distribution",
    "LikelihoodModel",
    "RankModel",
]
