"""Histograms and kernel-smoothed densities."""

from .histogram import Histogram
from .kernel_density import KernelDensity

__all__ = ['Histogram', 'KernelDensity']
