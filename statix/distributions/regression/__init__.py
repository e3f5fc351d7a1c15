"""Binary-outcome regression models."""

from .probit import Probit

__all__ = ['Probit']
