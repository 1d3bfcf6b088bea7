"""Synthetic data generators."""

from bankomat.generators.account import AccountGenerator

__all__ = ["AccountGenerator"]
