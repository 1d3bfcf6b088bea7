"""Bankomat: an ATM simulator backed by flat-file account storage."""

__version__ = "0.1.0"
