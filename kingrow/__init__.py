"""Kingrow: an 8x8 checkers rule engine."""

__version__ = "0.1.0"
