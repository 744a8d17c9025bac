"""Structural framing derivation from stacked floor plates."""

__version__ = "0.1.0"
