"""Traquila - tasting journal and cellar accounting for agave spirits."""

__version__ = "0.4.0"
