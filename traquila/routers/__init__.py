"""API routers for Traquila."""

from traquila.routers import bottles, cellar, export, insights, pours

__all__ = ["bottles", "pours", "cellar", "insights", "export"]
