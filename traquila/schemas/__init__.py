"""Pydantic schemas for the Traquila API."""

from traquila.schemas.bottle import BottleCreate, BottleResponse, BottleUpdate
from traquila.schemas.insights import DashboardFilters, DashboardResult
from traquila.schemas.tasting import PourCreate, PourResponse, PourUpdate

__all__ = [
    "BottleCreate",
    "BottleUpdate",
    "BottleResponse",
    "PourCreate",
    "PourUpdate",
    "PourResponse",
    "DashboardFilters",
    "DashboardResult",
]
