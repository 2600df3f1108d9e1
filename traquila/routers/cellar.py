"""Cellar overview endpoints."""

from fastapi import APIRouter, Query

from traquila.config import settings
from traquila.dependencies import Store
from traquila.schemas.bottle import BottleResponse
from traquila.services.cellar import CellarFilter, CellarSort, CellarSummary, filter_cellar, summarize_cellar

router = APIRouter()


@router.get("", response_model=list[BottleResponse])
async def list_cellar(
    store: Store,
    q: str = Query(default="", description="Search name, brand and location"),
    filter: CellarFilter = Query(default=CellarFilter.ALL, description="Cellar filter"),
    sort: CellarSort = Query(default=CellarSort.NAME, description="Sort order"),
) -> list[BottleResponse]:
    """List bottles in the cellar with search, filter and sort applied."""
    bottles = filter_cellar(
        store.list_bottles(),
        query=q,
        cellar_filter=filter,
        sort=sort,
        low_fill_threshold=settings.low_fill_threshold,
    )
    return [BottleResponse.from_bottle(bottle) for bottle in bottles]


@router.get("/summary", response_model=CellarSummary)
async def cellar_summary(store: Store) -> CellarSummary:
    """Get bottle count, value, opened and low-fill totals."""
    return summarize_cellar(store.list_bottles(), low_fill_threshold=settings.low_fill_threshold)
