"""Insights dashboard endpoints."""

from fastapi import APIRouter, Query

from traquila.config import settings
from traquila.dependencies import Session, Store
from traquila.models import BottleType
from traquila.schemas.insights import (
    DashboardFilters,
    DashboardResult,
    ExperiencePlace,
    ExperienceRatingFilter,
    ExperienceSortOption,
    ExperienceTimeRange,
    TopBottleRankingMetric,
)
from traquila.services.summary import EnjoymentPoint, InsightsSummary, build_summary, enjoyment_trend

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResult)
async def dashboard(
    session: Session,
    rating: ExperienceRatingFilter = Query(default=ExperienceRatingFilter.ALL),
    expressions: list[BottleType] = Query(default=[], description="Bottle types to include"),
    places: list[ExperiencePlace] = Query(default=[], description="Places to include"),
    time_range: ExperienceTimeRange | None = Query(default=None, description="Defaults to the configured range"),
    sort: ExperienceSortOption = Query(default=ExperienceSortOption.TOP_RATED),
    ranking: TopBottleRankingMetric = Query(default=TopBottleRankingMetric.AVG_RATING),
) -> DashboardResult:
    """Run the insights pipeline for the given filters.

    Empty expression and place lists mean no restriction.
    """
    filters = DashboardFilters(
        rating_filter=rating,
        selected_expressions=frozenset(expressions),
        selected_places=frozenset(places),
        time_range=time_range or settings.default_time_range,
        sort_option=sort,
        bottle_ranking_metric=ranking,
    )
    return session.set_filters(filters)


@router.get("/summary", response_model=InsightsSummary)
async def summary(store: Store) -> InsightsSummary:
    """Get journal-wide favorites, flavors and recommendations."""
    bottles, records = store.snapshot()
    return build_summary(bottles, records)


@router.get("/trend", response_model=list[EnjoymentPoint])
async def trend(store: Store) -> list[EnjoymentPoint]:
    """Get the average enjoyment per day."""
    _, records = store.snapshot()
    return enjoyment_trend(records)
