"""Pydantic schemas for the insights dashboard: filters and result bundle."""

import enum
from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from traquila.models import Bottle, BottleType, PourContext, TastingRecord


class ExperienceRatingFilter(str, enum.Enum):
    """Rating bucket a tasting must fall in."""

    ALL = "all"
    FOUR_PLUS = "four_plus"
    THREE_PLUS = "three_plus"
    UNRATED = "unrated"


class ExperienceTimeRange(str, enum.Enum):
    """How far back tastings are considered."""

    D30 = "d30"
    D90 = "d90"
    YTD = "ytd"
    ALL = "all"


class ExperienceSortOption(str, enum.Enum):
    """Ordering of the experience leaderboard."""

    TOP_RATED = "top_rated"
    MOST_LOGGED = "most_logged"
    MOST_RECENT = "most_recent"
    BEST_AT_RESTAURANT = "best_at_restaurant"


class TopBottleRankingMetric(str, enum.Enum):
    """Ordering of the bottle leaderboard."""

    AVG_RATING = "avg_rating"
    MOST_LOGGED = "most_logged"
    RECENCY = "recency"


class ExperiencePlace(str, enum.Enum):
    """Coarse location category derived from a pour's context."""

    HOME = "home"
    BAR = "bar"
    RESTAURANT = "restaurant"
    EVENT = "event"
    TASTING = "tasting"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_context(cls, context: PourContext) -> "ExperiencePlace":
        return _PLACE_BY_CONTEXT[context]


_PLACE_BY_CONTEXT = {
    PourContext.AT_HOME: ExperiencePlace.HOME,
    PourContext.BAR: ExperiencePlace.BAR,
    PourContext.RESTAURANT: ExperiencePlace.RESTAURANT,
    PourContext.PARTY: ExperiencePlace.EVENT,
    PourContext.TASTING: ExperiencePlace.TASTING,
}


class DashboardFilters(BaseModel):
    """Complete filter and sort configuration of the dashboard."""

    model_config = ConfigDict(frozen=True)

    rating_filter: ExperienceRatingFilter = ExperienceRatingFilter.ALL
    selected_expressions: frozenset[BottleType] = frozenset()
    selected_places: frozenset[ExperiencePlace] = frozenset()
    time_range: ExperienceTimeRange = ExperienceTimeRange.D90
    sort_option: ExperienceSortOption = ExperienceSortOption.TOP_RATED
    bottle_ranking_metric: TopBottleRankingMetric = TopBottleRankingMetric.AVG_RATING


class ExperienceRow(BaseModel):
    """A filtered tasting enriched with its derived rating, place and preview."""

    id: UUID
    record: TastingRecord
    bottle: Bottle
    rating: float | None = None
    place: ExperiencePlace
    note_preview: str


class TopBottleRow(BaseModel):
    """Per-bottle aggregate over the filtered tastings."""

    id: UUID
    bottle: Bottle
    average_rating: float | None = None
    tasting_count: int
    last_tasted: datetime | None = None


class PreferenceSnapshotItem(BaseModel):
    """One line of the preference snapshot."""

    title: str
    value: str
    icon: str


class ExperienceTrendPoint(BaseModel):
    """Average rating of one calendar month."""

    bucket_date: date
    avg_rating: float


class DashboardResult(BaseModel):
    """Everything the dashboard renders for one filter configuration."""

    top_experience: ExperienceRow | None = None
    top_bottles: list[TopBottleRow] = Field(default_factory=list)
    top_experiences: list[ExperienceRow] = Field(default_factory=list)
    snapshot_items: list[PreferenceSnapshotItem] = Field(default_factory=list)
    trend_points: list[ExperienceTrendPoint] = Field(default_factory=list)
    filtered_tastings_count: int = 0
