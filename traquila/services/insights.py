"""Tasting analytics pipeline behind the insights dashboard.

``recompute`` is a pure function of the bottles, the tasting records, the
filter configuration and a reference time. It filters the records, turns the
survivors into experience rows and derives the leaderboards, the preference
snapshot and the monthly trend from them. Every ordering carries a final
tie-break so identical inputs always give identical output.
"""

import logging
import re
from collections import Counter, defaultdict
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from uuid import UUID

from traquila.models import Bottle, TastingRecord
from traquila.schemas.insights import (
    DashboardFilters,
    DashboardResult,
    ExperiencePlace,
    ExperienceRatingFilter,
    ExperienceRow,
    ExperienceSortOption,
    ExperienceTimeRange,
    ExperienceTrendPoint,
    PreferenceSnapshotItem,
    TopBottleRankingMetric,
    TopBottleRow,
)

logger = logging.getLogger(__name__)

TOP_LIMIT = 10
NOTE_PREVIEW_LENGTH = 80
TREND_MIN_RATED = 3
KEYWORD_LIMIT = 3
HIGH_RATING = 4

EMPTY_NOTE_PREVIEW = "No tasting notes yet."
NEED_MORE_RATINGS = "Need more rated tastings"
NEED_MORE_NOTES = "Add tasting notes to surface tags"

STOP_WORDS = frozenset(
    {"the", "and", "with", "this", "that", "from", "very", "just", "have", "notes", "taste", "tasting"}
)

_TOKEN_SPLIT = re.compile(r"[\W_]+")


def effective_rating(record: TastingRecord, bottle: Bottle) -> float | None:
    """Rating used for a tasting: its own enjoyment, else the bottle's rating."""
    if record.enjoyment is not None:
        return float(record.enjoyment)
    if bottle.rating > 0:
        return bottle.rating
    return None


def time_cutoff(time_range: ExperienceTimeRange, now: datetime) -> datetime | None:
    """Earliest tasting date kept by ``time_range``; None keeps everything."""
    if time_range == ExperienceTimeRange.D30:
        return now - timedelta(days=30)
    if time_range == ExperienceTimeRange.D90:
        return now - timedelta(days=90)
    if time_range == ExperienceTimeRange.YTD:
        return now.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    return None


def _matches_rating(rating: float | None, rating_filter: ExperienceRatingFilter) -> bool:
    if rating_filter == ExperienceRatingFilter.FOUR_PLUS:
        return (rating or 0) >= 4
    if rating_filter == ExperienceRatingFilter.THREE_PLUS:
        return (rating or 0) >= 3
    if rating_filter == ExperienceRatingFilter.UNRATED:
        return rating is None
    return True


def note_preview(notes: str, length: int = NOTE_PREVIEW_LENGTH) -> str:
    trimmed = notes.strip()
    if not trimmed:
        return EMPTY_NOTE_PREVIEW
    return trimmed[:length]


def filter_experiences(
    filters: DashboardFilters,
    bottles: Iterable[Bottle],
    records: Iterable[TastingRecord],
    now: datetime,
    preview_length: int = NOTE_PREVIEW_LENGTH,
) -> list[ExperienceRow]:
    """Apply the time, expression, place and rating filters.

    Records whose bottle is not among ``bottles`` are skipped.
    """
    bottles_by_id = {bottle.id: bottle for bottle in bottles}
    cutoff = time_cutoff(filters.time_range, now)

    rows: list[ExperienceRow] = []
    for record in records:
        bottle = bottles_by_id.get(record.bottle_id)
        if bottle is None:
            logger.debug("Skipping pour %s with unknown bottle %s", record.id, record.bottle_id)
            continue

        if cutoff is not None and record.date < cutoff:
            continue

        if filters.selected_expressions and bottle.type not in filters.selected_expressions:
            continue

        place = ExperiencePlace.from_context(record.context)
        if filters.selected_places and place not in filters.selected_places:
            continue

        rating = effective_rating(record, bottle)
        if not _matches_rating(rating, filters.rating_filter):
            continue

        rows.append(
            ExperienceRow(
                id=record.id,
                record=record,
                bottle=bottle,
                rating=rating,
                place=place,
                note_preview=note_preview(record.notes, preview_length),
            )
        )
    return rows


def _rating_key(rating: float | None) -> float:
    # Missing ratings sort below every real rating.
    return rating if rating is not None else -1.0


def sort_experiences(rows: list[ExperienceRow], sort: ExperienceSortOption) -> list[ExperienceRow]:
    """Order experience rows; ties fall back to newest first, then record ID."""
    counts = Counter(row.bottle.id for row in rows)

    def key(row: ExperienceRow) -> tuple:
        newest = (row.record.date, str(row.id))
        if sort == ExperienceSortOption.TOP_RATED:
            return (_rating_key(row.rating), *newest)
        if sort == ExperienceSortOption.MOST_LOGGED:
            return (counts[row.bottle.id], *newest)
        if sort == ExperienceSortOption.BEST_AT_RESTAURANT:
            return (row.place == ExperiencePlace.RESTAURANT, _rating_key(row.rating), *newest)
        return newest

    return sorted(rows, key=key, reverse=True)


def build_top_bottles(
    rows: list[ExperienceRow],
    ranking: TopBottleRankingMetric,
    limit: int = TOP_LIMIT,
) -> list[TopBottleRow]:
    """Aggregate rows per bottle and rank the bottles."""
    grouped: dict[UUID, list[ExperienceRow]] = defaultdict(list)
    for row in rows:
        grouped[row.bottle.id].append(row)

    bottle_rows: list[TopBottleRow] = []
    for bottle_id, group in grouped.items():
        ratings = [row.rating for row in group if row.rating is not None]
        bottle_rows.append(
            TopBottleRow(
                id=bottle_id,
                bottle=group[0].bottle,
                average_rating=sum(ratings) / len(ratings) if ratings else None,
                tasting_count=len(group),
                last_tasted=max(row.record.date for row in group),
            )
        )

    # Stable sorts: the name/ID order survives as the last tie-break.
    bottle_rows.sort(key=lambda row: (row.bottle.name, str(row.id)))
    if ranking == TopBottleRankingMetric.AVG_RATING:
        bottle_rows.sort(key=lambda row: (_rating_key(row.average_rating), row.tasting_count), reverse=True)
    elif ranking == TopBottleRankingMetric.MOST_LOGGED:
        bottle_rows.sort(key=lambda row: (row.tasting_count, row.last_tasted), reverse=True)
    else:
        bottle_rows.sort(key=lambda row: row.last_tasted, reverse=True)

    return bottle_rows[:limit]


def _most_common(values: Iterable[str]) -> str | None:
    counts = Counter(value for value in values if value.strip())
    if not counts:
        return None
    return min(counts.items(), key=lambda item: (-item[1], item[0]))[0]


def _best_setting(rows: list[ExperienceRow]) -> str | None:
    ratings_by_place: dict[ExperiencePlace, list[float]] = defaultdict(list)
    for row in rows:
        if row.rating is not None:
            ratings_by_place[row.place].append(row.rating)
    if not ratings_by_place:
        return None
    averages = {place.label: sum(values) / len(values) for place, values in ratings_by_place.items()}
    return min(averages.items(), key=lambda item: (-item[1], item[0]))[0]


def extract_note_keywords(notes: Iterable[str], limit: int = KEYWORD_LIMIT) -> list[str]:
    """Most frequent note words of four letters or more, minus stop words."""
    counts: Counter[str] = Counter()
    for raw in notes:
        for token in _TOKEN_SPLIT.split(raw.lower()):
            if len(token) >= 4 and token not in STOP_WORDS:
                counts[token] += 1

    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [word.capitalize() for word, _ in ranked[:limit]]


def build_snapshot(rows: list[ExperienceRow], keyword_limit: int = KEYWORD_LIMIT) -> list[PreferenceSnapshotItem]:
    """Summarize what the highly rated tastings have in common."""
    high_rated = [row for row in rows if (row.rating or 0) >= HIGH_RATING]

    preferred_expression = _most_common(row.bottle.type.label for row in high_rated)
    preferred_region = _most_common(row.bottle.region.label for row in high_rated)
    favorite_setting = _best_setting(high_rated)

    tags = extract_note_keywords((row.record.notes for row in rows), keyword_limit)

    return [
        PreferenceSnapshotItem(
            title="Preferred Expression",
            value=preferred_expression or NEED_MORE_RATINGS,
            icon="wineglass",
        ),
        PreferenceSnapshotItem(
            title="Preferred Region",
            value=preferred_region or NEED_MORE_RATINGS,
            icon="map",
        ),
        PreferenceSnapshotItem(
            title="Favorite Setting",
            value=favorite_setting or NEED_MORE_RATINGS,
            icon="mappin.and.ellipse",
        ),
        PreferenceSnapshotItem(
            title="Most Used Note Tags",
            value=" • ".join(tags) if tags else NEED_MORE_NOTES,
            icon="text.bubble",
        ),
    ]


def build_trend(rows: list[ExperienceRow], min_rated: int = TREND_MIN_RATED) -> list[ExperienceTrendPoint]:
    """Monthly average rating, oldest month first.

    Returns an empty list when fewer than ``min_rated`` rows carry a rating.
    """
    rated = [row for row in rows if row.rating is not None]
    if len(rated) < min_rated:
        return []

    buckets: dict[date, list[float]] = defaultdict(list)
    for row in rated:
        bucket = date(row.record.date.year, row.record.date.month, 1)
        buckets[bucket].append(row.rating)

    return [
        ExperienceTrendPoint(bucket_date=bucket, avg_rating=sum(values) / len(values))
        for bucket, values in sorted(buckets.items())
    ]


def recompute(
    filters: DashboardFilters,
    bottles: Iterable[Bottle],
    records: Iterable[TastingRecord],
    now: datetime,
    *,
    top_limit: int = TOP_LIMIT,
    preview_length: int = NOTE_PREVIEW_LENGTH,
    trend_min_rated: int = TREND_MIN_RATED,
    keyword_limit: int = KEYWORD_LIMIT,
) -> DashboardResult:
    """Run the full dashboard pipeline for one filter configuration."""
    rows = filter_experiences(filters, bottles, records, now, preview_length)
    sorted_rows = sort_experiences(rows, filters.sort_option)

    result = DashboardResult(
        top_experience=sorted_rows[0] if sorted_rows else None,
        top_bottles=build_top_bottles(rows, filters.bottle_ranking_metric, top_limit),
        top_experiences=sorted_rows[:top_limit],
        snapshot_items=build_snapshot(rows, keyword_limit),
        trend_points=build_trend(rows, trend_min_rated),
        filtered_tastings_count=len(rows),
    )
    logger.debug(
        "Dashboard recomputed: %d tastings, %d bottles, %d trend points",
        result.filtered_tastings_count,
        len(result.top_bottles),
        len(result.trend_points),
    )
    return result
