"""Journal-wide insights summary and daily enjoyment trend.

Unlike the dashboard pipeline these figures ignore filters and look at the
whole journal.
"""

from collections import Counter, defaultdict
from collections.abc import Iterable
from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field

from traquila.models import Bottle, TastingRecord

FLAVOR_TERMS = (
    "agave",
    "vanilla",
    "citrus",
    "pepper",
    "oak",
    "caramel",
    "smoke",
    "spice",
    "floral",
    "herbal",
    "fruit",
    "earthy",
)


class InsightsSummary(BaseModel):
    favorite_by_enjoyment_name: str | None = None
    favorite_by_enjoyment_score: float | None = None
    most_logged_bottle_name: str | None = None
    most_logged_count: int = 0
    average_tasting_rating: float = 0.0
    preferred_region_name: str | None = None
    preferred_region_count: int = 0
    flavor_highlights: list[str] = Field(default_factory=list)
    recommended_bottle_names: list[str] = Field(default_factory=list)


class EnjoymentPoint(BaseModel):
    day: date
    value: float


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def extract_flavor_highlights(bottles: Iterable[Bottle], records: Iterable[TastingRecord], limit: int = 3) -> list[str]:
    """Count flavor vocabulary hits across bottle and pour notes."""
    notes_text = " ".join([bottle.notes for bottle in bottles] + [record.notes for record in records]).lower()
    counts = {term: notes_text.count(term) for term in FLAVOR_TERMS}
    ranked = sorted(
        ((term, hits) for term, hits in counts.items() if hits > 0),
        key=lambda item: (-item[1], item[0]),
    )
    return [term.capitalize() for term, _ in ranked[:limit]]


def build_summary(bottles: list[Bottle], records: list[TastingRecord]) -> InsightsSummary:
    """Favorite, most logged, preferred region, flavors and recommendations."""
    bottles_by_id = {bottle.id: bottle for bottle in bottles}
    known_records = [record for record in records if record.bottle_id in bottles_by_id]

    def name_of(bottle_id: UUID) -> str:
        return bottles_by_id[bottle_id].name

    enjoyment_values = [float(record.enjoyment) for record in known_records if record.enjoyment is not None]
    rated_bottle_values = [bottle.rating for bottle in bottles if bottle.rating > 0]
    average_enjoyment = _mean(enjoyment_values)
    average_tasting_rating = average_enjoyment if average_enjoyment > 0 else _mean(rated_bottle_values)

    pour_counts = Counter(record.bottle_id for record in known_records)
    most_logged = min(pour_counts.items(), key=lambda item: (-item[1], name_of(item[0])), default=None)

    enjoyment_by_bottle: dict[UUID, list[float]] = defaultdict(list)
    for record in known_records:
        if record.enjoyment is not None:
            enjoyment_by_bottle[record.bottle_id].append(float(record.enjoyment))
    favorite = min(
        ((bottle_id, _mean(values)) for bottle_id, values in enjoyment_by_bottle.items()),
        key=lambda item: (-item[1], name_of(item[0])),
        default=None,
    )

    region_counts = Counter(bottles_by_id[record.bottle_id].region.label for record in known_records)
    preferred_region = min(region_counts.items(), key=lambda item: (-item[1], item[0]), default=None)

    recommended = sorted(
        (bottle for bottle in bottles if bottle.rating >= 4),
        key=lambda bottle: (bottle.rating, bottle.updated_at),
        reverse=True,
    )[:3]

    return InsightsSummary(
        favorite_by_enjoyment_name=name_of(favorite[0]) if favorite else None,
        favorite_by_enjoyment_score=favorite[1] if favorite else None,
        most_logged_bottle_name=name_of(most_logged[0]) if most_logged else None,
        most_logged_count=most_logged[1] if most_logged else 0,
        average_tasting_rating=average_tasting_rating,
        preferred_region_name=preferred_region[0] if preferred_region else None,
        preferred_region_count=preferred_region[1] if preferred_region else 0,
        flavor_highlights=extract_flavor_highlights(bottles, known_records),
        recommended_bottle_names=[bottle.name for bottle in recommended],
    )


def enjoyment_trend(records: Iterable[TastingRecord]) -> list[EnjoymentPoint]:
    """Average enjoyment per calendar day, oldest first."""
    by_day: dict[date, list[float]] = defaultdict(list)
    for record in records:
        if record.enjoyment is not None:
            by_day[record.date.date()].append(float(record.enjoyment))
    return [EnjoymentPoint(day=day, value=_mean(values)) for day, values in sorted(by_day.items())]
