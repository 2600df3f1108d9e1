"""Cellar overview: searching, filtering, sorting and totals over bottles."""

import enum
from collections.abc import Iterable

from pydantic import BaseModel

from traquila.models import Bottle

LOW_FILL_THRESHOLD = 25.0


class CellarFilter(str, enum.Enum):
    ALL = "all"
    OPENED = "opened"
    SEALED = "sealed"
    LOW_FILL = "low_fill"


class CellarSort(str, enum.Enum):
    VALUE_HIGH = "value_high"
    FILL_LOW = "fill_low"
    UPDATED = "updated"
    NAME = "name"


class CellarSummary(BaseModel):
    """Totals shown above the cellar list."""

    total_quantity: int
    total_value: float
    opened_count: int
    low_fill_count: int


def bottle_value(bottle: Bottle) -> float:
    """Price paid times units owned; unpriced bottles are worth 0."""
    return (bottle.price_paid or 0) * max(1, bottle.quantity_owned)


def is_low_fill(bottle: Bottle, threshold: float = LOW_FILL_THRESHOLD) -> bool:
    return bottle.is_opened and bottle.fill_level_percent <= threshold


def _matches_query(bottle: Bottle, query: str) -> bool:
    needle = query.casefold()
    haystacks = (bottle.name, bottle.brand or "", bottle.cellar_location or "")
    return any(needle in text.casefold() for text in haystacks)


def filter_cellar(
    bottles: Iterable[Bottle],
    query: str = "",
    cellar_filter: CellarFilter = CellarFilter.ALL,
    sort: CellarSort = CellarSort.NAME,
    low_fill_threshold: float = LOW_FILL_THRESHOLD,
) -> list[Bottle]:
    """Bottles matching the search text and filter, in the requested order.

    The search is case-insensitive over name, brand and cellar location.
    """
    rows = list(bottles)

    trimmed = query.strip()
    if trimmed:
        rows = [bottle for bottle in rows if _matches_query(bottle, trimmed)]

    if cellar_filter == CellarFilter.OPENED:
        rows = [bottle for bottle in rows if bottle.is_opened]
    elif cellar_filter == CellarFilter.SEALED:
        rows = [bottle for bottle in rows if not bottle.is_opened]
    elif cellar_filter == CellarFilter.LOW_FILL:
        rows = [bottle for bottle in rows if is_low_fill(bottle, low_fill_threshold)]

    if sort == CellarSort.VALUE_HIGH:
        rows.sort(key=lambda bottle: (-bottle_value(bottle), bottle.name))
    elif sort == CellarSort.FILL_LOW:
        rows.sort(key=lambda bottle: (bottle.fill_level_percent, bottle.name))
    elif sort == CellarSort.UPDATED:
        rows.sort(key=lambda bottle: bottle.updated_at, reverse=True)
    else:
        rows.sort(key=lambda bottle: bottle.name)

    return rows


def summarize_cellar(bottles: Iterable[Bottle], low_fill_threshold: float = LOW_FILL_THRESHOLD) -> CellarSummary:
    rows = list(bottles)
    return CellarSummary(
        total_quantity=sum(max(1, bottle.quantity_owned) for bottle in rows),
        total_value=sum(bottle_value(bottle) for bottle in rows),
        opened_count=sum(1 for bottle in rows if bottle.is_opened),
        low_fill_count=sum(1 for bottle in rows if is_low_fill(bottle, low_fill_threshold)),
    )
