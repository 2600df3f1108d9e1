"""Pydantic schemas for journal export."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from traquila.models import Bottle, TastingRecord


class ExportFormat(str, Enum):
    """Supported export formats."""

    CSV = "csv"
    XLSX = "xlsx"
    YAML = "yaml"
    JSON = "json"


class BottleFlatExport(BaseModel):
    """Flat bottle schema for CSV/Excel export."""

    id: str
    name: str
    brand: str | None = None
    type: str
    region: str
    nom: str | None = None
    abv: float
    price_paid: float | None = None
    purchase_date: str | None = None
    bottle_size_ml: int | None = None
    opened_date: datetime | None = None
    fill_level_percent: float
    quantity_owned: int
    cellar_location: str | None = None
    rating: float
    notes: str = ""
    photo_count: int = 0
    created_at: datetime
    updated_at: datetime

    @staticmethod
    def from_bottle(bottle: Bottle) -> "BottleFlatExport":
        return BottleFlatExport(
            id=str(bottle.id),
            name=bottle.name,
            brand=bottle.brand,
            type=bottle.type.label,
            region=bottle.region.label,
            nom=bottle.nom,
            abv=bottle.abv,
            price_paid=bottle.price_paid,
            purchase_date=bottle.purchase_date.isoformat() if bottle.purchase_date else None,
            bottle_size_ml=bottle.bottle_size_ml,
            opened_date=bottle.opened_date,
            fill_level_percent=round(bottle.fill_level_percent, 2),
            quantity_owned=bottle.quantity_owned,
            cellar_location=bottle.cellar_location,
            rating=bottle.rating,
            notes=bottle.notes,
            photo_count=len(bottle.photos),
            created_at=bottle.created_at,
            updated_at=bottle.updated_at,
        )


class PourFlatExport(BaseModel):
    """Flat pour schema for CSV/Excel export."""

    id: str
    bottle_id: str
    bottle_name: str | None = None
    bottle_brand: str | None = None
    date: datetime
    amount_oz: float
    serve: str
    context: str
    enjoyment: int | None = None
    next_day_feel: int | None = None
    notes: str = ""
    created_at: datetime

    @staticmethod
    def from_record(record: TastingRecord, bottle: Bottle | None = None) -> "PourFlatExport":
        """Create a flat export row from a tasting record.

        Args:
            record: The pour to export
            bottle: Bottle the pour came from, if it is still in the journal

        Returns:
            PourFlatExport instance
        """
        return PourFlatExport(
            id=str(record.id),
            bottle_id=str(record.bottle_id),
            bottle_name=bottle.name if bottle else None,
            bottle_brand=bottle.brand if bottle else None,
            date=record.date,
            amount_oz=record.amount_oz,
            serve=record.serve.label,
            context=record.context.label,
            enjoyment=record.enjoyment,
            next_day_feel=record.next_day_feel,
            notes=record.notes,
            created_at=record.created_at,
        )


class ExportMetadata(BaseModel):
    """Metadata included in hierarchical exports (JSON, YAML)."""

    exported_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    bottle_count: int = 0
    pour_count: int = 0
    format: str
    filters_applied: dict[str, Any] = Field(default_factory=dict)

