"""Bottle model representing a unit of cellar inventory."""

import uuid
from datetime import date, datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from traquila.models.enums import BottleType, Region

DEFAULT_BOTTLE_SIZE_ML = 750


class BottlePhoto(BaseModel):
    """Embedded photo attachment of a bottle."""

    model_config = ConfigDict(ser_json_bytes="base64")

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    filename: str
    image_data: bytes
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Bottle(BaseModel):
    """A bottle in the cellar.

    ``fill_level_percent`` expresses the liquid left across all owned units,
    so a pair of half-empty bottles reads 50%, not 100%.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)

    # Descriptive
    name: str
    brand: Optional[str] = None
    type: BottleType = BottleType.BLANCO
    region: Region = Region.OTHER_UNKNOWN
    nom: Optional[str] = None  # NOM origin code printed on the label
    abv: float = Field(default=40, ge=0, le=100)

    # Commercial
    price_paid: Optional[float] = Field(default=None, ge=0)
    purchase_date: Optional[date] = None
    bottle_size_ml: Optional[int] = Field(default=DEFAULT_BOTTLE_SIZE_ML, gt=0)

    # Ledger state
    opened_date: Optional[datetime] = None
    fill_level_percent: float = Field(default=100, ge=0, le=100)
    quantity_owned: int = Field(default=1, ge=1)
    cellar_location: Optional[str] = None

    # Journal
    notes: str = ""
    rating: float = Field(default=0, ge=0, le=5, multiple_of=0.5)

    photos: list[BottlePhoto] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_opened(self) -> bool:
        return self.opened_date is not None

    @property
    def hero_photo(self) -> BottlePhoto | None:
        """Earliest photo by creation time."""
        if not self.photos:
            return None
        return min(self.photos, key=lambda photo: photo.created_at)

    def __repr__(self) -> str:
        return f"<Bottle(id={self.id}, name={self.name}, fill={self.fill_level_percent:.1f}%)>"
