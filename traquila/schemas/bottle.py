"""Pydantic schemas for bottles."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from traquila.models import Bottle, BottleType, Region


class BottleBase(BaseModel):
    """Fields shared by bottle create and update."""

    name: str | None = Field(default=None, max_length=500)
    brand: str | None = Field(default=None, max_length=200)
    type: BottleType | None = None
    region: Region | None = None
    nom: str | None = Field(default=None, max_length=50)
    abv: float | None = Field(default=None, ge=0, le=100)
    price_paid: float | None = Field(default=None, ge=0)
    purchase_date: date | None = None
    bottle_size_ml: int | None = Field(default=None, gt=0)
    opened_date: datetime | None = None
    fill_level_percent: float | None = Field(default=None, ge=0, le=100)
    quantity_owned: int | None = Field(default=None, ge=1)
    cellar_location: str | None = Field(default=None, max_length=200)
    notes: str | None = Field(default=None, max_length=2000)
    rating: float | None = Field(default=None, ge=0, le=5, multiple_of=0.5)

    @field_validator("brand", "nom", "cellar_location", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Treat whitespace-only text as missing."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class BottleCreate(BottleBase):
    """Schema for creating a bottle."""

    name: str = Field(..., min_length=1, max_length=500)


class BottleUpdate(BottleBase):
    """Schema for updating a bottle. Only the fields that are set change."""


class BottleResponse(BaseModel):
    """Schema for bottle response."""

    id: str
    name: str
    brand: str | None
    type: BottleType
    type_label: str
    region: Region
    region_label: str
    nom: str | None
    abv: float
    price_paid: float | None
    purchase_date: date | None
    bottle_size_ml: int | None
    opened_date: datetime | None
    fill_level_percent: float
    quantity_owned: int
    cellar_location: str | None
    notes: str
    rating: float
    photo_filenames: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @staticmethod
    def from_bottle(bottle: Bottle) -> "BottleResponse":
        data = bottle.model_dump(exclude={"photos"})
        data["id"] = str(bottle.id)
        data["type_label"] = bottle.type.label
        data["region_label"] = bottle.region.label
        data["photo_filenames"] = [photo.filename for photo in bottle.photos]
        return BottleResponse.model_validate(data)
