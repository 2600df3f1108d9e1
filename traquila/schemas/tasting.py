"""Pydantic schemas for tasting records (pours)."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from traquila.models import PourContext, ServeStyle, TastingRecord
from traquila.models.tasting import as_utc


class PourCreate(BaseModel):
    """Schema for logging a pour.

    ``amount_oz`` is not range-checked here; the journal store rejects
    non-positive amounts with a PourValidationError.
    """

    bottle_id: UUID | None = None
    amount_oz: float
    date: datetime | None = None
    serve: ServeStyle = ServeStyle.NEAT
    context: PourContext = PourContext.AT_HOME
    enjoyment: int | None = Field(default=None, ge=1, le=5)
    next_day_feel: int | None = Field(default=None, ge=1, le=5)
    notes: str = Field(default="", max_length=2000)
    photo: bytes | None = None

    @field_validator("date")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)


class PourUpdate(BaseModel):
    """Schema for editing a pour. Only the fields that are set change."""

    bottle_id: UUID | None = None
    amount_oz: float | None = None
    date: datetime | None = None
    serve: ServeStyle | None = None
    context: PourContext | None = None
    enjoyment: int | None = Field(default=None, ge=1, le=5)
    next_day_feel: int | None = Field(default=None, ge=1, le=5)
    notes: str | None = Field(default=None, max_length=2000)
    photo: bytes | None = None

    @field_validator("date")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)


class BottleBasicInfo(BaseModel):
    """Basic bottle info for pour response."""

    id: str
    name: str
    brand: str | None = None


class PourResponse(BaseModel):
    """Schema for pour response."""

    id: str
    bottle_id: str
    date: datetime
    amount_oz: float
    amount_display: str = ""
    serve: ServeStyle
    context: PourContext
    enjoyment: int | None
    next_day_feel: int | None
    notes: str
    has_photo: bool
    created_at: datetime
    bottle: BottleBasicInfo | None = None

    model_config = ConfigDict(from_attributes=True)

    @staticmethod
    def from_record(
        record: TastingRecord,
        bottle_info: BottleBasicInfo | None = None,
        amount_display: str = "",
    ) -> "PourResponse":
        data = record.model_dump(exclude={"photo"})
        data["id"] = str(record.id)
        data["bottle_id"] = str(record.bottle_id)
        data["amount_display"] = amount_display
        data["has_photo"] = record.photo is not None
        data["bottle"] = bottle_info
        return PourResponse.model_validate(data)
