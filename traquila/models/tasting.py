"""Tasting record model (a logged pour)."""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from traquila.models.enums import PourContext, ServeStyle


def as_utc(value: Any) -> Any:
    """Attach UTC to a naive datetime; anything else is returned unchanged."""
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class TastingRecord(BaseModel):
    """One consumption event logged against a bottle.

    The record holds the bottle's ID rather than the bottle itself; the
    journal store resolves it when needed.
    """

    model_config = ConfigDict(validate_assignment=True, ser_json_bytes="base64")

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    bottle_id: uuid.UUID
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    amount_oz: float = Field(gt=0)
    serve: ServeStyle = ServeStyle.NEAT
    context: PourContext = PourContext.AT_HOME
    enjoyment: Optional[int] = Field(default=None, ge=1, le=5)
    next_day_feel: Optional[int] = Field(default=None, ge=1, le=5)
    notes: str = ""
    photo: Optional[bytes] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("date", "created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Naive dates are taken to be UTC."""
        return as_utc(v)

    def __repr__(self) -> str:
        return (
            f"<TastingRecord(id={self.id}, bottle_id={self.bottle_id}, "
            f"amount_oz={self.amount_oz}, context={self.context.value})>"
        )
