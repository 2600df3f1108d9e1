"""Domain models for Traquila."""

from traquila.models.bottle import DEFAULT_BOTTLE_SIZE_ML, Bottle, BottlePhoto
from traquila.models.enums import BottleType, PourContext, Region, ServeStyle, VolumeUnit
from traquila.models.tasting import TastingRecord

__all__ = [
    # Records
    "Bottle",
    "BottlePhoto",
    "TastingRecord",
    "DEFAULT_BOTTLE_SIZE_ML",
    # Vocabularies
    "BottleType",
    "Region",
    "ServeStyle",
    "PourContext",
    "VolumeUnit",
]
