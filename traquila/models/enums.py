"""Closed vocabularies used by bottles and tasting records."""

import enum


class BottleType(str, enum.Enum):
    """Expression of the spirit in the bottle."""

    BLANCO = "blanco"
    REPOSADO = "reposado"
    ANEJO = "anejo"
    EXTRA_ANEJO = "extra_anejo"
    CRISTALINO = "cristalino"
    MEZCAL = "mezcal"

    @property
    def label(self) -> str:
        return _BOTTLE_TYPE_LABELS[self]


_BOTTLE_TYPE_LABELS = {
    BottleType.BLANCO: "Blanco",
    BottleType.REPOSADO: "Reposado",
    BottleType.ANEJO: "Añejo",
    BottleType.EXTRA_ANEJO: "Extra Añejo",
    BottleType.CRISTALINO: "Cristalino",
    BottleType.MEZCAL: "Mezcal",
}


class Region(str, enum.Enum):
    """Growing region of the agave."""

    HIGHLANDS = "highlands"
    LOWLANDS = "lowlands"
    OTHER_UNKNOWN = "other_unknown"

    @property
    def label(self) -> str:
        return _REGION_LABELS[self]


_REGION_LABELS = {
    Region.HIGHLANDS: "Highlands",
    Region.LOWLANDS: "Lowlands",
    Region.OTHER_UNKNOWN: "Other/Unknown",
}


class ServeStyle(str, enum.Enum):
    """How a pour was served."""

    NEAT = "neat"
    ON_THE_ROCKS = "on_the_rocks"
    MARGARITA = "margarita"
    PALOMA = "paloma"
    RANCH_WATER = "ranch_water"
    OTHER = "other"

    @property
    def label(self) -> str:
        return _SERVE_LABELS[self]


_SERVE_LABELS = {
    ServeStyle.NEAT: "Neat",
    ServeStyle.ON_THE_ROCKS: "On the rocks",
    ServeStyle.MARGARITA: "Margarita",
    ServeStyle.PALOMA: "Paloma",
    ServeStyle.RANCH_WATER: "Ranch Water",
    ServeStyle.OTHER: "Other",
}


class PourContext(str, enum.Enum):
    """Where a pour happened."""

    AT_HOME = "at_home"
    BAR = "bar"
    RESTAURANT = "restaurant"
    PARTY = "party"
    TASTING = "tasting"

    @property
    def label(self) -> str:
        return _CONTEXT_LABELS[self]


_CONTEXT_LABELS = {
    PourContext.AT_HOME: "At Home",
    PourContext.BAR: "Bar",
    PourContext.RESTAURANT: "Restaurant",
    PourContext.PARTY: "Party",
    PourContext.TASTING: "Tasting",
}


class VolumeUnit(str, enum.Enum):
    """Display unit for pour amounts."""

    OZ = "oz"
    ML = "ml"
