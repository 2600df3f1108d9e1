"""Exceptions raised by the Traquila journal workflow."""


class TraquilaError(Exception):
    """Base class for all Traquila errors."""


class PourValidationError(TraquilaError, ValueError):
    """A pour failed the entry checks (non-positive amount, no bottle selected)."""


class BottleNotFoundError(TraquilaError, LookupError):
    """No bottle exists with the requested ID."""

    def __init__(self, bottle_id: object) -> None:
        super().__init__(f"Bottle with ID {bottle_id} not found")
        self.bottle_id = bottle_id


class TastingNotFoundError(TraquilaError, LookupError):
    """No tasting record exists with the requested ID."""

    def __init__(self, record_id: object) -> None:
        super().__init__(f"Tasting record with ID {record_id} not found")
        self.record_id = record_id
