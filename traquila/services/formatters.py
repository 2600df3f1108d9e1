"""Display helpers for pour volumes."""

from traquila.models import VolumeUnit
from traquila.services.ledger import OZ_TO_ML


def format_volume(amount_oz: float, unit: VolumeUnit = VolumeUnit.OZ) -> str:
    """Render a pour amount, e.g. ``"1.5 oz"`` or ``"44 ml"``."""
    if unit == VolumeUnit.ML:
        return f"{round(amount_oz * OZ_TO_ML):.0f} ml"
    return f"{amount_oz:.2f}".rstrip("0").rstrip(".") + " oz"
