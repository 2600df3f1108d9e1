"""Volume ledger keeping bottle fill levels in step with logged pours.

Every counting pour debits its bottle when created and credits it back when
deleted. An edit is a full reversal of the old effect followed by a fresh
application of the new one, so a record's lifetime nets to zero on every
bottle it ever touched.

The ledger never validates or rejects input. Amounts are assumed positive
(the journal store checks that) and the resulting volume is clamped to the
bottle's capacity.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from traquila.models import DEFAULT_BOTTLE_SIZE_ML, Bottle, PourContext, TastingRecord

logger = logging.getLogger(__name__)

OZ_TO_ML = 29.5735


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def counts_against_cellar(context: PourContext) -> bool:
    """Whether a pour in this context is drawn from the user's own stock.

    Restaurant pours come from someone else's bottle.
    """
    return context != PourContext.RESTAURANT


def oz_to_ml(amount_oz: float) -> float:
    return amount_oz * OZ_TO_ML


def apply_volume_change(bottle: Bottle, delta_ml: float, now: datetime | None = None) -> None:
    """Add ``delta_ml`` (negative to consume) to the bottle's remaining volume.

    Capacity is the unit size times the number of units owned. The new
    volume is clamped to [0, capacity] before being stored as a percentage.
    """
    unit_size_ml = bottle.bottle_size_ml or DEFAULT_BOTTLE_SIZE_ML
    total_capacity_ml = max(unit_size_ml * max(1, bottle.quantity_owned), 1)
    current_remaining_ml = total_capacity_ml * (bottle.fill_level_percent / 100)
    next_remaining_ml = min(max(current_remaining_ml + delta_ml, 0.0), total_capacity_ml)

    bottle.fill_level_percent = (next_remaining_ml / total_capacity_ml) * 100
    bottle.updated_at = now or _utcnow()


class VolumeLedger:
    """Applies the ledger side effects of the tasting-record lifecycle."""

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or _utcnow

    def debit(self, bottle: Bottle, amount_oz: float) -> None:
        apply_volume_change(bottle, -oz_to_ml(amount_oz), self._clock())

    def credit(self, bottle: Bottle, amount_oz: float) -> None:
        apply_volume_change(bottle, oz_to_ml(amount_oz), self._clock())

    def record_created(self, record: TastingRecord, bottle: Bottle) -> None:
        """Debit the bottle for a newly logged pour."""
        if not counts_against_cellar(record.context):
            logger.debug("Pour %s at %s does not count against cellar", record.id, record.context.value)
            return
        self.debit(bottle, record.amount_oz)
        logger.debug(
            "Debited %.2f oz from bottle %s (fill now %.2f%%)",
            record.amount_oz,
            bottle.id,
            bottle.fill_level_percent,
        )

    def record_updated(
        self,
        record: TastingRecord,
        changes: Mapping[str, Any],
        resolve_bottle: Callable[[UUID], Bottle],
    ) -> TastingRecord:
        """Apply ``changes`` to ``record`` with the reverse-then-apply sequence.

        The previous bottle, amount and context are captured before any field
        is touched. The previous context decides whether a reversal is owed;
        the new context decides whether the new amount is debited.

        Args:
            record: The record being edited. Mutated in place.
            changes: Field values to assign (may include ``bottle_id``).
            resolve_bottle: Looks up a bottle by ID.

        Returns:
            The updated record.
        """
        previous_bottle_id = record.bottle_id
        previous_amount_oz = record.amount_oz
        previous_context = record.context

        if counts_against_cellar(previous_context):
            previous_bottle = resolve_bottle(previous_bottle_id)
            self.credit(previous_bottle, previous_amount_oz)
            logger.debug(
                "Reversed %.2f oz on bottle %s for edit of pour %s",
                previous_amount_oz,
                previous_bottle_id,
                record.id,
            )

        for field, value in changes.items():
            setattr(record, field, value)

        if counts_against_cellar(record.context):
            bottle = resolve_bottle(record.bottle_id)
            self.debit(bottle, record.amount_oz)
            logger.debug(
                "Re-applied %.2f oz on bottle %s for edit of pour %s",
                record.amount_oz,
                record.bottle_id,
                record.id,
            )

        return record

    def record_deleted(self, record: TastingRecord, bottle: Bottle) -> None:
        """Credit the bottle back before the pour is removed."""
        if not counts_against_cellar(record.context):
            return
        self.credit(bottle, record.amount_oz)
        logger.debug("Credited %.2f oz back to bottle %s", record.amount_oz, bottle.id)
