"""In-memory journal store for bottles and pours.

The store is the single coordination point for every mutation: it validates
pour input, runs the ledger side effects and keeps the bottle and pour
indexes consistent. All mutating methods hold one re-entrant lock for their
whole duration, so the ledger's reverse-then-apply sequence is never seen
half done. Readers that want to run the analytics pipeline take a
``snapshot()`` of deep copies.
"""

import logging
import threading
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from traquila.exceptions import BottleNotFoundError, PourValidationError, TastingNotFoundError
from traquila.models import DEFAULT_BOTTLE_SIZE_ML, Bottle, BottlePhoto, TastingRecord
from traquila.schemas.bottle import BottleCreate, BottleUpdate
from traquila.schemas.tasting import PourCreate, PourUpdate
from traquila.services.ledger import VolumeLedger

logger = logging.getLogger(__name__)

MAX_PHOTOS_PER_BOTTLE = 3

# Bottle fields that an update may not clear.
_REQUIRED_BOTTLE_FIELDS = frozenset(
    {"name", "type", "region", "abv", "fill_level_percent", "quantity_owned", "notes", "rating"}
)
_REQUIRED_POUR_FIELDS = frozenset({"bottle_id", "amount_oz", "date", "serve", "context", "notes"})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JournalStore:
    """Bottles and pours indexed by ID, with ledger-aware pour lifecycle."""

    def __init__(
        self,
        ledger: VolumeLedger | None = None,
        clock: Callable[[], datetime] | None = None,
        max_photos_per_bottle: int = MAX_PHOTOS_PER_BOTTLE,
        default_bottle_size_ml: int = DEFAULT_BOTTLE_SIZE_ML,
    ) -> None:
        self._clock = clock or _utcnow
        self._ledger = ledger or VolumeLedger(clock=self._clock)
        self._max_photos = max_photos_per_bottle
        self._default_bottle_size_ml = default_bottle_size_ml
        self._bottles: dict[UUID, Bottle] = {}
        self._pours: dict[UUID, TastingRecord] = {}
        self._lock = threading.RLock()

    # =========================================================================
    # Bottles
    # =========================================================================

    def create_bottle(self, data: BottleCreate, photos: list[bytes] | None = None) -> Bottle:
        """Add a bottle to the cellar."""
        now = self._clock()
        fields = data.model_dump(exclude_none=True)
        fields.setdefault("bottle_size_ml", self._default_bottle_size_ml)
        bottle = Bottle(**fields, created_at=now, updated_at=now)
        with self._lock:
            self._bottles[bottle.id] = bottle
            if photos:
                self._replace_photos(bottle, photos)
        logger.info("Created bottle %s (%s)", bottle.id, bottle.name)
        return bottle

    def update_bottle(self, bottle_id: UUID, data: BottleUpdate) -> Bottle:
        """Apply the fields set on ``data`` to a bottle."""
        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field not in _REQUIRED_BOTTLE_FIELDS
        }
        with self._lock:
            bottle = self.get_bottle(bottle_id)
            for field, value in changes.items():
                setattr(bottle, field, value)
            bottle.updated_at = self._clock()
        logger.info("Updated bottle %s: %s", bottle_id, sorted(changes))
        return bottle

    def set_photos(self, bottle_id: UUID, photos: list[bytes]) -> Bottle:
        """Replace the bottle's photos (extra images beyond the limit are dropped)."""
        with self._lock:
            bottle = self.get_bottle(bottle_id)
            self._replace_photos(bottle, photos)
            bottle.updated_at = self._clock()
        return bottle

    def _replace_photos(self, bottle: Bottle, photos: list[bytes]) -> None:
        kept = photos[: self._max_photos]
        if len(photos) > len(kept):
            logger.warning("Bottle %s: keeping %d of %d photos", bottle.id, len(kept), len(photos))
        bottle.photos = [
            BottlePhoto(filename=f"bottle_{bottle.id}_{index}.jpg", image_data=data, created_at=self._clock())
            for index, data in enumerate(kept)
        ]

    def open_bottle(self, bottle_id: UUID, when: datetime | None = None) -> Bottle:
        """Mark a sealed bottle as opened. Already opened bottles are unchanged."""
        with self._lock:
            bottle = self.get_bottle(bottle_id)
            if bottle.opened_date is None:
                bottle.opened_date = when or self._clock()
                bottle.updated_at = self._clock()
                logger.info("Opened bottle %s", bottle_id)
        return bottle

    def delete_bottle(self, bottle_id: UUID) -> None:
        """Remove a bottle together with all of its pours."""
        with self._lock:
            self.get_bottle(bottle_id)
            orphaned = [pour_id for pour_id, pour in self._pours.items() if pour.bottle_id == bottle_id]
            for pour_id in orphaned:
                del self._pours[pour_id]
            del self._bottles[bottle_id]
        logger.info("Deleted bottle %s and %d pours", bottle_id, len(orphaned))

    def get_bottle(self, bottle_id: UUID) -> Bottle:
        bottle = self._bottles.get(bottle_id)
        if bottle is None:
            raise BottleNotFoundError(bottle_id)
        return bottle

    def list_bottles(self) -> list[Bottle]:
        """All bottles ordered by name."""
        with self._lock:
            return sorted(self._bottles.values(), key=lambda bottle: (bottle.name.lower(), str(bottle.id)))

    # =========================================================================
    # Pours
    # =========================================================================

    def _validate_pour(self, bottle_id: UUID | None, amount_oz: float | None) -> Bottle:
        if amount_oz is None or amount_oz <= 0:
            raise PourValidationError("Pour amount must be greater than zero")
        if bottle_id is None:
            raise PourValidationError("A bottle must be selected for the pour")
        return self.get_bottle(bottle_id)

    def log_pour(self, data: PourCreate) -> TastingRecord:
        """Record a pour and debit its bottle when it counts against the cellar."""
        fields = data.model_dump(exclude_none=True)
        with self._lock:
            bottle = self._validate_pour(data.bottle_id, data.amount_oz)
            fields.setdefault("date", self._clock())
            record = TastingRecord(**fields, created_at=self._clock())
            self._ledger.record_created(record, bottle)
            self._pours[record.id] = record
        logger.info(
            "Logged pour %s: %.2f oz of %s (%s)",
            record.id,
            record.amount_oz,
            bottle.name,
            record.context.value,
        )
        return record

    def update_pour(self, record_id: UUID, data: PourUpdate) -> TastingRecord:
        """Edit a pour, reversing its old ledger effect before applying the new one."""
        changes: dict[str, Any] = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field not in _REQUIRED_POUR_FIELDS
        }
        with self._lock:
            record = self.get_pour(record_id)
            self._validate_pour(
                changes.get("bottle_id", record.bottle_id),
                changes.get("amount_oz", record.amount_oz),
            )
            self._ledger.record_updated(record, changes, self.get_bottle)
        logger.info("Updated pour %s: %s", record_id, sorted(changes))
        return record

    def delete_pour(self, record_id: UUID) -> None:
        """Remove a pour, crediting its bottle back."""
        with self._lock:
            record = self.get_pour(record_id)
            bottle = self._bottles.get(record.bottle_id)
            if bottle is not None:
                self._ledger.record_deleted(record, bottle)
            del self._pours[record_id]
        logger.info("Deleted pour %s", record_id)

    def get_pour(self, record_id: UUID) -> TastingRecord:
        record = self._pours.get(record_id)
        if record is None:
            raise TastingNotFoundError(record_id)
        return record

    def list_pours(self, bottle_id: UUID | None = None) -> list[TastingRecord]:
        """Pours newest first, optionally restricted to one bottle."""
        with self._lock:
            pours = [
                pour for pour in self._pours.values() if bottle_id is None or pour.bottle_id == bottle_id
            ]
        return sorted(pours, key=lambda pour: (pour.date, str(pour.id)), reverse=True)

    # =========================================================================
    # Snapshots
    # =========================================================================

    def snapshot(self) -> tuple[list[Bottle], list[TastingRecord]]:
        """Deep copies of every bottle and pour, safe to read outside the lock."""
        with self._lock:
            bottles = [bottle.model_copy(deep=True) for bottle in self._bottles.values()]
            pours = [pour.model_copy(deep=True) for pour in self._pours.values()]
        return bottles, pours

    def clear(self) -> None:
        with self._lock:
            self._bottles.clear()
            self._pours.clear()
