"""Pour (tasting record) endpoints.

Creating, editing and deleting pours goes through the journal store so the
bottle fill levels stay in step with the pour history.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from traquila.config import settings
from traquila.dependencies import Store
from traquila.exceptions import BottleNotFoundError, PourValidationError, TastingNotFoundError
from traquila.models import TastingRecord
from traquila.schemas.tasting import BottleBasicInfo, PourCreate, PourResponse, PourUpdate
from traquila.services.formatters import format_volume
from traquila.services.journal import JournalStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(store: JournalStore, record: TastingRecord) -> PourResponse:
    amount_display = format_volume(record.amount_oz, settings.volume_unit)
    try:
        bottle = store.get_bottle(record.bottle_id)
    except BottleNotFoundError:
        return PourResponse.from_record(record, amount_display=amount_display)
    info = BottleBasicInfo(id=str(bottle.id), name=bottle.name, brand=bottle.brand)
    return PourResponse.from_record(record, info, amount_display)


def _http_error(error: Exception) -> HTTPException:
    if isinstance(error, PourValidationError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(error))
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))


@router.get("", response_model=list[PourResponse])
async def list_pours(store: Store, bottle_id: UUID | None = None) -> list[PourResponse]:
    """List pours newest first, optionally for one bottle."""
    return [_to_response(store, record) for record in store.list_pours(bottle_id)]


@router.post("", response_model=PourResponse, status_code=status.HTTP_201_CREATED)
async def log_pour(pour_create: PourCreate, store: Store) -> PourResponse:
    """Log a pour. Pours outside restaurants are taken from the bottle."""
    try:
        record = store.log_pour(pour_create)
    except (PourValidationError, BottleNotFoundError) as e:
        logger.info("Rejected pour: %s", e)
        raise _http_error(e) from e
    return _to_response(store, record)


@router.get("/{pour_id}", response_model=PourResponse)
async def get_pour(pour_id: UUID, store: Store) -> PourResponse:
    """Get a single pour by ID."""
    try:
        record = store.get_pour(pour_id)
    except TastingNotFoundError as e:
        raise _http_error(e) from e
    return _to_response(store, record)


@router.put("/{pour_id}", response_model=PourResponse)
async def update_pour(pour_id: UUID, pour_update: PourUpdate, store: Store) -> PourResponse:
    """Edit a pour. The old volume is returned to its bottle before the new one is taken."""
    try:
        record = store.update_pour(pour_id, pour_update)
    except (PourValidationError, BottleNotFoundError, TastingNotFoundError) as e:
        raise _http_error(e) from e
    return _to_response(store, record)


@router.delete("/{pour_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pour(pour_id: UUID, store: Store) -> None:
    """Delete a pour and return its volume to the bottle."""
    try:
        store.delete_pour(pour_id)
    except TastingNotFoundError as e:
        raise _http_error(e) from e
