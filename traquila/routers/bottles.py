"""Bottle management endpoints."""

import logging
from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, File, HTTPException, UploadFile, status

from traquila.dependencies import Store
from traquila.exceptions import BottleNotFoundError
from traquila.schemas.bottle import BottleCreate, BottleResponse, BottleUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found(error: BottleNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))


@router.get("", response_model=list[BottleResponse])
async def list_bottles(store: Store) -> list[BottleResponse]:
    """List all bottles ordered by name."""
    return [BottleResponse.from_bottle(bottle) for bottle in store.list_bottles()]


@router.post("", response_model=BottleResponse, status_code=status.HTTP_201_CREATED)
async def create_bottle(bottle_create: BottleCreate, store: Store) -> BottleResponse:
    """Add a bottle to the cellar."""
    bottle = store.create_bottle(bottle_create)
    return BottleResponse.from_bottle(bottle)


@router.get("/{bottle_id}", response_model=BottleResponse)
async def get_bottle(bottle_id: UUID, store: Store) -> BottleResponse:
    """Get a single bottle by ID."""
    try:
        bottle = store.get_bottle(bottle_id)
    except BottleNotFoundError as e:
        raise _not_found(e) from e
    return BottleResponse.from_bottle(bottle)


@router.put("/{bottle_id}", response_model=BottleResponse)
async def update_bottle(bottle_id: UUID, bottle_update: BottleUpdate, store: Store) -> BottleResponse:
    """Update bottle details. Only the fields sent are changed."""
    try:
        bottle = store.update_bottle(bottle_id, bottle_update)
    except BottleNotFoundError as e:
        raise _not_found(e) from e
    return BottleResponse.from_bottle(bottle)


@router.put("/{bottle_id}/photos", response_model=BottleResponse)
async def replace_photos(
    bottle_id: UUID,
    store: Store,
    photos: Annotated[list[UploadFile], File(description="Bottle photos, first ones kept")],
) -> BottleResponse:
    """Replace the bottle's photos.

    Only the first few images are kept; the rest are dropped.
    """
    images = [await photo.read() for photo in photos]
    try:
        bottle = store.set_photos(bottle_id, images)
    except BottleNotFoundError as e:
        raise _not_found(e) from e
    return BottleResponse.from_bottle(bottle)


@router.post("/{bottle_id}/open", response_model=BottleResponse)
async def open_bottle(bottle_id: UUID, store: Store, when: datetime | None = None) -> BottleResponse:
    """Mark a sealed bottle as opened."""
    try:
        bottle = store.open_bottle(bottle_id, when)
    except BottleNotFoundError as e:
        raise _not_found(e) from e
    return BottleResponse.from_bottle(bottle)


@router.delete("/{bottle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bottle(bottle_id: UUID, store: Store) -> None:
    """Delete a bottle and all of its pours."""
    try:
        store.delete_bottle(bottle_id)
    except BottleNotFoundError as e:
        raise _not_found(e) from e
