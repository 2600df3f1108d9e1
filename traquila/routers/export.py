"""Export endpoints for downloading journal data."""

from datetime import datetime
from typing import Any
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import JSONResponse, Response

from traquila.config import settings
from traquila.dependencies import Store
from traquila.models import Bottle, PourContext, TastingRecord
from traquila.schemas.bottle import BottleResponse
from traquila.schemas.export import BottleFlatExport, ExportFormat, PourFlatExport
from traquila.schemas.tasting import BottleBasicInfo, PourResponse
from traquila.services import export_service
from traquila.services.formatters import format_volume

router = APIRouter()


def _attachment(kind: str, export_format: ExportFormat) -> dict[str, str]:
    filename = export_service.generate_filename(kind, export_format)
    return {"Content-Disposition": f"attachment; filename={filename}"}


def _hierarchical_response(
    kind: str,
    export_format: ExportFormat,
    bottles: list[dict[str, Any]] | None,
    pours: list[dict[str, Any]] | None,
    filters_applied: dict[str, Any],
) -> Response:
    if export_format == ExportFormat.YAML:
        content = export_service.export_journal_to_yaml(bottles, pours, filters_applied)
        return Response(
            content=content,
            media_type=export_service.get_content_type(export_format),
            headers=_attachment(kind, export_format),
        )
    export_data = export_service.export_journal_to_json(bottles, pours, filters_applied)
    return JSONResponse(content=export_data, headers=_attachment(kind, export_format))


def _bottle_dicts(bottles: list[Bottle]) -> list[dict[str, Any]]:
    return [BottleResponse.from_bottle(bottle).model_dump(mode="json") for bottle in bottles]


def _pour_dicts(records: list[TastingRecord], bottles_by_id: dict[UUID, Bottle]) -> list[dict[str, Any]]:
    pour_dicts = []
    for record in records:
        bottle = bottles_by_id.get(record.bottle_id)
        info = BottleBasicInfo(id=str(bottle.id), name=bottle.name, brand=bottle.brand) if bottle else None
        pour_dicts.append(PourResponse.from_record(
            record, info, format_volume(record.amount_oz, settings.volume_unit)
        ).model_dump(mode="json"))
    return pour_dicts


@router.get("/bottles")
async def export_bottles(
    store: Store,
    format: ExportFormat = Query(default=ExportFormat.JSON, description="Export format"),
    opened: bool | None = Query(default=None, description="Filter: only opened (true) or sealed (false) bottles"),
) -> Response:
    """Export the cellar.

    Returns bottle data in the specified format (CSV, XLSX, YAML, or JSON).
    """
    bottles = store.list_bottles()
    filters_applied: dict[str, Any] = {}
    if opened is not None:
        bottles = [bottle for bottle in bottles if bottle.is_opened == opened]
        filters_applied["opened"] = opened

    if format in (ExportFormat.CSV, ExportFormat.XLSX):
        flat_bottles = [BottleFlatExport.from_bottle(bottle) for bottle in bottles]
        if format == ExportFormat.CSV:
            content = export_service.export_bottles_to_csv(flat_bottles)
        else:
            content = export_service.export_bottles_to_xlsx(flat_bottles)
        return Response(
            content=content,
            media_type=export_service.get_content_type(format),
            headers=_attachment("bottles", format),
        )

    return _hierarchical_response("bottles", format, _bottle_dicts(bottles), None, filters_applied)


@router.get("/pours")
async def export_pours(
    store: Store,
    format: ExportFormat = Query(default=ExportFormat.JSON, description="Export format"),
    bottle_id: UUID | None = Query(default=None, description="Filter by specific bottle"),
    context: PourContext | None = Query(default=None, description="Filter by where the pour happened"),
    from_date: datetime | None = Query(default=None, description="Filter from date"),
    to_date: datetime | None = Query(default=None, description="Filter to date"),
) -> Response:
    """Export pour history.

    Returns pour data in the specified format (CSV, XLSX, YAML, or JSON).
    """
    records = store.list_pours(bottle_id)
    bottles_by_id = {bottle.id: bottle for bottle in store.list_bottles()}

    filters_applied: dict[str, Any] = {}
    if bottle_id:
        filters_applied["bottle_id"] = str(bottle_id)
    if context:
        records = [record for record in records if record.context == context]
        filters_applied["context"] = context.value
    try:
        if from_date:
            records = [record for record in records if record.date >= from_date]
            filters_applied["from_date"] = from_date.isoformat()
        if to_date:
            records = [record for record in records if record.date <= to_date]
            filters_applied["to_date"] = to_date.isoformat()
    except TypeError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Date filters must include a timezone",
        ) from e

    if format in (ExportFormat.CSV, ExportFormat.XLSX):
        flat_pours = [PourFlatExport.from_record(record, bottles_by_id.get(record.bottle_id)) for record in records]
        if format == ExportFormat.CSV:
            content = export_service.export_pours_to_csv(flat_pours)
        else:
            content = export_service.export_pours_to_xlsx(flat_pours)
        return Response(
            content=content,
            media_type=export_service.get_content_type(format),
            headers=_attachment("pours", format),
        )

    return _hierarchical_response("pours", format, None, _pour_dicts(records, bottles_by_id), filters_applied)


@router.get("/journal")
async def export_journal(
    store: Store,
    format: ExportFormat = Query(default=ExportFormat.JSON, description="Export format (JSON or YAML)"),
) -> Response:
    """Export every bottle and pour together.

    Only the hierarchical formats can hold both collections.
    """
    if format not in (ExportFormat.JSON, ExportFormat.YAML):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Journal export supports only json and yaml",
        )
    bottles = store.list_bottles()
    bottles_by_id = {bottle.id: bottle for bottle in bottles}
    return _hierarchical_response(
        "journal",
        format,
        _bottle_dicts(bottles),
        _pour_dicts(store.list_pours(), bottles_by_id),
        {},
    )
