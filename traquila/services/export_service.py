"""Export service for generating bottle and pour exports in various formats."""

import csv
import io
from datetime import datetime, timezone
from typing import Any

import yaml
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from traquila.schemas.export import (
    BottleFlatExport,
    ExportFormat,
    ExportMetadata,
    PourFlatExport,
)

HEADER_COLOR = "2E7D5B"
MAX_COLUMN_WIDTH = 50


def _format_datetime(dt: datetime | None) -> str:
    """Format datetime for export."""
    if dt is None:
        return ""
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def generate_filename(export_type: str, export_format: ExportFormat, now: datetime | None = None) -> str:
    """Generate a standardized filename for exports.

    Args:
        export_type: Type of export (e.g., "bottles", "pours", "journal")
        export_format: Export format
        now: Timestamp to embed, defaults to the current UTC time

    Returns:
        Filename string
    """
    timestamp = (now or datetime.now(timezone.utc)).strftime("%Y%m%d_%H%M%S")
    return f"traquila_{export_type}_{timestamp}.{export_format.value}"


def _bottle_to_row(bottle: BottleFlatExport) -> list[Any]:
    return [
        bottle.id,
        bottle.name,
        bottle.brand or "",
        bottle.type,
        bottle.region,
        bottle.nom or "",
        bottle.abv,
        bottle.price_paid if bottle.price_paid is not None else "",
        bottle.purchase_date or "",
        bottle.bottle_size_ml or "",
        _format_datetime(bottle.opened_date),
        bottle.fill_level_percent,
        bottle.quantity_owned,
        bottle.cellar_location or "",
        bottle.rating,
        bottle.notes,
        bottle.photo_count,
        _format_datetime(bottle.created_at),
        _format_datetime(bottle.updated_at),
    ]


def _pour_to_row(pour: PourFlatExport) -> list[Any]:
    return [
        pour.id,
        pour.bottle_id,
        pour.bottle_name or "",
        pour.bottle_brand or "",
        _format_datetime(pour.date),
        pour.amount_oz,
        pour.serve,
        pour.context,
        pour.enjoyment or "",
        pour.next_day_feel or "",
        pour.notes,
        _format_datetime(pour.created_at),
    ]


BOTTLE_HEADERS = [
    "id",
    "name",
    "brand",
    "type",
    "region",
    "nom",
    "abv",
    "price_paid",
    "purchase_date",
    "bottle_size_ml",
    "opened_date",
    "fill_level_percent",
    "quantity_owned",
    "cellar_location",
    "rating",
    "notes",
    "photo_count",
    "created_at",
    "updated_at",
]

POUR_HEADERS = [
    "id",
    "bottle_id",
    "bottle_name",
    "bottle_brand",
    "date",
    "amount_oz",
    "serve",
    "context",
    "enjoyment",
    "next_day_feel",
    "notes",
    "created_at",
]


def _rows_to_csv(headers: list[str], rows: list[list[Any]]) -> bytes:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(headers)
    writer.writerows(rows)
    return output.getvalue().encode("utf-8")


def _rows_to_xlsx(title: str, headers: list[str], rows: list[list[Any]]) -> bytes:
    """Write one styled worksheet with a frozen header row."""
    wb = Workbook()
    ws = wb.active
    ws.title = title

    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color=HEADER_COLOR, end_color=HEADER_COLOR, fill_type="solid")
    header_alignment = Alignment(horizontal="center")

    for col_idx, header in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = header_alignment

    for row_idx, row in enumerate(rows, 2):
        for col_idx, value in enumerate(row, 1):
            ws.cell(row=row_idx, column=col_idx, value=value)

    # Size each column to its longest value
    for col_idx, header in enumerate(headers, 1):
        max_length = len(header)
        for row in rows:
            value = row[col_idx - 1]
            if value:
                max_length = max(max_length, len(str(value)))
        ws.column_dimensions[get_column_letter(col_idx)].width = min(max_length + 2, MAX_COLUMN_WIDTH)

    ws.freeze_panes = "A2"

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


def export_bottles_to_csv(bottles: list[BottleFlatExport]) -> bytes:
    """Export bottles to CSV format."""
    return _rows_to_csv(BOTTLE_HEADERS, [_bottle_to_row(bottle) for bottle in bottles])


def export_bottles_to_xlsx(bottles: list[BottleFlatExport]) -> bytes:
    """Export bottles to Excel (XLSX) format."""
    return _rows_to_xlsx("Bottles", BOTTLE_HEADERS, [_bottle_to_row(bottle) for bottle in bottles])


def export_pours_to_csv(pours: list[PourFlatExport]) -> bytes:
    """Export pours to CSV format."""
    return _rows_to_csv(POUR_HEADERS, [_pour_to_row(pour) for pour in pours])


def export_pours_to_xlsx(pours: list[PourFlatExport]) -> bytes:
    """Export pours to Excel (XLSX) format."""
    return _rows_to_xlsx("Pours", POUR_HEADERS, [_pour_to_row(pour) for pour in pours])


def _hierarchical_export(
    export_format: ExportFormat,
    bottles: list[dict[str, Any]] | None,
    pours: list[dict[str, Any]] | None,
    filters_applied: dict[str, Any] | None,
) -> dict[str, Any]:
    export_data: dict[str, Any] = {}
    if bottles is not None:
        export_data["bottles"] = bottles
    if pours is not None:
        export_data["pours"] = pours
    export_data["export_info"] = ExportMetadata(
        bottle_count=len(bottles or []),
        pour_count=len(pours or []),
        format=export_format.value,
        filters_applied=filters_applied or {},
    ).model_dump(mode="json")
    return export_data


def export_journal_to_json(
    bottles: list[dict[str, Any]] | None = None,
    pours: list[dict[str, Any]] | None = None,
    filters_applied: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Export bottles and/or pours to JSON format with metadata.

    Args:
        bottles: List of bottle dictionaries, or None to leave the section out
        pours: List of pour dictionaries, or None to leave the section out
        filters_applied: Filters that were applied to the export

    Returns:
        JSON-serializable dictionary
    """
    return _hierarchical_export(ExportFormat.JSON, bottles, pours, filters_applied)


def export_journal_to_yaml(
    bottles: list[dict[str, Any]] | None = None,
    pours: list[dict[str, Any]] | None = None,
    filters_applied: dict[str, Any] | None = None,
) -> bytes:
    """Export bottles and/or pours to YAML format with metadata.

    The dictionaries must already be JSON-compatible (``model_dump(mode="json")``).
    """
    export_data = _hierarchical_export(ExportFormat.YAML, bottles, pours, filters_applied)
    return yaml.dump(export_data, default_flow_style=False, allow_unicode=True, sort_keys=False).encode("utf-8")


def get_content_type(export_format: ExportFormat) -> str:
    """Get the MIME type for an export format."""
    content_types = {
        ExportFormat.CSV: "text/csv",
        ExportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        ExportFormat.YAML: "application/x-yaml",
        ExportFormat.JSON: "application/json",
    }
    return content_types[export_format]
