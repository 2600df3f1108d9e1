"""Tests for journal export."""

import csv
import io
import re
from datetime import datetime, timezone

import pytest
import yaml
from httpx import AsyncClient
from openpyxl import load_workbook

from traquila.models import PourContext
from traquila.schemas.bottle import BottleCreate
from traquila.schemas.export import BottleFlatExport, ExportFormat, PourFlatExport
from traquila.schemas.tasting import PourCreate
from traquila.services import export_service


@pytest.fixture
def journal(store):
    bottle = store.create_bottle(
        BottleCreate(name="Tequila Ocho Plata", brand="Ocho", price_paid=55, notes="cooked agave")
    )
    store.log_pour(PourCreate(bottle_id=bottle.id, amount_oz=1.5, enjoyment=4, notes="bright"))
    store.log_pour(PourCreate(bottle_id=bottle.id, amount_oz=2, context=PourContext.RESTAURANT))
    return bottle


class TestExportService:
    """Test the export service functions directly."""

    def test_filename(self):
        when = datetime(2026, 6, 15, 8, 30, 5, tzinfo=timezone.utc)
        assert export_service.generate_filename("bottles", ExportFormat.CSV, when) == (
            "traquila_bottles_20260615_083005.csv"
        )
        assert re.fullmatch(
            r"traquila_journal_\d{8}_\d{6}\.yaml",
            export_service.generate_filename("journal", ExportFormat.YAML),
        )

    def test_content_types(self):
        assert export_service.get_content_type(ExportFormat.CSV) == "text/csv"
        assert export_service.get_content_type(ExportFormat.YAML) == "application/x-yaml"
        assert export_service.get_content_type(ExportFormat.JSON) == "application/json"

    def test_bottles_csv(self, store, journal):
        rows = [BottleFlatExport.from_bottle(bottle) for bottle in store.list_bottles()]
        content = export_service.export_bottles_to_csv(rows).decode("utf-8")
        parsed = list(csv.DictReader(io.StringIO(content)))

        assert len(parsed) == 1
        assert parsed[0]["name"] == "Tequila Ocho Plata"
        assert parsed[0]["type"] == "Blanco"
        assert parsed[0]["region"] == "Other/Unknown"
        assert float(parsed[0]["fill_level_percent"]) == pytest.approx(94.09, abs=0.01)

    def test_pours_xlsx(self, store, journal):
        rows = [PourFlatExport.from_record(pour, journal) for pour in store.list_pours()]
        workbook = load_workbook(io.BytesIO(export_service.export_pours_to_xlsx(rows)))
        sheet = workbook.active

        assert sheet.title == "Pours"
        assert [cell.value for cell in sheet[1]] == export_service.POUR_HEADERS
        assert sheet.max_row == 3
        assert sheet.freeze_panes == "A2"
        assert {sheet.cell(row=row, column=8).value for row in (2, 3)} == {"At Home", "Restaurant"}

    def test_journal_yaml_sections(self):
        content = export_service.export_journal_to_yaml(bottles=[{"name": "A"}], pours=[])
        data = yaml.safe_load(content)

        assert list(data) == ["bottles", "pours", "export_info"]
        assert data["export_info"]["bottle_count"] == 1
        assert data["export_info"]["format"] == "yaml"

    def test_json_leaves_out_missing_sections(self):
        data = export_service.export_journal_to_json(pours=[{"id": "1"}], filters_applied={"context": "bar"})
        assert "bottles" not in data
        assert data["export_info"]["pour_count"] == 1
        assert data["export_info"]["filters_applied"] == {"context": "bar"}


@pytest.mark.asyncio
async def test_export_bottles_json_empty(client: AsyncClient) -> None:
    """Test exporting bottles in JSON format when the cellar is empty."""
    response = await client.get("/api/export/bottles?format=json")
    assert response.status_code == 200

    data = response.json()
    assert data["bottles"] == []
    assert data["export_info"]["bottle_count"] == 0
    assert data["export_info"]["format"] == "json"


@pytest.mark.asyncio
async def test_export_bottles_csv(client: AsyncClient, journal) -> None:
    """Test exporting bottles in CSV format."""
    response = await client.get("/api/export/bottles?format=csv")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment; filename=traquila_bottles_" in response.headers["content-disposition"]

    rows = list(csv.reader(io.StringIO(response.content.decode("utf-8"))))
    assert rows[0] == export_service.BOTTLE_HEADERS
    assert len(rows) == 2


@pytest.mark.asyncio
async def test_export_bottles_opened_filter(client: AsyncClient, journal) -> None:
    """Test the opened filter on bottle export."""
    response = await client.get("/api/export/bottles?format=json&opened=true")
    data = response.json()
    assert data["bottles"] == []
    assert data["export_info"]["filters_applied"] == {"opened": True}


@pytest.mark.asyncio
async def test_export_pours_filtered_by_context(client: AsyncClient, journal) -> None:
    """Test exporting only restaurant pours."""
    response = await client.get("/api/export/pours?format=json&context=restaurant")
    assert response.status_code == 200

    data = response.json()
    assert len(data["pours"]) == 1
    assert data["pours"][0]["context"] == "restaurant"
    assert data["pours"][0]["amount_display"] == "2 oz"
    assert data["pours"][0]["bottle"]["name"] == "Tequila Ocho Plata"
    assert data["export_info"]["filters_applied"] == {"context": "restaurant"}


@pytest.mark.asyncio
async def test_export_pours_xlsx(client: AsyncClient, journal) -> None:
    """Test exporting pours in Excel format."""
    response = await client.get("/api/export/pours?format=xlsx")
    assert response.status_code == 200
    assert response.headers["content-type"] == export_service.get_content_type(ExportFormat.XLSX)
    assert load_workbook(io.BytesIO(response.content)).active.max_row == 3


@pytest.mark.asyncio
async def test_export_journal_yaml(client: AsyncClient, journal) -> None:
    """Test exporting the whole journal in YAML format."""
    response = await client.get("/api/export/journal?format=yaml")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/x-yaml"

    data = yaml.safe_load(response.content)
    assert len(data["bottles"]) == 1
    assert len(data["pours"]) == 2
    assert data["export_info"]["pour_count"] == 2


@pytest.mark.asyncio
async def test_export_journal_rejects_flat_formats(client: AsyncClient) -> None:
    """Test that the journal export refuses CSV."""
    response = await client.get("/api/export/journal?format=csv")
    assert response.status_code == 422
