"""Tests for the HTTP API."""

import pytest
from httpx import AsyncClient

from traquila import __version__


async def create_bottle(client: AsyncClient, **fields) -> dict:
    payload = {"name": "Fortaleza Blanco", "brand": "Fortaleza", **fields}
    response = await client.post("/api/bottles", json=payload)
    assert response.status_code == 201
    return response.json()


async def log_pour(client: AsyncClient, bottle_id: str, **fields) -> dict:
    payload = {"bottle_id": bottle_id, "amount_oz": 1.5, **fields}
    response = await client.post("/api/pours", json=payload)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    """Test the health check endpoint."""
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["version"] == __version__


def test_debug_setting_applied() -> None:
    """Test the app runs with the configured debug flag."""
    from traquila.config import settings
    from traquila.main import app

    assert app.debug is settings.debug


class TestBottles:
    """Tests for the bottle endpoints."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, client: AsyncClient) -> None:
        """Test creating a bottle fills in the defaults."""
        bottle = await create_bottle(client, type="reposado", region="highlands")

        assert bottle["fill_level_percent"] == 100
        assert bottle["bottle_size_ml"] == 750
        assert bottle["type_label"] == "Reposado"
        assert bottle["region_label"] == "Highlands"
        assert bottle["opened_date"] is None

        response = await client.get(f"/api/bottles/{bottle['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Fortaleza Blanco"

    @pytest.mark.asyncio
    async def test_create_requires_name(self, client: AsyncClient) -> None:
        response = await client.post("/api/bottles", json={"brand": "Nameless"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_list_is_sorted_by_name(self, client: AsyncClient) -> None:
        await create_bottle(client, name="Tapatio")
        await create_bottle(client, name="arette")

        response = await client.get("/api/bottles")
        assert [bottle["name"] for bottle in response.json()] == ["arette", "Tapatio"]

    @pytest.mark.asyncio
    async def test_update(self, client: AsyncClient) -> None:
        """Test that only the fields sent are changed."""
        bottle = await create_bottle(client, price_paid=50)

        response = await client.put(f"/api/bottles/{bottle['id']}", json={"rating": 4.5, "notes": "peppery"})
        assert response.status_code == 200
        data = response.json()
        assert data["rating"] == 4.5
        assert data["notes"] == "peppery"
        assert data["price_paid"] == 50

    @pytest.mark.asyncio
    async def test_update_rejects_off_step_rating(self, client: AsyncClient) -> None:
        bottle = await create_bottle(client)
        response = await client.put(f"/api/bottles/{bottle['id']}", json={"rating": 4.2})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_open(self, client: AsyncClient) -> None:
        """Test opening a bottle sets the opened date once."""
        bottle = await create_bottle(client)

        first = await client.post(f"/api/bottles/{bottle['id']}/open")
        assert first.status_code == 200
        opened = first.json()["opened_date"]
        assert opened is not None

        second = await client.post(f"/api/bottles/{bottle['id']}/open?when=2020-01-01T00:00:00Z")
        assert second.json()["opened_date"] == opened

    @pytest.mark.asyncio
    async def test_photo_upload_keeps_limit(self, client: AsyncClient, sample_image_bytes: bytes) -> None:
        """Test replacing photos keeps at most three images."""
        bottle = await create_bottle(client)
        files = [("photos", (f"p{index}.png", sample_image_bytes, "image/png")) for index in range(4)]

        response = await client.put(f"/api/bottles/{bottle['id']}/photos", files=files)
        assert response.status_code == 200
        assert len(response.json()["photo_filenames"]) == 3

    @pytest.mark.asyncio
    async def test_delete_removes_pours(self, client: AsyncClient) -> None:
        """Test deleting a bottle removes its pours too."""
        bottle = await create_bottle(client)
        await log_pour(client, bottle["id"])

        response = await client.delete(f"/api/bottles/{bottle['id']}")
        assert response.status_code == 204

        assert (await client.get(f"/api/bottles/{bottle['id']}")).status_code == 404
        assert (await client.get("/api/pours")).json() == []

    @pytest.mark.asyncio
    async def test_unknown_bottle(self, client: AsyncClient) -> None:
        missing = "00000000-0000-0000-0000-000000000001"
        assert (await client.get(f"/api/bottles/{missing}")).status_code == 404
        assert (await client.put(f"/api/bottles/{missing}", json={"notes": "x"})).status_code == 404
        assert (await client.post(f"/api/bottles/{missing}/open")).status_code == 404
        assert (await client.delete(f"/api/bottles/{missing}")).status_code == 404


class TestPours:
    """Tests for the pour endpoints and their effect on fill levels."""

    async def fill_of(self, client: AsyncClient, bottle_id: str) -> float:
        return (await client.get(f"/api/bottles/{bottle_id}")).json()["fill_level_percent"]

    @pytest.mark.asyncio
    async def test_log_pour_debits_bottle(self, client: AsyncClient) -> None:
        """Test a home pour lowers the bottle fill level."""
        bottle = await create_bottle(client)
        pour = await log_pour(client, bottle["id"], enjoyment=4)

        assert pour["bottle"]["name"] == "Fortaleza Blanco"
        assert pour["context"] == "at_home"
        assert pour["has_photo"] is False
        assert pour["amount_display"] == "1.5 oz"
        assert await self.fill_of(client, bottle["id"]) == pytest.approx(94.085, abs=0.001)

    @pytest.mark.asyncio
    async def test_restaurant_pour_leaves_bottle(self, client: AsyncClient) -> None:
        bottle = await create_bottle(client)
        await log_pour(client, bottle["id"], context="restaurant")
        assert await self.fill_of(client, bottle["id"]) == 100

    @pytest.mark.asyncio
    async def test_edit_reverses_then_applies(self, client: AsyncClient) -> None:
        """Test editing a pour moves its volume between bottles."""
        first = await create_bottle(client, name="First")
        second = await create_bottle(client, name="Second")
        pour = await log_pour(client, first["id"], amount_oz=2)

        response = await client.put(f"/api/pours/{pour['id']}", json={"bottle_id": second["id"], "amount_oz": 1})
        assert response.status_code == 200
        assert response.json()["bottle"]["name"] == "Second"

        assert await self.fill_of(client, first["id"]) == pytest.approx(100)
        assert await self.fill_of(client, second["id"]) == pytest.approx(96.057, abs=0.001)

    @pytest.mark.asyncio
    async def test_edit_to_restaurant_credits_back(self, client: AsyncClient) -> None:
        bottle = await create_bottle(client)
        pour = await log_pour(client, bottle["id"])

        await client.put(f"/api/pours/{pour['id']}", json={"context": "restaurant"})
        assert await self.fill_of(client, bottle["id"]) == pytest.approx(100)

    @pytest.mark.asyncio
    async def test_delete_credits_back(self, client: AsyncClient) -> None:
        bottle = await create_bottle(client)
        pour = await log_pour(client, bottle["id"], amount_oz=3)

        response = await client.delete(f"/api/pours/{pour['id']}")
        assert response.status_code == 204
        assert await self.fill_of(client, bottle["id"]) == pytest.approx(100)
        assert (await client.get(f"/api/pours/{pour['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_list_filters_by_bottle(self, client: AsyncClient) -> None:
        first = await create_bottle(client, name="First")
        second = await create_bottle(client, name="Second")
        await log_pour(client, first["id"])
        await log_pour(client, second["id"])

        response = await client.get(f"/api/pours?bottle_id={second['id']}")
        assert [pour["bottle_id"] for pour in response.json()] == [second["id"]]

    @pytest.mark.asyncio
    async def test_invalid_pours(self, client: AsyncClient) -> None:
        """Test zero amounts and missing bottles are rejected."""
        bottle = await create_bottle(client)

        zero = await client.post("/api/pours", json={"bottle_id": bottle["id"], "amount_oz": 0})
        assert zero.status_code == 422

        no_bottle = await client.post("/api/pours", json={"amount_oz": 1})
        assert no_bottle.status_code == 422

        unknown = await client.post(
            "/api/pours", json={"bottle_id": "00000000-0000-0000-0000-000000000001", "amount_oz": 1}
        )
        assert unknown.status_code == 404

        assert await self.fill_of(client, bottle["id"]) == 100

    @pytest.mark.asyncio
    async def test_invalid_edit_leaves_pour_unchanged(self, client: AsyncClient) -> None:
        bottle = await create_bottle(client)
        pour = await log_pour(client, bottle["id"])

        response = await client.put(f"/api/pours/{pour['id']}", json={"amount_oz": -1})
        assert response.status_code == 422
        assert (await client.get(f"/api/pours/{pour['id']}")).json()["amount_oz"] == 1.5


class TestCellar:
    """Tests for the cellar overview endpoints."""

    @pytest.mark.asyncio
    async def test_low_fill_filter_and_summary(self, client: AsyncClient) -> None:
        await create_bottle(client, name="Sealed", price_paid=40, quantity_owned=2)
        await create_bottle(
            client,
            name="Almost Gone",
            price_paid=60,
            opened_date="2026-01-01T00:00:00Z",
            fill_level_percent=10,
        )

        response = await client.get("/api/cellar?filter=low_fill")
        assert response.status_code == 200
        assert [bottle["name"] for bottle in response.json()] == ["Almost Gone"]

        response = await client.get("/api/cellar?q=seal&sort=value_high")
        assert [bottle["name"] for bottle in response.json()] == ["Sealed"]

        summary = (await client.get("/api/cellar/summary")).json()
        assert summary["total_quantity"] == 3
        assert summary["total_value"] == 140
        assert summary["opened_count"] == 1
        assert summary["low_fill_count"] == 1

    @pytest.mark.asyncio
    async def test_invalid_filter(self, client: AsyncClient) -> None:
        response = await client.get("/api/cellar?filter=dusty")
        assert response.status_code == 422


class TestInsights:
    """Tests for the insights endpoints."""

    @pytest.mark.asyncio
    async def test_empty_dashboard(self, client: AsyncClient) -> None:
        response = await client.get("/api/insights/dashboard")
        assert response.status_code == 200
        data = response.json()
        assert data["filtered_tastings_count"] == 0
        assert data["top_experience"] is None
        assert [item["value"] for item in data["snapshot_items"]][:3] == ["Need more rated tastings"] * 3

    @pytest.mark.asyncio
    async def test_dashboard_filters(self, client: AsyncClient) -> None:
        """Test the dashboard honours the rating and place filters."""
        bottle = await create_bottle(client, type="anejo")
        await log_pour(client, bottle["id"], enjoyment=5, notes="caramel and oak")
        await log_pour(client, bottle["id"], enjoyment=2, context="bar")

        everything = (await client.get("/api/insights/dashboard?time_range=all")).json()
        assert everything["filtered_tastings_count"] == 2
        assert everything["top_experience"]["rating"] == 5
        assert everything["top_bottles"][0]["tasting_count"] == 2

        high = (await client.get("/api/insights/dashboard?rating=four_plus")).json()
        assert high["filtered_tastings_count"] == 1

        bar = (await client.get("/api/insights/dashboard?places=bar&expressions=anejo")).json()
        assert bar["filtered_tastings_count"] == 1
        assert bar["top_experience"]["place"] == "bar"

        blanco = (await client.get("/api/insights/dashboard?expressions=blanco")).json()
        assert blanco["filtered_tastings_count"] == 0

    @pytest.mark.asyncio
    async def test_dashboard_rejects_unknown_sort(self, client: AsyncClient) -> None:
        response = await client.get("/api/insights/dashboard?sort=loudest")
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_summary_and_trend(self, client: AsyncClient) -> None:
        bottle = await create_bottle(client, region="highlands", rating=4)
        await log_pour(client, bottle["id"], enjoyment=4, notes="citrus")
        await log_pour(client, bottle["id"], enjoyment=5)

        summary = (await client.get("/api/insights/summary")).json()
        assert summary["most_logged_bottle_name"] == "Fortaleza Blanco"
        assert summary["most_logged_count"] == 2
        assert summary["average_tasting_rating"] == 4.5
        assert summary["preferred_region_name"] == "Highlands"
        assert summary["flavor_highlights"] == ["Citrus"]
        assert summary["recommended_bottle_names"] == ["Fortaleza Blanco"]

        trend = (await client.get("/api/insights/trend")).json()
        assert trend == [{"day": "2026-06-15", "value": 4.5}]

    @pytest.mark.asyncio
    async def test_pour_without_timezone_is_utc(self, client: AsyncClient) -> None:
        """Test a pour date sent without an offset is stored as UTC and still feeds the dashboard."""
        bottle = await create_bottle(client)
        naive = await log_pour(client, bottle["id"], date="2026-06-10T12:00:00", enjoyment=4)
        await log_pour(client, bottle["id"], enjoyment=3)

        assert naive["date"] == "2026-06-10T12:00:00Z"

        pours = await client.get("/api/pours")
        assert pours.status_code == 200
        assert len(pours.json()) == 2

        response = await client.get("/api/insights/dashboard")
        assert response.status_code == 200
        assert response.json()["filtered_tastings_count"] == 2
