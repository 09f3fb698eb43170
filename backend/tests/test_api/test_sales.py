"""Tests for one-off and recurring sale endpoints."""

from datetime import date
from decimal import Decimal
from typing import Any

import pytest
from httpx import AsyncClient


class TestOneOffSaleEndpoints:
    """Test one-off sale CRUD endpoints."""

    @pytest.mark.asyncio
    async def test_create_defaults_to_draft(
        self, test_client: AsyncClient, create_test_client: Any
    ) -> None:
        client = await create_test_client()

        response = await test_client.post(
            "/api/oneoff-sales",
            json={
                "client_id": client.id,
                "description": "Logo design",
                "quantity": 3,
                "unit_amount": "12.50",
                "sale_date": "2024-06-01",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "draft"
        assert data["amount"] is None
        assert data["effective_amount"] == pytest.approx(37.5)
        assert data["sale_date"] == "2024-06-01"

    @pytest.mark.asyncio
    async def test_effective_amount_prefers_amount(
        self, test_client: AsyncClient, create_test_oneoff_sale: Any
    ) -> None:
        sale = await create_test_oneoff_sale(
            amount=Decimal("80.00"), quantity=5, unit_amount=Decimal("100.00")
        )

        response = await test_client.get(f"/api/oneoff-sales/{sale.id}")

        assert response.status_code == 200
        assert response.json()["effective_amount"] == pytest.approx(80.0)

    @pytest.mark.asyncio
    async def test_list_filtered_by_client(
        self,
        test_client: AsyncClient,
        create_test_client: Any,
        create_test_oneoff_sale: Any,
    ) -> None:
        mine = await create_test_client(company="Mine")
        other = await create_test_client(company="Other")
        sale = await create_test_oneoff_sale(client_id=mine.id)
        await create_test_oneoff_sale(client_id=other.id)

        response = await test_client.get("/api/oneoff-sales", params={"client_id": mine.id})

        assert response.status_code == 200
        assert [s["id"] for s in response.json()] == [sale.id]

    @pytest.mark.asyncio
    async def test_update_status(
        self, test_client: AsyncClient, create_test_oneoff_sale: Any
    ) -> None:
        sale = await create_test_oneoff_sale(status="draft")

        response = await test_client.put(f"/api/oneoff-sales/{sale.id}", json={"status": "sent"})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "sent"
        assert data["amount"] == pytest.approx(100.0)

    @pytest.mark.asyncio
    async def test_clearing_amount_falls_back_to_quantity(
        self, test_client: AsyncClient, create_test_oneoff_sale: Any
    ) -> None:
        sale = await create_test_oneoff_sale(
            amount=Decimal("99.00"), quantity=2, unit_amount=Decimal("15.00")
        )

        response = await test_client.put(f"/api/oneoff-sales/{sale.id}", json={"amount": ""})

        assert response.status_code == 200
        data = response.json()
        assert data["amount"] is None
        assert data["effective_amount"] == pytest.approx(30.0)

    @pytest.mark.asyncio
    async def test_clearing_status_restores_draft(
        self, test_client: AsyncClient, create_test_oneoff_sale: Any
    ) -> None:
        sale = await create_test_oneoff_sale(status="paid")

        response = await test_client.put(f"/api/oneoff-sales/{sale.id}", json={"status": None})

        assert response.status_code == 200
        assert response.json()["status"] == "draft"

    @pytest.mark.asyncio
    async def test_update_no_valid_fields(
        self, test_client: AsyncClient, create_test_oneoff_sale: Any
    ) -> None:
        sale = await create_test_oneoff_sale()

        response = await test_client.put(f"/api/oneoff-sales/{sale.id}", json={"client_id": 5})

        assert response.status_code == 400
        assert response.json()["detail"] == "No valid fields to update"

    @pytest.mark.asyncio
    async def test_delete(self, test_client: AsyncClient, create_test_oneoff_sale: Any) -> None:
        sale = await create_test_oneoff_sale()

        response = await test_client.delete(f"/api/oneoff-sales/{sale.id}")

        assert response.status_code == 200
        assert response.json() == {"message": "Sale deleted"}
        missing = await test_client.get(f"/api/oneoff-sales/{sale.id}")
        assert missing.status_code == 404
        assert missing.json()["detail"] == "Sale not found"


class TestRecurringSaleEndpoints:
    """Test recurring sale CRUD endpoints."""

    @pytest.mark.asyncio
    async def test_create_defaults(self, test_client: AsyncClient) -> None:
        response = await test_client.post(
            "/api/recurring-sales",
            json={"service_name": "SEO retainer", "quantity": 2, "unit_amount": "50"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["active"] is True
        assert data["billing_cycle"] == "monthly"
        assert data["amount"] is None
        assert data["effective_amount"] == pytest.approx(100.0)

    @pytest.mark.asyncio
    async def test_update_returns_stored_record(
        self, test_client: AsyncClient, create_test_recurring_sale: Any
    ) -> None:
        sale = await create_test_recurring_sale()

        response = await test_client.put(
            f"/api/recurring-sales/{sale.id}",
            json={"end_date": "2024-12-31", "active": False, "billing_cycle": "yearly"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == sale.id
        assert data["end_date"] == "2024-12-31"
        assert data["active"] is False
        assert data["billing_cycle"] == "yearly"
        assert data["service_name"] == "Managed hosting"

    @pytest.mark.asyncio
    async def test_blank_end_date_clears_it(
        self, test_client: AsyncClient, create_test_recurring_sale: Any
    ) -> None:
        sale = await create_test_recurring_sale(end_date=date(2024, 12, 31))

        response = await test_client.put(f"/api/recurring-sales/{sale.id}", json={"end_date": ""})

        assert response.status_code == 200
        assert response.json()["end_date"] is None

    @pytest.mark.asyncio
    async def test_update_not_found(self, test_client: AsyncClient) -> None:
        response = await test_client.put("/api/recurring-sales/999", json={"product": "x"})

        assert response.status_code == 404
        assert response.json()["detail"] == "Record not found"

    @pytest.mark.asyncio
    async def test_update_no_valid_fields(
        self, test_client: AsyncClient, create_test_recurring_sale: Any
    ) -> None:
        sale = await create_test_recurring_sale()

        response = await test_client.put(f"/api/recurring-sales/{sale.id}", json={"id": 7})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delete(self, test_client: AsyncClient, create_test_recurring_sale: Any) -> None:
        sale = await create_test_recurring_sale()

        response = await test_client.delete(f"/api/recurring-sales/{sale.id}")

        assert response.status_code == 200
        assert response.json() == {"message": "Recurring sale deleted"}
        assert (await test_client.get("/api/recurring-sales")).json() == []
