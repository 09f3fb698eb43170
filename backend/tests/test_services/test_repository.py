"""Tests for the dashboard repository queries against SQLite."""

from datetime import date
from decimal import Decimal
from typing import Any

import pytest
from sqlalchemy import null
from sqlalchemy.ext.asyncio import AsyncSession

from webx_crm.services.dashboard import DashboardRepository


class TestOneOffSums:
    """Test one-off sale sums."""

    @pytest.mark.asyncio
    async def test_sum_uses_effective_amount(
        self, test_session: AsyncSession, create_test_oneoff_sale: Any
    ) -> None:
        await create_test_oneoff_sale(amount=Decimal("120.00"), status="paid")
        await create_test_oneoff_sale(
            amount=None, quantity=3, unit_amount=Decimal("10.00"), status="sent"
        )

        total = await DashboardRepository(test_session).sum_oneoff_amount(["sent", "paid"])

        assert total == pytest.approx(150.0)

    @pytest.mark.asyncio
    async def test_status_match_ignores_case(
        self, test_session: AsyncSession, create_test_oneoff_sale: Any
    ) -> None:
        await create_test_oneoff_sale(amount=Decimal("10.00"), status="PAID")
        await create_test_oneoff_sale(amount=Decimal("20.00"), status="Sent")
        await create_test_oneoff_sale(amount=Decimal("40.00"), status="void")

        total = await DashboardRepository(test_session).sum_oneoff_amount(["sent", "paid"])

        assert total == pytest.approx(30.0)

    @pytest.mark.asyncio
    async def test_date_range_is_inclusive(
        self, test_session: AsyncSession, create_test_oneoff_sale: Any
    ) -> None:
        await create_test_oneoff_sale(amount=Decimal("1.00"), sale_date=date(2024, 4, 1))
        await create_test_oneoff_sale(amount=Decimal("2.00"), sale_date=date(2024, 6, 15))
        await create_test_oneoff_sale(amount=Decimal("4.00"), sale_date=date(2024, 3, 31))
        await create_test_oneoff_sale(amount=Decimal("8.00"), sale_date=date(2024, 6, 16))
        await create_test_oneoff_sale(amount=Decimal("16.00"), sale_date=None)

        total = await DashboardRepository(test_session).sum_oneoff_amount(
            ["paid"], (date(2024, 4, 1), date(2024, 6, 15))
        )

        assert total == pytest.approx(3.0)

    @pytest.mark.asyncio
    async def test_empty_table_sums_to_zero(self, test_session: AsyncSession) -> None:
        repo = DashboardRepository(test_session)

        assert await repo.sum_oneoff_amount(["paid"]) == 0.0
        assert await repo.sum_draft_amount() == 0.0

    @pytest.mark.asyncio
    async def test_drafts_ignore_sale_date(
        self, test_session: AsyncSession, create_test_oneoff_sale: Any
    ) -> None:
        await create_test_oneoff_sale(amount=Decimal("75.00"), status="draft", sale_date=None)
        await create_test_oneoff_sale(
            amount=Decimal("25.00"), status="Draft", sale_date=date(2019, 1, 1)
        )
        await create_test_oneoff_sale(amount=Decimal("500.00"), status="paid")

        assert await DashboardRepository(test_session).sum_draft_amount() == pytest.approx(100.0)


class TestFetchRecurring:
    """Test recurring row snapshots."""

    @pytest.mark.asyncio
    async def test_rows_carry_dates_and_flags(
        self, test_session: AsyncSession, create_test_recurring_sale: Any
    ) -> None:
        await create_test_recurring_sale(
            amount=None,
            quantity=2,
            unit_amount=Decimal("50.00"),
            start_date=date(2024, 1, 1),
            end_date=date(2024, 12, 31),
            active=null(),
            billing_cycle="Monthly",
        )

        rows = await DashboardRepository(test_session).fetch_recurring()

        assert len(rows) == 1
        row = rows[0]
        assert row.amount is None
        assert row.quantity == 2
        assert float(row.unit_amount) == 50.0
        assert row.start_date == date(2024, 1, 1)
        assert row.end_date == date(2024, 12, 31)
        assert row.active is None
        assert row.billing_cycle == "Monthly"


class TestCounts:
    """Test client and task counters."""

    @pytest.mark.asyncio
    async def test_active_clients_normalize_status(
        self, test_session: AsyncSession, create_test_client: Any
    ) -> None:
        statuses = [
            "active", null(), "", "  ", "Active", "prospect", "Inactive", "ARCHIVED", " closed "
        ]
        for status in statuses:
            await create_test_client(status=status)

        count = await DashboardRepository(test_session).count_active_clients()

        # active, null, blank, whitespace, Active, prospect
        assert count == 6

    @pytest.mark.asyncio
    async def test_open_tasks_ignore_case(
        self, test_session: AsyncSession, create_test_task: Any
    ) -> None:
        await create_test_task(status="open")
        await create_test_task(status="OPEN")
        await create_test_task(status="done")

        assert await DashboardRepository(test_session).count_open_tasks() == 2
