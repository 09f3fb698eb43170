"""Read-only queries feeding the dashboard aggregator."""

from collections.abc import Sequence
from datetime import date

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from webx_crm.models import Client, OneOffSale, RecurringSale, Task
from webx_crm.services.dashboard.revenue import RecurringRevenueRow

INACTIVE_CLIENT_STATUSES = ("inactive", "archived", "closed")

# SQL rendering of effective_amount()
ONEOFF_EFFECTIVE_AMOUNT = case(
    (OneOffSale.amount.is_not(None), OneOffSale.amount),
    else_=func.coalesce(OneOffSale.quantity, 0) * func.coalesce(OneOffSale.unit_amount, 0),
)


class DashboardRepository:
    """Storage collaborator for the dashboard, bound to one session."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def sum_oneoff_amount(
        self,
        statuses: Sequence[str],
        date_range: tuple[date, date] | None = None,
    ) -> float:
        """Sum effective amounts of one-off sales in the given statuses.

        ``date_range`` is an inclusive ``(start, end)`` filter on sale_date.
        """
        query = select(func.coalesce(func.sum(ONEOFF_EFFECTIVE_AMOUNT), 0)).where(
            func.lower(OneOffSale.status).in_([s.lower() for s in statuses])
        )
        if date_range is not None:
            start, end = date_range
            query = query.where(OneOffSale.sale_date.between(start, end))

        total = await self.db.scalar(query)
        return float(total or 0)

    async def sum_draft_amount(self) -> float:
        """Sum effective amounts of every draft one-off sale, regardless of date."""
        return await self.sum_oneoff_amount(["draft"])

    async def fetch_recurring(self) -> list[RecurringRevenueRow]:
        """Load every recurring sale as an immutable snapshot."""
        result = await self.db.execute(
            select(
                RecurringSale.id,
                RecurringSale.amount,
                RecurringSale.quantity,
                RecurringSale.unit_amount,
                RecurringSale.start_date,
                RecurringSale.end_date,
                RecurringSale.active,
                RecurringSale.billing_cycle,
            )
        )
        return [
            RecurringRevenueRow(
                id=row.id,
                amount=row.amount,
                quantity=row.quantity,
                unit_amount=row.unit_amount,
                start_date=row.start_date,
                end_date=row.end_date,
                active=row.active,
                billing_cycle=row.billing_cycle,
            )
            for row in result.all()
        ]

    async def count_active_clients(self) -> int:
        """Count clients not marked inactive, archived or closed.

        A null or blank status counts as active.
        """
        normalized = func.coalesce(
            func.nullif(func.trim(func.lower(Client.status)), ""), "active"
        )
        count = await self.db.scalar(
            select(func.count())
            .select_from(Client)
            .where(normalized.not_in(INACTIVE_CLIENT_STATUSES))
        )
        return int(count or 0)

    async def count_open_tasks(self) -> int:
        """Count tasks whose status is "open" (any casing)."""
        count = await self.db.scalar(
            select(func.count()).select_from(Task).where(func.lower(Task.status) == "open")
        )
        return int(count or 0)
