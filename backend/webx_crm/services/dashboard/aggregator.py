"""Dashboard aggregation: fiscal year-to-date revenue and projection."""

from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Any, Protocol

import structlog

from webx_crm.services.dashboard.calendar import (
    first_of_month,
    fiscal_year_start,
    last_of_month,
    months_left_in_fiscal_year,
    next_month,
)
from webx_crm.services.dashboard.revenue import RecurringRevenueRow, sum_recurring_for_month

logger = structlog.get_logger()

EARNED_STATUSES = ("sent", "paid")
DEFAULT_GST_RATE = 0.15


class RevenueSource(Protocol):
    """What the aggregator needs from storage."""

    async def sum_oneoff_amount(
        self, statuses: Any, date_range: tuple[date, date] | None = None
    ) -> float: ...

    async def sum_draft_amount(self) -> float: ...

    async def fetch_recurring(self) -> list[RecurringRevenueRow]: ...

    async def count_active_clients(self) -> int: ...

    async def count_open_tasks(self) -> int: ...


@dataclass(frozen=True)
class DashboardResult:
    """Headline figures for the dashboard cards."""

    expected_income: float
    ytd: float
    monthly_income: float
    gst_this_month: float
    drafts_total: float
    active_clients: int
    open_tasks: int

    def to_dict(self) -> dict[str, Any]:
        """Plain dict of the figures."""
        return asdict(self)


class DashboardAggregator:
    """Computes the dashboard for a given moment.

    Every fetch must succeed; any storage error propagates to the caller
    and no partial result is produced.
    """

    def __init__(self, source: RevenueSource, gst_rate: float = DEFAULT_GST_RATE) -> None:
        self.source = source
        self.gst_rate = gst_rate

    async def compute(self, now: datetime | date) -> DashboardResult:
        """Build the dashboard as of ``now``."""
        today = now.date() if isinstance(now, datetime) else now
        fy_start = fiscal_year_start(today)
        month_start = first_of_month(today)
        month_end = last_of_month(today)

        log = logger.bind(today=today.isoformat(), fiscal_year_start=fy_start.isoformat())

        oneoff_ytd = await self.source.sum_oneoff_amount(EARNED_STATUSES, (fy_start, today))
        oneoff_this_month = await self.source.sum_oneoff_amount(
            EARNED_STATUSES, (month_start, month_end)
        )
        drafts_total = await self.source.sum_draft_amount()
        recurring = await self.source.fetch_recurring()

        recurring_ytd = 0.0
        cursor = first_of_month(fy_start)
        while cursor <= month_end:
            recurring_ytd += sum_recurring_for_month(recurring, cursor)
            cursor = next_month(cursor)

        recurring_this_month = sum_recurring_for_month(recurring, today)

        ytd = oneoff_ytd + recurring_ytd
        monthly_income = oneoff_this_month + recurring_this_month
        gst_this_month = monthly_income * self.gst_rate

        # Only recurring revenue is projected forward
        projection = 0.0
        cursor = next_month(today)
        for _ in range(months_left_in_fiscal_year(today)):
            projection += sum_recurring_for_month(recurring, cursor)
            cursor = next_month(cursor)

        active_clients = await self.source.count_active_clients()
        open_tasks = await self.source.count_open_tasks()

        result = DashboardResult(
            expected_income=ytd + projection,
            ytd=ytd,
            monthly_income=monthly_income,
            gst_this_month=gst_this_month,
            drafts_total=drafts_total,
            active_clients=active_clients,
            open_tasks=open_tasks,
        )
        log.debug(
            "dashboard_computed",
            recurring_rows=len(recurring),
            recurring_ytd=recurring_ytd,
            projection=projection,
        )
        return result
