"""Dashboard endpoint: headline revenue and workload figures."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncSession

from webx_crm.core.config import settings
from webx_crm.core.limiter import DEFAULT_LIMIT, limiter
from webx_crm.db.session import get_db
from webx_crm.services.dashboard import DashboardAggregator, DashboardRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


class DashboardCards(BaseModel):
    """Dashboard figures, serialized in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    expected_income: float
    ytd: float
    monthly_income: float
    gst_this_month: float
    drafts_total: float
    active_clients: int
    open_tasks: int


class DashboardResponse(BaseModel):
    """Dashboard response envelope."""

    ok: bool = True
    cards: DashboardCards


def get_dashboard_aggregator(db: AsyncSession = Depends(get_db)) -> DashboardAggregator:
    """Aggregator bound to this request's session."""
    return DashboardAggregator(DashboardRepository(db), gst_rate=settings.GST_RATE)


def business_now() -> datetime:
    """Current time in the business timezone."""
    return datetime.now(settings.business_tz)


@router.get("", response_model=DashboardResponse)
@limiter.limit(DEFAULT_LIMIT)
async def get_dashboard(
    request: Request,
    response: Response,
    aggregator: DashboardAggregator = Depends(get_dashboard_aggregator),
    now: datetime = Depends(business_now),
) -> DashboardResponse:
    """Compute the dashboard cards for right now.

    Storage failures propagate to the database error handler, which returns
    a single 500 without any partial figures.
    """
    response.headers["Cache-Control"] = "no-store"

    result = await aggregator.compute(now)
    logger.debug("Dashboard computed for %s", now.date().isoformat())
    return DashboardResponse(cards=DashboardCards(**result.to_dict()))
