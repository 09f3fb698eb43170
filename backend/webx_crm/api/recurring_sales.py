"""Recurring sale endpoints."""

import logging
from datetime import date, datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, ConfigDict, computed_field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from webx_crm.api.common import MessageResponse, UpdateSchema, apply_changes, get_or_404
from webx_crm.core.limiter import DEFAULT_LIMIT, limiter
from webx_crm.db.session import get_db
from webx_crm.models.recurring_sale import RecurringSale
from webx_crm.services.dashboard.revenue import effective_amount

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recurring-sales", tags=["sales"])


class RecurringSaleResponse(BaseModel):
    """Recurring sale response schema."""

    id: int
    client_id: int | None
    product: str
    service_name: str
    description: str | None
    amount: float | None
    quantity: int | None
    unit_amount: float | None
    start_date: date | None
    end_date: date | None
    active: bool | None
    billing_cycle: str | None
    notes: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def effective_amount(self) -> float:
        """Amount billed per cycle."""
        return effective_amount(self)


class RecurringSaleCreate(BaseModel):
    """Recurring sale creation schema."""

    client_id: int | None = None
    product: str = ""
    service_name: str = ""
    description: str = ""
    amount: Decimal | None = None
    quantity: int = 1
    unit_amount: Decimal = Decimal("0")
    start_date: date | None = None
    end_date: date | None = None
    active: bool = True
    billing_cycle: str = "monthly"
    notes: str | None = None


class RecurringSaleUpdate(UpdateSchema):
    """Fields a recurring sale update may change."""

    description: str | None = None
    service_name: str | None = None
    amount: Decimal | None = None
    start_date: date | None = None
    end_date: date | None = None
    product: str | None = None
    quantity: int | None = None
    unit_amount: Decimal | None = None
    notes: str | None = None
    active: bool | None = None
    billing_cycle: str | None = None


_NOT_NULL_TEXT = {"product", "service_name"}


@router.get("", response_model=list[RecurringSaleResponse])
@limiter.limit(DEFAULT_LIMIT)
async def list_recurring_sales(
    request: Request,
    client_id: int | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> list[RecurringSale]:
    """List recurring sales, newest first, optionally for one client."""
    query = select(RecurringSale).order_by(RecurringSale.id.desc())
    if client_id is not None:
        query = query.where(RecurringSale.client_id == client_id)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.get("/{sale_id}", response_model=RecurringSaleResponse)
@limiter.limit(DEFAULT_LIMIT)
async def get_recurring_sale(
    request: Request, sale_id: int, db: AsyncSession = Depends(get_db)
) -> RecurringSale:
    """Get a single recurring sale."""
    return await get_or_404(db, RecurringSale, sale_id, "Record")


@router.post("", response_model=RecurringSaleResponse, status_code=201)
@limiter.limit(DEFAULT_LIMIT)
async def create_recurring_sale(
    request: Request, sale_data: RecurringSaleCreate, db: AsyncSession = Depends(get_db)
) -> RecurringSale:
    """Create a recurring sale."""
    sale = RecurringSale(**sale_data.model_dump())
    db.add(sale)
    await db.commit()
    await db.refresh(sale)

    logger.info(
        "Created recurring sale: id=%d, client_id=%s, cycle=%s",
        sale.id,
        sale.client_id,
        sale.billing_cycle,
    )
    return sale


@router.put("/{sale_id}", response_model=RecurringSaleResponse)
@limiter.limit(DEFAULT_LIMIT)
async def update_recurring_sale(
    request: Request,
    sale_id: int,
    sale_data: RecurringSaleUpdate,
    db: AsyncSession = Depends(get_db),
) -> RecurringSale:
    """Update the supplied fields and return the stored record."""
    changes = sale_data.changes()
    sale = await get_or_404(db, RecurringSale, sale_id, "Record")
    apply_changes(
        sale,
        {
            field: "" if value is None and field in _NOT_NULL_TEXT else value
            for field, value in changes.items()
        },
    )
    await db.commit()
    await db.refresh(sale)

    logger.info("Updated recurring sale: id=%d, fields=%s", sale.id, sorted(changes))
    return sale


@router.delete("/{sale_id}", response_model=MessageResponse)
@limiter.limit(DEFAULT_LIMIT)
async def delete_recurring_sale(
    request: Request, sale_id: int, db: AsyncSession = Depends(get_db)
) -> MessageResponse:
    """Delete a recurring sale."""
    sale = await get_or_404(db, RecurringSale, sale_id, "Record")
    await db.delete(sale)
    await db.commit()

    logger.info("Deleted recurring sale: id=%d", sale_id)
    return MessageResponse(message="Recurring sale deleted")
