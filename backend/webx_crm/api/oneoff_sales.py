"""One-off sale endpoints."""

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
from webx_crm.models.oneoff_sale import OneOffSale
from webx_crm.services.dashboard.revenue import effective_amount

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/oneoff-sales", tags=["sales"])


class OneOffSaleResponse(BaseModel):
    """One-off sale response schema."""

    id: int
    client_id: int | None
    description: str
    amount: float | None
    quantity: int
    unit_amount: float
    status: str
    sale_date: date | None
    notes: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def effective_amount(self) -> float:
        """Amount if set, otherwise quantity * unit_amount."""
        return effective_amount(self)


class OneOffSaleCreate(BaseModel):
    """One-off sale creation schema."""

    client_id: int | None = None
    description: str = ""
    amount: Decimal | None = None
    quantity: int = 1
    unit_amount: Decimal = Decimal("0")
    status: str = "draft"
    sale_date: date | None = None
    notes: str | None = None


class OneOffSaleUpdate(UpdateSchema):
    """Fields a one-off sale update may change."""

    description: str | None = None
    amount: Decimal | None = None
    quantity: int | None = None
    unit_amount: Decimal | None = None
    status: str | None = None
    sale_date: date | None = None
    notes: str | None = None


# Columns that fall back to their create-time default when cleared
_CLEARED_DEFAULTS = {"description": "", "quantity": 1, "unit_amount": Decimal("0"), "status": "draft"}


@router.get("", response_model=list[OneOffSaleResponse])
@limiter.limit(DEFAULT_LIMIT)
async def list_oneoff_sales(
    request: Request,
    client_id: int | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> list[OneOffSale]:
    """List one-off sales, newest first, optionally for one client."""
    query = select(OneOffSale).order_by(OneOffSale.id.desc())
    if client_id is not None:
        query = query.where(OneOffSale.client_id == client_id)
    result = await db.execute(query)
    return list(result.scalars().all())


@router.get("/{sale_id}", response_model=OneOffSaleResponse)
@limiter.limit(DEFAULT_LIMIT)
async def get_oneoff_sale(
    request: Request, sale_id: int, db: AsyncSession = Depends(get_db)
) -> OneOffSale:
    """Get a single one-off sale."""
    return await get_or_404(db, OneOffSale, sale_id, "Sale")


@router.post("", response_model=OneOffSaleResponse, status_code=201)
@limiter.limit(DEFAULT_LIMIT)
async def create_oneoff_sale(
    request: Request, sale_data: OneOffSaleCreate, db: AsyncSession = Depends(get_db)
) -> OneOffSale:
    """Create a one-off sale; new sales start as drafts."""
    sale = OneOffSale(**sale_data.model_dump())
    db.add(sale)
    await db.commit()
    await db.refresh(sale)

    logger.info("Created one-off sale: id=%d, status=%s", sale.id, sale.status)
    return sale


@router.put("/{sale_id}", response_model=OneOffSaleResponse)
@limiter.limit(DEFAULT_LIMIT)
async def update_oneoff_sale(
    request: Request,
    sale_id: int,
    sale_data: OneOffSaleUpdate,
    db: AsyncSession = Depends(get_db),
) -> OneOffSale:
    """Update the supplied fields of a one-off sale."""
    sale = await get_or_404(db, OneOffSale, sale_id, "Sale")
    changes = {
        field: _CLEARED_DEFAULTS[field] if value is None and field in _CLEARED_DEFAULTS else value
        for field, value in sale_data.changes().items()
    }
    apply_changes(sale, changes)
    await db.commit()
    await db.refresh(sale)

    logger.info("Updated one-off sale: id=%d, fields=%s", sale.id, sorted(changes))
    return sale


@router.delete("/{sale_id}", response_model=MessageResponse)
@limiter.limit(DEFAULT_LIMIT)
async def delete_oneoff_sale(
    request: Request, sale_id: int, db: AsyncSession = Depends(get_db)
) -> MessageResponse:
    """Delete a one-off sale."""
    sale = await get_or_404(db, OneOffSale, sale_id, "Sale")
    await db.delete(sale)
    await db.commit()

    logger.info("Deleted one-off sale: id=%d", sale_id)
    return MessageResponse(message="Sale deleted")
