"""Renewal endpoints."""

import logging
from datetime import date, datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from webx_crm.api.common import MessageResponse, UpdateSchema, apply_changes, get_or_404
from webx_crm.core.limiter import DEFAULT_LIMIT, limiter
from webx_crm.db.session import get_db
from webx_crm.models.renewal import Renewal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/renewals", tags=["renewals"])


class RenewalResponse(BaseModel):
    """Renewal response schema."""

    id: int
    client_id: int | None
    service_type: str
    item_label: str
    provider: str | None
    renewal_date: date | None
    cost: float
    auto_renew: bool
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class RenewalCreate(BaseModel):
    """Renewal creation schema."""

    client_id: int | None = None
    service_type: str = "other"
    item_label: str = ""
    provider: str | None = None
    renewal_date: date | None = None
    cost: Decimal = Decimal("0")
    auto_renew: bool = False
    status: str = "active"


class RenewalUpdate(UpdateSchema):
    """Fields a renewal update may change."""

    renewal_date: date | None = None
    cost: Decimal | None = None
    auto_renew: bool | None = None
    status: str | None = None
    provider: str | None = None


_CLEARED_DEFAULTS = {"cost": Decimal("0"), "auto_renew": False, "status": "active"}


@router.get("", response_model=list[RenewalResponse])
@limiter.limit(DEFAULT_LIMIT)
async def list_renewals(request: Request, db: AsyncSession = Depends(get_db)) -> list[Renewal]:
    """List renewals, latest renewal date first."""
    result = await db.execute(
        select(Renewal).order_by(Renewal.renewal_date.desc(), Renewal.id.desc())
    )
    return list(result.scalars().all())


@router.post("", response_model=RenewalResponse, status_code=201)
@limiter.limit(DEFAULT_LIMIT)
async def create_renewal(
    request: Request, renewal_data: RenewalCreate, db: AsyncSession = Depends(get_db)
) -> Renewal:
    """Create a renewal."""
    renewal = Renewal(**renewal_data.model_dump())
    db.add(renewal)
    await db.commit()
    await db.refresh(renewal)

    logger.info("Created renewal: id=%d, date=%s", renewal.id, renewal.renewal_date)
    return renewal


@router.put("/{renewal_id}", response_model=RenewalResponse)
@limiter.limit(DEFAULT_LIMIT)
async def update_renewal(
    request: Request,
    renewal_id: int,
    renewal_data: RenewalUpdate,
    db: AsyncSession = Depends(get_db),
) -> Renewal:
    """Update the supplied fields of a renewal."""
    renewal = await get_or_404(db, Renewal, renewal_id, "Renewal")
    changes = {
        field: _CLEARED_DEFAULTS[field] if value is None and field in _CLEARED_DEFAULTS else value
        for field, value in renewal_data.changes().items()
    }
    apply_changes(renewal, changes)
    await db.commit()
    await db.refresh(renewal)

    logger.info("Updated renewal: id=%d, fields=%s", renewal.id, sorted(changes))
    return renewal


@router.delete("/{renewal_id}", response_model=MessageResponse)
@limiter.limit(DEFAULT_LIMIT)
async def delete_renewal(
    request: Request, renewal_id: int, db: AsyncSession = Depends(get_db)
) -> MessageResponse:
    """Delete a renewal."""
    renewal = await get_or_404(db, Renewal, renewal_id, "Renewal")
    await db.delete(renewal)
    await db.commit()

    logger.info("Deleted renewal: id=%d", renewal_id)
    return MessageResponse(message="Renewal deleted")
