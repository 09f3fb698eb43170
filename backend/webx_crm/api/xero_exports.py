"""Xero export batch endpoints."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from webx_crm.api.common import MessageResponse, UpdateSchema, apply_changes, get_or_404
from webx_crm.core.limiter import DEFAULT_LIMIT, limiter
from webx_crm.db.session import get_db
from webx_crm.models.xero_export import XeroExport, XeroExportItem

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/xero-exports", tags=["xero"])


class XeroExportResponse(BaseModel):
    """Export batch with its line count."""

    id: int
    name: str
    period_year: int
    period_month: int
    item_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class XeroExportCreate(BaseModel):
    """Export batch creation schema."""

    name: str = Field(min_length=1)
    period_year: int = Field(ge=2000, le=2100)
    period_month: int = Field(ge=1, le=12)


class XeroExportUpdate(UpdateSchema):
    """Fields an export batch update may change."""

    name: str | None = Field(None, min_length=1)
    period_year: int | None = Field(None, ge=2000, le=2100)
    period_month: int | None = Field(None, ge=1, le=12)


def _to_response(export: XeroExport, item_count: int) -> XeroExportResponse:
    return XeroExportResponse(
        id=export.id,
        name=export.name,
        period_year=export.period_year,
        period_month=export.period_month,
        item_count=item_count,
        created_at=export.created_at,
        updated_at=export.updated_at,
    )


async def _item_count(db: AsyncSession, export_id: int) -> int:
    count = await db.scalar(
        select(func.count(XeroExportItem.id)).where(XeroExportItem.export_id == export_id)
    )
    return int(count or 0)


@router.get("", response_model=list[XeroExportResponse])
@limiter.limit(DEFAULT_LIMIT)
async def list_exports(
    request: Request, db: AsyncSession = Depends(get_db)
) -> list[XeroExportResponse]:
    """List export batches, newest first, with their item counts."""
    result = await db.execute(
        select(XeroExport, func.count(XeroExportItem.id).label("item_count"))
        .outerjoin(XeroExportItem, XeroExportItem.export_id == XeroExport.id)
        .group_by(XeroExport.id)
        .order_by(XeroExport.created_at.desc(), XeroExport.id.desc())
    )
    return [_to_response(export, item_count) for export, item_count in result.all()]


@router.post("", response_model=XeroExportResponse, status_code=201)
@limiter.limit(DEFAULT_LIMIT)
async def create_export(
    request: Request, export_data: XeroExportCreate, db: AsyncSession = Depends(get_db)
) -> XeroExportResponse:
    """Create an empty export batch."""
    export = XeroExport(**export_data.model_dump())
    db.add(export)
    await db.commit()
    await db.refresh(export)

    logger.info(
        "Created Xero export: id=%d, period=%d-%02d",
        export.id,
        export.period_year,
        export.period_month,
    )
    return _to_response(export, 0)


@router.put("/{export_id}", response_model=XeroExportResponse)
@limiter.limit(DEFAULT_LIMIT)
async def update_export(
    request: Request,
    export_id: int,
    export_data: XeroExportUpdate,
    db: AsyncSession = Depends(get_db),
) -> XeroExportResponse:
    """Rename or re-date an export batch."""
    changes = {
        field: value for field, value in export_data.changes().items() if value is not None
    }
    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No valid fields to update",
        )
    export = await get_or_404(db, XeroExport, export_id, "Export")
    apply_changes(export, changes)
    await db.commit()
    await db.refresh(export)

    logger.info("Updated Xero export: id=%d", export.id)
    return _to_response(export, await _item_count(db, export.id))


@router.delete("/{export_id}", response_model=MessageResponse)
@limiter.limit(DEFAULT_LIMIT)
async def delete_export(
    request: Request, export_id: int, db: AsyncSession = Depends(get_db)
) -> MessageResponse:
    """Delete an export batch together with its items."""
    export = await get_or_404(db, XeroExport, export_id, "Export")
    await db.delete(export)
    await db.commit()

    logger.info("Deleted Xero export: id=%d", export_id)
    return MessageResponse(message="Export and related items deleted")
