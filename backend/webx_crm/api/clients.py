"""Client endpoints."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from webx_crm.api.common import MessageResponse, UpdateSchema, apply_changes, get_or_404
from webx_crm.core.limiter import DEFAULT_LIMIT, limiter
from webx_crm.db.session import get_db
from webx_crm.models.client import Client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["clients"])


class ClientResponse(BaseModel):
    """Client response schema."""

    id: int
    name: str
    company: str
    contact_name: str
    email: str
    phone: str
    address1: str
    city: str
    status: str | None
    website: str
    notes: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ClientCreate(BaseModel):
    """Client creation schema. Missing text fields are stored as ""."""

    name: str | None = None
    company: str | None = None
    contact_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address1: str | None = None
    city: str | None = None
    status: str = "active"
    website: str | None = None
    notes: str | None = None

    def to_model(self) -> Client:
        """Resolve defaults; name falls back to the company name."""
        return Client(
            name=self.name or self.company or "",
            company=self.company or "",
            contact_name=self.contact_name or "",
            email=self.email or "",
            phone=self.phone or "",
            address1=self.address1 or "",
            city=self.city or "",
            status=self.status,
            website=self.website or "",
            notes=self.notes or "",
        )


class ClientUpdate(UpdateSchema):
    """Fields a client update may change."""

    name: str | None = None
    company: str | None = None
    contact_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address1: str | None = None
    city: str | None = None
    status: str | None = None
    website: str | None = None
    notes: str | None = None


# Text columns that are NOT NULL; clearing one stores ""
_TEXT_FIELDS = {
    "name", "company", "contact_name", "email", "phone", "address1", "city", "website", "notes"
}


@router.get("", response_model=list[ClientResponse])
@limiter.limit(DEFAULT_LIMIT)
async def list_clients(request: Request, db: AsyncSession = Depends(get_db)) -> list[Client]:
    """List all clients, newest first."""
    result = await db.execute(select(Client).order_by(Client.id.desc()))
    return list(result.scalars().all())


@router.get("/{client_id}", response_model=ClientResponse)
@limiter.limit(DEFAULT_LIMIT)
async def get_client(
    request: Request, client_id: int, db: AsyncSession = Depends(get_db)
) -> Client:
    """Get a single client by ID."""
    return await get_or_404(db, Client, client_id, "Client")


@router.post("", response_model=ClientResponse, status_code=201)
@limiter.limit(DEFAULT_LIMIT)
async def create_client(
    request: Request, client_data: ClientCreate, db: AsyncSession = Depends(get_db)
) -> Client:
    """Create a new client."""
    client = client_data.to_model()
    db.add(client)
    await db.commit()
    await db.refresh(client)

    logger.info("Created client: id=%d, company=%s", client.id, client.company)
    return client


@router.put("/{client_id}", response_model=ClientResponse)
@limiter.limit(DEFAULT_LIMIT)
async def update_client(
    request: Request,
    client_id: int,
    client_data: ClientUpdate,
    db: AsyncSession = Depends(get_db),
) -> Client:
    """Update the supplied fields of a client."""
    client = await get_or_404(db, Client, client_id, "Client")
    changes = {
        field: "" if value is None and field in _TEXT_FIELDS else value
        for field, value in client_data.changes().items()
    }
    apply_changes(client, changes)
    await db.commit()
    await db.refresh(client)

    logger.info("Updated client: id=%d, fields=%s", client.id, sorted(changes))
    return client


@router.delete("/{client_id}", response_model=MessageResponse)
@limiter.limit(DEFAULT_LIMIT)
async def delete_client(
    request: Request, client_id: int, db: AsyncSession = Depends(get_db)
) -> MessageResponse:
    """Delete a client."""
    client = await get_or_404(db, Client, client_id, "Client")
    await db.delete(client)
    await db.commit()

    logger.info("Deleted client: id=%d", client_id)
    return MessageResponse(message="Client deleted")
