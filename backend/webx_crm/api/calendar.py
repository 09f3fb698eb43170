"""Calendar event endpoints."""

import logging
import re
from datetime import date, datetime, time
from typing import Any

from dateutil.relativedelta import relativedelta
from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from webx_crm.core.errors import ApiError
from webx_crm.core.limiter import DEFAULT_LIMIT, limiter
from webx_crm.db.session import get_db
from webx_crm.models.calendar_event import CalendarEvent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calendar", tags=["calendar"])

EVENT_TYPES = ("meeting", "call", "followup", "personal")
MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def parse_month(month: str | None) -> date:
    """Parse ``YYYY-MM`` into the first day of that month."""
    match = MONTH_PATTERN.match(month or "")
    if not match:
        raise ApiError("Invalid month")
    year, mon = int(match.group(1)), int(match.group(2))
    if not 1 <= mon <= 12:
        raise ApiError("Invalid month")
    return date(year, mon, 1)


def parse_event_time(value: str | None) -> time | None:
    """Accept ``HH``, ``HH:MM`` or ``HH:MM:SS``; blank means all-day."""
    if value is None or str(value).strip() == "":
        return None
    parts = str(value).strip().split(":")
    try:
        numbers = [int(part or "0") for part in parts[:3]]
        numbers += [0] * (3 - len(numbers))
        return time(*numbers)
    except ValueError as e:
        raise ApiError("Invalid time") from e


class EventOut(BaseModel):
    """Calendar event as returned to the frontend."""

    id: int
    title: str
    type: str
    date: date
    time: str | None
    notes: str | None
    created_at: datetime | None = None

    @classmethod
    def from_event(cls, event: CalendarEvent) -> "EventOut":
        return cls(
            id=event.id,
            title=event.title,
            type=event.event_type,
            date=event.event_date,
            time=event.event_time.strftime("%H:%M:%S") if event.event_time else None,
            notes=event.notes,
            created_at=event.created_at,
        )


class EventListResponse(BaseModel):
    ok: bool = True
    events: list[EventOut]


class EventResponse(BaseModel):
    ok: bool = True
    event: EventOut


class EventWrite(BaseModel):
    """Body for creating or replacing an event."""

    title: str | None = None
    type: str | None = None
    date: Any = None
    time: str | None = None
    notes: str | None = None

    def validated(self) -> dict[str, Any]:
        """Column values for the event, or ApiError when title/date are missing."""
        if not self.title or not self.title.strip() or not self.date:
            raise ApiError("Title and date required")
        try:
            event_date = date.fromisoformat(str(self.date)[:10])
        except ValueError as e:
            raise ApiError("Invalid date") from e
        return {
            "title": self.title.strip(),
            "event_type": self.type if self.type in EVENT_TYPES else "meeting",
            "event_date": event_date,
            "event_time": parse_event_time(self.time),
            "notes": self.notes or None,
        }


@router.get("", response_model=EventListResponse)
@limiter.limit(DEFAULT_LIMIT)
async def list_events(
    request: Request,
    month: str | None = Query(None, description="YYYY-MM"),
    db: AsyncSession = Depends(get_db),
) -> EventListResponse:
    """List the events of one month, in date and time order."""
    start = parse_month(month)
    end = start + relativedelta(months=1)

    result = await db.execute(
        select(CalendarEvent)
        .where(CalendarEvent.event_date >= start, CalendarEvent.event_date < end)
        .order_by(CalendarEvent.event_date.asc(), CalendarEvent.event_time.asc())
    )
    return EventListResponse(events=[EventOut.from_event(e) for e in result.scalars().all()])


@router.post("", response_model=EventResponse, status_code=201)
@limiter.limit(DEFAULT_LIMIT)
async def create_event(
    request: Request, event_data: EventWrite, db: AsyncSession = Depends(get_db)
) -> EventResponse:
    """Create an event."""
    event = CalendarEvent(**event_data.validated())
    db.add(event)
    await db.commit()
    await db.refresh(event)

    logger.info("Created calendar event: id=%d, date=%s", event.id, event.event_date)
    return EventResponse(event=EventOut.from_event(event))


async def _get_event(db: AsyncSession, event_id: int) -> CalendarEvent:
    event = await db.get(CalendarEvent, event_id)
    if event is None:
        raise ApiError("Event not found", status_code=404)
    return event


@router.put("/{event_id}", response_model=EventResponse)
@limiter.limit(DEFAULT_LIMIT)
async def update_event(
    request: Request,
    event_id: int,
    event_data: EventWrite,
    db: AsyncSession = Depends(get_db),
) -> EventResponse:
    """Replace an event's details."""
    values = event_data.validated()
    event = await _get_event(db, event_id)
    for field, value in values.items():
        setattr(event, field, value)
    await db.commit()
    await db.refresh(event)

    logger.info("Updated calendar event: id=%d", event.id)
    return EventResponse(event=EventOut.from_event(event))


@router.delete("/{event_id}")
@limiter.limit(DEFAULT_LIMIT)
async def delete_event(
    request: Request, event_id: int, db: AsyncSession = Depends(get_db)
) -> dict[str, bool]:
    """Delete an event."""
    event = await _get_event(db, event_id)
    await db.delete(event)
    await db.commit()

    logger.info("Deleted calendar event: id=%d", event_id)
    return {"ok": True}
