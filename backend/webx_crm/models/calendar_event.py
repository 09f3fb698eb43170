"""Calendar event model."""

from datetime import date, time

from sqlalchemy import Date, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column

from webx_crm.db.base import Base, TimestampMixin


class CalendarEvent(Base, TimestampMixin):
    """A meeting, call, follow-up or personal entry on the shared calendar."""

    __tablename__ = "calendar_events"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    event_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="meeting"
    )  # meeting, call, followup, personal
    event_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    event_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        """String representation."""
        return f"<CalendarEvent {self.id} - {self.title} on {self.event_date}>"
