"""Project model."""

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from webx_crm.db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from webx_crm.models.client import Client


class Project(Base, TimestampMixin):
    """Delivery work for a client, tracked through stages."""

    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    client_id: Mapped[int | None] = mapped_column(
        ForeignKey("clients.id", ondelete="SET NULL"), nullable=True, index=True
    )
    client_name_manual: Mapped[str | None] = mapped_column(String(255), nullable=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    allocated_to: Mapped[str] = mapped_column(String(255), nullable=False, default="Unassigned")
    cost: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    eta_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    priority: Mapped[str] = mapped_column(
        String(20), nullable=False, default="normal"
    )  # low, normal, high, urgent
    stage: Mapped[str] = mapped_column(String(50), nullable=False, default="not_started")
    progress_percent: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    client: Mapped["Client | None"] = relationship("Client", back_populates="projects")

    def __repr__(self) -> str:
        """String representation."""
        return f"<Project {self.id} - {self.title} ({self.stage})>"
