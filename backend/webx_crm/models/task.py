"""Task model."""

from datetime import date

from sqlalchemy import Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from webx_crm.db.base import Base, TimestampMixin


class Task(Base, TimestampMixin):
    """A to-do item, optionally tied to a client."""

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    client_id: Mapped[int | None] = mapped_column(
        ForeignKey("clients.id", ondelete="SET NULL"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    details: Mapped[str] = mapped_column(Text, nullable=False, default="")
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True, index=True)
    status: Mapped[str] = mapped_column(
        String(50), nullable=False, default="open", index=True
    )  # open, done

    def __repr__(self) -> str:
        """String representation."""
        return f"<Task {self.id} - {self.title} ({self.status})>"
