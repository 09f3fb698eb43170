"""Client model."""

from typing import TYPE_CHECKING

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from webx_crm.db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from webx_crm.models.project import Project


class Client(Base, TimestampMixin):
    """A customer of the business."""

    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    company: Mapped[str] = mapped_column(String(255), nullable=False, default="", index=True)
    contact_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    address1: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    city: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    # active, inactive, archived, closed (blank is treated as active)
    status: Mapped[str | None] = mapped_column(String(50), nullable=True, default="active")

    website: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    projects: Mapped[list["Project"]] = relationship(
        "Project", back_populates="client", passive_deletes=True
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Client {self.id} - {self.company or self.name}>"
