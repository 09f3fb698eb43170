"""Renewal model."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, Date, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from webx_crm.db.base import Base, TimestampMixin


class Renewal(Base, TimestampMixin):
    """A domain, hosting or licence renewal due for a client."""

    __tablename__ = "renewals"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    client_id: Mapped[int | None] = mapped_column(
        ForeignKey("clients.id", ondelete="SET NULL"), nullable=True, index=True
    )
    service_type: Mapped[str] = mapped_column(
        String(50), nullable=False, default="other"
    )  # domain, hosting, ssl, email, other
    item_label: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    provider: Mapped[str | None] = mapped_column(String(255), nullable=True)
    renewal_date: Mapped[date | None] = mapped_column(Date, nullable=True, index=True)
    cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    auto_renew: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active")

    def __repr__(self) -> str:
        """String representation."""
        return f"<Renewal {self.id} - {self.item_label} on {self.renewal_date}>"
