"""Recurring sale model."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from webx_crm.db.base import Base, TimestampMixin


class RecurringSale(Base, TimestampMixin):
    """Subscription-like revenue that repeats every billing cycle."""

    __tablename__ = "recurring_sales"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    client_id: Mapped[int | None] = mapped_column(
        ForeignKey("clients.id", ondelete="SET NULL"), nullable=True, index=True
    )
    product: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    service_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    description: Mapped[str | None] = mapped_column(String(500), nullable=True, default="")

    amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    quantity: Mapped[int | None] = mapped_column(Integer, nullable=True, default=1)
    unit_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True, default=0)

    # Open-ended on either side when null
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Null counts as active
    active: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=True)
    billing_cycle: Mapped[str | None] = mapped_column(
        String(20), nullable=True, default="monthly"
    )  # monthly, quarterly, yearly

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        """String representation."""
        return f"<RecurringSale {self.id} - {self.service_name or self.product}>"
