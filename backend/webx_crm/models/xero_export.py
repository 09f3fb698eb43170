"""Xero export batch models."""

from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from webx_crm.db.base import Base, TimestampMixin


class XeroExport(Base, TimestampMixin):
    """A named batch of sales exported to Xero for one accounting period."""

    __tablename__ = "xero_exports"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    period_year: Mapped[int] = mapped_column(Integer, nullable=False)
    period_month: Mapped[int] = mapped_column(Integer, nullable=False)

    items: Mapped[list["XeroExportItem"]] = relationship(
        "XeroExportItem", back_populates="export", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<XeroExport {self.id} - {self.period_year}-{self.period_month:02d}>"


class XeroExportItem(Base):
    """A single line within an export batch."""

    __tablename__ = "xero_export_items"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    export_id: Mapped[int] = mapped_column(
        ForeignKey("xero_exports.id", ondelete="CASCADE"), nullable=False, index=True
    )
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)

    export: Mapped["XeroExport"] = relationship("XeroExport", back_populates="items")
