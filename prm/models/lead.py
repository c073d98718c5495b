"""
Lead model and status funnel definitions.
"""
import enum
from datetime import datetime, UTC
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import String, Integer, Numeric, DateTime, Enum as SAEnum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from prm.core.base import Base

if TYPE_CHECKING:
    from prm.models.partner import Partner


class LeadStatus(str, enum.Enum):
    """Lead funnel statuses. Values are persisted verbatim."""
    NEW = "New"
    CONTACTED = "Contacted"
    QUALIFIED = "Qualified"
    CONVERTED = "Converted"
    LOST = "Lost"


# Ordinal ladder for in-progress statuses; LOST is a sentinel off the ladder
STATUS_LEVELS: dict[LeadStatus, int] = {
    LeadStatus.NEW: 0,
    LeadStatus.CONTACTED: 1,
    LeadStatus.QUALIFIED: 2,
    LeadStatus.CONVERTED: 3,
    LeadStatus.LOST: -1,
}


def get_status_level(status: LeadStatus) -> int:
    return STATUS_LEVELS[status]


class Lead(Base):
    """Prospective sale tracked through the status funnel, optionally assigned to a partner."""
    __tablename__ = "leads"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lead_name: Mapped[str] = mapped_column(String(256), nullable=False)

    partner_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("partners.id"), nullable=True, index=True
    )
    status: Mapped[LeadStatus] = mapped_column(
        SAEnum(
            LeadStatus,
            name="leadstatus",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=LeadStatus.NEW,
    )
    value: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    organization_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)

    created_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    partner: Mapped["Partner | None"] = relationship("Partner", back_populates="leads")

    def __repr__(self):
        return f"<Lead id={self.id} status={self.status.value} partner_id={self.partner_id}>"
