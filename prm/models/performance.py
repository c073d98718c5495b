"""
Partner performance model - cumulative scoring counters, one row per partner.
"""
from datetime import datetime, UTC

from sqlalchemy import Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from prm.core.base import Base


# Counter columns incremented by scoring; all start at zero and never decrease
PERFORMANCE_COUNTERS = (
    "leads_assigned",
    "leads_contacted",
    "leads_qualified",
    "leads_converted",
    "leads_lost",
    "leads_stalled",
)


class PartnerPerformance(Base):
    __tablename__ = "partner_performance"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    partner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("partners.id"), nullable=False, unique=True, index=True
    )

    # Cumulative points, may go negative
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    leads_assigned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    leads_contacted: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    leads_qualified: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    leads_converted: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    leads_lost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    leads_stalled: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    def __repr__(self):
        return f"<PartnerPerformance partner_id={self.partner_id} score={self.score} assigned={self.leads_assigned}>"
