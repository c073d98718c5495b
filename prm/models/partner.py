"""
Partner model - external sales/referral entity that leads are assigned to.
"""
from datetime import datetime, UTC
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, Boolean, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from prm.core.base import Base

if TYPE_CHECKING:
    from prm.models.lead import Lead


class Partner(Base):
    __tablename__ = "partners"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    tier: Mapped[str] = mapped_column(String(64), nullable=False, default="Standard")
    specialization: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    region: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    contact_email: Mapped[str] = mapped_column(String(128), nullable=False)
    country: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    organization_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )

    leads: Mapped[list["Lead"]] = relationship("Lead", back_populates="partner")

    def __repr__(self):
        return f"<Partner id={self.id} name={self.name}>"
