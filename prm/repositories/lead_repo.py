"""
Lead Repository - Data Access Layer for Lead model.
"""
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from prm.models.lead import Lead, LeadStatus


class LeadRepository:
    """Repository for Lead CRUD operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, lead: Lead) -> Lead:
        """Create a new lead."""
        self.db.add(lead)
        await self.db.flush()
        await self.db.refresh(lead)
        return lead

    async def get_by_id(self, lead_id: int) -> Optional[Lead]:
        """Get lead by ID."""
        result = await self.db.execute(select(Lead).where(Lead.id == lead_id))
        return result.scalar_one_or_none()

    async def get_all(
        self,
        partner_id: Optional[int] = None,
        status: Optional[LeadStatus] = None,
        organization_id: Optional[str] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> tuple[list[Lead], int]:
        """Get leads with optional filtering and pagination."""
        stmt = select(Lead)

        if partner_id is not None:
            stmt = stmt.where(Lead.partner_id == partner_id)
        if status:
            stmt = stmt.where(Lead.status == status)
        if organization_id:
            stmt = stmt.where(Lead.organization_id == organization_id)

        count_stmt = select(func.count()).select_from(stmt.subquery())
        count_result = await self.db.execute(count_stmt)
        total = count_result.scalar() or 0

        stmt = stmt.offset(offset).limit(limit).order_by(Lead.created_date.desc(), Lead.id.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total

    async def save(self, lead: Lead) -> Lead:
        """Save lead changes."""
        await self.db.flush()
        await self.db.refresh(lead)
        return lead
