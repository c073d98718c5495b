"""
Partner Repository - database operations for partners.
"""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from prm.models.partner import Partner


class PartnerRepository:
    """Repository for Partner model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_all(self, organization_id: Optional[str] = None) -> list[Partner]:
        """Get all partners, optionally scoped to one organization."""
        stmt = select(Partner).order_by(Partner.id)
        if organization_id:
            stmt = stmt.where(Partner.organization_id == organization_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, partner_id: int) -> Optional[Partner]:
        """Get partner by ID."""
        result = await self.session.execute(
            select(Partner).where(Partner.id == partner_id)
        )
        return result.scalar_one_or_none()

    async def create(self, partner: Partner) -> Partner:
        """Create a new partner."""
        self.session.add(partner)
        await self.session.flush()
        await self.session.refresh(partner)
        return partner

    async def save(self, partner: Partner) -> Partner:
        """Save partner changes."""
        await self.session.flush()
        await self.session.refresh(partner)
        return partner
