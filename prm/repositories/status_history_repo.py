from datetime import datetime, UTC
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from prm.models.lead import LeadStatus
from prm.models.status_history import LeadStatusHistory


def _status_value(status: LeadStatus | str | None) -> Optional[str]:
    if isinstance(status, LeadStatus):
        return status.value
    return status


class StatusHistoryLedger:
    """Append-only ledger of lead status transitions.

    Status values are stored as given; validating them is the caller's job.
    Entries are never updated or deleted through this class.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def append(
        self,
        lead_id: int,
        old_status: LeadStatus | str | None,
        new_status: LeadStatus | str,
        changed_by: Optional[str] = None,
        changed_at: Optional[datetime] = None,
    ) -> LeadStatusHistory:
        entry = LeadStatusHistory(
            lead_id=lead_id,
            old_status=_status_value(old_status),
            new_status=_status_value(new_status),
            changed_by=changed_by,
            changed_at=changed_at or datetime.now(UTC),
        )
        self.db.add(entry)
        await self.db.flush()
        return entry

    async def list_for_lead(self, lead_id: int) -> list[LeadStatusHistory]:
        """All entries for a lead in the order they were appended."""
        stmt = (
            select(LeadStatusHistory)
            .where(LeadStatusHistory.lead_id == lead_id)
            .order_by(LeadStatusHistory.id.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
