"""
Partner Performance Repository - atomic counter updates for partner scoring.

Updates are applied as in-database increments (score = score + :delta)
rather than load/modify/save, so concurrent transitions for the same
partner cannot lose each other's increments.
"""
from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from prm.core.logging import get_logger
from prm.models.performance import PartnerPerformance, PERFORMANCE_COUNTERS

logger = get_logger(__name__)


@dataclass
class PerformanceDelta:
    """Increments to apply to one partner's performance record."""
    score: int = 0
    leads_assigned: int = 0
    leads_contacted: int = 0
    leads_qualified: int = 0
    leads_converted: int = 0
    leads_lost: int = 0
    leads_stalled: int = 0
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def counters(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in PERFORMANCE_COUNTERS}


class PerformanceRepository:
    """Repository for PartnerPerformance records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_partner_id(self, partner_id: int) -> Optional[PartnerPerformance]:
        """Fetch the current record, bypassing stale identity-map state."""
        stmt = (
            select(PartnerPerformance)
            .where(PartnerPerformance.partner_id == partner_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def apply_delta(self, partner_id: int, delta: PerformanceDelta) -> None:
        """Add delta to the partner's record, creating a zeroed record first if needed."""
        if await self._increment(partner_id, delta):
            return

        try:
            async with self.db.begin_nested():
                self.db.add(
                    PartnerPerformance(
                        partner_id=partner_id,
                        score=delta.score,
                        updated_at=delta.updated_at,
                        **delta.counters(),
                    )
                )
        except IntegrityError as e:
            # Another transaction created the record between our UPDATE and INSERT
            logger.info("partner_performance_insert_conflict", partner_id=partner_id)
            if not await self._increment(partner_id, delta):
                # No row to increment, so the conflict was not a concurrent insert
                logger.error("partner_performance_insert_failed", partner_id=partner_id, error=str(e))
                raise

    async def _increment(self, partner_id: int, delta: PerformanceDelta) -> bool:
        values = {
            name: getattr(PartnerPerformance, name) + amount
            for name, amount in delta.counters().items()
            if amount
        }
        values["score"] = PartnerPerformance.score + delta.score
        values["updated_at"] = delta.updated_at

        stmt = (
            update(PartnerPerformance)
            .where(PartnerPerformance.partner_id == partner_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount > 0
