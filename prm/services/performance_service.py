"""
PerformanceScoringService - partner performance scoring from lead status transitions.

Points per transition (applied additively):
- First-day bonus: +1 when leaving New on the day the lead was created
- Transition to Lost: -5 (replaces the level-based progression rule)
- Progression: +2 per level moved up the New/Contacted/Qualified/Converted ladder,
  -2 per level moved down unless the lead was Lost
- Initial assignment: +level of the starting status (nothing extra for Lost)
- Stall penalty: -3 when leaving New more than 7 days after creation

The displayed percentage is a logistic curve over average points per
assigned lead, centred on 3 points = 50%.
"""
import math
from datetime import datetime, timedelta, UTC
from typing import Callable, Optional, Protocol

from prm.core.logging import get_logger
from prm.models.lead import Lead, LeadStatus, get_status_level
from prm.models.performance import PartnerPerformance
from prm.repositories.performance_repo import PerformanceDelta

logger = get_logger(__name__)

FIRST_DAY_BONUS = 1
LOST_PENALTY = 5
POINTS_PER_LEVEL = 2
STALL_PENALTY = 3
STALL_THRESHOLD_DAYS = 7

# Logistic normalization constants; existing stored scores depend on these exact values
SIGMOID_SLOPE = 0.4
SIGMOID_MIDPOINT = 3

STATUS_COUNTERS: dict[LeadStatus, str] = {
    LeadStatus.CONTACTED: "leads_contacted",
    LeadStatus.QUALIFIED: "leads_qualified",
    LeadStatus.CONVERTED: "leads_converted",
    LeadStatus.LOST: "leads_lost",
}


class LeadReader(Protocol):
    async def get_by_id(self, lead_id: int) -> Optional[Lead]: ...


class PerformanceStore(Protocol):
    async def get_by_partner_id(self, partner_id: int) -> Optional[PartnerPerformance]: ...

    async def apply_delta(self, partner_id: int, delta: PerformanceDelta) -> None: ...


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def days_since(created: datetime, now: datetime) -> int:
    """Whole days elapsed between created and now, floored."""
    return (_as_utc(now) - _as_utc(created)) // timedelta(days=1)


def round_half_away_from_zero(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def performance_percentage(score: int, leads_assigned: int) -> int:
    """Normalize cumulative points to 0..100 via the logistic curve."""
    if leads_assigned <= 0:
        return 0

    average = score / leads_assigned
    try:
        sigmoid = 100 / (1 + math.exp(-SIGMOID_SLOPE * (average - SIGMOID_MIDPOINT)))
    except OverflowError:
        # exp() overflows only for hugely negative averages, where the curve is 0
        return 0
    return round_half_away_from_zero(sigmoid)


def _coerce_status(status: LeadStatus | str | None) -> Optional[LeadStatus]:
    if status is None:
        return None
    return LeadStatus(status)


class PerformanceScoringService:
    """Maintains per-partner performance counters and computes their percentage.

    Stateless apart from its collaborators; construct one per session.
    The clock returns an aware UTC datetime and can be pinned in tests.
    """

    def __init__(
        self,
        lead_repo: LeadReader,
        performance_repo: PerformanceStore,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.lead_repo = lead_repo
        self.performance_repo = performance_repo
        self.clock = clock

    def score_transition(
        self,
        lead: Lead,
        old_status: LeadStatus | str | None,
        new_status: LeadStatus | str,
        now: Optional[datetime] = None,
    ) -> int:
        """Points earned (or lost) by a single status transition. No side effects."""
        old_status = _coerce_status(old_status)
        new_status = _coerce_status(new_status)
        days = days_since(lead.created_date, now or self.clock())
        points = 0

        if days == 0 and old_status == LeadStatus.NEW:
            points += FIRST_DAY_BONUS

        if new_status == LeadStatus.LOST:
            points -= LOST_PENALTY
        elif old_status is not None:
            old_level = get_status_level(old_status)
            new_level = get_status_level(new_status)
            if new_level > old_level:
                points += POINTS_PER_LEVEL * (new_level - old_level)
            elif new_level < old_level and old_level != -1:
                points -= POINTS_PER_LEVEL * (old_level - new_level)
        else:
            points += get_status_level(new_status)

        if old_status == LeadStatus.NEW and days > STALL_THRESHOLD_DAYS:
            points -= STALL_PENALTY

        return points

    async def update_partner_performance(
        self,
        partner_id: int,
        lead_id: int,
        old_status: LeadStatus | str | None,
        new_status: LeadStatus | str,
    ) -> None:
        """Score one transition and fold it into the partner's record.

        A lead that cannot be found makes this a no-op: no record is created
        and no counter changes.
        """
        old_status = _coerce_status(old_status)
        new_status = _coerce_status(new_status)

        lead = await self.lead_repo.get_by_id(lead_id)
        if lead is None:
            logger.warning(
                "performance_update_skipped",
                reason="lead_not_found",
                partner_id=partner_id,
                lead_id=lead_id,
            )
            return

        now = self.clock()
        points = self.score_transition(lead, old_status, new_status, now=now)
        delta = PerformanceDelta(score=points, updated_at=now)

        if old_status is None:
            delta.leads_assigned = 1

        counter = STATUS_COUNTERS.get(new_status)
        if counter:
            setattr(delta, counter, 1)

        if old_status == LeadStatus.NEW and days_since(lead.created_date, now) > STALL_THRESHOLD_DAYS:
            delta.leads_stalled = 1

        await self.performance_repo.apply_delta(partner_id, delta)

        logger.info(
            "partner_performance_updated",
            partner_id=partner_id,
            lead_id=lead_id,
            old_status=old_status.value if old_status else None,
            new_status=new_status.value,
            points=points,
        )

    async def get_partner_performance(self, partner_id: int) -> Optional[PartnerPerformance]:
        return await self.performance_repo.get_by_partner_id(partner_id)

    async def calculate_performance_score(self, partner_id: int) -> int:
        """Performance percentage (0..100); 0 when the partner has no assigned leads."""
        performance = await self.performance_repo.get_by_partner_id(partner_id)
        if performance is None or performance.leads_assigned == 0:
            logger.debug("performance_score_empty", partner_id=partner_id)
            return 0

        percentage = performance_percentage(performance.score, performance.leads_assigned)
        logger.debug(
            "performance_score_calculated",
            partner_id=partner_id,
            total_score=performance.score,
            leads_assigned=performance.leads_assigned,
            percentage=percentage,
        )
        return percentage
