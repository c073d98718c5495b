"""
LeadService - lead lifecycle: creation, status changes, and the audit/scoring hooks they fire.

Every recorded transition is written to the status history ledger first and
then, when the lead belongs to a partner, scored. The two writes run in
separate savepoints: a ledger failure does not undo scoring, and surfaces as
StatusHistoryWriteError once scoring has been applied. Callers that own the
transaction commit before reporting it, so the applied score is kept.
"""
from datetime import datetime, UTC
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from prm.core.logging import get_logger
from prm.models.lead import Lead, LeadStatus
from prm.models.status_history import LeadStatusHistory
from prm.repositories.lead_repo import LeadRepository
from prm.repositories.partner_repo import PartnerRepository
from prm.repositories.status_history_repo import StatusHistoryLedger
from prm.schemas.lead import LeadCreate, LeadUpdate
from prm.services.partner_service import PartnerNotFoundError
from prm.services.performance_service import PerformanceScoringService

logger = get_logger(__name__)


class LeadNotFoundError(Exception):
    """Raised when lead is not found."""
    pass


class StatusHistoryWriteError(Exception):
    """Raised when a transition was scored but its history entry could not be written."""

    def __init__(self, lead_id: int):
        super().__init__(f"Status history for lead {lead_id} could not be written")
        self.lead_id = lead_id


class LeadService:
    def __init__(
        self,
        lead_repo: LeadRepository,
        partner_repo: PartnerRepository,
        ledger: StatusHistoryLedger,
        scoring: PerformanceScoringService,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        self.repo = lead_repo
        self.partner_repo = partner_repo
        self.ledger = ledger
        self.scoring = scoring
        self.clock = clock

    async def create_lead(self, data: LeadCreate) -> Lead:
        if data.partner_id is not None:
            await self._ensure_partner(data.partner_id)

        lead = Lead(
            lead_name=data.lead_name,
            partner_id=data.partner_id,
            status=data.status,
            value=data.value,
            organization_id=data.organization_id,
            created_date=self.clock(),
        )
        lead = await self.repo.create(lead)
        logger.info("lead_created", lead_id=lead.id, partner_id=lead.partner_id, status=lead.status.value)

        # Unassigned leads are neither audited nor scored until they change status
        if lead.partner_id is not None:
            await self._record_transition(lead.id, lead.partner_id, None, lead.status, data.changed_by)

        return lead

    async def get_lead(self, lead_id: int) -> Lead:
        lead = await self.repo.get_by_id(lead_id)
        if not lead:
            raise LeadNotFoundError(f"Lead {lead_id} not found")
        return lead

    async def get_leads(
        self,
        partner_id: int | None = None,
        status: LeadStatus | None = None,
        organization_id: str | None = None,
        offset: int = 0,
        limit: int = 50,
    ) -> tuple[list[Lead], int]:
        return await self.repo.get_all(
            partner_id=partner_id,
            status=status,
            organization_id=organization_id,
            offset=offset,
            limit=limit,
        )

    async def update_lead(self, lead: Lead, data: LeadUpdate) -> Lead:
        """Update lead details; a status change is routed through change_status.

        The transition is attributed to the partner the lead had before this update.
        An explicit null partner_id unassigns the lead; an omitted one leaves it alone.
        """
        scored_partner_id = lead.partner_id

        if data.lead_name is not None:
            lead.lead_name = data.lead_name
        if data.value is not None:
            lead.value = data.value
        if "partner_id" in data.model_fields_set and data.partner_id != lead.partner_id:
            if data.partner_id is not None:
                await self._ensure_partner(data.partner_id)
            lead.partner_id = data.partner_id

        if data.status is not None and data.status != lead.status:
            return await self._transition(lead, data.status, data.changed_by, scored_partner_id)
        return await self.repo.save(lead)

    async def change_status(
        self,
        lead: Lead,
        new_status: LeadStatus,
        changed_by: Optional[str] = None,
    ) -> Lead:
        """Move a lead to new_status, record it, and score it for its partner.

        Same-status updates are ignored.
        """
        if new_status == lead.status:
            return lead
        return await self._transition(lead, new_status, changed_by, lead.partner_id)

    async def _transition(
        self,
        lead: Lead,
        new_status: LeadStatus,
        changed_by: Optional[str],
        partner_id: Optional[int],
    ) -> Lead:
        old_status = lead.status
        lead.status = new_status
        lead = await self.repo.save(lead)
        await self._record_transition(lead.id, partner_id, old_status, new_status, changed_by)
        return lead

    async def get_history(self, lead_id: int) -> list[LeadStatusHistory]:
        await self.get_lead(lead_id)
        return await self.ledger.list_for_lead(lead_id)

    async def _ensure_partner(self, partner_id: int) -> None:
        if not await self.partner_repo.get_by_id(partner_id):
            raise PartnerNotFoundError(f"Partner {partner_id} not found")

    async def _record_transition(
        self,
        lead_id: int,
        partner_id: Optional[int],
        old_status: Optional[LeadStatus],
        new_status: LeadStatus,
        changed_by: Optional[str],
    ) -> None:
        ledger_error: SQLAlchemyError | None = None
        try:
            async with self.repo.db.begin_nested():
                await self.ledger.append(lead_id, old_status, new_status, changed_by, self.clock())
        except SQLAlchemyError as e:
            logger.error("status_history_append_failed", lead_id=lead_id, error=str(e))
            ledger_error = e

        if partner_id is not None:
            async with self.repo.db.begin_nested():
                await self.scoring.update_partner_performance(partner_id, lead_id, old_status, new_status)

        if ledger_error is not None:
            raise StatusHistoryWriteError(lead_id) from ledger_error
