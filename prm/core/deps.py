"""
FastAPI dependencies for dependency injection.
"""
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from prm.core.database import get_db
from prm.repositories.lead_repo import LeadRepository
from prm.repositories.partner_repo import PartnerRepository
from prm.repositories.performance_repo import PerformanceRepository
from prm.repositories.status_history_repo import StatusHistoryLedger
from prm.services.lead_service import LeadService
from prm.services.partner_service import PartnerService
from prm.services.performance_service import PerformanceScoringService


DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_lead_repo(db: DbSession) -> LeadRepository:
    return LeadRepository(db)


async def get_partner_repo(db: DbSession) -> PartnerRepository:
    return PartnerRepository(db)


async def get_status_history_ledger(db: DbSession) -> StatusHistoryLedger:
    return StatusHistoryLedger(db)


async def get_performance_repo(db: DbSession) -> PerformanceRepository:
    return PerformanceRepository(db)


async def get_scoring_service(
    lead_repo: Annotated[LeadRepository, Depends(get_lead_repo)],
    performance_repo: Annotated[PerformanceRepository, Depends(get_performance_repo)],
) -> PerformanceScoringService:
    """Get PerformanceScoringService instance."""
    return PerformanceScoringService(lead_repo, performance_repo)


async def get_lead_service(
    lead_repo: Annotated[LeadRepository, Depends(get_lead_repo)],
    partner_repo: Annotated[PartnerRepository, Depends(get_partner_repo)],
    ledger: Annotated[StatusHistoryLedger, Depends(get_status_history_ledger)],
    scoring: Annotated[PerformanceScoringService, Depends(get_scoring_service)],
) -> LeadService:
    """Get LeadService instance."""
    return LeadService(lead_repo, partner_repo, ledger, scoring)


async def get_partner_service(
    partner_repo: Annotated[PartnerRepository, Depends(get_partner_repo)],
    scoring: Annotated[PerformanceScoringService, Depends(get_scoring_service)],
) -> PartnerService:
    """Get PartnerService instance."""
    return PartnerService(partner_repo, scoring)
