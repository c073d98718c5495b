"""
PartnerService - partner records decorated with their live performance percentage.
"""
from typing import Optional

from prm.core.logging import get_logger
from prm.models.partner import Partner
from prm.models.performance import PERFORMANCE_COUNTERS
from prm.repositories.partner_repo import PartnerRepository
from prm.schemas.partner import (
    PartnerCreate,
    PartnerUpdate,
    PartnerResponse,
    PartnerPerformanceResponse,
)
from prm.services.performance_service import PerformanceScoringService, performance_percentage

logger = get_logger(__name__)


class PartnerNotFoundError(Exception):
    """Raised when partner is not found."""
    pass


class PartnerService:
    def __init__(self, partner_repo: PartnerRepository, scoring: PerformanceScoringService):
        self.repo = partner_repo
        self.scoring = scoring

    async def create_partner(self, data: PartnerCreate) -> PartnerResponse:
        partner = await self.repo.create(Partner(**data.model_dump()))
        return PartnerResponse.model_validate(partner)

    async def get_partner(self, partner_id: int) -> Partner:
        partner = await self.repo.get_by_id(partner_id)
        if not partner:
            raise PartnerNotFoundError(f"Partner {partner_id} not found")
        return partner

    async def get_partner_with_score(self, partner_id: int) -> PartnerResponse:
        partner = await self.get_partner(partner_id)
        return await self._with_score(partner)

    async def update_partner(self, partner_id: int, data: PartnerUpdate) -> PartnerResponse:
        partner = await self.get_partner(partner_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(partner, field, value)
        partner = await self.repo.save(partner)
        logger.info("partner_updated", partner_id=partner_id, fields=sorted(data.model_fields_set))
        return await self._with_score(partner)

    async def list_partners(self, organization_id: Optional[str] = None) -> list[PartnerResponse]:
        """All partners with the performance percentage computed at read time."""
        partners = await self.repo.get_all(organization_id=organization_id)
        return [await self._with_score(partner) for partner in partners]

    async def get_performance(self, partner_id: int) -> PartnerPerformanceResponse:
        """Counter breakdown for a partner; zeros if it has never been scored."""
        await self.get_partner(partner_id)
        performance = await self.scoring.get_partner_performance(partner_id)
        if performance is None:
            return PartnerPerformanceResponse(partner_id=partner_id)

        return PartnerPerformanceResponse(
            partner_id=partner_id,
            score=performance.score,
            performance_score=performance_percentage(performance.score, performance.leads_assigned),
            updated_at=performance.updated_at,
            **{name: getattr(performance, name) for name in PERFORMANCE_COUNTERS},
        )

    async def _with_score(self, partner: Partner) -> PartnerResponse:
        score = await self.scoring.calculate_performance_score(partner.id)
        return PartnerResponse.model_validate(partner).model_copy(update={"performance_score": score})
