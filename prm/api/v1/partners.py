"""
Partner API endpoints.
"""
from fastapi import APIRouter, Depends, Query
from starlette import status

from prm.api.errors import raise_api_error
from prm.core.deps import get_partner_service
from prm.schemas.partner import (
    PartnerCreate,
    PartnerUpdate,
    PartnerResponse,
    PartnerPerformanceResponse,
)
from prm.services.partner_service import PartnerService, PartnerNotFoundError


router = APIRouter()


def _not_found(partner_id: int):
    raise_api_error(
        status_code=404,
        code="partner_not_found",
        message="Partner not found",
        detail=f"Partner {partner_id} not found",
        context={"partner_id": partner_id},
    )


@router.post("", response_model=PartnerResponse, status_code=status.HTTP_201_CREATED)
async def create_partner(data: PartnerCreate, svc: PartnerService = Depends(get_partner_service)):
    return await svc.create_partner(data)


@router.get("", response_model=list[PartnerResponse])
async def list_partners(
    organization_id: str | None = Query(default=None, description="Filter by organization"),
    svc: PartnerService = Depends(get_partner_service),
):
    """List partners with their live performance percentage."""
    return await svc.list_partners(organization_id=organization_id)


@router.get("/{partner_id}", response_model=PartnerResponse)
async def get_partner(partner_id: int, svc: PartnerService = Depends(get_partner_service)):
    try:
        return await svc.get_partner_with_score(partner_id)
    except PartnerNotFoundError:
        _not_found(partner_id)


@router.put("/{partner_id}", response_model=PartnerResponse)
async def update_partner(
    partner_id: int,
    data: PartnerUpdate,
    svc: PartnerService = Depends(get_partner_service),
):
    """Update partner details. Scoring counters are not touched."""
    try:
        return await svc.update_partner(partner_id, data)
    except PartnerNotFoundError:
        _not_found(partner_id)


@router.get("/{partner_id}/performance", response_model=PartnerPerformanceResponse)
async def get_partner_performance(partner_id: int, svc: PartnerService = Depends(get_partner_service)):
    """Scoring counters behind the partner's performance percentage."""
    try:
        return await svc.get_performance(partner_id)
    except PartnerNotFoundError:
        _not_found(partner_id)
