"""
Lead API endpoints.
"""
from fastapi import APIRouter, Depends, Query
from starlette import status

from prm.api.errors import raise_api_error
from prm.core.deps import DbSession, get_lead_service
from prm.models.lead import LeadStatus
from prm.schemas.lead import (
    LeadCreate,
    LeadUpdate,
    LeadResponse,
    LeadListResponse,
    LeadStatusHistoryResponse,
)
from prm.services.lead_service import LeadService, LeadNotFoundError, StatusHistoryWriteError
from prm.services.partner_service import PartnerNotFoundError


router = APIRouter()


def _lead_not_found(lead_id: int):
    raise_api_error(
        status_code=404,
        code="lead_not_found",
        message="Lead not found",
        detail=f"Lead {lead_id} not found",
        context={"lead_id": lead_id},
    )


def _partner_not_found(partner_id: int):
    raise_api_error(
        status_code=404,
        code="partner_not_found",
        message="Partner not found",
        detail=f"Partner {partner_id} not found",
        context={"partner_id": partner_id},
    )


async def _history_write_failed(db: DbSession, error: StatusHistoryWriteError):
    # Keep the lead change and its score; only the history entry is missing
    await db.commit()
    raise_api_error(
        status_code=500,
        code="status_history_write_failed",
        message="Lead updated but its status history could not be recorded",
        detail=str(error),
        context={"lead_id": error.lead_id},
    )


@router.post("", response_model=LeadResponse, status_code=status.HTTP_201_CREATED)
async def create_lead(
    data: LeadCreate,
    db: DbSession,
    svc: LeadService = Depends(get_lead_service),
):
    """Create a lead. Leads created with a partner are recorded and scored immediately."""
    try:
        return await svc.create_lead(data)
    except PartnerNotFoundError:
        _partner_not_found(data.partner_id)
    except StatusHistoryWriteError as e:
        await _history_write_failed(db, e)


@router.get("", response_model=LeadListResponse)
async def list_leads(
    partner_id: int | None = Query(default=None, description="Filter by partner"),
    lead_status: LeadStatus | None = Query(default=None, alias="status"),
    organization_id: str | None = Query(default=None),
    page: int = Query(default=1, ge=1, description="Page number"),
    page_size: int = Query(default=50, ge=1, le=200, description="Items per page"),
    svc: LeadService = Depends(get_lead_service),
):
    """List leads with pagination and filters."""
    offset = (page - 1) * page_size
    items, total = await svc.get_leads(
        partner_id=partner_id,
        status=lead_status,
        organization_id=organization_id,
        offset=offset,
        limit=page_size,
    )

    return {
        "items": items,
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": (total + page_size - 1) // page_size,
    }


@router.get("/{lead_id}", response_model=LeadResponse)
async def get_lead(lead_id: int, svc: LeadService = Depends(get_lead_service)):
    try:
        return await svc.get_lead(lead_id)
    except LeadNotFoundError:
        _lead_not_found(lead_id)


@router.put("/{lead_id}", response_model=LeadResponse)
async def update_lead(
    lead_id: int,
    data: LeadUpdate,
    db: DbSession,
    svc: LeadService = Depends(get_lead_service),
):
    """Update lead fields. A changed status is written to history and scored for the partner."""
    try:
        lead = await svc.get_lead(lead_id)
        return await svc.update_lead(lead, data)
    except LeadNotFoundError:
        _lead_not_found(lead_id)
    except PartnerNotFoundError:
        _partner_not_found(data.partner_id)
    except StatusHistoryWriteError as e:
        await _history_write_failed(db, e)


@router.get("/{lead_id}/history", response_model=list[LeadStatusHistoryResponse])
async def get_lead_history(lead_id: int, svc: LeadService = Depends(get_lead_service)):
    """Status transitions for a lead, oldest first."""
    try:
        return await svc.get_history(lead_id)
    except LeadNotFoundError:
        _lead_not_found(lead_id)
