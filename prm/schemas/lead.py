"""
Pydantic schemas for Lead API.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from prm.models.lead import LeadStatus


def _normalize_status(v):
    # Accept "new", "NEW", " New " for LeadStatus.NEW
    if isinstance(v, str) and not isinstance(v, LeadStatus):
        return v.strip().capitalize()
    return v


# ──────────────────────────────────────────────
# Request Schemas
# ──────────────────────────────────────────────

class LeadCreate(BaseModel):
    """Schema for creating a new lead."""
    lead_name: str = Field(..., min_length=1, max_length=256)
    partner_id: Optional[int] = None
    status: LeadStatus = LeadStatus.NEW
    value: Decimal = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    organization_id: Optional[str] = Field(None, max_length=64)
    changed_by: Optional[str] = Field(None, max_length=100)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return _normalize_status(v)


class LeadUpdate(BaseModel):
    """Schema for updating lead details and/or status."""
    lead_name: Optional[str] = Field(None, min_length=1, max_length=256)
    # Omitted keeps the current partner; explicit null unassigns
    partner_id: Optional[int] = None
    status: Optional[LeadStatus] = None
    value: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    changed_by: Optional[str] = Field(None, max_length=100)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return _normalize_status(v)


# ──────────────────────────────────────────────
# Response Schemas
# ──────────────────────────────────────────────

class LeadResponse(BaseModel):
    """Schema for lead response."""
    id: int
    lead_name: str
    partner_id: Optional[int]
    status: LeadStatus
    value: float
    organization_id: Optional[str]
    created_date: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LeadListResponse(BaseModel):
    """Paginated lead list."""
    items: list[LeadResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class LeadStatusHistoryResponse(BaseModel):
    """Schema for lead status history entries."""
    id: int
    lead_id: int
    old_status: Optional[str]
    new_status: str
    changed_by: Optional[str]
    changed_at: datetime

    model_config = {"from_attributes": True}
