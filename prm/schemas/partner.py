"""
Pydantic schemas for Partner API.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class PartnerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=256)
    tier: str = Field(default="Standard", max_length=64)
    specialization: str = Field(default="", max_length=128)
    region: str = Field(default="", max_length=128)
    contact_email: str = Field(..., min_length=3, max_length=128)
    country: Optional[str] = Field(None, max_length=64)
    is_active: bool = True
    organization_id: Optional[str] = Field(None, max_length=64)


class PartnerUpdate(BaseModel):
    """Partial partner update; omitted fields are left unchanged."""
    name: Optional[str] = Field(None, min_length=1, max_length=256)
    tier: Optional[str] = Field(None, max_length=64)
    specialization: Optional[str] = Field(None, max_length=128)
    region: Optional[str] = Field(None, max_length=128)
    contact_email: Optional[str] = Field(None, min_length=3, max_length=128)
    country: Optional[str] = Field(None, max_length=64)
    is_active: Optional[bool] = None
    organization_id: Optional[str] = Field(None, max_length=64)

    @field_validator("name", "tier", "specialization", "region", "contact_email", "is_active")
    @classmethod
    def reject_null(cls, v):
        # Only country and organization_id can be cleared
        if v is None:
            raise ValueError("field cannot be null")
        return v


class PartnerResponse(BaseModel):
    """Partner with its live performance percentage."""
    id: int
    name: str
    tier: str
    specialization: str
    region: str
    contact_email: str
    country: Optional[str]
    is_active: bool
    organization_id: Optional[str]
    created_at: datetime
    performance_score: int = 0

    model_config = {"from_attributes": True}


class PartnerPerformanceResponse(BaseModel):
    """Raw scoring counters plus the normalized percentage."""
    partner_id: int
    score: int = 0
    leads_assigned: int = 0
    leads_contacted: int = 0
    leads_qualified: int = 0
    leads_converted: int = 0
    leads_lost: int = 0
    leads_stalled: int = 0
    performance_score: int = 0
    updated_at: Optional[datetime] = None
