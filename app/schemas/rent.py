"""
Rent Agreement Schemas
Pydantic v2 models for rent agreements and contract expiry views.
"""
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from app.services.contract_service import ContractStatus


# ─────────────────────── Rent CRUD ───────────────────────

class RentCreate(BaseModel):
    """
    total_rent may be omitted and is then monthly_rent * months; when sent
    it must agree with that product to the cent.
    """
    tenant_id: uuid.UUID
    room_id: uuid.UUID
    guarantor_name: str = Field(..., min_length=1)
    guarantor_phone: str = Field(..., min_length=1)
    monthly_rent: float = Field(..., gt=0)
    months: int = Field(..., ge=1, le=12)
    total_rent: Optional[float] = Field(None, gt=0)
    start_date: date
    end_date: date
    contract_url: Optional[str] = None

    @model_validator(mode="after")
    def _check_period(self) -> "RentCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class RentUpdate(BaseModel):
    """Partial update; the merged record is re-validated by the rent service."""
    guarantor_name: Optional[str] = None
    guarantor_phone: Optional[str] = None
    monthly_rent: Optional[float] = Field(None, gt=0)
    months: Optional[int] = Field(None, ge=1, le=12)
    total_rent: Optional[float] = Field(None, gt=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    contract_url: Optional[str] = None


class RentResponse(BaseModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    room_id: uuid.UUID
    guarantor_name: str
    guarantor_phone: str
    monthly_rent: float
    months: int
    total_rent: float
    start_date: date
    end_date: date
    contract_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ─────────────────────── Contracts ───────────────────────

class ContractOut(BaseModel):
    rent_id: uuid.UUID
    tenant_id: uuid.UUID
    tenant_name: Optional[str] = None
    room_id: uuid.UUID
    room_name: Optional[str] = None
    start_date: date
    end_date: date
    monthly_rent: float
    total_rent: float
    status: ContractStatus
    days_remaining: int
    balance: float


class ContractListOut(BaseModel):
    success: bool = True
    expired_count: int
    expiring_soon_count: int
    active_count: int
    contracts: List[ContractOut]
