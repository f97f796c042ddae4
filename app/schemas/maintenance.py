from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.maintenance import MaintenanceStatus


# Issue catalog
class MaintenanceIssueBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: float = Field(..., ge=0)


class MaintenanceIssueCreate(MaintenanceIssueBase):
    pass


class MaintenanceIssueUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)


class MaintenanceIssueResponse(MaintenanceIssueBase):
    id: UUID
    created_at: datetime

    class Config:
        from_attributes = True


# Requests
class MaintenanceRequestCreate(BaseModel):
    tenant_id: Optional[UUID] = None
    room_id: Optional[UUID] = None
    issue_ids: List[UUID] = Field(..., min_length=1)
    notes: Optional[str] = None


class MaintenanceRequestUpdate(BaseModel):
    """Issues and price are fixed at creation; only workflow fields change."""
    status: Optional[MaintenanceStatus] = None
    notes: Optional[str] = None


class MaintenanceRequestItemResponse(BaseModel):
    issue_id: UUID
    issue_name: str
    price_at_request: float

    class Config:
        from_attributes = True


class MaintenanceRequestResponse(BaseModel):
    id: UUID
    tenant_id: Optional[UUID] = None
    room_id: Optional[UUID] = None
    total_price: float
    status: MaintenanceStatus
    notes: Optional[str] = None
    items: List[MaintenanceRequestItemResponse] = []
    created_at: datetime

    class Config:
        from_attributes = True
