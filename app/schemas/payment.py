"""
Payment Request/Response Schemas
Pydantic models for ledger entry creation and balance views
"""
from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import date, datetime
from uuid import UUID

from app.models.payment import ObligationKind, EntryType, PaymentStatus


# ==================== Payment Creation ====================

class PaymentCreate(BaseModel):
    tenant_id: UUID
    obligation_kind: ObligationKind
    rent_id: Optional[UUID] = Field(None, description="Resolved from the tenant's active rent when omitted")
    monthly_service_id: Optional[UUID] = None
    maintenance_request_id: Optional[UUID] = None

    paid_amount: float = Field(..., ge=0, description="Amount received")
    payment_date: date = Field(default_factory=date.today)
    # Optional client-computed balance after this payment; checked against the engine
    balance: Optional[float] = None
    idempotency_key: str = Field(..., min_length=1, max_length=100)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_obligation_reference(self) -> "PaymentCreate":
        refs = {
            ObligationKind.RENT: self.rent_id,
            ObligationKind.SERVICE: self.monthly_service_id,
            ObligationKind.MAINTENANCE: self.maintenance_request_id,
        }
        for kind, value in refs.items():
            if kind != self.obligation_kind and value is not None:
                raise ValueError(f"{kind.value} reference not allowed for a {self.obligation_kind.value} payment")
        if self.obligation_kind == ObligationKind.SERVICE and self.monthly_service_id is None:
            raise ValueError("monthly_service_id is required for service payments")
        if self.obligation_kind == ObligationKind.MAINTENANCE and self.maintenance_request_id is None:
            raise ValueError("maintenance_request_id is required for maintenance payments")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "tenant_id": "550e8400-e29b-41d4-a716-446655440000",
                "obligation_kind": "rent",
                "paid_amount": 100.0,
                "payment_date": "2026-03-05",
                "idempotency_key": "pay-2026-03-05-001",
            }
        }


class PaymentCorrection(BaseModel):
    """Replace the effective amount of an earlier payment by appending an adjustment."""
    corrected_amount: float = Field(..., ge=0)
    payment_date: date = Field(default_factory=date.today)
    idempotency_key: str = Field(..., min_length=1, max_length=100)
    notes: Optional[str] = None


class PaymentResponse(BaseModel):
    id: UUID
    tenant_id: UUID
    entry_type: EntryType
    obligation_kind: ObligationKind
    rent_id: Optional[UUID] = None
    monthly_service_id: Optional[UUID] = None
    maintenance_request_id: Optional[UUID] = None
    adjusts_payment_id: Optional[UUID] = None
    monthly_rent: float
    paid_amount: float
    balance: float
    status: PaymentStatus
    payment_date: date
    idempotency_key: str
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


# ==================== Balances ====================

class BalanceResponse(BaseModel):
    total_due: float
    total_paid: float
    balance: float
    status: PaymentStatus


class LedgerEventResponse(BaseModel):
    type: str
    amount: float
    event_date: date
    balance_after: float
    payment_id: Optional[UUID] = None
    adjusts_payment_id: Optional[UUID] = None

    class Config:
        from_attributes = True


class ObligationBalanceResponse(BaseModel):
    kind: ObligationKind
    obligation_id: UUID
    tenant_id: Optional[UUID] = None
    reference_date: date
    due_date: Optional[date] = None
    summary: BalanceResponse
    ledger: List[LedgerEventResponse] = []


class TenantBalancesResponse(BaseModel):
    success: bool = True
    tenant_id: UUID
    total_due: float
    total_paid: float
    total_outstanding: float
    obligations: List[ObligationBalanceResponse]
