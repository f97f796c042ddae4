"""
Payment Routes
Append-only ledger: payments are recorded and corrected, never edited or deleted
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from uuid import UUID

from app.database import get_db
from app.core.deps import get_current_user
from app.models.user import User
from app.models.payment import EntryType, ObligationKind, Payment
from app.schemas.payment import PaymentCorrection, PaymentCreate, PaymentResponse
from app.services.payment_service import PaymentService

router = APIRouter()


@router.get("/", response_model=List[PaymentResponse])
def list_payments(
    tenant_id: Optional[UUID] = None,
    obligation_kind: Optional[ObligationKind] = None,
    entry_type: Optional[EntryType] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    query = db.query(Payment)
    if tenant_id:
        query = query.filter(Payment.tenant_id == tenant_id)
    if obligation_kind:
        query = query.filter(Payment.obligation_kind == obligation_kind)
    if entry_type:
        query = query.filter(Payment.entry_type == entry_type)
    if start_date:
        query = query.filter(Payment.payment_date >= start_date)
    if end_date:
        query = query.filter(Payment.payment_date <= end_date)
    return query.order_by(Payment.payment_date.desc(), Payment.created_at.desc()).all()


@router.get("/{payment_id}", response_model=PaymentResponse)
def get_payment(
    payment_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    payment = db.get(Payment, payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payment


@router.post("/", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def create_payment(
    payment_in: PaymentCreate,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Record a payment against one obligation.

    Replaying an idempotency_key returns the payment it created with
    200 instead of 201.
    """
    payment, created = PaymentService(db).record_payment(payment_in)
    if not created:
        response.status_code = status.HTTP_200_OK
    return payment


@router.post("/{payment_id}/corrections", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def correct_payment(
    payment_id: UUID,
    correction_in: PaymentCorrection,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Append an adjustment so the payment counts as corrected_amount"""
    adjustment, created = PaymentService(db).record_correction(payment_id, correction_in)
    if not created:
        response.status_code = status.HTTP_200_OK
    return adjustment
