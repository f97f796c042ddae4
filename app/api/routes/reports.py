"""
Engine views: obligation balances, contract expiry and the dashboard summary
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload
from typing import Optional
from datetime import date
from uuid import UUID

from app.database import get_db
from app.core.deps import get_current_user
from app.models.user import User
from app.models.payment import ObligationKind
from app.models.rent import Rent
from app.schemas.payment import ObligationBalanceResponse
from app.schemas.rent import ContractListOut
from app.schemas.report import ReportSummary
from app.services.balance_service import compute_balance
from app.services.contract_service import ContractStatus, classify_all
from app.services.ledger import obligation_from_rent
from app.services.obligation_resolver import ObligationResolver
from app.services.report_service import ReportService

balances_router = APIRouter()
contracts_router = APIRouter()
reports_router = APIRouter()


@balances_router.get("/{kind}/{obligation_id}", response_model=ObligationBalanceResponse)
def get_obligation_balance(
    kind: ObligationKind,
    obligation_id: UUID,
    as_of: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Balance summary and ledger of one rent, service bill or maintenance request"""
    view = ReportService(db).obligation_balance(kind, obligation_id, as_of)
    if view is None:
        raise HTTPException(status_code=404, detail=f"No {kind.value} obligation {obligation_id}")
    return view


@contracts_router.get("/", response_model=ContractListOut)
def list_contracts(
    contract_status: Optional[ContractStatus] = Query(None, alias="status"),
    as_of: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Rent agreements classified as active, expiring_soon (ends within one
    calendar month) or expired, soonest end first, with their balances.
    """
    rents = db.query(Rent).options(joinedload(Rent.tenant), joinedload(Rent.room)).all()
    classified = classify_all(rents, as_of)
    resolver = ObligationResolver(db)

    counts = {s: 0 for s in ContractStatus}
    contracts = []
    for rent, classification in classified:
        counts[classification.status] += 1
        if contract_status and classification.status != contract_status:
            continue
        obligation = obligation_from_rent(rent)
        balance = compute_balance(obligation, resolver.entries_for(obligation)).balance
        contracts.append({
            "rent_id": rent.id,
            "tenant_id": rent.tenant_id,
            "tenant_name": rent.tenant.name if rent.tenant else None,
            "room_id": rent.room_id,
            "room_name": rent.room.name if rent.room else None,
            "start_date": rent.start_date,
            "end_date": rent.end_date,
            "monthly_rent": rent.monthly_rent,
            "total_rent": rent.total_rent,
            "status": classification.status,
            "days_remaining": classification.days_remaining,
            "balance": balance,
        })

    return {
        "expired_count": counts[ContractStatus.EXPIRED],
        "expiring_soon_count": counts[ContractStatus.EXPIRING_SOON],
        "active_count": counts[ContractStatus.ACTIVE],
        "contracts": contracts,
    }


@reports_router.get("/summary", response_model=ReportSummary)
def get_summary(
    as_of: Optional[date] = None,
    tenant_id: Optional[UUID] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Occupancy, per-kind totals, status and contract counts, collections in a date window"""
    return ReportService(db).summary(as_of, tenant_id, start_date, end_date)
