"""
Tenant Routes
Tenant CRUD plus the per-tenant engine views (balances, active rent)
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from uuid import UUID
import logging

from app.database import get_db
from app.core.deps import get_current_user
from app.models.user import User
from app.models.tenant import Tenant
from app.models.rent import Rent
from app.models.payment import Payment
from app.models.maintenance import MaintenanceRequest
from app.schemas.tenant import TenantCreate, TenantResponse, TenantUpdate
from app.schemas.rent import RentResponse
from app.schemas.payment import TenantBalancesResponse
from app.services.obligation_resolver import ObligationResolver, is_active_on
from app.services.report_service import ReportService

router = APIRouter()
logger = logging.getLogger(__name__)


# ==================== TENANT CRUD ====================

@router.post("/", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
def create_tenant(
    tenant_in: TenantCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    tenant = Tenant(**tenant_in.model_dump())
    db.add(tenant)
    db.commit()
    db.refresh(tenant)
    logger.info(f"[tenants] Created tenant {tenant.id} ({tenant.name})")
    return tenant


@router.get("/", response_model=List[TenantResponse])
def list_tenants(
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    query = db.query(Tenant)
    if search:
        pattern = f"%{search}%"
        query = query.filter(Tenant.name.ilike(pattern) | Tenant.phone.ilike(pattern))
    return query.order_by(Tenant.name).all()


@router.get("/{tenant_id}", response_model=TenantResponse)
def get_tenant(
    tenant_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    tenant = db.get(Tenant, tenant_id)
    if not tenant:
        raise HTTPException(status_code=404, detail="Tenant not found")
    return tenant


@router.put("/{tenant_id}", response_model=TenantResponse)
def update_tenant(
    tenant_id: UUID,
    tenant_in: TenantUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    tenant = db.get(Tenant, tenant_id)
    if not tenant:
        raise HTTPException(status_code=404, detail="Tenant not found")

    for field, value in tenant_in.model_dump(exclude_unset=True).items():
        setattr(tenant, field, value)

    db.commit()
    db.refresh(tenant)
    return tenant


@router.delete("/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tenant(
    tenant_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Blocked while any rent, payment or maintenance request references the tenant"""
    tenant = db.get(Tenant, tenant_id)
    if not tenant:
        raise HTTPException(status_code=404, detail="Tenant not found")

    for model, label in ((Rent, "rent agreements"), (Payment, "payments"), (MaintenanceRequest, "maintenance requests")):
        if db.query(model.id).filter(model.tenant_id == tenant_id).first():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Tenant has {label} and cannot be deleted"
            )

    db.delete(tenant)
    db.commit()
    logger.info(f"[tenants] Deleted tenant {tenant_id}")
    return None


# ==================== ENGINE VIEWS ====================

@router.get("/{tenant_id}/balances", response_model=TenantBalancesResponse)
def get_tenant_balances(
    tenant_id: UUID,
    as_of: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Every obligation of the tenant with its balance, status and ledger"""
    if not db.get(Tenant, tenant_id):
        raise HTTPException(status_code=404, detail="Tenant not found")
    return ReportService(db).tenant_balances(tenant_id, as_of)


@router.get("/{tenant_id}/active-rent")
def get_active_rent(
    tenant_id: UUID,
    as_of: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Rent in force on `as_of` (default today). When none is, the most recent
    rent is returned with is_active false; rent is null when the tenant has
    never rented.
    """
    if not db.get(Tenant, tenant_id):
        raise HTTPException(status_code=404, detail="Tenant not found")

    as_of = as_of or date.today()
    rent = ObligationResolver(db).active_rent(tenant_id, as_of)
    return {
        "success": True,
        "tenant_id": tenant_id,
        "as_of": as_of,
        "is_active": bool(rent and is_active_on(rent, as_of)),
        "rent": RentResponse.model_validate(rent) if rent else None,
    }
