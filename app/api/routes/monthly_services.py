from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from app.database import get_db
from app.core.deps import get_current_user
from app.models.user import User
from app.models.monthly_service import MonthlyService
from app.schemas.monthly_service import MonthlyServiceCreate, MonthlyServiceResponse, MonthlyServiceUpdate
from app.services.billing_service import BillingService

router = APIRouter()


@router.post("/", response_model=MonthlyServiceResponse, status_code=status.HTTP_201_CREATED)
def create_monthly_service(
    service_in: MonthlyServiceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """One bill per room and month; totals derived from readings and fees"""
    return BillingService(db).create_service(service_in)


@router.get("/", response_model=List[MonthlyServiceResponse])
def list_monthly_services(
    room_id: Optional[UUID] = None,
    month: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    query = db.query(MonthlyService)
    if room_id:
        query = query.filter(MonthlyService.room_id == room_id)
    if month:
        query = query.filter(MonthlyService.month == month)
    return query.order_by(MonthlyService.month.desc()).all()


@router.get("/{service_id}", response_model=MonthlyServiceResponse)
def get_monthly_service(
    service_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    service = db.get(MonthlyService, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Monthly service not found")
    return service


@router.put("/{service_id}", response_model=MonthlyServiceResponse)
def update_monthly_service(
    service_id: UUID,
    service_in: MonthlyServiceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    service = db.get(MonthlyService, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Monthly service not found")
    return BillingService(db).update_service(service, service_in)


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_monthly_service(
    service_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    service = db.get(MonthlyService, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Monthly service not found")
    BillingService(db).delete_service(service)
    return None
