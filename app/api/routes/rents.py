from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from app.database import get_db
from app.core.deps import get_current_user
from app.models.user import User
from app.models.rent import Rent
from app.schemas.rent import RentCreate, RentResponse, RentUpdate
from app.services.rent_service import RentService

router = APIRouter()


@router.post("/", response_model=RentResponse, status_code=status.HTTP_201_CREATED)
def create_rent(
    rent_in: RentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Create a rent agreement; total_rent is derived when omitted"""
    return RentService(db).create(rent_in)


@router.get("/", response_model=List[RentResponse])
def list_rents(
    tenant_id: Optional[UUID] = None,
    room_id: Optional[UUID] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    query = db.query(Rent)
    if tenant_id:
        query = query.filter(Rent.tenant_id == tenant_id)
    if room_id:
        query = query.filter(Rent.room_id == room_id)
    return query.order_by(Rent.start_date.desc()).all()


@router.get("/{rent_id}", response_model=RentResponse)
def get_rent(
    rent_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    rent = db.get(Rent, rent_id)
    if not rent:
        raise HTTPException(status_code=404, detail="Rent not found")
    return rent


@router.put("/{rent_id}", response_model=RentResponse)
def update_rent(
    rent_id: UUID,
    rent_in: RentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    rent = db.get(Rent, rent_id)
    if not rent:
        raise HTTPException(status_code=404, detail="Rent not found")
    return RentService(db).update(rent, rent_in)


@router.delete("/{rent_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_rent(
    rent_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    rent = db.get(Rent, rent_id)
    if not rent:
        raise HTTPException(status_code=404, detail="Rent not found")
    RentService(db).delete(rent)
    return None
