"""
Maintenance Routes
Issue catalog and maintenance requests. A request keeps the issue prices
it was created with; editing the catalog later does not touch it.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from app.database import get_db
from app.core.deps import get_current_user
from app.models.user import User
from app.models.maintenance import (
    MaintenanceIssue, MaintenanceRequest, MaintenanceRequestItem, MaintenanceStatus
)
from app.schemas.maintenance import (
    MaintenanceIssueCreate, MaintenanceIssueResponse, MaintenanceIssueUpdate,
    MaintenanceRequestCreate, MaintenanceRequestResponse, MaintenanceRequestUpdate
)
from app.services.billing_service import BillingService

issues_router = APIRouter()
requests_router = APIRouter()


# ==================== ISSUE CATALOG ====================

@issues_router.post("/", response_model=MaintenanceIssueResponse, status_code=status.HTTP_201_CREATED)
def create_issue(
    issue_in: MaintenanceIssueCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    issue = MaintenanceIssue(**issue_in.model_dump())
    db.add(issue)
    db.commit()
    db.refresh(issue)
    return issue


@issues_router.get("/", response_model=List[MaintenanceIssueResponse])
def list_issues(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return db.query(MaintenanceIssue).order_by(MaintenanceIssue.name).all()


@issues_router.get("/{issue_id}", response_model=MaintenanceIssueResponse)
def get_issue(
    issue_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    issue = db.get(MaintenanceIssue, issue_id)
    if not issue:
        raise HTTPException(status_code=404, detail="Maintenance issue not found")
    return issue


@issues_router.put("/{issue_id}", response_model=MaintenanceIssueResponse)
def update_issue(
    issue_id: UUID,
    issue_in: MaintenanceIssueUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    issue = db.get(MaintenanceIssue, issue_id)
    if not issue:
        raise HTTPException(status_code=404, detail="Maintenance issue not found")

    for field, value in issue_in.model_dump(exclude_unset=True).items():
        setattr(issue, field, value)

    db.commit()
    db.refresh(issue)
    return issue


@issues_router.delete("/{issue_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_issue(
    issue_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    issue = db.get(MaintenanceIssue, issue_id)
    if not issue:
        raise HTTPException(status_code=404, detail="Maintenance issue not found")
    if db.query(MaintenanceRequestItem.id).filter(MaintenanceRequestItem.issue_id == issue_id).first():
        raise HTTPException(status_code=409, detail="Issue is used by maintenance requests")

    db.delete(issue)
    db.commit()
    return None


# ==================== REQUESTS ====================

@requests_router.post("/", response_model=MaintenanceRequestResponse, status_code=status.HTTP_201_CREATED)
def create_request(
    request_in: MaintenanceRequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return BillingService(db).create_request(request_in)


@requests_router.get("/", response_model=List[MaintenanceRequestResponse])
def list_requests(
    tenant_id: Optional[UUID] = None,
    room_id: Optional[UUID] = None,
    request_status: Optional[MaintenanceStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    query = db.query(MaintenanceRequest)
    if tenant_id:
        query = query.filter(MaintenanceRequest.tenant_id == tenant_id)
    if room_id:
        query = query.filter(MaintenanceRequest.room_id == room_id)
    if request_status:
        query = query.filter(MaintenanceRequest.status == request_status)
    return query.order_by(MaintenanceRequest.created_at.desc()).all()


@requests_router.get("/{request_id}", response_model=MaintenanceRequestResponse)
def get_request(
    request_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    request = db.get(MaintenanceRequest, request_id)
    if not request:
        raise HTTPException(status_code=404, detail="Maintenance request not found")
    return request


@requests_router.put("/{request_id}", response_model=MaintenanceRequestResponse)
def update_request(
    request_id: UUID,
    request_in: MaintenanceRequestUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    request = db.get(MaintenanceRequest, request_id)
    if not request:
        raise HTTPException(status_code=404, detail="Maintenance request not found")

    for field, value in request_in.model_dump(exclude_unset=True).items():
        setattr(request, field, value)

    db.commit()
    db.refresh(request)
    return request


@requests_router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_request(
    request_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    request = db.get(MaintenanceRequest, request_id)
    if not request:
        raise HTTPException(status_code=404, detail="Maintenance request not found")
    BillingService(db).delete_request(request)
    return None
