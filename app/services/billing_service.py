"""
Billing Service
Monthly utility bills and maintenance requests: the two obligations whose
totals are derived from components.
"""
import logging
import uuid
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, InvariantViolationError, NotFoundError
from app.models.maintenance import MaintenanceIssue, MaintenanceRequest, MaintenanceRequestItem
from app.models.monthly_service import MonthlyService
from app.models.payment import Payment
from app.models.property import Room
from app.models.tenant import Tenant
from app.schemas.maintenance import MaintenanceRequestCreate
from app.schemas.monthly_service import MonthlyServiceCreate, MonthlyServiceUpdate, meter_total
from app.services.balance_service import MONEY_TOLERANCE, compute_balance
from app.services.ledger import obligation_from_service
from app.services.obligation_resolver import ObligationResolver

logger = logging.getLogger(__name__)

_COMPONENTS = ("water_total", "electricity_total", "trash_fee", "maintenance_fee")


def derive_service_totals(values: Dict) -> Dict:
    """
    Fill in utility totals from meter readings and check total_amount.

    `values` is the full field set of the bill (after merging an update).
    Returns a new dict; raises InvariantViolationError when a supplied
    total_amount disagrees with its components.
    """
    result = dict(values)
    for utility in ("water", "electricity"):
        total_key = f"{utility}_total"
        if result.get(total_key) is None:
            try:
                result[total_key] = meter_total(
                    result.get(f"{utility}_previous"),
                    result.get(f"{utility}_current"),
                    result.get(f"{utility}_price_per_unit"),
                )
            except ValueError as e:
                raise InvariantViolationError(str(e), field=f"{utility}Current")

    component_sum = round(sum(result.get(key) or 0.0 for key in _COMPONENTS), 2)
    supplied = result.get("total_amount")
    if supplied is None:
        result["total_amount"] = component_sum
    elif abs(supplied - component_sum) > MONEY_TOLERANCE:
        raise InvariantViolationError(
            f"total_amount {supplied:.2f} does not equal the sum of its components ({component_sum:.2f})",
            field="totalAmount",
        )
    return result


def _service_values(service: MonthlyService) -> Dict:
    fields = MonthlyServiceUpdate.model_fields.keys()
    return {name: getattr(service, name) for name in fields}


class BillingService:
    def __init__(self, db: Session):
        self.db = db

    # ── Monthly services ────────────────────────────────────────────────────

    def _check_unique_month(self, room_id: uuid.UUID, month: str, exclude_id: Optional[uuid.UUID] = None):
        query = self.db.query(MonthlyService).filter(
            MonthlyService.room_id == room_id,
            MonthlyService.month == month,
        )
        if exclude_id is not None:
            query = query.filter(MonthlyService.id != exclude_id)
        if query.first():
            raise ConflictError(f"room already has a service bill for {month}", field="month")

    def _paid_towards(self, service: MonthlyService) -> float:
        obligation = obligation_from_service(service)
        entries = ObligationResolver(self.db).entries_for(obligation)
        return compute_balance(obligation, entries).total_paid

    def create_service(self, data: MonthlyServiceCreate) -> MonthlyService:
        if self.db.get(Room, data.room_id) is None:
            raise NotFoundError("room not found", field="roomId")
        self._check_unique_month(data.room_id, data.month)

        values = derive_service_totals(data.model_dump())
        service = MonthlyService(id=uuid.uuid4(), **values)
        self.db.add(service)
        self.db.commit()
        self.db.refresh(service)
        logger.info(f"[billing] Service bill {service.id} for {service.month}: {service.total_amount:.2f}")
        return service

    def update_service(self, service: MonthlyService, data: MonthlyServiceUpdate) -> MonthlyService:
        changes = data.model_dump(exclude_unset=True)
        if changes.get("month") is None:
            changes.pop("month", None)
        merged = {**_service_values(service), **changes}

        # A changed component invalidates the stored totals unless they were sent too
        for utility in ("water", "electricity"):
            readings = {f"{utility}_previous", f"{utility}_current", f"{utility}_price_per_unit"}
            if readings & changes.keys() and f"{utility}_total" not in changes:
                merged[f"{utility}_total"] = None
        if "total_amount" not in changes:
            merged["total_amount"] = None

        values = derive_service_totals(merged)
        paid = self._paid_towards(service)
        if values["month"] != service.month:
            if self.db.query(Payment.id).filter(Payment.monthly_service_id == service.id).first():
                raise ConflictError("service bill has recorded payments; its month cannot change", field="month")
            self._check_unique_month(service.room_id, values["month"], exclude_id=service.id)
        if values["total_amount"] + MONEY_TOLERANCE < paid:
            raise InvariantViolationError(
                f"total_amount {values['total_amount']:.2f} is below the {paid:.2f} already paid",
                field="totalAmount",
            )

        for field, value in values.items():
            setattr(service, field, value)
        self.db.commit()
        self.db.refresh(service)
        logger.info(f"[billing] Updated service bill {service.id}: total={service.total_amount:.2f}")
        return service

    def delete_service(self, service: MonthlyService) -> None:
        if self.db.query(Payment.id).filter(Payment.monthly_service_id == service.id).first():
            raise ConflictError("service bill has recorded payments and cannot be deleted", field="monthlyServiceId")
        self.db.delete(service)
        self.db.commit()

    # ── Maintenance requests ────────────────────────────────────────────────

    def create_request(self, data: MaintenanceRequestCreate) -> MaintenanceRequest:
        if data.tenant_id and self.db.get(Tenant, data.tenant_id) is None:
            raise NotFoundError("tenant not found", field="tenantId")
        if data.room_id and self.db.get(Room, data.room_id) is None:
            raise NotFoundError("room not found", field="roomId")

        issues: List[MaintenanceIssue] = []
        for issue_id in data.issue_ids:
            issue = self.db.get(MaintenanceIssue, issue_id)
            if issue is None:
                raise NotFoundError(f"maintenance issue {issue_id} not found", field="issueIds")
            issues.append(issue)

        request = MaintenanceRequest(
            id=uuid.uuid4(),
            tenant_id=data.tenant_id,
            room_id=data.room_id,
            notes=data.notes,
            total_price=round(sum(issue.price for issue in issues), 2),
            items=[
                MaintenanceRequestItem(
                    issue_id=issue.id,
                    issue_name=issue.name,
                    price_at_request=issue.price,
                )
                for issue in issues
            ],
        )
        self.db.add(request)
        self.db.commit()
        self.db.refresh(request)
        logger.info(f"[billing] Maintenance request {request.id}: {len(issues)} issue(s), {request.total_price:.2f}")
        return request

    def delete_request(self, request: MaintenanceRequest) -> None:
        if self.db.query(Payment.id).filter(Payment.maintenance_request_id == request.id).first():
            raise ConflictError("maintenance request has recorded payments and cannot be deleted", field="maintenanceRequestId")
        self.db.delete(request)
        self.db.commit()
