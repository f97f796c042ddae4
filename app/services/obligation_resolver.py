"""
Obligation Resolver

Finds the obligations relevant to a tenant or room at a point in time.
Absence is a normal answer: every lookup returns None (or an empty list)
instead of raising, and callers render "no obligation".
"""
from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from typing import Iterable, List, Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from app.models.maintenance import MaintenanceRequest
from app.models.monthly_service import MonthlyService
from app.models.payment import ObligationKind, Payment
from app.models.rent import Rent
from app.services.ledger import (
    Obligation,
    month_bounds,
    obligation_from_maintenance,
    obligation_from_rent,
    obligation_from_service,
)

logger = logging.getLogger(__name__)


def _day(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def is_active_on(rent, as_of: date) -> bool:
    """Inclusive on both ends, day granularity."""
    return _day(rent.start_date) <= as_of <= _day(rent.end_date)


def resolve_active_rent(rents: Iterable, tenant_id: uuid.UUID, as_of) -> Optional[Rent]:
    """
    The tenant's rent whose window contains `as_of`.

    Overlapping windows (bad data entry) resolve to the latest start_date.
    With no window match, the most recent rent by start_date is returned so
    a bill raised just after a lease lapsed still finds its tenant.
    None when the tenant has no rents at all.
    """
    as_of = _day(as_of)
    tenant_rents = sorted(
        (r for r in rents if r.tenant_id == tenant_id),
        key=lambda r: _day(r.start_date),
        reverse=True,
    )
    if not tenant_rents:
        return None

    for rent in tenant_rents:
        if is_active_on(rent, as_of):
            return rent
    return tenant_rents[0]


def resolve_room_rent(rents: Iterable, room_id: uuid.UUID, as_of) -> Optional[Rent]:
    """Rent occupying a room on a given day; no fallback."""
    as_of = _day(as_of)
    candidates = [r for r in rents if r.room_id == room_id and is_active_on(r, as_of)]
    if not candidates:
        return None
    return max(candidates, key=lambda r: _day(r.start_date))


def _overlaps_month(rent, month: str) -> bool:
    first_day, last_day = month_bounds(month)
    return _day(rent.start_date) <= last_day and _day(rent.end_date) >= first_day


def resolve_service_rent(rents: Iterable, room_id: uuid.UUID, month: str) -> Optional[Rent]:
    """
    The one rent a room's monthly bill is charged to: the lease holding the
    room on the month's last day, else on its first day, else the latest
    lease starting inside the month. None for a month the room stood empty.
    """
    first_day, last_day = month_bounds(month)
    rent = resolve_room_rent(rents, room_id, last_day) or resolve_room_rent(rents, room_id, first_day)
    if rent is not None:
        return rent
    inside = [r for r in rents if r.room_id == room_id and _overlaps_month(r, month)]
    return max(inside, key=lambda r: _day(r.start_date)) if inside else None


class ObligationResolver:
    def __init__(self, db: Session):
        self.db = db

    def active_rent(self, tenant_id: uuid.UUID, as_of=None) -> Optional[Rent]:
        as_of = as_of or date.today()
        rents = self.db.query(Rent).filter(Rent.tenant_id == tenant_id).all()
        rent = resolve_active_rent(rents, tenant_id, as_of)
        if rent is None:
            logger.info(f"[obligations] No rent found for tenant {tenant_id}")
        elif not is_active_on(rent, _day(as_of)):
            logger.info(
                f"[obligations] No rent active on {as_of} for tenant {tenant_id}; "
                f"falling back to most recent rent {rent.id}"
            )
        return rent

    def active_rent_for_room(self, room_id: uuid.UUID, as_of=None) -> Optional[Rent]:
        as_of = as_of or date.today()
        rents = self.db.query(Rent).filter(Rent.room_id == room_id).all()
        return resolve_room_rent(rents, room_id, as_of)

    def tenant_for_service(self, service: MonthlyService) -> Optional[uuid.UUID]:
        """Tenant the bill is charged to; see resolve_service_rent."""
        rents = self.db.query(Rent).filter(Rent.room_id == service.room_id).all()
        rent = resolve_service_rent(rents, service.room_id, service.month)
        return rent.tenant_id if rent else None

    def get_obligation(self, kind: ObligationKind, obligation_id: uuid.UUID) -> Optional[Obligation]:
        kind = ObligationKind(kind)
        if kind == ObligationKind.RENT:
            rent = self.db.get(Rent, obligation_id)
            return obligation_from_rent(rent) if rent else None
        if kind == ObligationKind.SERVICE:
            service = self.db.get(MonthlyService, obligation_id)
            if not service:
                return None
            return obligation_from_service(service, self.tenant_for_service(service))
        request = self.db.get(MaintenanceRequest, obligation_id)
        return obligation_from_maintenance(request) if request else None

    def entries_for(self, obligation: Obligation) -> List[Payment]:
        """
        Ledger rows that may count toward the obligation. The balance
        calculator does the final matching; this only narrows the query.
        """
        query = self.db.query(Payment).filter(Payment.obligation_kind == obligation.kind)
        if obligation.kind == ObligationKind.SERVICE:
            query = query.filter(Payment.monthly_service_id == obligation.id)
        elif obligation.kind == ObligationKind.MAINTENANCE:
            query = query.filter(Payment.maintenance_request_id == obligation.id)
        else:
            query = query.filter(or_(
                Payment.rent_id == obligation.id,
                and_(Payment.rent_id.is_(None), Payment.tenant_id == obligation.tenant_id),
            ))
        return query.order_by(Payment.payment_date, Payment.created_at).all()

    def obligations_for_tenant(self, tenant_id: uuid.UUID) -> List[Obligation]:
        """Rents, service bills charged to the tenant, and maintenance requests."""
        rents = (
            self.db.query(Rent)
            .filter(Rent.tenant_id == tenant_id)
            .order_by(Rent.start_date)
            .all()
        )
        obligations = [obligation_from_rent(rent) for rent in rents]

        room_ids = {rent.room_id for rent in rents}
        if room_ids:
            room_rents = self.db.query(Rent).filter(Rent.room_id.in_(room_ids)).all()
            services = (
                self.db.query(MonthlyService)
                .filter(MonthlyService.room_id.in_(room_ids))
                .order_by(MonthlyService.month)
                .all()
            )
            for service in services:
                # Changeover months go to one tenant only
                charged = resolve_service_rent(room_rents, service.room_id, service.month)
                if charged is not None and charged.tenant_id == tenant_id:
                    obligations.append(obligation_from_service(service, tenant_id))

        requests = (
            self.db.query(MaintenanceRequest)
            .filter(MaintenanceRequest.tenant_id == tenant_id)
            .order_by(MaintenanceRequest.created_at)
            .all()
        )
        obligations.extend(obligation_from_maintenance(req) for req in requests)
        return obligations
