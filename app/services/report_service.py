"""
Report Service
Read-only views built from the balance calculator: per-obligation ledgers,
tenant statements and the dashboard summary. Every figure here goes
through compute_balance so the screens cannot disagree with each other.
"""
import logging
import uuid
from collections import Counter
from dataclasses import asdict
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.maintenance import MaintenanceRequest
from app.models.monthly_service import MonthlyService
from app.models.payment import ObligationKind, Payment, PaymentStatus
from app.models.property import House, Room, RoomStatus
from app.models.rent import Rent
from app.models.tenant import Tenant
from app.services.balance_service import compute_balance, matching_entries
from app.services.contract_service import ContractStatus, classify
from app.services.ledger import (
    Obligation,
    build_ledger,
    obligation_from_maintenance,
    obligation_from_rent,
    obligation_from_service,
)
from app.services.obligation_resolver import ObligationResolver

logger = logging.getLogger(__name__)


def obligation_view(obligation: Obligation, entries, as_of: Optional[date] = None) -> dict:
    """Summary plus ledger for one obligation, shaped like ObligationBalanceResponse."""
    matched = matching_entries(obligation, entries)
    summary = compute_balance(obligation, entries, as_of=as_of)
    return {
        "kind": obligation.kind,
        "obligation_id": obligation.id,
        "tenant_id": obligation.tenant_id,
        "reference_date": obligation.reference_date,
        "due_date": obligation.due_date,
        "summary": summary.to_dict(),
        "ledger": [asdict(event) for event in build_ledger(obligation, matched)],
    }


class ReportService:
    def __init__(self, db: Session):
        self.db = db
        self.resolver = ObligationResolver(db)

    def obligation_balance(self, kind: ObligationKind, obligation_id: uuid.UUID, as_of: Optional[date] = None):
        """None when the obligation does not exist."""
        obligation = self.resolver.get_obligation(kind, obligation_id)
        if obligation is None:
            return None
        return obligation_view(obligation, self.resolver.entries_for(obligation), as_of or date.today())

    def tenant_balances(self, tenant_id: uuid.UUID, as_of: Optional[date] = None) -> dict:
        as_of = as_of or date.today()
        views = [
            obligation_view(obligation, self.resolver.entries_for(obligation), as_of)
            for obligation in self.resolver.obligations_for_tenant(tenant_id)
        ]
        return {
            "tenant_id": tenant_id,
            "total_due": round(sum(v["summary"]["total_due"] for v in views), 2),
            "total_paid": round(sum(v["summary"]["total_paid"] for v in views), 2),
            "total_outstanding": round(sum(v["summary"]["balance"] for v in views), 2),
            "obligations": views,
        }

    def _all_obligations(self, tenant_id: Optional[uuid.UUID]) -> List[Obligation]:
        if tenant_id is not None:
            return self.resolver.obligations_for_tenant(tenant_id)

        obligations = [obligation_from_rent(rent) for rent in self.db.query(Rent).all()]
        obligations.extend(
            obligation_from_service(service, self.resolver.tenant_for_service(service))
            for service in self.db.query(MonthlyService).all()
        )
        obligations.extend(
            obligation_from_maintenance(request) for request in self.db.query(MaintenanceRequest).all()
        )
        return obligations

    def summary(
        self,
        as_of: Optional[date] = None,
        tenant_id: Optional[uuid.UUID] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> dict:
        as_of = as_of or date.today()

        payments_query = self.db.query(Payment)
        if tenant_id is not None:
            payments_query = payments_query.filter(Payment.tenant_id == tenant_id)
        entries = payments_query.all()

        by_kind = {kind.value: {"obligations": 0, "total_due": 0.0, "total_paid": 0.0, "outstanding": 0.0}
                   for kind in ObligationKind}
        status_counts = Counter({status.value: 0 for status in PaymentStatus})

        for obligation in self._all_obligations(tenant_id):
            result = compute_balance(obligation, entries, as_of=as_of)
            totals = by_kind[obligation.kind.value]
            totals["obligations"] += 1
            totals["total_due"] = round(totals["total_due"] + result.total_due, 2)
            totals["total_paid"] = round(totals["total_paid"] + result.total_paid, 2)
            totals["outstanding"] = round(totals["outstanding"] + result.balance, 2)
            status_counts[result.status.value] += 1

        rents_query = self.db.query(Rent)
        if tenant_id is not None:
            rents_query = rents_query.filter(Rent.tenant_id == tenant_id)
        contract_counts = Counter({status.value: 0 for status in ContractStatus})
        for rent in rents_query.all():
            contract_counts[classify(rent, as_of).status.value] += 1

        collected = sum(
            entry.paid_amount
            for entry in entries
            if (start_date is None or entry.payment_date >= start_date)
            and (end_date is None or entry.payment_date <= end_date)
        )

        rooms = self.db.query(Room).count()
        rented = self.db.query(Room).filter(Room.status == RoomStatus.RENTED).count()
        logger.info(f"[reports] Summary as of {as_of}: {sum(status_counts.values())} obligations")

        return {
            "as_of": as_of,
            "tenant_id": tenant_id,
            "occupancy": {
                "houses": self.db.query(House).count(),
                "rooms": rooms,
                "rented_rooms": rented,
                "available_rooms": rooms - rented,
                "tenants": self.db.query(Tenant).count(),
            },
            "by_kind": by_kind,
            "status_counts": dict(status_counts),
            "contract_counts": dict(contract_counts),
            "collected_in_period": round(collected, 2),
            "period_start": start_date,
            "period_end": end_date,
        }
