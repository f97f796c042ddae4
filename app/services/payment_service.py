"""
Payment recording

One payment = one transaction:
  lock the obligation row -> load its ledger -> validate -> INSERT -> commit

Retries carrying an idempotency_key that was already used get the original
row back; nothing is inserted twice. Payments are never edited: a
correction appends an adjustment entry for the difference.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import LedgerError, NotFoundError, PaymentValidationError
from app.models.maintenance import MaintenanceRequest
from app.models.monthly_service import MonthlyService
from app.models.payment import EntryType, ObligationKind, Payment
from app.models.rent import Rent
from app.models.tenant import Tenant
from app.schemas.payment import PaymentCorrection, PaymentCreate
from app.services.balance_service import (
    MONEY_TOLERANCE,
    derive_status,
    matching_entries,
    remaining_balance,
    total_paid,
)
from app.services.ledger import (
    Obligation,
    obligation_from_maintenance,
    obligation_from_rent,
    obligation_from_service,
)
from app.services.obligation_resolver import ObligationResolver
from app.services.payment_validator import validate_payment, validate_submitted_balance

logger = logging.getLogger(__name__)

_OBLIGATION_MODELS = {
    ObligationKind.RENT: Rent,
    ObligationKind.SERVICE: MonthlyService,
    ObligationKind.MAINTENANCE: MaintenanceRequest,
}


def _reference_of(payment: Payment) -> Optional[uuid.UUID]:
    if payment.obligation_kind == ObligationKind.SERVICE:
        return payment.monthly_service_id
    if payment.obligation_kind == ObligationKind.MAINTENANCE:
        return payment.maintenance_request_id
    return payment.rent_id


class PaymentService:
    def __init__(self, db: Session):
        self.db = db
        self.resolver = ObligationResolver(db)

    # ── Lookups ─────────────────────────────────────────────────────────────

    def _by_idempotency_key(self, key: str) -> Optional[Payment]:
        return self.db.query(Payment).filter(Payment.idempotency_key == key).first()

    def _lock(self, kind: ObligationKind, obligation_id: uuid.UUID):
        """
        Row lock on the obligation so concurrent payments against it
        serialize. SQLite ignores FOR UPDATE; its writer lock covers it.
        """
        model = _OBLIGATION_MODELS[kind]
        return (
            self.db.query(model)
            .filter(model.id == obligation_id)
            .with_for_update()
            .one_or_none()
        )

    def _locked_obligation(self, kind: ObligationKind, obligation_id: uuid.UUID, tenant_id: uuid.UUID) -> Obligation:
        row = self._lock(kind, obligation_id)
        if row is None:
            raise NotFoundError(f"{kind.value} obligation not found", field="obligationId")

        if kind == ObligationKind.RENT:
            obligation = obligation_from_rent(row)
        elif kind == ObligationKind.SERVICE:
            # Vacant-room bills have no tenant of record; the payer is used
            obligation = obligation_from_service(row, self.resolver.tenant_for_service(row) or tenant_id)
        else:
            obligation = obligation_from_maintenance(row)
            if obligation.tenant_id is None:
                obligation = replace(obligation, tenant_id=tenant_id)

        if obligation.tenant_id != tenant_id:
            raise LedgerError(f"{kind.value} obligation belongs to another tenant", field="tenantId")
        return obligation

    def _resolve_rent_id(self, data: PaymentCreate) -> uuid.UUID:
        if data.rent_id is not None:
            return data.rent_id
        rent = self.resolver.active_rent(data.tenant_id, data.payment_date)
        if rent is None:
            raise NotFoundError("no rent found for this tenant", field="rentId")
        return rent.id

    # ── Commands ────────────────────────────────────────────────────────────

    def _insert(self, payment: Payment) -> Tuple[Payment, bool]:
        self.db.add(payment)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race on idempotency_key: hand back the winner
            self.db.rollback()
            existing = self._by_idempotency_key(payment.idempotency_key)
            if existing is None:
                raise
            logger.info(f"[payments] Duplicate submission {payment.idempotency_key}; returning {existing.id}")
            return existing, False
        self.db.refresh(payment)
        return payment, True

    def record_payment(self, data: PaymentCreate) -> Tuple[Payment, bool]:
        """Returns (payment, created). created is False for a replayed key."""
        existing = self._by_idempotency_key(data.idempotency_key)
        if existing:
            logger.info(f"[payments] Replayed idempotency key {data.idempotency_key}; returning {existing.id}")
            return existing, False

        if self.db.get(Tenant, data.tenant_id) is None:
            raise NotFoundError("tenant not found", field="tenantId")

        kind = data.obligation_kind
        if kind == ObligationKind.RENT:
            obligation_id = self._resolve_rent_id(data)
        elif kind == ObligationKind.SERVICE:
            obligation_id = data.monthly_service_id
        else:
            obligation_id = data.maintenance_request_id

        try:
            obligation = self._locked_obligation(kind, obligation_id, data.tenant_id)
            entries = self.resolver.entries_for(obligation)

            remaining = remaining_balance(obligation, entries)
            validate_payment(data.paid_amount, remaining)

            paid_after = total_paid(matching_entries(obligation, entries)) + data.paid_amount
            balance_after = round(max(0.0, obligation.total_amount - paid_after), 2)
            if data.balance is not None:
                validate_submitted_balance(data.balance, balance_after)
        except LedgerError:
            self.db.rollback()
            raise

        payment = Payment(
            id=uuid.uuid4(),
            tenant_id=data.tenant_id,
            entry_type=EntryType.PAYMENT,
            obligation_kind=kind,
            rent_id=obligation.id if kind == ObligationKind.RENT else None,
            monthly_service_id=data.monthly_service_id,
            maintenance_request_id=data.maintenance_request_id,
            monthly_rent=obligation.monthly_rent or 0.0,
            paid_amount=round(data.paid_amount, 2),
            balance=balance_after,
            status=derive_status(obligation.total_amount, paid_after, obligation.due_date, data.payment_date),
            payment_date=data.payment_date,
            idempotency_key=data.idempotency_key,
            notes=data.notes,
        )
        payment, created = self._insert(payment)
        if created:
            logger.info(
                f"[payments] Recorded {kind.value} payment {payment.id}: "
                f"paid={payment.paid_amount:.2f} balance={payment.balance:.2f} status={payment.status.value}"
            )
        return payment, created

    def record_correction(self, payment_id: uuid.UUID, data: PaymentCorrection) -> Tuple[Payment, bool]:
        """
        Re-state what an earlier payment should have been. The original row
        stays; an adjustment of (corrected - effective amount) is appended.
        """
        existing = self._by_idempotency_key(data.idempotency_key)
        if existing:
            return existing, False

        original = self.db.get(Payment, payment_id)
        if original is None:
            raise NotFoundError("payment not found", field="paymentId")
        if original.entry_type == EntryType.ADJUSTMENT:
            raise LedgerError("adjustments cannot be corrected; correct the original payment", field="paymentId")

        kind = original.obligation_kind
        try:
            obligation = self._locked_obligation(kind, _reference_of(original), original.tenant_id)
            entries = self.resolver.entries_for(obligation)

            effective = original.paid_amount + sum(
                e.paid_amount for e in entries if e.adjusts_payment_id == original.id
            )
            remaining = remaining_balance(obligation, entries, exclude_payment_id=original.id)
            validate_payment(data.corrected_amount, remaining, is_edit=True)

            delta = round(data.corrected_amount - effective, 2)
            if abs(delta) < MONEY_TOLERANCE:
                raise PaymentValidationError("correction does not change the amount", field="paidAmount")
        except LedgerError:
            self.db.rollback()
            raise

        paid_after = total_paid(matching_entries(obligation, entries)) + delta
        adjustment = Payment(
            id=uuid.uuid4(),
            tenant_id=original.tenant_id,
            entry_type=EntryType.ADJUSTMENT,
            obligation_kind=kind,
            rent_id=original.rent_id,
            monthly_service_id=original.monthly_service_id,
            maintenance_request_id=original.maintenance_request_id,
            adjusts_payment_id=original.id,
            monthly_rent=original.monthly_rent,
            paid_amount=delta,
            balance=round(max(0.0, obligation.total_amount - paid_after), 2),
            status=derive_status(obligation.total_amount, paid_after, obligation.due_date, data.payment_date),
            payment_date=data.payment_date,
            idempotency_key=data.idempotency_key,
            notes=data.notes or f"Correction of payment {original.id}",
        )
        adjustment, created = self._insert(adjustment)
        if created:
            logger.info(f"[payments] Appended adjustment {adjustment.id} ({delta:+.2f}) to payment {original.id}")
        return adjustment, created
