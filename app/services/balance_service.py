"""
Balance Calculator

    total_due  = obligation.total_amount
    total_paid = sum(paid_amount) over entries referencing the obligation
    balance    = max(0, total_due - total_paid)
    status     = Paid      if balance <= tolerance
                 Overdue   if as_of is given and due_date < as_of
                 Pending   if nothing paid
                 Partial   otherwise

Matching is by explicit reference: rent_id, monthly_service_id or
maintenance_request_id. Rent payments recorded before rent_id existed can
still be counted by monthly_rent amount when LEGACY_RENT_AMOUNT_MATCHING is
on; two rents of the same tenant with the same monthly_rent then share
those payments, which is why it is off by default.

No function here touches the database or mutates its inputs.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional

from app.core.config import settings
from app.models.payment import ObligationKind, PaymentStatus
from app.services.ledger import Obligation

MONEY_TOLERANCE = settings.MONEY_TOLERANCE


@dataclass(frozen=True)
class BalanceSummary:
    total_due: float
    total_paid: float
    balance: float
    status: PaymentStatus

    def to_dict(self) -> dict:
        return {
            "total_due": self.total_due,
            "total_paid": self.total_paid,
            "balance": self.balance,
            "status": self.status.value,
        }


def _is_legacy_rent_entry(obligation: Obligation, entry) -> bool:
    return (
        entry.rent_id is None
        and entry.monthly_service_id is None
        and entry.maintenance_request_id is None
        and entry.tenant_id == obligation.tenant_id
        and obligation.monthly_rent is not None
        and abs((entry.monthly_rent or 0.0) - obligation.monthly_rent) < MONEY_TOLERANCE
    )


def entry_matches(obligation: Obligation, entry, legacy_rent_matching: Optional[bool] = None) -> bool:
    """True when `entry` was recorded against `obligation`."""
    if legacy_rent_matching is None:
        legacy_rent_matching = settings.LEGACY_RENT_AMOUNT_MATCHING

    # An explicit reference identifies the obligation on its own; the payer
    # is checked when the entry is recorded, not here.
    if obligation.kind == ObligationKind.SERVICE:
        return entry.monthly_service_id == obligation.id
    if obligation.kind == ObligationKind.MAINTENANCE:
        return entry.maintenance_request_id == obligation.id
    if entry.rent_id is not None:
        return entry.rent_id == obligation.id
    return legacy_rent_matching and _is_legacy_rent_entry(obligation, entry)


def matching_entries(
    obligation: Obligation,
    entries: Iterable,
    exclude_payment_id: Optional[uuid.UUID] = None,
    legacy_rent_matching: Optional[bool] = None,
) -> List:
    """
    Entries counted toward the obligation. Excluding a payment also drops
    the adjustments that corrected it, which is what an edit needs.
    """
    matched = []
    for entry in entries:
        if exclude_payment_id is not None and (
            entry.id == exclude_payment_id or entry.adjusts_payment_id == exclude_payment_id
        ):
            continue
        if entry_matches(obligation, entry, legacy_rent_matching):
            matched.append(entry)
    return matched


def total_paid(entries: Iterable) -> float:
    return round(sum(entry.paid_amount or 0.0 for entry in entries), 2)


def derive_status(
    total_due: float,
    paid: float,
    due_date: Optional[date] = None,
    as_of: Optional[date] = None,
) -> PaymentStatus:
    balance = max(0.0, total_due - paid)
    if balance <= MONEY_TOLERANCE:
        return PaymentStatus.PAID
    if as_of is not None and due_date is not None and due_date < as_of:
        return PaymentStatus.OVERDUE
    if paid < MONEY_TOLERANCE:
        return PaymentStatus.PENDING
    return PaymentStatus.PARTIAL


def compute_balance(
    obligation: Obligation,
    entries: Iterable,
    as_of: Optional[date] = None,
    legacy_rent_matching: Optional[bool] = None,
) -> BalanceSummary:
    """
    Balance of one obligation from a snapshot of ledger entries.

    `entries` may contain rows for other obligations; only matching ones
    are counted. Passing `as_of` enables the derived Overdue status.
    """
    if isinstance(as_of, datetime):
        as_of = as_of.date()

    paid = total_paid(matching_entries(obligation, entries, legacy_rent_matching=legacy_rent_matching))
    total_due = round(obligation.total_amount, 2)
    balance = round(max(0.0, total_due - paid), 2)
    return BalanceSummary(
        total_due=total_due,
        total_paid=paid,
        balance=balance,
        status=derive_status(total_due, paid, obligation.due_date, as_of),
    )


def remaining_balance(
    obligation: Obligation,
    entries: Iterable,
    exclude_payment_id: Optional[uuid.UUID] = None,
    legacy_rent_matching: Optional[bool] = None,
) -> float:
    """Unclamped total_due - total_paid; negative when over-collected."""
    matched = matching_entries(obligation, entries, exclude_payment_id, legacy_rent_matching)
    return round(obligation.total_amount - total_paid(matched), 2)
