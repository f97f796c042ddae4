"""
Ledger Entry Model

Uniform view of anything a tenant owes (rent agreement, monthly service
bill, maintenance request) so balance code never special-cases the source
table, plus the event view of an obligation's ledger:

    Charge -> PaymentReceived | Adjustment -> ...

Everything here is a pure mapping over already-loaded rows.
"""
from __future__ import annotations

import calendar
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, List, Optional, Union

from app.models.payment import EntryType, ObligationKind


@dataclass(frozen=True)
class Obligation:
    kind: ObligationKind
    id: uuid.UUID
    tenant_id: Optional[uuid.UUID]
    total_amount: float
    reference_date: date
    due_date: Optional[date] = None
    # Rent only: used by legacy amount matching
    monthly_rent: Optional[float] = None


def _as_date(value: Union[date, datetime, None]) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value


def month_bounds(month: str) -> tuple:
    """'2026-03' -> (date(2026, 3, 1), date(2026, 3, 31))"""
    year, mon = (int(part) for part in month.split("-")[:2])
    _, last_day = calendar.monthrange(year, mon)
    return date(year, mon, 1), date(year, mon, last_day)


def obligation_from_rent(rent) -> Obligation:
    return Obligation(
        kind=ObligationKind.RENT,
        id=rent.id,
        tenant_id=rent.tenant_id,
        total_amount=float(rent.total_rent or 0.0),
        reference_date=_as_date(rent.start_date),
        due_date=_as_date(rent.end_date),
        monthly_rent=float(rent.monthly_rent or 0.0),
    )


def obligation_from_service(service, tenant_id: Optional[uuid.UUID] = None) -> Obligation:
    """A service bill belongs to a room; the tenant comes from the room's rent."""
    first_day, last_day = month_bounds(service.month)
    return Obligation(
        kind=ObligationKind.SERVICE,
        id=service.id,
        tenant_id=tenant_id,
        total_amount=float(service.total_amount or 0.0),
        reference_date=first_day,
        due_date=last_day,
    )


def obligation_from_maintenance(request) -> Obligation:
    created = _as_date(request.created_at) or date.today()
    return Obligation(
        kind=ObligationKind.MAINTENANCE,
        id=request.id,
        tenant_id=request.tenant_id,
        total_amount=float(request.total_price or 0.0),
        reference_date=created,
        due_date=None,
    )


# ── Ledger events ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Charge:
    obligation_id: uuid.UUID
    amount: float
    event_date: date
    balance_after: float
    type: str = field(default="charge", init=False)


@dataclass(frozen=True)
class PaymentReceived:
    payment_id: uuid.UUID
    amount: float
    event_date: date
    balance_after: float
    type: str = field(default="payment", init=False)


@dataclass(frozen=True)
class Adjustment:
    payment_id: uuid.UUID
    adjusts_payment_id: Optional[uuid.UUID]
    amount: float
    event_date: date
    balance_after: float
    type: str = field(default="adjustment", init=False)


LedgerEvent = Union[Charge, PaymentReceived, Adjustment]


def build_ledger(obligation: Obligation, entries: Iterable) -> List[LedgerEvent]:
    """
    Charge first, then each entry in (payment_date, created_at) order.
    Callers pass entries already matched to the obligation.
    balance_after is the unclamped running balance so an over-collected
    ledger is visible; the calculator clamps for display.
    """
    running = obligation.total_amount
    events: List[LedgerEvent] = [
        Charge(
            obligation_id=obligation.id,
            amount=obligation.total_amount,
            event_date=obligation.reference_date,
            balance_after=round(running, 2),
        )
    ]

    def _order(entry):
        created = getattr(entry, "created_at", None)
        return _as_date(entry.payment_date), created.timestamp() if created else 0.0

    ordered = sorted(entries, key=_order)
    for entry in ordered:
        running -= entry.paid_amount
        if entry.entry_type == EntryType.ADJUSTMENT:
            events.append(Adjustment(
                payment_id=entry.id,
                adjusts_payment_id=entry.adjusts_payment_id,
                amount=entry.paid_amount,
                event_date=_as_date(entry.payment_date),
                balance_after=round(running, 2),
            ))
        else:
            events.append(PaymentReceived(
                payment_id=entry.id,
                amount=entry.paid_amount,
                event_date=_as_date(entry.payment_date),
                balance_after=round(running, 2),
            ))
    return events
