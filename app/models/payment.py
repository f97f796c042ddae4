"""
Payment Models
Append-only ledger entries recorded against rent, service and maintenance obligations
"""
from datetime import date
from enum import Enum
from sqlalchemy import String, Float, Date, ForeignKey, Text, Enum as SQLEnum, Uuid, Index, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

from app.db.base import Base, TimestampMixin


class PaymentStatus(str, Enum):
    """Obligation status after the entry was recorded"""
    PAID = "Paid"
    PARTIAL = "Partial"
    PENDING = "Pending"
    OVERDUE = "Overdue"


class ObligationKind(str, Enum):
    """What a ledger entry is paying for"""
    RENT = "rent"
    SERVICE = "service"
    MAINTENANCE = "maintenance"


class EntryType(str, Enum):
    """Payment received, or a signed correction of an earlier payment"""
    PAYMENT = "payment"
    ADJUSTMENT = "adjustment"


def _values(enum_cls):
    return [member.value for member in enum_cls]


class Payment(Base, TimestampMixin):
    """
    Ledger entry against exactly one obligation.

    Rows are never updated after insert. `balance` and `status` describe
    the obligation right after this entry; corrections are new rows with
    entry_type=adjustment pointing at the corrected payment.
    """
    __tablename__ = "payments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("tenants.id"), nullable=False, index=True)

    entry_type: Mapped[EntryType] = mapped_column(
        SQLEnum(EntryType, values_callable=_values), default=EntryType.PAYMENT, nullable=False
    )
    obligation_kind: Mapped[ObligationKind] = mapped_column(
        SQLEnum(ObligationKind, values_callable=_values), nullable=False, index=True
    )

    # Explicit obligation reference, one per kind
    rent_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("rents.id"), nullable=True, index=True)
    monthly_service_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("monthly_services.id"), nullable=True, index=True
    )
    maintenance_request_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("maintenance_requests.id"), nullable=True, index=True
    )
    adjusts_payment_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("payments.id"), nullable=True)

    # Amounts
    monthly_rent: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    paid_amount: Mapped[float] = mapped_column(Float, nullable=False)
    balance: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[PaymentStatus] = mapped_column(
        SQLEnum(PaymentStatus, values_callable=_values), nullable=False
    )

    payment_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Client-supplied key; a retried submission returns the original row
    idempotency_key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    notes: Mapped[str] = mapped_column(Text, nullable=True)

    # Relationships
    tenant = relationship("Tenant", back_populates="payments")

    __table_args__ = (
        Index("idx_payments_tenant_kind", "tenant_id", "obligation_kind"),
        CheckConstraint("balance >= 0", name="balance_non_negative"),
        CheckConstraint(
            "(CASE WHEN rent_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN monthly_service_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN maintenance_request_id IS NULL THEN 0 ELSE 1 END) <= 1",
            name="single_obligation_reference",
        ),
    )
