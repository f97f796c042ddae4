from sqlalchemy import String, ForeignKey, Text, Float, Enum as SQLEnum, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.db.base import Base, TimestampMixin
from enum import Enum
import uuid


class MaintenanceStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class MaintenanceIssue(Base, TimestampMixin):
    """Catalog entry: a repair type and its current price."""
    __tablename__ = "maintenance_issues"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)


class MaintenanceRequest(Base, TimestampMixin):
    __tablename__ = "maintenance_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    tenant_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("tenants.id"), nullable=True, index=True)
    room_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("rooms.id"), nullable=True, index=True)

    # Sum of the issue prices captured at request time
    total_price: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[MaintenanceStatus] = mapped_column(
        SQLEnum(MaintenanceStatus, values_callable=lambda e: [m.value for m in e]),
        default=MaintenanceStatus.PENDING,
        nullable=False,
    )
    notes: Mapped[str] = mapped_column(Text, nullable=True)

    tenant = relationship("Tenant", back_populates="maintenance_requests")
    items = relationship(
        "MaintenanceRequestItem",
        back_populates="request",
        cascade="all, delete-orphan",
    )

    @property
    def issue_ids(self) -> list:
        return [item.issue_id for item in self.items]


class MaintenanceRequestItem(Base):
    """Issue attached to a request, with its price frozen at request time."""
    __tablename__ = "maintenance_request_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    request_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("maintenance_requests.id", ondelete="CASCADE"), nullable=False, index=True
    )
    issue_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("maintenance_issues.id"), nullable=False)
    issue_name: Mapped[str] = mapped_column(String(255), nullable=False)
    price_at_request: Mapped[float] = mapped_column(Float, nullable=False)

    request = relationship("MaintenanceRequest", back_populates="items")
