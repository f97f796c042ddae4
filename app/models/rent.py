"""
Rent Agreement Model
One row per lease of a room by a tenant
"""
from datetime import date
from sqlalchemy import String, Integer, Float, Date, ForeignKey, Uuid, Index, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

from app.db.base import Base, TimestampMixin


class Rent(Base, TimestampMixin):
    """Core rent obligation: total_rent == monthly_rent * months."""
    __tablename__ = "rents"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    tenant_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("tenants.id"), nullable=False, index=True)
    room_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("rooms.id"), nullable=False, index=True)

    guarantor_name: Mapped[str] = mapped_column(String(255), nullable=False)
    guarantor_phone: Mapped[str] = mapped_column(String(50), nullable=False)

    # Financial terms
    monthly_rent: Mapped[float] = mapped_column(Float, nullable=False)
    months: Mapped[int] = mapped_column(Integer, nullable=False)
    total_rent: Mapped[float] = mapped_column(Float, nullable=False)

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Signed contract PDF URL
    contract_url: Mapped[str] = mapped_column(String(1000), nullable=True)

    tenant = relationship("Tenant", back_populates="rents")
    room = relationship("Room", back_populates="rents")

    __table_args__ = (
        Index("idx_rents_room_period", "room_id", "start_date", "end_date"),
        CheckConstraint("months >= 1 AND months <= 12", name="months_range"),
        CheckConstraint("end_date >= start_date", name="period_order"),
    )
