"""
Monthly Service Model
Utility bill for one room and one month (water, electricity, fees)
"""
from sqlalchemy import String, Float, Text, ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

from app.db.base import Base, TimestampMixin


class MonthlyService(Base, TimestampMixin):
    __tablename__ = "monthly_services"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    room_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("rooms.id"), nullable=False, index=True)

    # "YYYY-MM"
    month: Mapped[str] = mapped_column(String(7), nullable=False, index=True)

    # Water meter
    water_previous: Mapped[float] = mapped_column(Float, nullable=True)
    water_current: Mapped[float] = mapped_column(Float, nullable=True)
    water_price_per_unit: Mapped[float] = mapped_column(Float, nullable=True)
    water_total: Mapped[float] = mapped_column(Float, nullable=True)

    # Electricity meter
    electricity_previous: Mapped[float] = mapped_column(Float, nullable=True)
    electricity_current: Mapped[float] = mapped_column(Float, nullable=True)
    electricity_price_per_unit: Mapped[float] = mapped_column(Float, nullable=True)
    electricity_total: Mapped[float] = mapped_column(Float, nullable=True)

    # Flat fees
    trash_fee: Mapped[float] = mapped_column(Float, nullable=True)
    maintenance_fee: Mapped[float] = mapped_column(Float, nullable=True)

    total_amount: Mapped[float] = mapped_column(Float, nullable=False)
    notes: Mapped[str] = mapped_column(Text, nullable=True)

    room = relationship("Room", back_populates="monthly_services")

    __table_args__ = (
        UniqueConstraint("room_id", "month", name="uq_monthly_services_room_month"),
    )

    @property
    def component_total(self) -> float:
        """Sum of the bill components; absent components count as 0."""
        return sum(
            value or 0.0
            for value in (self.water_total, self.electricity_total, self.trash_fee, self.maintenance_fee)
        )
