from enum import Enum
from sqlalchemy import String, ForeignKey, Float, Text, Uuid, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

from app.db.base import Base, TimestampMixin


class RoomStatus(str, Enum):
    AVAILABLE = "available"
    RENTED = "rented"


class House(Base, TimestampMixin):
    __tablename__ = "houses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=True)

    rooms = relationship("Room", back_populates="house", cascade="all, delete-orphan")


class Room(Base, TimestampMixin):
    __tablename__ = "rooms"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    house_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("houses.id"), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    monthly_rent: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[RoomStatus] = mapped_column(SQLEnum(RoomStatus), default=RoomStatus.AVAILABLE, nullable=False)

    house = relationship("House", back_populates="rooms")
    rents = relationship("Rent", back_populates="room")
    monthly_services = relationship("MonthlyService", back_populates="room")
