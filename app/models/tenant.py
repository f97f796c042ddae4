"""
Tenant Model
"""
from sqlalchemy import String
from sqlalchemy import Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

from app.db.base import Base, TimestampMixin


class Tenant(Base, TimestampMixin):
    """
    Tenant reference data
    Referenced by rents, maintenance requests and payments
    """
    __tablename__ = "tenants"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    address: Mapped[str] = mapped_column(String(500), nullable=False)

    # Photo URL from the file-storage collaborator
    profile_url: Mapped[str] = mapped_column(String(500), nullable=True)

    # Relationships
    rents = relationship("Rent", back_populates="tenant")
    payments = relationship("Payment", back_populates="tenant")
    maintenance_requests = relationship("MaintenanceRequest", back_populates="tenant")
