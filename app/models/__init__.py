# Import all models in dependency order so relationships resolve
from app.models.user import User, UserRole, UserStatus
from app.models.property import House, Room, RoomStatus
from app.models.tenant import Tenant
from app.models.rent import Rent
from app.models.monthly_service import MonthlyService
from app.models.maintenance import (
    MaintenanceIssue,
    MaintenanceRequest,
    MaintenanceRequestItem,
    MaintenanceStatus,
)
from app.models.payment import Payment, PaymentStatus, ObligationKind, EntryType

__all__ = [
    "User",
    "UserRole",
    "UserStatus",
    "House",
    "Room",
    "RoomStatus",
    "Tenant",
    "Rent",
    "MonthlyService",
    "MaintenanceIssue",
    "MaintenanceRequest",
    "MaintenanceRequestItem",
    "MaintenanceStatus",
    "Payment",
    "PaymentStatus",
    "ObligationKind",
    "EntryType",
]
