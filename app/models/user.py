"""
User Model - admin panel operators
"""
from enum import Enum
from sqlalchemy import String, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Uuid
import uuid

from app.db.base import Base, TimestampMixin


class UserRole(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class User(Base, TimestampMixin):
    """Operator account that signs in to the admin panel"""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)

    role: Mapped[UserRole] = mapped_column(SQLEnum(UserRole), default=UserRole.STAFF, nullable=False)
    status: Mapped[UserStatus] = mapped_column(SQLEnum(UserStatus), default=UserStatus.ACTIVE, nullable=False)

    # Public URL handed back by the file-storage collaborator
    profile_url: Mapped[str] = mapped_column(String(500), nullable=True)

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE
