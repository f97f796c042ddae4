"""
Authentication Service
Handles user creation, authentication, and token generation
"""
from sqlalchemy.orm import Session
from datetime import timedelta
from typing import Optional
import logging
import uuid

from app.models.user import User, UserRole, UserStatus
from app.core.exceptions import ConflictError
from app.core.security import get_password_hash, verify_password, create_access_token
from app.core.config import settings

logger = logging.getLogger(__name__)


def create_user(
    db: Session,
    username: str,
    full_name: str,
    password: str,
    role: UserRole = UserRole.STAFF,
    status: UserStatus = UserStatus.ACTIVE,
    profile_url: Optional[str] = None
) -> User:
    """
    Create a new admin-panel user

    Args:
        db: Database session
        username: Login name (unique)
        full_name: User full name
        password: Plain text password (will be hashed)
        role: admin or staff (default: staff)
        status: active or inactive
        profile_url: Avatar URL (optional)

    Returns:
        Created user object

    Raises:
        ConflictError: username already taken
    """
    if get_user_by_username(db, username):
        raise ConflictError("username already exists", field="username")

    db_user = User(
        id=uuid.uuid4(),
        username=username,
        full_name=full_name,
        hashed_password=get_password_hash(password),
        role=role,
        status=status,
        profile_url=profile_url,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info(f"[auth] Created user {db_user.username} ({db_user.role.value})")
    return db_user


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    """
    Authenticate user with username and password

    Args:
        db: Database session
        username: Login name
        password: Plain text password

    Returns:
        User object if authentication successful, None otherwise
    """
    user = get_user_by_username(db, username)

    if not user or not verify_password(password, user.hashed_password):
        return None
    if not user.is_active:
        logger.info(f"[auth] Inactive user {username} attempted login")
        return None

    return user


def generate_token(user: User) -> str:
    """
    Generate access token for user

    Args:
        user: User object

    Returns:
        JWT access token string
    """
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return create_access_token(
        data={"sub": str(user.id), "username": user.username, "role": user.role.value},
        expires_delta=access_token_expires
    )


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()
