from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
import logging
import uuid

from app.core.config import settings
from app.core.security import decode_access_token
from app.database import get_db
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)


def _token_from_request(request: Request):
    """Bearer header first, then the session cookie set at login."""
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1]
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def get_current_user(
    request: Request,
    db: Session = Depends(get_db)
) -> User:
    """
    Get current authenticated user from the session token.
    Returns 401 if token is invalid or user not found.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = _token_from_request(request)
    if not token:
        raise credentials_exception

    payload = decode_access_token(token)
    if not payload or payload.get("sub") is None:
        raise credentials_exception

    try:
        user_id = uuid.UUID(str(payload["sub"]))
    except ValueError:
        logger.warning(f"Token carries malformed subject: {payload.get('sub')}")
        raise credentials_exception

    user = db.get(User, user_id)
    if user is None or not user.is_active:
        logger.warning(f"User not found or inactive: {user_id}")
        raise credentials_exception

    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != UserRole.ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user
