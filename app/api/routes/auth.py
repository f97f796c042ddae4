"""
Authentication Endpoints
Login, logout and the current operator's profile
"""
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
import logging

from app.core.config import settings, is_production
from app.core.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.user import Token, UserLogin, UserResponse
from app.services.auth_service import authenticate_user, generate_token

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=Token)
def login(user_credentials: UserLogin, response: Response, db: Session = Depends(get_db)):
    """Login and get access token with user info"""
    user = authenticate_user(db, user_credentials.username, user_credentials.password)
    if not user:
        logger.info(f"[auth] Failed login for {user_credentials.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = generate_token(user)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=access_token,
        httponly=True,
        samesite="lax",
        secure=is_production(),
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    logger.info(f"[auth] {user.username} logged in")
    return {"access_token": access_token, "token_type": "bearer", "user": UserResponse.model_validate(user)}


@router.post("/logout")
def logout(response: Response):
    """Clear the session cookie; bearer tokens simply expire"""
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"success": True, "message": "Logged out"}


@router.get("/me", response_model=UserResponse)
def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user