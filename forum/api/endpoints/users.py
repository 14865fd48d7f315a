from typing import Annotated
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from forum.core.config import get_settings
from forum.core.security import (
    get_current_identity,
    get_session_token,
    set_session_cookie,
    clear_session_cookie,
)
from forum.db.database import get_session
from forum.schemas.user import UserCreate, UserResponse, UserLogin, IdentityResponse, LoginResponse
from forum.services import credentials, sessions
from forum.services.sessions import Identity

router = APIRouter()

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_in: UserCreate,
    session: Annotated[Session, Depends(get_session)]
):
    """Create a new user"""
    user_id = credentials.register(session, user_in.email, user_in.username, user_in.password)
    return credentials.get_user(session, user_id)

@router.post("/login", response_model=LoginResponse)
def login(
    user_in: UserLogin,
    response: Response,
    session: Annotated[Session, Depends(get_session)]
) -> dict:
    """Login a user and start a fresh session, replacing any previous one"""
    user = credentials.verify(session, user_in.email, user_in.password)
    token, expires_at = sessions.create_session(session, user.id, get_settings().session_ttl)
    set_session_cookie(response, token, expires_at)
    return {"username": user.username, "expires_at": expires_at}

@router.post("/logout")
def logout(
    response: Response,
    token: Annotated[str | None, Depends(get_session_token)],
    session: Annotated[Session, Depends(get_session)]
) -> dict:
    """Logout the current session"""
    sessions.revoke(session, token)
    clear_session_cookie(response)
    return {"message": "Logged out"}

@router.get("/me", response_model=IdentityResponse)
def read_users_me(
    current_user: Annotated[Identity, Depends(get_current_identity)]
) -> Identity:
    """Get the current user"""
    return current_user
