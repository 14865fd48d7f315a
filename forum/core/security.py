from datetime import datetime
from typing import Annotated
from fastapi import Depends, Request, Response
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from forum.core.config import get_settings
from forum.db.database import get_session
from forum.services import auth, sessions
from forum.services.sessions import Identity

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=get_settings().BCRYPT_ROUNDS,
)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """验证密码"""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """生成密码哈希"""
    return pwd_context.hash(password)

def dummy_verify() -> None:
    """Spend one hash verification without a stored hash"""
    pwd_context.dummy_verify()

def get_session_token(request: Request) -> str | None:
    """Session token from the request cookie"""
    return request.cookies.get(get_settings().COOKIE_NAME)

def set_session_cookie(response: Response, token: str, expires_at: datetime) -> None:
    """Hand the token to the client: HTTP-only, SameSite=Lax, whole site"""
    response.set_cookie(
        key=get_settings().COOKIE_NAME,
        value=token,
        expires=expires_at.strftime("%a, %d %b %Y %H:%M:%S GMT"),
        path="/",
        httponly=True,
        samesite="lax",
    )

def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=get_settings().COOKIE_NAME,
        path="/",
        httponly=True,
        samesite="lax",
    )

def get_current_identity(
    token: Annotated[str | None, Depends(get_session_token)],
    session: Session = Depends(get_session)
) -> Identity:
    """获取当前用户"""
    return auth.require_auth(session, token)

def get_optional_identity(
    token: Annotated[str | None, Depends(get_session_token)],
    session: Session = Depends(get_session)
) -> Identity | None:
    """获取当前用户（可选）"""
    return sessions.resolve(session, token)
