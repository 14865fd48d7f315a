from datetime import datetime

from sqlalchemy.orm import Session

from forum.core.errors import Unauthenticated
from forum.services import sessions
from forum.services.sessions import Identity


def require_auth(session: Session, token: str | None, now: datetime | None = None) -> Identity:
    """Resolve ``token`` or raise Unauthenticated"""
    identity = sessions.resolve(session, token, now)
    if identity is None:
        raise Unauthenticated()
    return identity
