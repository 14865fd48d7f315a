"""Server-side sessions.

A user has at most one session row: creating a session replaces any prior
one, so the previous token stops resolving immediately. Expired rows are
removed lazily when they are looked up, and in bulk by ``reap_expired``.
"""
import logging
import secrets
from datetime import datetime, timedelta, UTC

from pydantic import BaseModel
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from forum.core.errors import storage_operation
from forum.db.database import dialect_insert
from forum.models.user import User
from forum.models.user_session import UserSession

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


class Identity(BaseModel):
    """The user a session token resolves to"""
    id: int
    username: str


def utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def as_utc(moment: datetime | None) -> datetime:
    """Normalize to the naive UTC datetimes stored in the sessions table"""
    if moment is None:
        return utcnow()
    if moment.tzinfo is not None:
        return moment.astimezone(UTC).replace(tzinfo=None)
    return moment


def new_token() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)


@storage_operation
def create_session(
    session: Session,
    user_id: int,
    ttl: timedelta,
    now: datetime | None = None,
) -> tuple[str, datetime]:
    """Start a session for ``user_id`` and return ``(token, expires_at)``.

    The row is upserted on ``user_id``; under concurrent logins the last
    writer wins.
    """
    token = new_token()
    created_at = as_utc(now)
    expires_at = created_at + ttl
    values = {"id": token, "user_id": user_id, "expires_at": expires_at, "created_at": created_at}

    stmt = dialect_insert(session, UserSession.__table__)
    if stmt is not None:
        stmt = stmt.values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[UserSession.user_id],
            set_={
                "id": stmt.excluded.id,
                "expires_at": stmt.excluded.expires_at,
                "created_at": stmt.excluded.created_at,
            },
        )
        session.execute(stmt)
    else:
        session.execute(delete(UserSession).where(UserSession.user_id == user_id))
        session.add(UserSession(**values))
    session.commit()
    logger.info(f"Session created for user {user_id}, expires {expires_at.isoformat()}")
    return token, expires_at


@storage_operation
def resolve(session: Session, token: str | None, now: datetime | None = None) -> Identity | None:
    """Return the identity bound to ``token``, or None.

    A session whose ``expires_at`` is at or before ``now`` is deleted and
    treated as absent.
    """
    if not token:
        return None
    row = session.execute(
        select(UserSession.expires_at, User.id, User.username)
        .join(User, User.id == UserSession.user_id)
        .where(UserSession.id == token)
    ).first()
    if row is None:
        return None
    if row.expires_at <= as_utc(now):
        session.execute(delete(UserSession).where(UserSession.id == token))
        session.commit()
        logger.debug(f"Expired session removed for user {row.id}")
        return None
    return Identity(id=row.id, username=row.username)


@storage_operation
def revoke(session: Session, token: str | None) -> None:
    """Delete the session for ``token``; unknown tokens are ignored"""
    if not token:
        return
    result = session.execute(delete(UserSession).where(UserSession.id == token))
    session.commit()
    if result.rowcount:
        logger.info(f"Session revoked ({token[:6]}...)")


@storage_operation
def reap_expired(session: Session, now: datetime | None = None) -> int:
    result = session.execute(delete(UserSession).where(UserSession.expires_at <= as_utc(now)))
    session.commit()
    if result.rowcount:
        logger.info(f"Reaped {result.rowcount} expired sessions")
    return result.rowcount
