import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from forum.core.errors import DuplicateIdentity, InvalidCredentials, storage_operation
from forum.core.security import get_password_hash, verify_password, dummy_verify
from forum.models.user import User

logger = logging.getLogger(__name__)


@storage_operation
def register(session: Session, email: str, username: str, password: str) -> int:
    """Create a user and return its id.

    Uniqueness of email and username is left to the table constraints so two
    concurrent registrations cannot both win. The error does not say which
    field collided.
    """
    user = User(
        email=email,
        username=username,
        password_hash=get_password_hash(password),
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise DuplicateIdentity()
    logger.info(f"Registered user {user.id}")
    return user.id


@storage_operation
def verify(session: Session, email: str, password: str) -> User:
    """Check an email/password pair.

    Unknown email and wrong password raise the same InvalidCredentials, and
    an unknown email still pays for one hash so timing does not tell them
    apart.
    """
    user = session.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if user is None:
        dummy_verify()
        raise InvalidCredentials()
    if not verify_password(password, user.password_hash):
        raise InvalidCredentials()
    return user


@storage_operation
def get_user(session: Session, user_id: int) -> User | None:
    return session.get(User, user_id)
