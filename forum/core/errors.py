import functools
import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError

logger = logging.getLogger(__name__)


class ForumError(Exception):
    """Base class for errors surfaced to API callers"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "internal error"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class DuplicateIdentity(ForumError):
    status_code = status.HTTP_409_CONFLICT
    detail = "email or username already taken"


class InvalidCredentials(ForumError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "invalid credentials"


class Unauthenticated(ForumError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Not authenticated"


class InvalidValue(ForumError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "invalid reaction value"


class NotFound(ForumError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "not found"


class Transient(ForumError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "temporary storage failure"


def storage_operation(func):
    """Turn storage timeouts and connection failures into Transient.

    No retry happens here; the caller decides.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (OperationalError, PoolTimeoutError) as e:
            logger.warning(f"Storage failure in {func.__name__}: {e}")
            raise Transient() from e
    return wrapper


async def forum_error_handler(request: Request, exc: ForumError) -> JSONResponse:
    headers = None
    if isinstance(exc, (Unauthenticated, InvalidCredentials)):
        headers = {"WWW-Authenticate": "Cookie"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=headers,
    )
