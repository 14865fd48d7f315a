from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from .api.api import api_router
from .core.config import get_settings
from .core.errors import ForumError, forum_error_handler
from .db.database import create_tables, engine_from_settings, get_session_maker
from .api.endpoints.categories import seed_default_categories
from .services.sessions import reap_expired
from fastapi.responses import Response
import logging
import json
import traceback

logger = logging.getLogger("fastapi")

REDACTED_FIELDS = {"password"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    settings = get_settings()
    engine = engine_from_settings(settings)
    app.state.session_maker = get_session_maker(engine)

    # make sure tables are created
    create_tables(engine)
    with app.state.session_maker() as session:
        if settings.SEED_CATEGORIES:
            seed_default_categories(session)
        reap_expired(session)
    yield
    engine.dispose()


def redact_body(body: bytes) -> str | None:
    """Request body for logging, with password fields masked"""
    if not body:
        return None
    try:
        payload = json.loads(body)
    except ValueError:
        return body.decode(errors="replace")
    if isinstance(payload, dict):
        payload = {
            key: "***" if key in REDACTED_FIELDS else value
            for key, value in payload.items()
        }
    return json.dumps(payload)


app = FastAPI(title="Forum", lifespan=lifespan)
app.add_exception_handler(ForumError, forum_error_handler)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    body = await request.body()
    request_info = {
        "url": str(request.url),
        "method": request.method,
        "body": redact_body(body),
        "path_params": request.path_params,
        "query_params": dict(request.query_params)
    }

    try:
        # execute the request
        response = await call_next(request)

        if response.status_code >= 400:
            response_body = b""
            async for chunk in response.body_iterator:
                response_body += chunk

            logger.error(
                f"Request failed with status {response.status_code}\n"
                f"Request: {json.dumps(request_info, indent=2)}\n"
                f"Response: {response_body.decode()}\n"
            )
            return Response(
                content=response_body,
                status_code=response.status_code,
                headers=dict(response.headers),
                media_type=response.media_type
            )

        return response

    except Exception as e:
        logger.error(
            f"Request failed with exception\n"
            f"Request: {json.dumps(request_info, indent=2)}\n"
            f"Error: {str(e)}\n"
            f"Traceback: {traceback.format_exc()}"
        )
        raise

# register the API router
app.include_router(api_router, prefix="/api")
