from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from forum.core.config import Settings

Base = declarative_base()


def create_db_engine(url: str, timeout: float = 5.0) -> Engine:
    """创建数据库引擎

    Every storage operation is bounded by ``timeout`` seconds: SQLite waits
    at most that long on a locked database, other backends on the pool and
    on connecting.
    """
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": timeout},
        )

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    connect_args = {}
    if url.startswith("postgresql"):
        connect_args["connect_timeout"] = int(timeout)
    return create_engine(
        url,
        pool_timeout=timeout,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def engine_from_settings(settings: Settings) -> Engine:
    return create_db_engine(settings.database_url, settings.DB_TIMEOUT_SECONDS)


def get_session_maker(engine: Engine) -> sessionmaker:
    """获取会话工厂"""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_session(request: Request):
    """获取数据库会话

    The session factory is owned by the application lifespan and stored on
    ``app.state``.
    """
    session = request.app.state.session_maker()
    try:
        yield session
    finally:
        session.close()


def dialect_insert(session: Session, table):
    """INSERT construct supporting ``on_conflict_*`` for the bound dialect.

    Returns None for dialects without upsert support.
    """
    name = session.get_bind().dialect.name
    if name == "sqlite":
        return sqlite.insert(table)
    if name == "postgresql":
        return postgresql.insert(table)
    return None


def create_tables(db_engine: Engine):
    """创建所有表

    Args:
        db_engine: 数据库引擎
    """
    # make sure every model is registered on Base.metadata
    from forum.models import category, comment, post, reaction, user, user_session  # noqa: F401

    Base.metadata.create_all(bind=db_engine)
