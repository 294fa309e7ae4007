"""
Database configuration and session management.
"""

from functools import lru_cache
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from timesheets.config import get_settings


# Create declarative base
Base = declarative_base()


def _configure_sqlite(engine: Engine) -> None:
    """
    Let SQLAlchemy drive transactions on SQLite so SAVEPOINTs work, and
    enforce foreign keys.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(connection):
        connection.exec_driver_sql("BEGIN")


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine for ``database_url``."""
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url.rstrip("/") == "sqlite:":
            # One shared connection, otherwise every session sees an empty database
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, echo=echo, **kwargs)
        _configure_sqlite(engine)
        return engine

    return create_engine(database_url, echo=echo, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create the session factory bound to ``engine``."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


@lru_cache()
def get_engine() -> Engine:
    """Engine for the configured database."""
    settings = get_settings()
    return create_db_engine(settings.database_url, echo=settings.database_echo)


@lru_cache()
def get_session_factory() -> sessionmaker:
    return create_session_factory(get_engine())


def create_tables(engine: Engine) -> None:
    """Create every table that does not exist yet."""
    # Register the models on Base.metadata
    from timesheets.infrastructure.db import models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def drop_tables(engine: Engine) -> None:
    from timesheets.infrastructure.db import models  # noqa: F401
    Base.metadata.drop_all(bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function to get database session.
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()
