from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine, SQLModel, Session

from config import Settings


def create_db_engine(settings: Settings) -> Engine:
    """Create the SQLAlchemy engine for the configured database"""
    kwargs = {"echo": settings.sql_echo}

    if settings.database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        # In-memory SQLite lives inside one connection; share it across threads
        if settings.database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool

    return create_engine(settings.database_url, **kwargs)


def create_db_and_tables(engine: Engine):
    """Create all tables in the database"""
    SQLModel.metadata.create_all(engine)


def get_session(request: Request):
    """Get database session - used as FastAPI dependency"""
    with Session(request.app.state.engine) as session:
        yield session
