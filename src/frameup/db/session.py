"""Database session management."""

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from frameup.config import settings


def build_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine for PostgreSQL or SQLite."""
    if url.startswith("sqlite"):
        kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live as long as their single connection
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)

    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


engine = build_engine(settings.database_url, echo=settings.database_echo)

# Create session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def get_session() -> Generator[Session, None, None]:
    """Get a database session (for FastAPI dependency injection)."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@contextmanager
def get_session_context() -> Generator[Session, None, None]:
    """Get a database session as a context manager (for use outside of FastAPI)."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """Initialize database connection and verify connectivity."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def create_all() -> None:
    """Create tables directly from the models (SQLite and local development).

    PostgreSQL deployments use the Alembic migrations instead.
    """
    from frameup.db.models import Base

    Base.metadata.create_all(engine)
