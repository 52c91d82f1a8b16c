"""
Database Session Management Module
==================================

Responsible for:
- Creating the database engine from settings
- Building the session factory
- Providing the per-request session dependency for FastAPI routes
- Database health checks

The engine and session factory are created once by the application
factory and kept on `app.state`; nothing in this module holds a
module-level connection.
"""

from typing import Generator

from fastapi import Request
from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.core.logging import get_logger

# Initialize logger
logger = get_logger(__name__)


# ==========================
# Database Engine
# ==========================

def create_db_engine(settings: Settings) -> Engine:
    """
    Create the SQLAlchemy engine for the configured database.

    SQLite gets a thread-agnostic connection (and a single shared
    connection when in-memory); other backends get a validated
    connection pool.

    Args:
        settings: Application settings

    Returns:
        SQLAlchemy Engine
    """
    if settings.is_sqlite:
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in settings.DATABASE_URL:
            kwargs["poolclass"] = StaticPool
        engine = create_engine(settings.DATABASE_URL, echo=settings.DEBUG, **kwargs)
    else:
        engine = create_engine(
            settings.DATABASE_URL,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=True,  # Validate connections before use
            echo=settings.DEBUG,
        )

    @event.listens_for(engine, "connect")
    def receive_connect(dbapi_connection, connection_record):
        """Log new database connections."""
        logger.debug("db_connection_established", dialect=engine.dialect.name)

    return engine


# ==========================
# Session Factory
# ==========================

def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,  # Access objects after commit
    )


# ==========================
# Dependency for FastAPI
# ==========================

def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides a database session.

    Ensures:
    - Session is opened per request from the app's session factory
    - Session is properly closed after request completes
    - Transactions are rolled back on error

    Yields:
        SQLAlchemy Session object
    """
    db = request.app.state.session_factory()
    try:
        yield db
    except Exception as e:
        logger.error("db_session_error", error=str(e), error_type=type(e).__name__)
        db.rollback()
        raise
    finally:
        db.close()


# ==========================
# Database Health Check
# ==========================

def check_database_connection(engine: Engine) -> bool:
    """
    Check if database connection is healthy.

    Returns:
        True if connection is healthy, False otherwise
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error("db_health_check_failed", error=str(e))
        return False
