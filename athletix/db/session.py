from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from athletix.config.settings import settings
from athletix.core.errors import AthletixError


def _is_postgresql(url: str) -> bool:
    lowered = url.lower()
    return "postgresql" in lowered or "postgres" in lowered


def _validate_postgresql_driver() -> None:
    """Validate PostgreSQL driver is installed when using PostgreSQL.

    Must actually import psycopg2 (not just find_spec) because SQLAlchemy
    will try to import it when creating the engine.
    """
    try:
        import psycopg2  # noqa: F401

        logger.info("PostgreSQL driver (psycopg2) is available")
    except ImportError as e:
        logger.error("PostgreSQL driver (psycopg2) is not installed. Install it with: pip install psycopg2-binary")
        raise ImportError("PostgreSQL driver required. Install with: pip install psycopg2-binary") from e


_engine = None
_SessionLocal = None


def _get_engine():
    """Get or create the database engine (lazy initialization)."""
    global _engine
    if _engine is None:
        is_postgresql = _is_postgresql(settings.database_url)
        connect_args = {}
        if is_postgresql:
            _validate_postgresql_driver()
            connect_args = {
                "connect_timeout": 10,
                "application_name": "athletix",
            }
            logger.info("Using PostgreSQL database")
        else:
            logger.warning("Using SQLite database (local development only)")
            if "sqlite" in settings.database_url.lower():
                connect_args = {"check_same_thread": False}

        _engine = create_engine(
            settings.database_url,
            connect_args=connect_args,
            echo=False,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        logger.info("Database engine initialized")
    return _engine


def get_engine():
    """Get or create the database engine (public API)."""
    return _get_engine()


def _get_session_local():
    """Get or create the session factory (lazy initialization)."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_get_engine())
        logger.info("Database session factory initialized")
    return _SessionLocal


def check_database_connection() -> None:
    """Run a trivial query to confirm the database is reachable."""
    with get_engine().connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info("Database connection test successful")


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Get database session context manager.

    Commits on clean exit. Bulk UPDATE/DELETE statements do not mark the
    session dirty, so the commit is unconditional. Domain errors roll back
    without being logged as database failures; anything else is logged and
    rolled back.
    """
    session = _get_session_local()()
    try:
        yield session
        session.commit()
    except AthletixError:
        logger.debug("Domain error in session, rolling back")
        session.rollback()
        raise
    except Exception as e:
        logger.error(f"Database session error, rolling back: {type(e).__name__}: {e}")
        session.rollback()
        raise
    finally:
        session.close()
