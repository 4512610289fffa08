"""Database session factory and configuration.

Provides database connectivity and session management for the DocFlow backend.
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from config import get_settings

DATABASE_URL = get_settings().DATABASE_URL

# Create engine with connection pooling
# Pool settings only apply to PostgreSQL (not SQLite)
_engine_kwargs = {
    "pool_pre_ping": True,  # Verify connections before using
    "echo": False,  # Set to True for SQL query logging
}

if DATABASE_URL.startswith("sqlite"):
    _engine_kwargs["connect_args"] = {"check_same_thread": False}
else:
    _engine_kwargs["pool_size"] = 5
    _engine_kwargs["max_overflow"] = 10

engine = create_engine(DATABASE_URL, **_engine_kwargs)

# Create session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Context manager for database sessions.

    Usage:
        with get_db_session() as session:
            session.query(Area).all()

    Automatically commits on success, rolls back on exception.
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    """Dependency for FastAPI endpoints.

    Usage:
        @app.get("/areas")
        def list_areas(db: Session = Depends(get_db)):
            return db.query(Area).all()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
