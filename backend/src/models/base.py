"""Declarative base shared by all DocFlow models"""

from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base
from sqlalchemy import TypeDecorator, JSON
from sqlalchemy.dialects.postgresql import JSONB


class PortableJSONB(TypeDecorator):
    """JSON column stored as JSONB on PostgreSQL and plain JSON elsewhere.

    The SQLite fallback keeps the test suite runnable without a database server.
    """
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(JSON())


Base = declarative_base()


def utcnow() -> datetime:
    """Current UTC time as a naive datetime.

    Timestamps are stored without tzinfo so PostgreSQL and SQLite compare them
    the same way.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)
