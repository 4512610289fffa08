"""Repository adapters implementing domain ports on SQLAlchemy."""

from .process_repository import SqlAlchemyProcessRepository

__all__ = ["SqlAlchemyProcessRepository"]
