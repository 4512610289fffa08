"""DocumentType SQLAlchemy model"""

from sqlalchemy import Column, Integer, Text, Boolean, DateTime

from .base import Base, utcnow


class DocumentType(Base):
    """Reference data classifying a process document (memo, request, ...)."""
    __tablename__ = "document_type"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "is_active": self.is_active}
