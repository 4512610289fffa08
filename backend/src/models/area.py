"""Area SQLAlchemy model"""

from sqlalchemy import Column, Integer, Text, Boolean, DateTime
from sqlalchemy.orm import relationship, validates

from .base import Base, utcnow


class Area(Base):
    """Organizational unit that holds and acts on documents.

    Inactive areas stay in the database for history but are not valid
    forwarding destinations.
    """
    __tablename__ = "area"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    employees = relationship("Employee", back_populates="area")

    @validates('name')
    def validate_name(self, key, value):
        if not value or len(value.strip()) == 0:
            raise ValueError("Area name cannot be empty")
        return value.strip()

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Area(id={self.id}, name='{self.name}')>"
