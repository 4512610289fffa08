"""Employee SQLAlchemy model"""

from sqlalchemy import Column, Integer, Text, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class Employee(Base):
    """Person affiliated with exactly one area.

    Documents can only be assigned to active employees of the area the
    document is currently in.
    """
    __tablename__ = "employee"
    __table_args__ = (
        Index("ix_employee_area_id", "area_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    dni = Column(Text, nullable=False, unique=True)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    area_id = Column(Integer, ForeignKey("area.id", ondelete="RESTRICT"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    area = relationship("Area", back_populates="employees")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_dict(self):
        return {
            "id": self.id,
            "dni": self.dni,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "area_id": self.area_id,
            "is_active": self.is_active,
        }
