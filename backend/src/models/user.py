"""User SQLAlchemy model"""

from sqlalchemy import Column, Integer, Text, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship, validates

from .base import Base, utcnow


class User(Base):
    """Account that operates on documents.

    The optional area and employee links scope which documents the user can
    see and move. Administrators are not scoped. Password handling lives in
    the external authentication service, so no credential columns are kept
    here.
    """
    __tablename__ = "app_user"
    __table_args__ = (
        Index("ix_app_user_area_id", "area_id"),
        Index("ix_app_user_employee_id", "employee_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=False)
    role = Column(Text, nullable=False)
    area_id = Column(Integer, ForeignKey("area.id", ondelete="SET NULL"), nullable=True)
    employee_id = Column(Integer, ForeignKey("employee.id", ondelete="SET NULL"), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    area = relationship("Area")
    employee = relationship("Employee")

    @validates('username')
    def validate_username(self, key, value):
        """Usernames are stored lowercase and without surrounding spaces"""
        if not value or not value.strip():
            raise ValueError("Username cannot be empty")
        return value.strip().lower()

    def to_dict(self):
        """Convert user to dictionary representation"""
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
            "role": self.role,
            "area_id": self.area_id,
            "employee_id": self.employee_id,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
