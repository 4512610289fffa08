"""DocumentTracking SQLAlchemy model"""

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Index

from .base import Base, utcnow


class DocumentTracking(Base):
    """Immutable ledger entry recording one state transition of a document.

    Entries are append-only. The ordered entries of a document (by created_at,
    then id) form its complete history; the first one records creation.

    document_id is deliberately not a foreign key: deleting a document keeps
    its ledger rows unless cascading deletion is configured.
    """
    __tablename__ = "document_tracking"
    __table_args__ = (
        Index("ix_document_tracking_document_id_created_at", "document_id", "created_at"),
        Index("ix_document_tracking_created_at", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(Integer, nullable=False)
    from_area_id = Column(Integer, ForeignKey("area.id", ondelete="RESTRICT"), nullable=False)
    to_area_id = Column(Integer, ForeignKey("area.id", ondelete="RESTRICT"), nullable=False)
    from_employee_id = Column(Integer, ForeignKey("employee.id", ondelete="SET NULL"), nullable=True)
    to_employee_id = Column(Integer, ForeignKey("employee.id", ondelete="SET NULL"), nullable=True)
    description = Column(Text, nullable=True)
    attachment_path = Column(Text, nullable=True)
    deadline_days = Column(Integer, nullable=True)  # value applied at this step
    created_by = Column(Integer, ForeignKey("app_user.id", ondelete="RESTRICT"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "document_id": self.document_id,
            "from_area_id": self.from_area_id,
            "to_area_id": self.to_area_id,
            "from_employee_id": self.from_employee_id,
            "to_employee_id": self.to_employee_id,
            "description": self.description,
            "attachment_path": self.attachment_path,
            "deadline_days": self.deadline_days,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
