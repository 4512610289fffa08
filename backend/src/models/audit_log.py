"""AuditLog SQLAlchemy model"""

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Index

from .base import Base, PortableJSONB, utcnow


class AuditLog(Base):
    """AuditLog model for immutable security event logging.

    Complements the document tracking ledger with events that do not move a
    document: permission denials and deletions. Entries are append-only and
    should never be updated or deleted.
    """
    __tablename__ = "audit_log"
    __table_args__ = (
        Index("ix_audit_log_created_at", "created_at"),
        Index("ix_audit_log_entity", "entity_type", "entity_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    actor_id = Column(Integer, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True)
    action = Column(Text, nullable=False)
    entity_type = Column(Text, nullable=True)
    entity_id = Column(Integer, nullable=True)
    metadata_json = Column(PortableJSONB, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        """Convert audit log entry to dictionary representation"""
        return {
            "id": self.id,
            "actor_id": self.actor_id,
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "metadata": self.metadata_json,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
