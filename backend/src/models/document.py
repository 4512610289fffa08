"""Process document SQLAlchemy model

A document ("process") is the unit of work routed between areas and
employees. Its current location is a cached projection of the tail of its
tracking ledger.
"""

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class Document(Base):
    """Document routed through the organization.

    Identity is given by two generated numbers: the process number
    (PROC-YYYY-MM-DD-NNNN, business facing) and the tracking number
    (TRK-YYYY-NNN, globally unique).

    current_area_id and current_employee_id are only written together with a
    DocumentTracking entry. The version column is the optimistic
    concurrency token; SQLAlchemy bumps it on every UPDATE and rejects writes
    based on a stale read.
    """
    __tablename__ = "process_document"
    __table_args__ = (
        Index("ix_process_document_current_area_id", "current_area_id"),
        Index("ix_process_document_current_employee_id", "current_employee_id"),
        Index("ix_process_document_status", "status"),
        Index("ix_process_document_process_number", "process_number"),
        CheckConstraint(
            "priority IN ('Normal', 'Com Contagem de Prazo', 'Urgente')",
            name="ck_process_document_priority"
        ),
        CheckConstraint(
            "status IN ('Pending', 'Em Análise', 'In Progress', 'Completed', 'Archived')",
            name="ck_process_document_status"
        ),
        CheckConstraint("folios > 0", name="ck_process_document_folios"),
        # Never reuse a freed id: kept ledger rows reference it
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    process_number = Column(Text, nullable=False)
    tracking_number = Column(Text, nullable=False, unique=True)
    document_type_id = Column(
        Integer,
        ForeignKey("document_type.id", ondelete="RESTRICT"),
        nullable=False
    )
    priority = Column(Text, nullable=False, default="Normal")

    # Location (origin is immutable after creation)
    origin_area_id = Column(Integer, ForeignKey("area.id", ondelete="RESTRICT"), nullable=False)
    current_area_id = Column(Integer, ForeignKey("area.id", ondelete="RESTRICT"), nullable=False)
    current_employee_id = Column(
        Integer,
        ForeignKey("employee.id", ondelete="SET NULL"),
        nullable=True
    )

    status = Column(Text, nullable=False, default="Em Análise")
    subject = Column(Text, nullable=False)
    folios = Column(Integer, nullable=False, default=1)
    file_path = Column(Text, nullable=True)

    # Sender block (stored verbatim, no business rules attached)
    sender_name = Column(Text, nullable=True)
    sender_document_id = Column(Text, nullable=True)
    sender_email = Column(Text, nullable=True)
    sender_phone = Column(Text, nullable=True)
    representation = Column(Text, nullable=True)
    company_name = Column(Text, nullable=True)
    company_tax_id = Column(Text, nullable=True)

    deadline_days = Column(Integer, nullable=True)
    deadline = Column(DateTime, nullable=True)

    created_by = Column(Integer, ForeignKey("app_user.id", ondelete="RESTRICT"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    version = Column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    document_type = relationship("DocumentType")
    origin_area = relationship("Area", foreign_keys=[origin_area_id])
    current_area = relationship("Area", foreign_keys=[current_area_id])
    current_employee = relationship("Employee", foreign_keys=[current_employee_id])

    def to_dict(self):
        """Convert document to dictionary representation"""
        return {
            "id": self.id,
            "process_number": self.process_number,
            "tracking_number": self.tracking_number,
            "document_type_id": self.document_type_id,
            "priority": self.priority,
            "origin_area_id": self.origin_area_id,
            "current_area_id": self.current_area_id,
            "current_employee_id": self.current_employee_id,
            "status": self.status,
            "subject": self.subject,
            "folios": self.folios,
            "file_path": self.file_path,
            "deadline_days": self.deadline_days,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return (
            f"<Document(id={self.id}, process_number='{self.process_number}', "
            f"current_area_id={self.current_area_id})>"
        )
