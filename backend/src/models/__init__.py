"""SQLAlchemy Models for DocFlow"""

from .base import Base
from .area import Area
from .employee import Employee
from .user import User
from .document_type import DocumentType
from .document import Document
from .document_tracking import DocumentTracking
from .audit_log import AuditLog

__all__ = [
    "Base",
    "Area",
    "Employee",
    "User",
    "DocumentType",
    "Document",
    "DocumentTracking",
    "AuditLog",
]
