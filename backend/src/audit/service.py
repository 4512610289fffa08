"""Audit logging service for security events.

This service provides a centralized interface for creating immutable audit log
entries. Document movements are already recorded in the tracking ledger; the
audit log holds the events that leave no ledger trace:

- DOCUMENT_DELETED (keeps the numbers of a hard-deleted document)
- PERMISSION_DENIED (movement, status change or deletion refused)
"""

from typing import Optional, Dict, Any

from sqlalchemy.orm import Session

from models.audit_log import AuditLog


DOCUMENT_DELETED = "DOCUMENT_DELETED"
PERMISSION_DENIED = "PERMISSION_DENIED"


def log_audit_event(
    db: Session,
    action: str,
    actor_id: Optional[int] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[int] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """Create an audit log entry.

    All parameters are stored as-is. This function does not validate action
    names or entity types.

    Args:
        db: Database session
        action: Event action (e.g., "DOCUMENT_DELETED")
        actor_id: User who performed the action (None for system events)
        entity_type: Type of entity affected (e.g., "document")
        entity_id: ID of affected entity
        metadata: Additional context as JSON

    Returns:
        AuditLog: The created audit log entry

    Example:
        log_audit_event(
            db=db,
            action="DOCUMENT_DELETED",
            actor_id=admin.id,
            entity_type="document",
            entity_id=document.id,
            metadata={"tracking_number": document.tracking_number}
        )
    """
    audit_entry = AuditLog(
        actor_id=actor_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        metadata_json=metadata,
    )

    db.add(audit_entry)
    db.flush()  # Get ID without committing transaction

    return audit_entry
