"""Process routing service - Business logic for document routing and tracking.

Every mutating operation re-reads current state, validates it, writes the
document and appends exactly one tracking entry inside a single unit of
work. The document's current location is only ever written from the entry
being appended, so it always mirrors the tail of the ledger.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from auth.roles import is_administrator
from audit.service import log_audit_event, DOCUMENT_DELETED, PERMISSION_DENIED
from config import Settings, get_settings
from domain.processes import (
    ProcessStatus,
    DEFAULT_STATUS,
    TransitionPolicy,
    MovementDecision,
    DeletionDecision,
    ProcessValidationError,
    StatusTransitionError,
    PermissionDeniedError,
    InvalidReferenceError,
    ProcessNotFoundError,
    Priority,
    calculate_deadline,
    parse_priority,
    parse_status,
    get_transition_policy,
    generate_process_number,
    generate_tracking_number,
    validate_document_movement,
    validate_document_deletion,
)
from domain.processes.permissions import REASON_NOT_FOUND
from domain.processes.ports import ProcessRepositoryPort
from infrastructure.repositories.process_repository import SqlAlchemyProcessRepository
from models.base import utcnow
from models.document import Document
from models.document_tracking import DocumentTracking


logger = logging.getLogger(__name__)

# Optional sender/company fields copied verbatim on creation
SENDER_FIELDS = (
    "sender_name",
    "sender_document_id",
    "sender_email",
    "sender_phone",
    "representation",
    "company_name",
    "company_tax_id",
    "file_path",
)


class ProcessRoutingService:
    """Service for document routing operations."""

    def __init__(
        self,
        db: Session,
        settings: Optional[Settings] = None,
        repository: Optional[ProcessRepositoryPort] = None,
        clock: Optional[Callable[[], datetime]] = None,
        transition_policy: Optional[TransitionPolicy] = None,
    ):
        self.db = db
        self.settings = settings or get_settings()
        self.repository = repository or SqlAlchemyProcessRepository(db)
        self.clock = clock or utcnow
        self.transition_policy = transition_policy or get_transition_policy(
            self.settings.STATUS_TRANSITION_POLICY
        )

    # ------------------------------------------------------------------
    # Permission predicates
    # ------------------------------------------------------------------

    def validate_document_movement(self, user_id: int, document_id: int) -> MovementDecision:
        """Check whether a user may move, assign or change the status of a document."""
        return validate_document_movement(self.repository, user_id, document_id)

    def validate_document_deletion(self, document_id: int, user_id: int) -> DeletionDecision:
        """Check whether a user may delete a document."""
        return validate_document_deletion(self.repository, document_id, user_id)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_document(self, data: Dict[str, Any], created_by: int) -> Document:
        """Create a document and its creation entry in the tracking ledger.

        Args:
            data: Document fields. subject, document_type_id and
                origin_area_id are required; priority, status,
                current_area_id, current_employee_id, deadline_days, folios
                and the sender fields are optional.
            created_by: ID of the creating user

        Returns:
            The persisted Document

        Raises:
            ProcessValidationError: If a required field is missing or a value is unknown
            ProcessNotFoundError: If the creating user does not exist
            InvalidReferenceError: If the document type, an area or the initial
                employee is not usable
        """
        subject = (data.get("subject") or "").strip()
        if not subject:
            raise ProcessValidationError("Subject is required")
        if not data.get("document_type_id"):
            raise ProcessValidationError("Document type is required")
        if not data.get("origin_area_id"):
            raise ProcessValidationError("Origin area is required")

        try:
            priority = parse_priority(data.get("priority"))
        except ValueError:
            raise ProcessValidationError(f"Invalid priority: {data.get('priority')}")

        status = data.get("status") or DEFAULT_STATUS.value
        if parse_status(status) is None:
            raise ProcessValidationError(f"Invalid status: {status}")

        custom_days = self._check_day_count(data.get("deadline_days"))
        folios = data.get("folios")
        if folios is None:
            folios = 1
        if folios < 1:
            raise ProcessValidationError("Folios must be at least 1")

        origin_area_id = data["origin_area_id"]
        current_area_id = data.get("current_area_id") or origin_area_id
        current_employee_id = data.get("current_employee_id") or None

        now = self.clock()

        with self.repository.unit_of_work():
            if self.repository.get_user(created_by) is None:
                raise ProcessNotFoundError(f"User {created_by} not found")

            document_type = self.repository.get_document_type(data["document_type_id"])
            if document_type is None:
                raise InvalidReferenceError(f"Document type {data['document_type_id']} not found")
            if not document_type.is_active:
                raise InvalidReferenceError(f"Document type '{document_type.name}' is inactive")

            for area_id in {origin_area_id, current_area_id}:
                if self.repository.get_area(area_id) is None:
                    raise InvalidReferenceError(f"Area {area_id} not found")
            if current_employee_id is not None:
                self._require_assignable_employee(current_employee_id, current_area_id)

            process_number = generate_process_number(self.repository, now)
            tracking_number = generate_tracking_number(self.repository, now)
            deadline = calculate_deadline(
                priority,
                custom_days,
                now=now,
                add_days=self.repository.calculate_deadline_date,
            )

            document = self.repository.create_document(
                process_number=process_number,
                tracking_number=tracking_number,
                document_type_id=data["document_type_id"],
                priority=priority.value,
                origin_area_id=origin_area_id,
                current_area_id=current_area_id,
                current_employee_id=current_employee_id,
                status=status,
                subject=subject,
                folios=folios,
                deadline_days=deadline.deadline_days,
                deadline=deadline.deadline,
                created_by=created_by,
                created_at=now,
                **{field: data.get(field) for field in SENDER_FIELDS},
            )

            self._record_transition(
                document,
                to_area_id=current_area_id,
                to_employee_id=current_employee_id,
                description=f"Documento {process_number} criado com prioridade {priority.value}",
                deadline_days=deadline.deadline_days,
                created_by=created_by,
                now=now,
                from_location=(origin_area_id, None),
            )

        logger.info(
            f"Document {process_number} created ({tracking_number}) in area {current_area_id}",
            extra={"user_id": created_by, "document_id": document.id, "process_number": process_number},
        )
        return document

    def move_document(
        self,
        document_id: int,
        to_area_id: int,
        user_id: int,
        to_employee_id: Optional[int] = None,
        description: Optional[str] = None,
        deadline_days: Optional[int] = None,
        attachment_path: Optional[str] = None,
    ) -> DocumentTracking:
        """Forward a document to an area, optionally to an employee of that area.

        The deadline is recomputed from deadline_days when a positive value
        is given and cleared otherwise.

        Returns:
            The new tracking entry

        Raises:
            ProcessNotFoundError: If the user or document does not exist
            PermissionDeniedError: If the user may not move the document
            InvalidReferenceError: If the destination area/employee is not usable
        """
        custom_days = self._check_day_count(deadline_days)
        now = self.clock()

        with self.repository.unit_of_work():
            self._require_movement(user_id, document_id, action="move")
            document = self._get_document_or_raise(document_id)

            area = self.repository.get_area(to_area_id)
            if area is None:
                raise InvalidReferenceError(f"Destination area {to_area_id} not found")
            if not area.is_active:
                raise InvalidReferenceError(f"Destination area '{area.name}' is inactive")

            if to_employee_id:
                self._require_assignable_employee(to_employee_id, to_area_id)
            else:
                to_employee_id = None

            deadline = calculate_deadline(
                Priority.NORMAL,
                custom_days,
                now=now,
                add_days=self.repository.calculate_deadline_date,
            )

            from_area_id = document.current_area_id
            entry = self._record_transition(
                document,
                to_area_id=to_area_id,
                to_employee_id=to_employee_id,
                description=description or f"Encaminhado para {area.name}",
                deadline_days=deadline.deadline_days,
                created_by=user_id,
                now=now,
                attachment_path=attachment_path,
                document_updates={
                    "deadline_days": deadline.deadline_days,
                    "deadline": deadline.deadline,
                },
            )

        logger.info(
            f"Document {document.process_number} moved from area {from_area_id} "
            f"to area {to_area_id} (employee {to_employee_id})",
            extra={"user_id": user_id, "document_id": document_id, "process_number": document.process_number},
        )
        return entry

    def assign_document(self, document_id: int, employee_id: int, user_id: int) -> DocumentTracking:
        """Assign a document to an employee of its current area.

        The area and the deadline fields are left unchanged.

        Returns:
            The new tracking entry
        """
        now = self.clock()

        with self.repository.unit_of_work():
            self._require_movement(user_id, document_id, action="assign")
            document = self._get_document_or_raise(document_id)

            employee = self.repository.get_employee(employee_id)
            if employee is None:
                raise InvalidReferenceError(f"Employee {employee_id} not found")
            if not employee.is_active:
                raise InvalidReferenceError(f"Employee {employee.full_name} is inactive")
            if employee.area_id != document.current_area_id:
                raise InvalidReferenceError(
                    "Employee does not belong to the document's current area"
                )

            entry = self._record_transition(
                document,
                to_area_id=document.current_area_id,
                to_employee_id=employee.id,
                description=f"Documento atribuído a {employee.full_name}",
                deadline_days=None,
                created_by=user_id,
                now=now,
            )

        logger.info(
            f"Document {document.process_number} assigned to employee {employee_id}",
            extra={"user_id": user_id, "document_id": document_id, "process_number": document.process_number},
        )
        return entry

    def update_document_status(self, document_id: int, status: str, user_id: int) -> DocumentTracking:
        """Change the status of a document, recording it in the ledger.

        Returns:
            The new tracking entry

        Raises:
            ProcessValidationError: If status is not a known value
            StatusTransitionError: If the transition policy rejects the change
        """
        now = self.clock()

        with self.repository.unit_of_work():
            self._require_movement(user_id, document_id, action="update_status")

            new_status = parse_status(status)
            if new_status is None:
                raise ProcessValidationError(
                    f"Invalid status: {status}. "
                    f"Valid values: {[s.value for s in ProcessStatus]}"
                )

            document = self._get_document_or_raise(document_id)
            current_status = parse_status(document.status)
            if current_status is not None and not self.transition_policy.can_transition(
                current_status, new_status
            ):
                raise StatusTransitionError(
                    f"Invalid transition: {current_status.value} -> {new_status.value}. "
                    f"Allowed transitions from {current_status.value}: "
                    f"{[s.value for s in self.transition_policy.allowed_from(current_status)]}"
                )

            entry = self._record_transition(
                document,
                to_area_id=document.current_area_id,
                to_employee_id=document.current_employee_id,
                description=f"Status alterado para: {new_status.value}",
                deadline_days=None,
                created_by=user_id,
                now=now,
                document_updates={"status": new_status.value},
            )

        logger.info(
            f"Document {document.process_number} status changed to {new_status.value}",
            extra={"user_id": user_id, "document_id": document_id, "process_number": document.process_number},
        )
        return entry

    def delete_document(self, document_id: int, user_id: int) -> None:
        """Hard delete a document that has no movement history.

        Ledger rows are kept unless DELETE_TRACKING_ON_DOCUMENT_DELETE is set.
        The deletion is written to the audit log with the document numbers.

        Raises:
            ProcessNotFoundError: If the user or document does not exist
            PermissionDeniedError: If the deletion rules reject the request
        """
        with self.repository.unit_of_work():
            decision = self.validate_document_deletion(document_id, user_id)
            if not decision.can_delete:
                self._deny(user_id, document_id, "delete", decision.reason)

            document = self._get_document_or_raise(document_id)
            snapshot = {
                "process_number": document.process_number,
                "tracking_number": document.tracking_number,
                "subject": document.subject,
            }

            removed_entries = 0
            if self.settings.DELETE_TRACKING_ON_DOCUMENT_DELETE:
                removed_entries = self.repository.delete_document_tracking(document_id)
            snapshot["tracking_entries_removed"] = removed_entries

            self.repository.delete_document(document)
            log_audit_event(
                db=self.db,
                action=DOCUMENT_DELETED,
                actor_id=user_id,
                entity_type="document",
                entity_id=document_id,
                metadata=snapshot,
            )

        logger.info(
            f"Document {snapshot['process_number']} deleted "
            f"({removed_entries} tracking entries removed)",
            extra={"user_id": user_id, "document_id": document_id, "process_number": snapshot["process_number"]},
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_document(self, document_id: int) -> Document:
        return self._get_document_or_raise(document_id)

    def get_document_by_tracking_number(self, tracking_number: str) -> Document:
        document = self.repository.get_document_by_tracking_number(tracking_number)
        if document is None:
            raise ProcessNotFoundError(f"Document {tracking_number} not found")
        return document

    def get_document_history(self, document_id: int) -> List[DocumentTracking]:
        """Return the ledger of a document, oldest entry first."""
        self._get_document_or_raise(document_id)
        return self.repository.list_document_tracking_by_document_id(document_id)

    def get_recent_activity(self, limit: int = 10) -> List[DocumentTracking]:
        if limit < 1:
            raise ProcessValidationError("Limit must be at least 1")
        return self.repository.list_recent_tracking(limit)

    def list_documents_for_user(self, user_id: int) -> List[Document]:
        """List the documents visible to a user.

        Administrators see everything, users with an area see the documents
        currently in that area, everyone else sees nothing.
        """
        user = self.repository.get_user(user_id)
        if user is None:
            return []

        if is_administrator(user):
            return self.repository.list_documents()

        if user.area_id:
            return self.repository.get_documents_by_area_id(user.area_id)

        return []

    def list_assigned_documents(self, user_id: int) -> List[Document]:
        """List documents currently assigned to the user's employee record."""
        user = self.repository.get_user(user_id)
        if user is None or not user.employee_id:
            return []
        return self.repository.get_documents_by_employee_id(user.employee_id)

    def get_documents_near_deadline(self, days: Optional[int] = None) -> List[Document]:
        """Documents whose deadline falls within the next `days` days (inclusive)."""
        if days is None:
            days = self.settings.NEAR_DEADLINE_DAYS
        if days < 0:
            raise ProcessValidationError("Days must not be negative")
        return self.repository.get_documents_with_deadline(days, self.clock())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _record_transition(
        self,
        document: Document,
        to_area_id: int,
        to_employee_id: Optional[int],
        description: str,
        deadline_days: Optional[int],
        created_by: int,
        now: datetime,
        attachment_path: Optional[str] = None,
        from_location: Optional[Tuple[int, Optional[int]]] = None,
        document_updates: Optional[Dict[str, Any]] = None,
    ) -> DocumentTracking:
        """Append a ledger entry and project it onto the document.

        document_updates holds extra document columns written in the same
        flush as the location (deadline, status).
        """
        if from_location is None:
            from_location = (document.current_area_id, document.current_employee_id)

        entry = self.repository.create_document_tracking(
            document_id=document.id,
            from_area_id=from_location[0],
            from_employee_id=from_location[1],
            to_area_id=to_area_id,
            to_employee_id=to_employee_id,
            description=description,
            attachment_path=attachment_path,
            deadline_days=deadline_days,
            created_by=created_by,
            created_at=now,
        )

        self.repository.update_document(
            document,
            current_area_id=entry.to_area_id,
            current_employee_id=entry.to_employee_id,
            **(document_updates or {}),
        )
        return entry

    def _require_movement(self, user_id: int, document_id: int, action: str) -> None:
        decision = self.validate_document_movement(user_id, document_id)
        if not decision.can_move:
            self._deny(user_id, document_id, action, decision.reason)

    def _deny(self, user_id: int, document_id: int, action: str, reason: Optional[str]) -> None:
        if reason == REASON_NOT_FOUND:
            raise ProcessNotFoundError(reason)

        # The denial is committed on its own: the failing operation rolls back
        log_audit_event(
            db=self.db,
            action=PERMISSION_DENIED,
            actor_id=user_id,
            entity_type="document",
            entity_id=document_id,
            metadata={"operation": action, "reason": reason},
        )
        self.repository.commit()

        logger.warning(
            f"Permission denied for {action} on document {document_id}: {reason}",
            extra={"user_id": user_id, "document_id": document_id, "operation": action},
        )
        raise PermissionDeniedError(reason or "Permission denied")

    def _get_document_or_raise(self, document_id: int) -> Document:
        document = self.repository.get_document(document_id)
        if document is None:
            raise ProcessNotFoundError(f"Document {document_id} not found")
        return document

    def _require_assignable_employee(self, employee_id: int, area_id: int) -> None:
        employee = self.repository.get_employee(employee_id)
        if employee is None:
            raise InvalidReferenceError(f"Employee {employee_id} not found")
        if not employee.is_active:
            raise InvalidReferenceError(f"Employee {employee.full_name} is inactive")
        if employee.area_id != area_id:
            raise InvalidReferenceError("Employee does not belong to the destination area")

    @staticmethod
    def _check_day_count(days: Optional[int]) -> Optional[int]:
        if days is None:
            return None
        if days < 0:
            raise ProcessValidationError("Deadline days must not be negative")
        return days or None
