"""Integration tests for document deletion rules and its audit trail"""

import pytest
from sqlalchemy import select

from audit.service import DOCUMENT_DELETED, PERMISSION_DENIED
from config import Settings
from domain.processes import PermissionDeniedError, ProcessNotFoundError
from domain.processes.permissions import REASON_ADMIN_ONLY, REASON_HAS_HISTORY, REASON_NOT_FOUND
from models.audit_log import AuditLog
from processes.service import ProcessRoutingService


pytestmark = pytest.mark.integration


class TestValidateDocumentDeletion:
    """The predicate never mutates state"""

    def test_creation_only_document_can_be_deleted_by_admin(self, service, document, admin_user):
        decision = service.validate_document_deletion(document.id, admin_user.id)
        assert decision.can_delete is True
        assert decision.reason is None

    def test_secretary_cannot_delete(self, service, document, reception_secretary):
        decision = service.validate_document_deletion(document.id, reception_secretary.id)
        assert decision.can_delete is False
        assert decision.reason == REASON_ADMIN_ONLY

    def test_moved_document_cannot_be_deleted(self, service, document, legal_area, admin_user):
        service.move_document(document.id, legal_area.id, user_id=admin_user.id)

        decision = service.validate_document_deletion(document.id, admin_user.id)
        assert decision.reason == REASON_HAS_HISTORY

    def test_unknown_document(self, service, admin_user):
        decision = service.validate_document_deletion(9999, admin_user.id)
        assert decision.reason == REASON_NOT_FOUND

    def test_predicate_is_idempotent(self, service, db_session, document, reception_secretary):
        first = service.validate_document_deletion(document.id, reception_secretary.id)
        second = service.validate_document_deletion(document.id, reception_secretary.id)
        assert first == second
        assert db_session.execute(select(AuditLog)).scalars().all() == []


class TestDeleteDocument:
    """Test hard deletion"""

    def test_admin_deletes_creation_only_document(self, service, db_session, document, admin_user):
        document_id = document.id
        process_number = document.process_number

        service.delete_document(document_id, user_id=admin_user.id)

        with pytest.raises(ProcessNotFoundError):
            service.get_document(document_id)

        # Ledger rows are kept by default
        orphaned = service.repository.list_document_tracking_by_document_id(document_id)
        assert len(orphaned) == 1

        audit_entry = db_session.execute(
            select(AuditLog).where(AuditLog.action == DOCUMENT_DELETED)
        ).scalar_one()
        assert audit_entry.actor_id == admin_user.id
        assert audit_entry.entity_id == document_id
        assert audit_entry.metadata_json["process_number"] == process_number
        assert audit_entry.metadata_json["tracking_entries_removed"] == 0

    def test_cascade_setting_removes_ledger(self, db_session, clock, document, admin_user):
        cascading = ProcessRoutingService(
            db_session,
            settings=Settings(DELETE_TRACKING_ON_DOCUMENT_DELETE=True),
            clock=clock,
        )
        document_id = document.id

        cascading.delete_document(document_id, user_id=admin_user.id)

        assert cascading.repository.list_document_tracking_by_document_id(document_id) == []

    def test_deleted_id_is_not_reused(self, service, make_document, admin_user):
        first = make_document()
        first_id = first.id
        service.delete_document(first_id, user_id=admin_user.id)

        second = make_document(subject="Pedido de vistas")

        assert second.id != first_id
        history = service.get_document_history(second.id)
        assert len(history) == 1
        assert history[0].description.startswith(f"Documento {second.process_number} criado")

        # Still a creation-only document, so it can be deleted as well
        service.delete_document(second.id, user_id=admin_user.id)
        with pytest.raises(ProcessNotFoundError):
            service.get_document(second.id)

    def test_secretary_is_denied(self, service, db_session, document, reception_secretary):
        with pytest.raises(PermissionDeniedError) as exc_info:
            service.delete_document(document.id, user_id=reception_secretary.id)

        assert exc_info.value.message == REASON_ADMIN_ONLY
        assert service.get_document(document.id) is not None

        audit_entry = db_session.execute(select(AuditLog)).scalar_one()
        assert audit_entry.action == PERMISSION_DENIED
        assert audit_entry.metadata_json["operation"] == "delete"

    def test_document_with_history_is_kept(self, service, document, legal_area, admin_user):
        service.move_document(document.id, legal_area.id, user_id=admin_user.id)

        with pytest.raises(PermissionDeniedError) as exc_info:
            service.delete_document(document.id, user_id=admin_user.id)

        assert exc_info.value.message == REASON_HAS_HISTORY
        assert len(service.get_document_history(document.id)) == 2

    def test_unknown_document(self, service, admin_user):
        with pytest.raises(ProcessNotFoundError):
            service.delete_document(9999, user_id=admin_user.id)
