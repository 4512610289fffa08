"""Integration tests for read-side queries: listings, deadlines, activity and dashboard"""

from datetime import datetime, timedelta

import pytest

from domain.processes import ProcessValidationError, ProcessNotFoundError
from processes.dashboard import DashboardService


pytestmark = pytest.mark.integration

FIXED_NOW = datetime(2024, 3, 5, 10, 0, 0)


class TestDocumentsNearDeadline:
    """Inclusive [now, now + days] window"""

    @pytest.fixture
    def documents(self, make_document):
        return {
            "urgent": make_document(priority="Urgente"),
            "counted": make_document(priority="Com Contagem de Prazo"),
            "normal": make_document(),
        }

    def test_default_window(self, service, documents):
        result = service.get_documents_near_deadline()
        assert [doc.id for doc in result] == [documents["urgent"].id]

    def test_window_end_is_inclusive(self, service, documents):
        result = service.get_documents_near_deadline(5)
        assert [doc.id for doc in result] == [documents["urgent"].id, documents["counted"].id]

    def test_past_deadlines_are_excluded(self, service, clock, documents):
        clock.advance(days=2)
        result = service.get_documents_near_deadline(5)
        assert [doc.id for doc in result] == [documents["counted"].id]

    def test_negative_days(self, service):
        with pytest.raises(ProcessValidationError):
            service.get_documents_near_deadline(-1)


class TestListings:
    """Visibility of documents per user"""

    @pytest.fixture
    def documents(self, make_document, legal_area, legal_employee, admin_user, service):
        in_reception = make_document(subject="Fica na recepção")
        in_legal = make_document(subject="Vai para o jurídico")
        service.move_document(
            in_legal.id, legal_area.id, user_id=admin_user.id, to_employee_id=legal_employee.id
        )
        return in_reception, in_legal

    def test_administrator_sees_everything(self, service, documents, admin_user):
        assert len(service.list_documents_for_user(admin_user.id)) == 2

    def test_secretary_sees_own_area(self, service, documents, reception_secretary, legal_secretary):
        in_reception, in_legal = documents
        assert [d.id for d in service.list_documents_for_user(reception_secretary.id)] == [in_reception.id]
        assert [d.id for d in service.list_documents_for_user(legal_secretary.id)] == [in_legal.id]

    def test_unknown_user_sees_nothing(self, service, documents):
        assert service.list_documents_for_user(9999) == []

    def test_assigned_documents(self, service, documents, legal_secretary, reception_secretary):
        _, in_legal = documents
        assert [d.id for d in service.list_assigned_documents(legal_secretary.id)] == [in_legal.id]
        assert service.list_assigned_documents(reception_secretary.id) == []

    def test_lookup_by_tracking_number(self, service, documents):
        in_reception, _ = documents
        found = service.get_document_by_tracking_number(in_reception.tracking_number)
        assert found.id == in_reception.id

    def test_unknown_tracking_number(self, service, documents):
        with pytest.raises(ProcessNotFoundError):
            service.get_document_by_tracking_number("TRK-1999-001")


class TestRecentActivity:
    def test_latest_entries_first(self, service, clock, make_document, legal_area, admin_user):
        document = make_document()
        clock.advance(minutes=5)
        service.move_document(document.id, legal_area.id, user_id=admin_user.id)

        activity = service.get_recent_activity(limit=1)

        assert len(activity) == 1
        assert activity[0].to_area_id == legal_area.id

    def test_invalid_limit(self, service):
        with pytest.raises(ProcessValidationError):
            service.get_recent_activity(limit=0)


class TestDashboard:
    """Dashboard aggregates"""

    @pytest.fixture
    def dashboard(self, service, clock):
        return DashboardService(service.repository, clock)

    @pytest.fixture
    def documents(self, make_document, reception_employee):
        return [
            make_document(priority="Urgente"),
            make_document(priority="Com Contagem de Prazo"),
            make_document(current_employee_id=reception_employee.id),
        ]

    def test_summary_counters(self, dashboard, documents, reception_secretary):
        summary = dashboard.get_summary(reception_secretary)

        assert summary.total_documents == 3
        assert summary.urgent_documents == 1
        assert summary.in_analysis_documents == 3
        assert summary.pending_documents == 0
        assert summary.completed_documents == 0
        assert summary.documents_to_assign == 2
        assert [doc.deadline for doc in summary.upcoming_deadlines] == [
            FIXED_NOW + timedelta(days=1),
            FIXED_NOW + timedelta(days=5),
        ]
        assert summary.recent_documents_count == 3
        assert summary.documents_by_area == []

    def test_area_counts_for_administrators(self, dashboard, documents, legal_area, reception_area, admin_user):
        summary = dashboard.get_summary(admin_user)

        assert summary.documents_by_area == [
            {"area_id": legal_area.id, "area_name": "Assessoria Jurídica", "count": 0},
            {"area_id": reception_area.id, "area_name": "Mesa de Partes", "count": 3},
        ]

    def test_calendar_groups_by_day(self, dashboard, documents):
        calendar = dashboard.get_calendar(2024, 3)

        assert sorted(calendar) == [6, 10]
        assert calendar[6][0].id == documents[0].id
        assert calendar[10][0].id == documents[1].id
        assert dashboard.get_calendar(2024, 4) == {}

    def test_calendar_rejects_invalid_month(self, dashboard):
        with pytest.raises(ValueError):
            dashboard.get_calendar(2024, 13)

    def test_analysis_by_time(self, service, dashboard, clock, make_document, reception_secretary):
        older = make_document()
        clock.advance(days=3)
        newer = make_document()
        finished = make_document()
        service.update_document_status(finished.id, "Completed", user_id=reception_secretary.id)
        clock.advance(days=2)

        rows = dashboard.get_analysis_by_time()

        assert [(row["document"].id, row["days_in_analysis"]) for row in rows] == [
            (older.id, 5),
            (newer.id, 2),
        ]
