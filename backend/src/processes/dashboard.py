"""Dashboard aggregates over process documents.

Read-only views used by the home screen: status/priority counters, the
deadline calendar of a month and the time spent in analysis.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from auth.roles import is_administrator
from domain.processes import Priority, ProcessStatus
from domain.processes.ports import ProcessRepositoryPort


UPCOMING_DEADLINE_DAYS = 7
RECENT_DOCUMENT_DAYS = 30
RECENT_DOCUMENT_LIST_SIZE = 10


@dataclass
class DashboardSummary:
    total_documents: int
    pending_documents: int
    urgent_documents: int
    in_analysis_documents: int
    completed_documents: int
    documents_to_assign: int
    upcoming_deadlines: List[Any]
    recent_documents_count: int
    recent_documents: List[Any]
    documents_by_area: List[Dict[str, Any]] = field(default_factory=list)


class DashboardService:
    """Aggregates document counters for the dashboard."""

    def __init__(self, repository: ProcessRepositoryPort, clock: Callable[[], datetime]):
        self.repository = repository
        self.clock = clock

    def get_summary(self, user: Optional[Any]) -> DashboardSummary:
        """Build the counters shown on the dashboard.

        Per-area counts are only computed for administrators.
        """
        now = self.clock()
        documents = self.repository.list_documents()

        upcoming_end = now + timedelta(days=UPCOMING_DEADLINE_DAYS)
        upcoming = [
            doc for doc in documents
            if doc.deadline is not None and now <= doc.deadline <= upcoming_end
        ]
        upcoming.sort(key=lambda doc: doc.deadline)

        recent_start = now - timedelta(days=RECENT_DOCUMENT_DAYS)
        recent = [doc for doc in documents if doc.created_at >= recent_start]

        by_area = []
        if is_administrator(user):
            counts: Dict[int, int] = defaultdict(int)
            for doc in documents:
                counts[doc.current_area_id] += 1
            by_area = [
                {"area_id": area.id, "area_name": area.name, "count": counts.get(area.id, 0)}
                for area in self.repository.list_areas()
            ]

        return DashboardSummary(
            total_documents=len(documents),
            pending_documents=_count_status(documents, ProcessStatus.PENDING),
            urgent_documents=sum(1 for doc in documents if doc.priority == Priority.URGENT.value),
            in_analysis_documents=_count_status(documents, ProcessStatus.IN_ANALYSIS),
            completed_documents=_count_status(documents, ProcessStatus.COMPLETED),
            documents_to_assign=sum(1 for doc in documents if not doc.current_employee_id),
            upcoming_deadlines=upcoming,
            recent_documents_count=len(recent),
            recent_documents=recent[:RECENT_DOCUMENT_LIST_SIZE],
            documents_by_area=by_area,
        )

    def get_calendar(self, year: int, month: int) -> Dict[int, List[Any]]:
        """Group the documents due in a month by day of month."""
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month: {month}")

        calendar: Dict[int, List[Any]] = defaultdict(list)
        for doc in self.repository.list_documents():
            if doc.deadline is None:
                continue
            if doc.deadline.year == year and doc.deadline.month == month:
                calendar[doc.deadline.day].append(doc)

        for day_documents in calendar.values():
            day_documents.sort(key=lambda doc: doc.deadline)
        return dict(calendar)

    def get_analysis_by_time(self) -> List[Dict[str, Any]]:
        """Days each document in analysis has spent since creation, longest first."""
        now = self.clock()
        rows = [
            {"document": doc, "days_in_analysis": (now - doc.created_at).days}
            for doc in self.repository.list_documents()
            if doc.status == ProcessStatus.IN_ANALYSIS.value
        ]
        rows.sort(key=lambda row: row["days_in_analysis"], reverse=True)
        return rows


def _count_status(documents: List[Any], status: ProcessStatus) -> int:
    return sum(1 for doc in documents if doc.status == status.value)
