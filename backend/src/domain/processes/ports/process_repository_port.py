"""Process Repository Port - Domain interface for document routing persistence.

This port defines what the routing engine needs from storage: reads and
writes of documents, areas, employees, users and tracking entries, plus the
date arithmetic and deadline-window query the deadline rules rely on.

Architecture: Hexagonal - Port interface in domain layer
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Any, List, Optional


class ProcessRepositoryPort(ABC):
    """Port interface for the routing engine's storage collaborator.

    Records are returned as ORM-like objects exposing the attributes named
    in the data model (id, current_area_id, is_active, ...). Implementations
    guarantee atomic single-record create/update; unit_of_work() groups the
    writes of one engine operation into a single transaction.
    """

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager:
        """Context manager committing on success and rolling back on error."""

    @abstractmethod
    def commit(self) -> None:
        """Commit pending writes immediately."""

    # Users, areas, employees -------------------------------------------------

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[Any]:
        """Return the user or None."""

    @abstractmethod
    def get_area(self, area_id: int) -> Optional[Any]:
        """Return the area or None."""

    @abstractmethod
    def list_areas(self) -> List[Any]:
        """Return all areas ordered by name."""

    @abstractmethod
    def get_employee(self, employee_id: int) -> Optional[Any]:
        """Return the employee or None."""

    @abstractmethod
    def get_document_type(self, document_type_id: int) -> Optional[Any]:
        """Return the document type or None."""

    # Documents ---------------------------------------------------------------

    @abstractmethod
    def get_document(self, document_id: int) -> Optional[Any]:
        """Return the document or None."""

    @abstractmethod
    def get_document_by_tracking_number(self, tracking_number: str) -> Optional[Any]:
        """Return the document with this tracking number or None."""

    @abstractmethod
    def list_documents(self) -> List[Any]:
        """Return all documents, newest first."""

    @abstractmethod
    def get_documents_by_area_id(self, area_id: int) -> List[Any]:
        """Return documents currently located in area_id."""

    @abstractmethod
    def get_documents_by_employee_id(self, employee_id: int) -> List[Any]:
        """Return documents currently assigned to employee_id."""

    @abstractmethod
    def create_document(self, **fields) -> Any:
        """Persist a new document and return it with its id populated."""

    @abstractmethod
    def update_document(self, document: Any, **fields) -> Any:
        """Apply fields to document and flush.

        Raises:
            ConcurrencyError: If the row changed since it was read
        """

    @abstractmethod
    def delete_document(self, document: Any) -> None:
        """Hard delete the document row."""

    @abstractmethod
    def count_documents_with_process_prefix(self, prefix: str) -> int:
        """Count documents whose process number starts with prefix."""

    @abstractmethod
    def count_documents_with_tracking_prefix(self, prefix: str) -> int:
        """Count documents whose tracking number starts with prefix."""

    @abstractmethod
    def process_number_exists(self, process_number: str) -> bool:
        """Return True if a document already uses process_number."""

    @abstractmethod
    def tracking_number_exists(self, tracking_number: str) -> bool:
        """Return True if a document already uses tracking_number."""

    # Tracking ledger ---------------------------------------------------------

    @abstractmethod
    def create_document_tracking(self, **fields) -> Any:
        """Append a ledger entry and return it."""

    @abstractmethod
    def list_document_tracking_by_document_id(self, document_id: int) -> List[Any]:
        """Return the ledger of a document, oldest first."""

    @abstractmethod
    def delete_document_tracking(self, document_id: int) -> int:
        """Delete every ledger entry of a document; return the row count."""

    @abstractmethod
    def list_recent_tracking(self, limit: int) -> List[Any]:
        """Return the newest ledger entries across all documents."""

    # Deadlines ---------------------------------------------------------------

    @abstractmethod
    def calculate_deadline_date(self, base: datetime, days: int) -> datetime:
        """Return base plus days calendar days."""

    @abstractmethod
    def get_documents_with_deadline(self, days: int, now: datetime) -> List[Any]:
        """Return documents whose deadline falls in [now, now + days]."""
