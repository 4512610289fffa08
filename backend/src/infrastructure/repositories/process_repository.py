"""SQLAlchemy repository for document routing persistence"""

from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Iterator, List, Optional

from sqlalchemy import select, func, and_, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from models.area import Area
from models.employee import Employee
from models.user import User
from models.document_type import DocumentType
from models.document import Document
from models.document_tracking import DocumentTracking
from domain.processes.errors import ConcurrencyError
from domain.processes.ports import ProcessRepositoryPort


class SqlAlchemyProcessRepository(ProcessRepositoryPort):
    """Repository implementing ProcessRepositoryPort on a SQLAlchemy session.

    Writes are flushed, not committed: the caller decides the transaction
    boundary through unit_of_work(). Optimistic-lock failures and tracking
    number collisions are translated to ConcurrencyError; other integrity
    errors propagate unchanged.
    """

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    @contextmanager
    def unit_of_work(self) -> Iterator[Session]:
        """Commit on success, roll back on any exception."""
        try:
            yield self.db
            self._commit()
        except Exception:
            self.db.rollback()
            raise

    def commit(self) -> None:
        self._commit()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except StaleDataError as e:
            self.db.rollback()
            raise ConcurrencyError(f"Concurrent modification detected: {e}") from e
        except IntegrityError as e:
            self.db.rollback()
            if _is_tracking_number_collision(e):
                raise ConcurrencyError(f"Tracking number already taken: {e.orig}") from e
            raise

    def _flush(self) -> None:
        try:
            self.db.flush()
        except StaleDataError as e:
            raise ConcurrencyError(f"Concurrent modification detected: {e}") from e
        except IntegrityError as e:
            if _is_tracking_number_collision(e):
                raise ConcurrencyError(f"Tracking number already taken: {e.orig}") from e
            raise

    # Users, areas, employees -------------------------------------------------

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_area(self, area_id: int) -> Optional[Area]:
        return self.db.get(Area, area_id)

    def list_areas(self) -> List[Area]:
        return list(self.db.execute(select(Area).order_by(Area.name)).scalars().all())

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        return self.db.get(Employee, employee_id)

    def get_document_type(self, document_type_id: int) -> Optional[DocumentType]:
        return self.db.get(DocumentType, document_type_id)

    # Documents ---------------------------------------------------------------

    def get_document(self, document_id: int) -> Optional[Document]:
        return self.db.get(Document, document_id)

    def get_document_by_tracking_number(self, tracking_number: str) -> Optional[Document]:
        query = select(Document).where(Document.tracking_number == tracking_number)
        return self.db.execute(query).scalars().first()

    def list_documents(self) -> List[Document]:
        query = select(Document).order_by(Document.created_at.desc(), Document.id.desc())
        return list(self.db.execute(query).scalars().all())

    def get_documents_by_area_id(self, area_id: int) -> List[Document]:
        query = (
            select(Document)
            .where(Document.current_area_id == area_id)
            .order_by(Document.created_at.desc(), Document.id.desc())
        )
        return list(self.db.execute(query).scalars().all())

    def get_documents_by_employee_id(self, employee_id: int) -> List[Document]:
        query = (
            select(Document)
            .where(Document.current_employee_id == employee_id)
            .order_by(Document.created_at.desc(), Document.id.desc())
        )
        return list(self.db.execute(query).scalars().all())

    def create_document(self, **fields) -> Document:
        document = Document(**fields)
        self.db.add(document)
        self._flush()
        return document

    def update_document(self, document: Document, **fields) -> Document:
        for field, value in fields.items():
            setattr(document, field, value)
        self._flush()
        return document

    def delete_document(self, document: Document) -> None:
        self.db.delete(document)
        self._flush()

    def count_documents_with_process_prefix(self, prefix: str) -> int:
        query = select(func.count(Document.id)).where(Document.process_number.startswith(prefix))
        return self.db.execute(query).scalar_one()

    def count_documents_with_tracking_prefix(self, prefix: str) -> int:
        query = select(func.count(Document.id)).where(Document.tracking_number.startswith(prefix))
        return self.db.execute(query).scalar_one()

    def process_number_exists(self, process_number: str) -> bool:
        query = select(Document.id).where(Document.process_number == process_number).limit(1)
        return self.db.execute(query).first() is not None

    def tracking_number_exists(self, tracking_number: str) -> bool:
        query = select(Document.id).where(Document.tracking_number == tracking_number).limit(1)
        return self.db.execute(query).first() is not None

    # Tracking ledger ---------------------------------------------------------

    def create_document_tracking(self, **fields) -> DocumentTracking:
        entry = DocumentTracking(**fields)
        self.db.add(entry)
        self._flush()
        return entry

    def list_document_tracking_by_document_id(self, document_id: int) -> List[DocumentTracking]:
        query = (
            select(DocumentTracking)
            .where(DocumentTracking.document_id == document_id)
            .order_by(DocumentTracking.created_at, DocumentTracking.id)
        )
        return list(self.db.execute(query).scalars().all())

    def delete_document_tracking(self, document_id: int) -> int:
        result = self.db.execute(
            delete(DocumentTracking).where(DocumentTracking.document_id == document_id)
        )
        return result.rowcount

    def list_recent_tracking(self, limit: int) -> List[DocumentTracking]:
        query = (
            select(DocumentTracking)
            .order_by(DocumentTracking.created_at.desc(), DocumentTracking.id.desc())
            .limit(limit)
        )
        return list(self.db.execute(query).scalars().all())

    # Deadlines ---------------------------------------------------------------

    def calculate_deadline_date(self, base: datetime, days: int) -> datetime:
        return base + timedelta(days=days)

    def get_documents_with_deadline(self, days: int, now: datetime) -> List[Document]:
        window_end = self.calculate_deadline_date(now, days)
        query = (
            select(Document)
            .where(
                and_(
                    Document.deadline.is_not(None),
                    Document.deadline >= now,
                    Document.deadline <= window_end,
                )
            )
            .order_by(Document.deadline)
        )
        return list(self.db.execute(query).scalars().all())


def _is_tracking_number_collision(error: IntegrityError) -> bool:
    # Unique tracking_number is the only constraint a concurrent creation can trip
    return "tracking_number" in str(error.orig)
