"""Pytest fixtures for the routing engine and the Processes API.

Provides reusable test fixtures for:
- In-memory SQLite database session (tables created/dropped per test)
- Areas, employees and users with Administrator/Secretary roles
- A controllable clock and a ProcessRoutingService bound to it
- Authenticated test clients with JWT tokens

Usage:
    def test_forward(service, reception_secretary, legal_area, document):
        service.move_document(document.id, legal_area.id, reception_secretary.id)
"""

import sys
import os
from datetime import datetime, timedelta
from pathlib import Path
from typing import Generator

# Set environment variables BEFORE any imports to ensure they take effect
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-256-bits-minimum-length-required-for-security")
os.environ.setdefault("LOG_JSON", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

from config import Settings
from models.base import Base
from models.area import Area
from models.employee import Employee
from models.user import User
from models.document_type import DocumentType
from auth.jwt import create_access_token
from auth.roles import UserRole
from processes.service import ProcessRoutingService
from database import get_db as database_get_db


# Single shared connection so every session sees the same in-memory database
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

FIXED_NOW = datetime(2024, 3, 5, 10, 0, 0)


class FrozenClock:
    """Clock returning a fixed time until advanced explicitly."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    """
    Base.metadata.create_all(bind=test_engine)

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


# ---------------------------------------------------------------------------
# Organization
# ---------------------------------------------------------------------------

@pytest.fixture
def reception_area(db_session: Session) -> Area:
    area = Area(name="Mesa de Partes")
    db_session.add(area)
    db_session.commit()
    return area


@pytest.fixture
def legal_area(db_session: Session) -> Area:
    area = Area(name="Assessoria Jurídica")
    db_session.add(area)
    db_session.commit()
    return area


@pytest.fixture
def inactive_area(db_session: Session) -> Area:
    area = Area(name="Arquivo Antigo", is_active=False)
    db_session.add(area)
    db_session.commit()
    return area


def _employee(db_session: Session, dni: str, first_name: str, last_name: str, area: Area, **kwargs) -> Employee:
    employee = Employee(dni=dni, first_name=first_name, last_name=last_name, area_id=area.id, **kwargs)
    db_session.add(employee)
    db_session.commit()
    return employee


@pytest.fixture
def reception_employee(db_session: Session, reception_area: Area) -> Employee:
    return _employee(db_session, "10000001", "Ana", "Souza", reception_area)


@pytest.fixture
def legal_employee(db_session: Session, legal_area: Area) -> Employee:
    return _employee(db_session, "20000001", "Maria", "Silva", legal_area)


@pytest.fixture
def other_legal_employee(db_session: Session, legal_area: Area) -> Employee:
    return _employee(db_session, "20000002", "João", "Pereira", legal_area)


@pytest.fixture
def inactive_legal_employee(db_session: Session, legal_area: Area) -> Employee:
    return _employee(db_session, "20000003", "Carlos", "Lima", legal_area, is_active=False)


def _user(db_session: Session, username: str, role: str, area: Area = None, employee: Employee = None) -> User:
    user = User(
        username=username,
        name=username.title(),
        role=role,
        area_id=area.id if area else None,
        employee_id=employee.id if employee else None,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def admin_user(db_session: Session) -> User:
    """Administrator without an area."""
    return _user(db_session, "admin", UserRole.ADMINISTRATOR.value)


@pytest.fixture
def reception_secretary(db_session: Session, reception_area: Area, reception_employee: Employee) -> User:
    return _user(db_session, "ana", UserRole.SECRETARY.value, reception_area, reception_employee)


@pytest.fixture
def legal_secretary(db_session: Session, legal_area: Area, legal_employee: Employee) -> User:
    return _user(db_session, "maria", UserRole.SECRETARY.value, legal_area, legal_employee)


@pytest.fixture
def other_legal_secretary(db_session: Session, legal_area: Area, other_legal_employee: Employee) -> User:
    return _user(db_session, "joao", UserRole.SECRETARY.value, legal_area, other_legal_employee)


@pytest.fixture
def document_type(db_session: Session) -> DocumentType:
    doc_type = DocumentType(name="Ofício")
    db_session.add(doc_type)
    db_session.commit()
    return doc_type


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(STATUS_TRANSITION_POLICY="permissive", DELETE_TRACKING_ON_DOCUMENT_DELETE=False)


@pytest.fixture
def service(db_session: Session, settings: Settings, clock: FrozenClock) -> ProcessRoutingService:
    return ProcessRoutingService(db_session, settings=settings, clock=clock)


@pytest.fixture
def make_document(service, reception_area, document_type, reception_secretary):
    """Factory creating documents in the reception area."""

    def _make(**overrides):
        data = {
            "subject": "Solicitação de certidão",
            "document_type_id": document_type.id,
            "origin_area_id": reception_area.id,
        }
        data.update(overrides)
        created_by = data.pop("created_by", reception_secretary.id)
        return service.create_document(data, created_by=created_by)

    return _make


@pytest.fixture
def document(make_document):
    """Normal-priority document sitting unassigned in the reception area."""
    return make_document()


# ---------------------------------------------------------------------------
# API clients
# ---------------------------------------------------------------------------

def _client_for(db_session: Session, user: User = None) -> Generator[TestClient, None, None]:
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[database_get_db] = override_get_db

    client = TestClient(app)
    if user is not None:
        token = create_access_token(user_id=user.id, role=user.role)
        client.headers.update({"Authorization": f"Bearer {token}"})

    try:
        yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def client(db_session: Session):
    """Unauthenticated test client."""
    yield from _client_for(db_session)


@pytest.fixture
def admin_client(db_session: Session, admin_user: User):
    yield from _client_for(db_session, admin_user)


@pytest.fixture
def reception_client(db_session: Session, reception_secretary: User):
    yield from _client_for(db_session, reception_secretary)


@pytest.fixture
def legal_client(db_session: Session, legal_secretary: User):
    yield from _client_for(db_session, legal_secretary)
