"""Unit tests for how the SQLAlchemy repository translates write failures"""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from domain.processes import ConcurrencyError
from infrastructure.repositories import SqlAlchemyProcessRepository


TRACKING_COLLISION = "UNIQUE constraint failed: process_document.tracking_number"
MISSING_TYPE = "FOREIGN KEY constraint failed"


class FailingSession:
    """Session double whose flush and commit raise the configured error."""

    def __init__(self, error):
        self.error = error
        self.rolled_back = False

    def delete(self, instance):
        pass

    def flush(self):
        raise self.error

    def commit(self):
        raise self.error

    def rollback(self):
        self.rolled_back = True


def integrity_error(message: str) -> IntegrityError:
    return IntegrityError("INSERT INTO process_document ...", {}, Exception(message))


class TestFlushErrors:
    def test_tracking_number_collision_is_a_conflict(self):
        repository = SqlAlchemyProcessRepository(FailingSession(integrity_error(TRACKING_COLLISION)))

        with pytest.raises(ConcurrencyError):
            repository.delete_document(object())

    def test_other_integrity_errors_propagate(self):
        repository = SqlAlchemyProcessRepository(FailingSession(integrity_error(MISSING_TYPE)))

        with pytest.raises(IntegrityError):
            repository.delete_document(object())

    def test_stale_row_is_a_conflict(self):
        repository = SqlAlchemyProcessRepository(FailingSession(StaleDataError("version mismatch")))

        with pytest.raises(ConcurrencyError):
            repository.delete_document(object())


class TestCommitErrors:
    def test_tracking_number_collision_rolls_back_as_conflict(self):
        session = FailingSession(integrity_error(TRACKING_COLLISION))
        repository = SqlAlchemyProcessRepository(session)

        with pytest.raises(ConcurrencyError) as exc_info:
            repository.commit()

        assert "Tracking number already taken" in exc_info.value.message
        assert session.rolled_back is True

    def test_other_integrity_errors_roll_back_and_propagate(self):
        session = FailingSession(integrity_error(MISSING_TYPE))
        repository = SqlAlchemyProcessRepository(session)

        with pytest.raises(IntegrityError):
            repository.commit()

        assert session.rolled_back is True
