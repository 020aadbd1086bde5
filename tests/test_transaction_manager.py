"""
Transaction manager tests: conflict classification and retry.
"""
import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from residence_engine.core.exceptions import ConcurrentConflictError
from residence_engine.models import Room
from residence_engine.services.base import TransactionManager
from residence_engine.services.base.transaction_manager import is_conflict


class DriverError(Exception):
    def __init__(self, message, pgcode=None):
        super().__init__(message)
        self.pgcode = pgcode


def wrap(error_cls, message, pgcode=None):
    return error_cls("INSERT ...", {}, DriverError(message, pgcode))


@pytest.mark.parametrize(
    "error,expected",
    [
        (wrap(IntegrityError, "UNIQUE constraint failed: residences.student_id"), True),
        (wrap(IntegrityError, "duplicate key value violates unique constraint", pgcode="23505"), True),
        (wrap(IntegrityError, "FOREIGN KEY constraint failed"), False),
        (wrap(IntegrityError, "CHECK constraint failed: ck_room_capacity_positive"), False),
        (wrap(IntegrityError, "insert or update violates foreign key constraint", pgcode="23503"), False),
        (wrap(OperationalError, "database is locked"), True),
        (wrap(OperationalError, "could not serialize access", pgcode="40001"), True),
        (wrap(OperationalError, "no such table: rooms"), False),
    ],
)
def test_is_conflict(error, expected):
    assert is_conflict(error) is expected


def test_unique_violation_is_retried_then_surfaces(db_session):
    attempts = []

    def operation():
        attempts.append(1)
        raise wrap(IntegrityError, "UNIQUE constraint failed: rooms.hostel_id, rooms.room_number")

    with pytest.raises(ConcurrentConflictError) as exc_info:
        TransactionManager(db_session, max_retries=2).run(operation, name="create room")

    assert len(attempts) == 3
    assert exc_info.value.to_dict()["error"]["retryable"] is True


def test_check_violation_is_not_retried(db_session, men_hostel):
    attempts = []

    def operation():
        attempts.append(1)
        db_session.add(Room(hostel_id=men_hostel.id, room_number="X1", floor=1, capacity=0, current_occupancy=0))
        db_session.flush()

    with pytest.raises(IntegrityError):
        TransactionManager(db_session, max_retries=3).run(operation, name="create room")

    assert len(attempts) == 1
    assert db_session.query(Room).count() == 0
