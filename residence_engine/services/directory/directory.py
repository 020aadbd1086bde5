"""
Student and staff directories.

The engine never writes student or staff records; it asks a directory for
the two facts it needs: a student's internal id and gender, and whether a
staff member exists.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

from sqlalchemy.orm import Session

from residence_engine.core.exceptions import StudentNotFoundError
from residence_engine.repositories.directory import StaffRepository, StudentRepository


@dataclass(frozen=True)
class StudentRecord:
    internal_id: str
    gender: Optional[str]


class StudentDirectory(Protocol):
    def find_student(self, identifier: str) -> StudentRecord:
        """Resolve a student id or student number; raises StudentNotFoundError."""
        ...


class StaffDirectory(Protocol):
    def find_staff(self, internal_id: str) -> bool:
        ...


class SqlStudentDirectory:
    """Student directory backed by the ``students`` reference table."""

    def __init__(self, session: Session):
        self.repository = StudentRepository(session)

    def find_student(self, identifier: str) -> StudentRecord:
        student = self.repository.find_by_identifier(identifier) if identifier else None
        if student is None:
            raise StudentNotFoundError(identifier)
        return StudentRecord(internal_id=student.id, gender=student.gender)


class SqlStaffDirectory:
    """Staff directory backed by the ``staff`` reference table."""

    def __init__(self, session: Session):
        self.repository = StaffRepository(session)

    def find_staff(self, internal_id: str) -> bool:
        return bool(internal_id) and self.repository.exists({'id': internal_id})
