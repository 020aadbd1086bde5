"""
Read-only lookups against the student and staff reference tables.
"""

from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from residence_engine.core.exceptions import StaffNotFoundError, StudentNotFoundError
from residence_engine.models.directory import Staff, Student
from residence_engine.repositories.base import BaseRepository


class StudentRepository(BaseRepository[Student]):
    not_found_error = StudentNotFoundError

    def __init__(self, session: Session):
        super().__init__(Student, session)

    def find_by_identifier(self, identifier: str) -> Optional[Student]:
        """Match either the internal id or the registry's student number."""
        query = select(Student).where(
            or_(Student.id == identifier, Student.student_number == identifier)
        )
        return self.session.execute(query).scalars().first()


class StaffRepository(BaseRepository[Staff]):
    not_found_error = StaffNotFoundError

    def __init__(self, session: Session):
        super().__init__(Staff, session)
