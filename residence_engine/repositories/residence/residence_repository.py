"""
Residence repository.
"""

from typing import List, Optional, Set, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from residence_engine.core.exceptions import ResidenceNotFoundError
from residence_engine.models.base import ResidenceKind
from residence_engine.models.residence import Residence
from residence_engine.repositories.base import BaseRepository


class ResidenceRepository(BaseRepository[Residence]):
    not_found_error = ResidenceNotFoundError

    def __init__(self, session: Session):
        super().__init__(Residence, session)

    def find_by_student(self, student_id: str) -> Optional[Residence]:
        return self.find_one_by_criteria({'student_id': student_id})

    def get_by_student(self, student_id: str) -> Residence:
        residence = self.find_by_student(student_id)
        if residence is None:
            raise ResidenceNotFoundError(
                student_id,
                message=f"Residence not found for student {student_id}",
            )
        return residence

    def lock_query(self, student_id: str):
        """SELECT ... FOR UPDATE on the student's residence, refreshing any loaded copy."""
        return (
            select(Residence)
            .where(Residence.student_id == student_id)
            .with_for_update(of=Residence)
            .execution_options(populate_existing=True)
        )

    def lock_by_student(self, student_id: str) -> Optional[Residence]:
        """
        Lock the student's residence row for the rest of the transaction.

        Taken before any room lock, so a concurrent move or vacate of the
        same student waits here and then sees the committed location.
        """
        return self.session.execute(self.lock_query(student_id)).scalars().first()

    def list_residences(
        self,
        kind: Optional[ResidenceKind] = None,
        hostel_id: Optional[str] = None,
        area: Optional[str] = None,
    ) -> List[Residence]:
        return self.find_by_criteria(
            {
                'kind': kind,
                'hostel_id': hostel_id,
                'off_campus_area': area,
            },
            order_by=['allocated_at'],
        )

    def list_room_occupants(self, room_id: str) -> List[Residence]:
        return self.find_by_criteria(
            {'room_id': room_id, 'kind': ResidenceKind.ON_CAMPUS},
            order_by=['bed_label'],
        )

    def count_room_occupants(self, room_id: str) -> int:
        return self.count({'room_id': room_id, 'kind': ResidenceKind.ON_CAMPUS})

    def taken_bed_labels(self, room_id: str, exclude_student_id: Optional[str] = None) -> Set[str]:
        query = select(Residence.bed_label).where(Residence.room_id == room_id)
        if exclude_student_id is not None:
            query = query.where(Residence.student_id != exclude_student_id)
        return {label for label in self.session.execute(query).scalars().all() if label}

    def count_by_area(self) -> List[Tuple[Optional[str], int]]:
        query = (
            select(Residence.off_campus_area, func.count(Residence.id))
            .where(Residence.kind == ResidenceKind.OFF_CAMPUS)
            .group_by(Residence.off_campus_area)
            .order_by(Residence.off_campus_area)
        )
        return [(area, count) for area, count in self.session.execute(query).all()]
