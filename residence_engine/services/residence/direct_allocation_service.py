"""
Direct allocation: immediate administrative placement of a student,
outside the booking workflow.
"""

from typing import Optional

from sqlalchemy.orm import Session

from residence_engine.core.exceptions import ValidationError
from residence_engine.models.residence import Residence, ResidenceTarget
from residence_engine.repositories.hostel import HostelRepository
from residence_engine.repositories.room import RoomRepository
from residence_engine.schemas.residence import OffCampusAllocationRequest, OnCampusAllocationRequest
from residence_engine.services.base import BaseService, ServiceResult
from residence_engine.services.directory import StudentDirectory
from residence_engine.services.residence.residence_ledger import ResidenceLedger


class DirectAllocationService(BaseService):
    """
    Resolves the student and the room, then hands over to the residence
    ledger inside a single transaction. Ledger errors (RoomFull,
    GenderMismatch, AlreadyResident, NotFound) come back unchanged as
    ServiceResult failures.
    """

    def __init__(self, db_session: Session, student_directory: Optional[StudentDirectory] = None):
        super().__init__(db_session)
        self.ledger = ResidenceLedger(db_session, student_directory=student_directory)
        self.hostels = HostelRepository(db_session)
        self.rooms = RoomRepository(db_session)

    @property
    def student_directory(self) -> StudentDirectory:
        return self.ledger.student_directory

    def allocate(self, request: OnCampusAllocationRequest) -> ServiceResult[Residence]:
        def _allocate() -> Residence:
            self._require(student_id=request.student_id, room_id=request.room_id)

            student = self.student_directory.find_student(request.student_id)
            room = self.rooms.get_by_id(request.room_id)
            if request.hostel_id:
                hostel = self.hostels.get_by_id(request.hostel_id)
                if hostel.id != room.hostel_id:
                    raise ValidationError(
                        f"Room {room.id} does not belong to hostel {hostel.id}",
                        field_errors={"hostel_id": ["does not own the requested room"]},
                    )
            return self.ledger.apply_on_campus_allocation(student, room.id, request.bed_label)

        return self._execute("direct on-campus allocation", _allocate, request.student_id, message="Residence allocated")

    def allocate_off_campus(self, request: OffCampusAllocationRequest) -> ServiceResult[Residence]:
        def _allocate() -> Residence:
            self._require(
                student_id=request.student_id,
                off_campus_hostel_name=request.off_campus_hostel_name,
                off_campus_area=request.off_campus_area,
            )
            student = self.student_directory.find_student(request.student_id)
            target = ResidenceTarget.off_campus(
                request.off_campus_hostel_name,
                request.off_campus_room_number,
                request.off_campus_area,
            )
            return self.ledger.apply_off_campus_allocation(student, target)

        return self._execute("direct off-campus allocation", _allocate, request.student_id, message="Residence allocated")

    @staticmethod
    def _require(**values) -> None:
        missing = {name: ["is required"] for name, value in values.items() if not (value or "").strip()}
        if missing:
            raise ValidationError("Missing required fields", field_errors=missing)
