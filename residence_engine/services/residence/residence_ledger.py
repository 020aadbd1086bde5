"""
Residence ledger.

Owns the student -> residence mapping and is the only caller of
RoomRepository.adjust_occupancy. Every allocation, move and vacate locks
the rooms it touches, validates against the locked rows and writes the
residence and the occupancy delta in the same transaction.

The ``apply_*`` methods raise typed errors and expect the caller to own
the transaction; direct allocation and booking approval compose them into
their own units of work. The public methods wrap them in one retried
transaction each and return a ServiceResult.
"""

from string import ascii_uppercase
from typing import List, Optional, Set, Tuple

from sqlalchemy.orm import Session

from residence_engine.config.settings import settings
from residence_engine.core.exceptions import (
    AlreadyResidentError,
    GenderMismatchError,
    ResidenceNotFoundError,
    RoomFullError,
    ValidationError,
)
from residence_engine.core.logging import get_audit_logger
from residence_engine.models.base import ResidenceKind, utcnow
from residence_engine.models.residence import Residence, ResidenceTarget
from residence_engine.models.room import Room
from residence_engine.repositories.residence import ResidenceRepository
from residence_engine.repositories.room import RoomRepository
from residence_engine.services.base import BaseService, ServiceResult, coerce_enum
from residence_engine.services.directory import SqlStudentDirectory, StudentDirectory, StudentRecord


def bed_label_for(index: int, prefix: Optional[str] = None) -> str:
    """Default label of the index-th bed: 'Bed A', 'Bed B', ... then 'Bed 27'."""
    prefix = settings.BED_LABEL_PREFIX if prefix is None else prefix
    suffix = ascii_uppercase[index] if index < len(ascii_uppercase) else str(index + 1)
    return f"{prefix} {suffix}".strip()


class ResidenceLedger(BaseService):
    """Allocate, move and vacate residences while keeping room counters exact."""

    def __init__(self, db_session: Session, student_directory: Optional[StudentDirectory] = None):
        super().__init__(db_session)
        self.residences = ResidenceRepository(db_session)
        self.rooms = RoomRepository(db_session)
        self.student_directory = student_directory or SqlStudentDirectory(db_session)
        self._audit = get_audit_logger(component="residence_ledger")

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_residence(self, student_id: str) -> ServiceResult[Residence]:
        return self._query("get residence", lambda: self.residences.get_by_student(student_id), student_id)

    def list_residences(
        self,
        kind: Optional[ResidenceKind] = None,
        hostel_id: Optional[str] = None,
        area: Optional[str] = None,
    ) -> ServiceResult[List[Residence]]:
        def _list() -> List[Residence]:
            parsed = coerce_enum(ResidenceKind, kind, "kind") if kind is not None else None
            return self.residences.list_residences(kind=parsed, hostel_id=hostel_id, area=area)

        return self._query("list residences", _list)

    def residences_by_area(self) -> ServiceResult[List[Tuple[Optional[str], int]]]:
        """Off-campus residence counts grouped by area."""
        return self._query("group residences by area", self.residences.count_by_area)

    # -------------------------------------------------------------------------
    # Public mutations
    # -------------------------------------------------------------------------

    def allocate_on_campus(
        self,
        student_id: str,
        room_id: str,
        bed_label: Optional[str] = None,
    ) -> ServiceResult[Residence]:
        def _allocate() -> Residence:
            student = self.student_directory.find_student(student_id)
            return self.apply_on_campus_allocation(student, room_id, bed_label)

        return self._execute("allocate on-campus residence", _allocate, student_id, message="Residence allocated")

    def allocate_off_campus(
        self,
        student_id: str,
        hostel_name: str,
        room_number: Optional[str],
        area: str,
    ) -> ServiceResult[Residence]:
        def _allocate() -> Residence:
            student = self.student_directory.find_student(student_id)
            target = ResidenceTarget.off_campus(hostel_name, room_number, area)
            return self.apply_off_campus_allocation(student, target)

        return self._execute("allocate off-campus residence", _allocate, student_id, message="Residence allocated")

    def move_student(self, student_id: str, target: ResidenceTarget) -> ServiceResult[Residence]:
        return self._execute(
            "move student",
            lambda: self.apply_move(student_id, target),
            student_id,
            message="Residence updated",
        )

    def vacate(self, student_id: str) -> ServiceResult[Residence]:
        return self._execute("vacate residence", lambda: self.apply_vacate(student_id), student_id)

    # -------------------------------------------------------------------------
    # Transactional steps (caller owns the transaction)
    # -------------------------------------------------------------------------

    def apply_on_campus_allocation(
        self,
        student: StudentRecord,
        room_id: str,
        bed_label: Optional[str] = None,
    ) -> Residence:
        """
        Place a student with no residence into a bed of a room.

        Checks run against the locked room in this order: AlreadyResident,
        RoomFull, GenderMismatch. A bed label already held in the room is a
        ValidationError; an omitted one gets the first free default label.
        """
        room = self.rooms.lock_room(room_id)

        existing = self.residences.find_by_student(student.internal_id)
        if existing is not None:
            raise AlreadyResidentError(student.internal_id, existing.id)

        self._check_admission(room, student)
        bed = self._resolve_bed(room, bed_label)

        residence = self.residences.add(
            Residence(
                student_id=student.internal_id,
                kind=ResidenceKind.ON_CAMPUS,
                hostel_id=room.hostel_id,
                room_id=room.id,
                bed_label=bed,
                allocated_at=utcnow(),
            )
        )
        self.rooms.adjust_occupancy(room.id, +1)

        self._audit.info(
            "residence_allocated",
            student_id=student.internal_id,
            kind=ResidenceKind.ON_CAMPUS.value,
            room_id=room.id,
            hostel_id=room.hostel_id,
            bed_label=bed,
        )
        return residence

    def apply_off_campus_allocation(self, student: StudentRecord, target: ResidenceTarget) -> Residence:
        self.validate_off_campus_target(target)

        existing = self.residences.find_by_student(student.internal_id)
        if existing is not None:
            raise AlreadyResidentError(student.internal_id, existing.id)

        residence = Residence(student_id=student.internal_id, kind=ResidenceKind.OFF_CAMPUS)
        self._write_location(residence, target, bed_label=None)
        self.residences.add(residence)

        self._audit.info(
            "residence_allocated",
            student_id=student.internal_id,
            kind=ResidenceKind.OFF_CAMPUS.value,
            area=target.off_campus_area,
        )
        return residence

    def apply_move(self, student_id: str, target: ResidenceTarget) -> Residence:
        """
        Point a student's residence at a new target.

        The residence row is locked first, then both rooms in ascending id
        order. Every check runs before the first write, so a refused move
        leaves the old room, the new room and the residence untouched once
        the transaction rolls back. A student without a residence gets one.
        Moving within the same room only rewrites the bed.
        """
        student = self.student_directory.find_student(student_id)
        if not target.is_on_campus:
            self.validate_off_campus_target(target)

        current = self.residences.lock_by_student(student.internal_id)
        old_room_id = current.room_id if current is not None and current.is_on_campus else None
        new_room_id = target.room_id if target.is_on_campus else None

        locked = self.rooms.lock_rooms([old_room_id, new_room_id])

        bed = None
        new_room = None
        if new_room_id is not None:
            new_room = locked[new_room_id]
            if target.hostel_id and target.hostel_id != new_room.hostel_id:
                raise ValidationError(
                    f"Room {new_room.id} does not belong to hostel {target.hostel_id}",
                    field_errors={"hostel_id": ["does not own the requested room"]},
                )
            if new_room_id != old_room_id:
                self._check_admission(new_room, student)
            bed = self._resolve_bed(new_room, target.bed_label, exclude_student_id=student.internal_id)

        if old_room_id is not None and old_room_id != new_room_id:
            self.rooms.adjust_occupancy(old_room_id, -1)
        if new_room_id is not None and new_room_id != old_room_id:
            self.rooms.adjust_occupancy(new_room_id, +1)

        residence = current or Residence(student_id=student.internal_id)
        self._write_location(residence, target, bed_label=bed, hostel_id=new_room.hostel_id if new_room else None)
        if current is None:
            self.residences.add(residence)
        else:
            self.db.flush()

        self._audit.info(
            "residence_moved",
            student_id=student.internal_id,
            from_room_id=old_room_id,
            to_room_id=new_room_id,
            kind=residence.kind.value,
            bed_label=bed,
        )
        return residence

    def apply_vacate(self, student_id: str) -> Residence:
        residence = self.residences.lock_by_student(student_id)
        if residence is None:
            raise ResidenceNotFoundError(
                student_id,
                message=f"Residence not found for student {student_id}",
            )
        room_id = residence.room_id if residence.is_on_campus else None

        if room_id is not None:
            self.rooms.lock_room(room_id)
        self.residences.delete(residence)
        if room_id is not None:
            self.rooms.adjust_occupancy(room_id, -1)

        self._audit.info(
            "residence_vacated",
            student_id=student_id,
            kind=residence.kind.value,
            room_id=room_id,
        )
        return residence

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _check_admission(self, room: Room, student: StudentRecord) -> None:
        """Capacity first, then gender eligibility, against a locked room."""
        if room.is_under_maintenance:
            raise RoomFullError(room.id, room.current_occupancy, room.capacity, reason="maintenance")
        if room.current_occupancy >= room.capacity:
            raise RoomFullError(room.id, room.current_occupancy, room.capacity)

        hostel = room.hostel
        if not hostel.gender_restriction.admits(student.gender):
            raise GenderMismatchError(
                student.internal_id,
                student.gender,
                hostel.id,
                hostel.gender_restriction.value,
            )

    def _resolve_bed(
        self,
        room: Room,
        requested: Optional[str],
        exclude_student_id: Optional[str] = None,
    ) -> str:
        taken: Set[str] = self.residences.taken_bed_labels(room.id, exclude_student_id)
        label = (requested or "").strip()

        if label:
            if label in taken:
                raise ValidationError(
                    f"Bed '{label}' in room {room.id} is already taken",
                    field_errors={"bed_label": ["already assigned in this room"]},
                )
            return label

        for index in range(room.capacity):
            candidate = bed_label_for(index)
            if candidate not in taken:
                return candidate
        raise RoomFullError(room.id, room.current_occupancy, room.capacity)

    @staticmethod
    def validate_off_campus_target(target: ResidenceTarget) -> None:
        field_errors = {}
        if not (target.off_campus_hostel_name or "").strip():
            field_errors["off_campus_hostel_name"] = ["is required"]
        if not (target.off_campus_area or "").strip():
            field_errors["off_campus_area"] = ["is required"]
        if field_errors:
            raise ValidationError("Off-campus residence needs a hostel name and an area", field_errors=field_errors)

    @staticmethod
    def _write_location(
        residence: Residence,
        target: ResidenceTarget,
        bed_label: Optional[str],
        hostel_id: Optional[str] = None,
    ) -> None:
        """Overwrite kind and every location field; fields of the other kind are cleared."""
        residence.kind = target.kind
        if target.is_on_campus:
            residence.hostel_id = hostel_id or target.hostel_id
            residence.room_id = target.room_id
            residence.bed_label = bed_label
            residence.off_campus_hostel_name = None
            residence.off_campus_room_number = None
            residence.off_campus_area = None
        else:
            residence.hostel_id = None
            residence.room_id = None
            residence.bed_label = None
            residence.off_campus_hostel_name = target.off_campus_hostel_name.strip()
            residence.off_campus_room_number = target.off_campus_room_number
            residence.off_campus_area = target.off_campus_area.strip()
        residence.allocated_at = utcnow()
