"""
Booking workflow service.

A booking request is created pending and decided exactly once. Approval
moves the student through the residence ledger in the same transaction as
the status change, so a refused move leaves the request pending.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from residence_engine.core.exceptions import StaffNotFoundError, ValidationError
from residence_engine.core.logging import get_audit_logger
from residence_engine.models.base import BookingRequestType, BookingStatus, utcnow
from residence_engine.models.booking import BookingRequest
from residence_engine.models.residence import ResidenceTarget
from residence_engine.repositories.booking import BookingRequestRepository
from residence_engine.repositories.residence import ResidenceRepository
from residence_engine.repositories.room import RoomRepository
from residence_engine.services.base import BaseService, ServiceResult, coerce_enum
from residence_engine.services.directory import SqlStaffDirectory, StaffDirectory, StudentDirectory
from residence_engine.services.residence import ResidenceLedger


def build_target(
    requested_room_id: Optional[str] = None,
    requested_hostel_id: Optional[str] = None,
    requested_bed: Optional[str] = None,
    off_campus_hostel_name: Optional[str] = None,
    off_campus_room_number: Optional[str] = None,
    off_campus_area: Optional[str] = None,
) -> ResidenceTarget:
    """
    Build the requested target from flat request fields.

    Exactly one of the on-campus and off-campus groups may be filled in.
    """
    on_campus = any((requested_room_id, requested_hostel_id, requested_bed))
    off_campus = any((off_campus_hostel_name, off_campus_room_number, off_campus_area))

    if on_campus == off_campus:
        raise ValidationError(
            "Request exactly one target: an on-campus room or an off-campus address",
            field_errors={"target": ["on-campus and off-campus fields are mutually exclusive"]},
        )
    if on_campus:
        if not requested_room_id:
            raise ValidationError(
                "An on-campus booking needs a room",
                field_errors={"requested_room_id": ["is required"]},
            )
        return ResidenceTarget.on_campus(requested_room_id, bed_label=requested_bed, hostel_id=requested_hostel_id)

    missing = {}
    if not off_campus_hostel_name:
        missing["requested_off_campus_hostel_name"] = ["is required"]
    if not off_campus_area:
        missing["requested_off_campus_area"] = ["is required"]
    if missing:
        raise ValidationError("An off-campus booking needs a hostel name and an area", field_errors=missing)
    return ResidenceTarget.off_campus(off_campus_hostel_name, off_campus_room_number, off_campus_area)


class BookingWorkflowService(BaseService):
    """Submit, list and decide booking requests."""

    def __init__(
        self,
        db_session: Session,
        student_directory: Optional[StudentDirectory] = None,
        staff_directory: Optional[StaffDirectory] = None,
    ):
        super().__init__(db_session)
        self.bookings = BookingRequestRepository(db_session)
        self.rooms = RoomRepository(db_session)
        self.residences = ResidenceRepository(db_session)
        self.ledger = ResidenceLedger(db_session, student_directory=student_directory)
        self.staff_directory = staff_directory or SqlStaffDirectory(db_session)
        self._audit = get_audit_logger(component="booking_workflow")

    @property
    def student_directory(self) -> StudentDirectory:
        return self.ledger.student_directory

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_bookings(
        self,
        status: Optional[BookingStatus] = None,
        request_type: Optional[BookingRequestType] = None,
        student_id: Optional[str] = None,
    ) -> ServiceResult[List[BookingRequest]]:
        def _list() -> List[BookingRequest]:
            return self.bookings.list_bookings(
                status=coerce_enum(BookingStatus, status, "status") if status is not None else None,
                request_type=(
                    coerce_enum(BookingRequestType, request_type, "request_type")
                    if request_type is not None
                    else None
                ),
                student_id=student_id,
            )

        return self._query("list bookings", _list)

    def get_booking(self, booking_id: str) -> ServiceResult[BookingRequest]:
        return self._query("get booking", lambda: self.bookings.get_by_id(booking_id), booking_id)

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def submit_booking(
        self,
        student_id: str,
        request_type,
        target: Optional[ResidenceTarget],
        note: Optional[str] = None,
    ) -> ServiceResult[BookingRequest]:
        """
        Record a pending booking request.

        For a transfer the student's current on-campus room is copied into
        current_room_id. It is kept for the record only; approval re-reads
        the live residence.
        """

        def _submit() -> BookingRequest:
            kind = coerce_enum(BookingRequestType, request_type, "request_type")
            if target is None:
                raise ValidationError("A booking needs a target", field_errors={"target": ["is required"]})

            student = self.student_directory.find_student(student_id)

            booking = BookingRequest(
                student_id=student.internal_id,
                request_type=kind,
                note=note,
                status=BookingStatus.PENDING,
                requested_at=utcnow(),
            )

            if target.is_on_campus:
                room = self.rooms.get_by_id(target.room_id)
                if target.hostel_id and target.hostel_id != room.hostel_id:
                    raise ValidationError(
                        f"Room {room.id} does not belong to hostel {target.hostel_id}",
                        field_errors={"requested_hostel_id": ["does not own the requested room"]},
                    )
                booking.requested_room_id = room.id
                booking.requested_hostel_id = room.hostel_id
                booking.requested_bed = (target.bed_label or "").strip() or None
            else:
                self.ledger.validate_off_campus_target(target)
                booking.requested_off_campus_hostel_name = target.off_campus_hostel_name.strip()
                booking.requested_off_campus_room_number = target.off_campus_room_number
                booking.requested_off_campus_area = target.off_campus_area.strip()

            if kind is BookingRequestType.TRANSFER:
                current = self.residences.find_by_student(student.internal_id)
                if current is not None and current.is_on_campus:
                    booking.current_room_id = current.room_id

            return self.bookings.add(booking)

        return self._execute("submit booking", _submit, student_id, message="Booking request submitted")

    # -------------------------------------------------------------------------
    # Decision
    # -------------------------------------------------------------------------

    def decide(
        self,
        booking_id: str,
        decision,
        approver_id: str,
        note: Optional[str] = None,
    ) -> ServiceResult[BookingRequest]:
        """
        Approve or reject a pending booking request.

        The status write is a compare-and-set on pending, so of two
        concurrent decisions exactly one applies and the other fails with
        AlreadyDecided. On approval the residence move runs in the same
        transaction; if it fails the decision is rolled back with it.
        """

        def _decide() -> BookingRequest:
            outcome = coerce_enum(BookingStatus, decision, "decision")
            if not BookingStatus.PENDING.can_transition_to(outcome):
                raise ValidationError(
                    "Decision must be 'approved' or 'rejected'",
                    field_errors={"decision": [f"invalid value '{outcome.value}'"]},
                )
            if not self.staff_directory.find_staff(approver_id):
                raise StaffNotFoundError(approver_id)

            booking = self.bookings.record_decision(booking_id, outcome, approver_id, note, utcnow())

            residence_id = None
            if outcome is BookingStatus.APPROVED:
                residence = self.ledger.apply_move(booking.student_id, booking.target)
                residence_id = residence.id

            self._audit.info(
                "booking_decided",
                booking_id=booking.id,
                student_id=booking.student_id,
                decision=outcome.value,
                approver_id=approver_id,
                residence_id=residence_id,
            )
            return booking

        return self._execute("decide booking", _decide, booking_id, message="Booking request decided")
