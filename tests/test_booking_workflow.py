"""
Booking workflow tests: submission, the decision state machine and the
transfer scenarios.
"""
import pytest

from residence_engine.core.exceptions import ErrorCode, ValidationError
from residence_engine.models import BookingRequest, Room
from residence_engine.models.base import BookingRequestType, BookingStatus
from residence_engine.models.residence import ResidenceTarget
from residence_engine.services import BookingWorkflowService, ResidenceLedger
from residence_engine.services.booking import build_target

from conftest import make_room


def refreshed_room(session, room_id):
    session.expire_all()
    return session.get(Room, room_id)


@pytest.fixture
def service(db_session):
    return BookingWorkflowService(db_session)


@pytest.fixture
def a_in_r1(db_session, r1, student_a, student_c):
    """Student A in R1 next to student C, so R1 starts at occupancy 2."""
    ledger = ResidenceLedger(db_session)
    ledger.allocate_on_campus(student_a.id, r1.id, "A")
    ledger.allocate_on_campus(student_c.id, r1.id, "B")
    return student_a


class TestSubmit:
    def test_new_booking_is_pending(self, service, r1, student_a):
        result = service.submit_booking(student_a.id, "new", ResidenceTarget.on_campus(r1.id), note="first year")

        booking = result.data
        assert booking.status == BookingStatus.PENDING
        assert booking.request_type == BookingRequestType.NEW
        assert booking.requested_hostel_id == r1.hostel_id
        assert booking.current_room_id is None

    def test_transfer_snapshots_current_room(self, service, a_in_r1, r1, r2):
        booking = service.submit_booking(a_in_r1.id, "transfer", ResidenceTarget.on_campus(r2.id)).data

        assert booking.current_room_id == r1.id

    def test_unknown_request_type(self, service, r1, student_a):
        result = service.submit_booking(student_a.id, "swap", ResidenceTarget.on_campus(r1.id))

        assert result.error.code == ErrorCode.VALIDATION_ERROR
        assert "request_type" in result.error.details["field_errors"]

    def test_unknown_student(self, service, r1):
        assert service.submit_booking("ghost", "new", ResidenceTarget.on_campus(r1.id)).error.code == ErrorCode.NOT_FOUND

    def test_unknown_room(self, service, student_a):
        result = service.submit_booking(student_a.id, "new", ResidenceTarget.on_campus("ghost"))

        assert result.error.details["resource_type"] == "Room"

    def test_off_campus_target(self, service, student_a):
        target = ResidenceTarget.off_campus("Sunrise Apartments", "4B", "Kapsabet")

        booking = service.submit_booking(student_a.id, "new", target).data

        assert booking.requested_room_id is None
        assert booking.requested_off_campus_area == "Kapsabet"


class TestBuildTarget:
    def test_both_groups_rejected(self):
        with pytest.raises(ValidationError):
            build_target(requested_room_id="r", off_campus_hostel_name="Lodge", off_campus_area="Kapsabet")

    def test_neither_group_rejected(self):
        with pytest.raises(ValidationError):
            build_target()

    def test_on_campus_needs_room(self):
        with pytest.raises(ValidationError):
            build_target(requested_hostel_id="h")

    def test_off_campus_needs_area(self):
        with pytest.raises(ValidationError):
            build_target(off_campus_hostel_name="Lodge")


class TestDecide:
    def test_transfer_approved(self, db_session, service, staff, a_in_r1, r1, r2):
        booking = service.submit_booking(a_in_r1.id, "transfer", ResidenceTarget.on_campus(r2.id)).data

        result = service.decide(booking.id, "approved", staff.id, "ok")

        assert result.is_success
        assert result.data.status == BookingStatus.APPROVED
        assert result.data.approved_by == staff.id
        assert result.data.approved_at is not None
        assert refreshed_room(db_session, r1.id).current_occupancy == 1
        assert refreshed_room(db_session, r2.id).current_occupancy == 1
        assert ResidenceLedger(db_session).get_residence(a_in_r1.id).data.room_id == r2.id

    def test_transfer_into_full_room_stays_pending(self, db_session, service, men_hostel, staff, a_in_r1, r1, student_b):
        r3 = make_room(db_session, men_hostel, "R3", capacity=1)
        ResidenceLedger(db_session).allocate_on_campus(student_b.id, r3.id)
        booking = service.submit_booking(a_in_r1.id, "transfer", ResidenceTarget.on_campus(r3.id)).data

        result = service.decide(booking.id, "approved", staff.id)

        assert result.error.code == ErrorCode.ROOM_FULL
        assert service.get_booking(booking.id).data.status == BookingStatus.PENDING
        assert service.get_booking(booking.id).data.approved_by is None
        assert ResidenceLedger(db_session).get_residence(a_in_r1.id).data.room_id == r1.id
        assert refreshed_room(db_session, r1.id).current_occupancy == 2
        assert refreshed_room(db_session, r3.id).current_occupancy == 1

    def test_second_decision_is_refused(self, db_session, service, staff, r2, student_a):
        booking = service.submit_booking(student_a.id, "new", ResidenceTarget.on_campus(r2.id)).data

        assert service.decide(booking.id, "approved", staff.id).is_success
        second = service.decide(booking.id, "rejected", staff.id)

        assert second.error.code == ErrorCode.ALREADY_DECIDED
        assert second.error.status_code == 409
        assert service.get_booking(booking.id).data.status == BookingStatus.APPROVED
        assert refreshed_room(db_session, r2.id).current_occupancy == 1

    def test_reject_has_no_side_effect(self, db_session, service, staff, r2, student_a):
        booking = service.submit_booking(student_a.id, "new", ResidenceTarget.on_campus(r2.id)).data

        result = service.decide(booking.id, "Rejected", staff.id, "no space this term")

        assert result.data.status == BookingStatus.REJECTED
        assert result.data.decision_note == "no space this term"
        assert refreshed_room(db_session, r2.id).current_occupancy == 0
        assert ResidenceLedger(db_session).get_residence(student_a.id).error.code == ErrorCode.NOT_FOUND

    @pytest.mark.parametrize("decision", ["pending", "maybe"])
    def test_invalid_decision(self, service, staff, r2, student_a, decision):
        booking = service.submit_booking(student_a.id, "new", ResidenceTarget.on_campus(r2.id)).data

        result = service.decide(booking.id, decision, staff.id)

        assert result.error.code == ErrorCode.VALIDATION_ERROR
        assert service.get_booking(booking.id).data.status == BookingStatus.PENDING

    def test_unknown_approver(self, service, r2, student_a):
        booking = service.submit_booking(student_a.id, "new", ResidenceTarget.on_campus(r2.id)).data

        result = service.decide(booking.id, "approved", "nobody")

        assert result.error.code == ErrorCode.NOT_FOUND
        assert result.error.details["resource_type"] == "Staff"

    def test_unknown_booking(self, service, staff):
        result = service.decide("missing", "approved", staff.id)

        assert result.error.code == ErrorCode.NOT_FOUND
        assert result.error.details["resource_type"] == "Booking request"

    def test_approve_off_campus_transfer_frees_room(self, db_session, service, staff, a_in_r1, r1):
        booking = service.submit_booking(
            a_in_r1.id, "transfer", ResidenceTarget.off_campus("Sunrise Apartments", None, "Kapsabet")
        ).data

        assert service.decide(booking.id, "approved", staff.id).is_success
        assert refreshed_room(db_session, r1.id).current_occupancy == 1
        assert ResidenceLedger(db_session).get_residence(a_in_r1.id).data.off_campus_area == "Kapsabet"


class TestListBookings:
    def test_filters(self, db_session, service, staff, r1, r2, student_a, student_b):
        first = service.submit_booking(student_a.id, "new", ResidenceTarget.on_campus(r1.id)).data
        service.submit_booking(student_b.id, "new", ResidenceTarget.on_campus(r2.id))
        service.decide(first.id, "rejected", staff.id)

        assert len(service.list_bookings().data) == 2
        assert [b.student_id for b in service.list_bookings(status="pending").data] == [student_b.id]
        assert len(service.list_bookings(student_id=student_a.id).data) == 1
        assert service.list_bookings(status="bogus").error.code == ErrorCode.VALIDATION_ERROR
        assert db_session.query(BookingRequest).count() == 2
