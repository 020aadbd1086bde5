"""
Direct allocation service tests.
"""
from residence_engine.core.exceptions import ErrorCode, StudentNotFoundError
from residence_engine.models import Room
from residence_engine.schemas.residence import OffCampusAllocationRequest, OnCampusAllocationRequest
from residence_engine.services import DirectAllocationService
from residence_engine.services.directory import StudentRecord


class FakeStudentDirectory:
    """In-memory directory standing in for an external registry."""

    def __init__(self, **genders):
        self.genders = genders

    def find_student(self, identifier):
        if identifier not in self.genders:
            raise StudentNotFoundError(identifier)
        return StudentRecord(internal_id=identifier, gender=self.genders[identifier])


class TestDirectAllocation:
    def test_on_campus(self, db_session, men_hostel, r1, student_a):
        service = DirectAllocationService(db_session)

        result = service.allocate(
            OnCampusAllocationRequest(student_id=student_a.id, room_id=r1.id, hostel_id=men_hostel.id, bed_label="A")
        )

        assert result.is_success
        assert result.data.bed_label == "A"
        assert result.data.hostel_id == men_hostel.id

    def test_hostel_must_own_room(self, db_session, ladies_hostel, r1, student_a):
        result = DirectAllocationService(db_session).allocate(
            OnCampusAllocationRequest(student_id=student_a.id, room_id=r1.id, hostel_id=ladies_hostel.id)
        )

        assert result.error.code == ErrorCode.VALIDATION_ERROR
        db_session.expire_all()
        assert db_session.get(Room, r1.id).current_occupancy == 0

    def test_unknown_hostel_is_not_found(self, db_session, r1, student_a):
        result = DirectAllocationService(db_session).allocate(
            OnCampusAllocationRequest(student_id=student_a.id, room_id=r1.id, hostel_id="no-such-hostel")
        )

        assert result.error.code == ErrorCode.NOT_FOUND
        assert result.error.error_type == "HostelNotFoundError"
        assert result.error.details["resource_id"] == "no-such-hostel"
        db_session.expire_all()
        assert db_session.get(Room, r1.id).current_occupancy == 0

    def test_blank_fields(self, db_session):
        result = DirectAllocationService(db_session).allocate(OnCampusAllocationRequest(student_id=" ", room_id=""))

        assert result.error.code == ErrorCode.VALIDATION_ERROR
        assert set(result.error.details["field_errors"]) == {"student_id", "room_id"}

    def test_ledger_errors_surface_unchanged(self, db_session, r1, student_d):
        result = DirectAllocationService(db_session).allocate(
            OnCampusAllocationRequest(student_id=student_d.id, room_id=r1.id)
        )

        assert result.error.code == ErrorCode.GENDER_MISMATCH
        assert result.error.error_type == "GenderMismatchError"

    def test_off_campus(self, db_session, student_a):
        result = DirectAllocationService(db_session).allocate_off_campus(
            OffCampusAllocationRequest(
                student_id=student_a.id,
                off_campus_hostel_name="Sunrise Apartments",
                off_campus_room_number="4B",
                off_campus_area="Kapsabet",
            )
        )

        assert result.is_success
        assert result.data.off_campus_room_number == "4B"

    def test_pluggable_student_directory(self, db_session, r1):
        service = DirectAllocationService(db_session, student_directory=FakeStudentDirectory(ext1="male"))

        assert service.allocate(OnCampusAllocationRequest(student_id="ext1", room_id=r1.id)).is_success
        missing = service.allocate(OnCampusAllocationRequest(student_id="ext2", room_id=r1.id))
        assert missing.error.code == ErrorCode.NOT_FOUND
