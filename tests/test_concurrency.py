"""
Concurrency tests against a file-backed SQLite database, one session per
worker thread.
"""
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy.orm import sessionmaker

from residence_engine.core.exceptions import ErrorCode
from residence_engine.db.init_db import init_db
from residence_engine.db.session import build_engine
from residence_engine.models import Residence, Room, Staff
from residence_engine.models.residence import ResidenceTarget
from residence_engine.services import BookingWorkflowService, ResidenceLedger

from conftest import make_hostel, make_room, make_student


@pytest.fixture
def file_session_factory(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'residences.db'}")
    init_db(engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


def run_in_session(factory, action):
    session = factory()
    try:
        return action(session)
    finally:
        session.close()


def test_parallel_allocations_never_exceed_capacity(file_session_factory):
    capacity, candidates = 3, 8

    def setup(session):
        hostel = make_hostel(session)
        room = make_room(session, hostel, "R1", capacity=capacity)
        students = [make_student(session, f"S{i}") for i in range(candidates)]
        return room.id, [student.id for student in students]

    room_id, student_ids = run_in_session(file_session_factory, setup)

    def allocate(student_id):
        return run_in_session(
            file_session_factory,
            lambda session: ResidenceLedger(session).allocate_on_campus(student_id, room_id).error_code,
        )

    with ThreadPoolExecutor(max_workers=candidates) as pool:
        outcomes = list(pool.map(allocate, student_ids))

    assert outcomes.count(None) == capacity
    assert outcomes.count(ErrorCode.ROOM_FULL) == candidates - capacity

    def final_state(session):
        room = session.get(Room, room_id)
        return room.current_occupancy, session.query(Residence).filter_by(room_id=room_id).count()

    assert run_in_session(file_session_factory, final_state) == (capacity, capacity)


def test_parallel_decisions_apply_once(file_session_factory):
    def setup(session):
        hostel = make_hostel(session)
        room = make_room(session, hostel, "R1", capacity=2)
        student = make_student(session, "S1")
        approvers = [Staff(name=f"Warden {i}") for i in range(4)]
        session.add_all(approvers)
        session.commit()
        booking = BookingWorkflowService(session).submit_booking(
            student.id, "new", ResidenceTarget.on_campus(room.id)
        ).data
        return room.id, booking.id, [approver.id for approver in approvers]

    room_id, booking_id, approver_ids = run_in_session(file_session_factory, setup)

    def decide(approver_id):
        return run_in_session(
            file_session_factory,
            lambda session: BookingWorkflowService(session).decide(booking_id, "approved", approver_id).error_code,
        )

    with ThreadPoolExecutor(max_workers=len(approver_ids)) as pool:
        outcomes = list(pool.map(decide, approver_ids))

    assert outcomes.count(None) == 1
    assert outcomes.count(ErrorCode.ALREADY_DECIDED) == len(approver_ids) - 1
    assert run_in_session(file_session_factory, lambda s: s.get(Room, room_id).current_occupancy) == 1


def test_parallel_approval_and_vacate_keep_counts_exact(file_session_factory):
    def setup(session):
        hostel = make_hostel(session)
        r1 = make_room(session, hostel, "R1", capacity=2)
        r2 = make_room(session, hostel, "R2", capacity=1)
        mover, roommate = make_student(session, "S1"), make_student(session, "S2")
        warden = Staff(name="Warden")
        session.add(warden)
        session.commit()
        ledger = ResidenceLedger(session)
        ledger.allocate_on_campus(mover.id, r1.id)
        ledger.allocate_on_campus(roommate.id, r1.id)
        booking = BookingWorkflowService(session).submit_booking(
            mover.id, "transfer", ResidenceTarget.on_campus(r2.id)
        ).data
        return [r1.id, r2.id], mover.id, booking.id, warden.id

    room_ids, mover_id, booking_id, warden_id = run_in_session(file_session_factory, setup)

    def approve():
        return run_in_session(
            file_session_factory,
            lambda session: BookingWorkflowService(session).decide(booking_id, "approved", warden_id).error_code,
        )

    def vacate():
        return run_in_session(
            file_session_factory,
            lambda session: ResidenceLedger(session).vacate(mover_id).error_code,
        )

    with ThreadPoolExecutor(max_workers=2) as pool:
        outcomes = [future.result() for future in [pool.submit(approve), pool.submit(vacate)]]

    assert outcomes == [None, None]

    def counts(session):
        return [
            (
                session.get(Room, room_id).current_occupancy,
                session.query(Residence).filter_by(room_id=room_id).count(),
            )
            for room_id in room_ids
        ]

    for occupancy, residents in run_in_session(file_session_factory, counts):
        assert occupancy == residents
