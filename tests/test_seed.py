"""
Reference data seeding tests.
"""
from sqlalchemy import func, select

from residence_engine.db.seed import HOSTELS, room_numbers, seed_hostels
from residence_engine.models import Hostel, Room, Staff
from residence_engine.models.base import RoomStatus


def test_room_numbers_layout():
    numbers = room_numbers(12)

    assert len(numbers) == 12
    assert numbers[:3] == [(1, "1A01"), (1, "1A02"), (1, "1B03")]
    assert numbers[9] == (1, "1E10")
    assert numbers[10:] == [(2, "2A01"), (2, "2A02")]


def test_seed_creates_hostels_rooms_and_wardens(db_session):
    created = seed_hostels(db_session)
    db_session.commit()

    assert [h.name for h in created] == [spec["name"] for spec in HOSTELS]
    total_rooms = sum(spec["total_rooms"] for spec in HOSTELS)
    assert db_session.scalar(select(func.count()).select_from(Room)) == total_rooms
    assert db_session.scalar(select(func.count()).select_from(Staff)) == len(HOSTELS)

    rooms = db_session.scalars(select(Room)).all()
    assert {room.capacity for room in rooms} == {2}
    assert {room.status for room in rooms} == {RoomStatus.AVAILABLE}
    assert all(hostel.warden_ref for hostel in created)


def test_seed_is_idempotent(db_session):
    seed_hostels(db_session)
    db_session.commit()

    assert seed_hostels(db_session) == []
    assert db_session.scalar(select(func.count()).select_from(Hostel)) == len(HOSTELS)
