"""
Seed the reference dormitories.

Creates one warden per hostel, the five campus hostels and their
double-occupancy rooms, ten rooms per floor. Hostels that already exist
are left alone, so the script can be run repeatedly.

Usage:
    python -m residence_engine.db.seed
"""

import math
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from residence_engine.core.logging import get_logger, log_execution_time
from residence_engine.db.init_db import init_db
from residence_engine.models import Hostel, Room, Staff
from residence_engine.models.base import HostelGender, RoomStatus
from residence_engine.repositories.hostel import HostelRepository

logger = get_logger(__name__)

ROOMS_PER_FLOOR = 10
ROOM_CAPACITY = 2
ROOM_AMENITIES = "Bathroom, Study Desk, Wardrobe, Bed"

HOSTELS: List[Dict] = [
    {"name": "New Men Dorm", "gender": HostelGender.MALE, "total_rooms": 50, "location": "East Campus"},
    {"name": "Old Men Dorm", "gender": HostelGender.MALE, "total_rooms": 40, "location": "Main Campus"},
    {"name": "Box Ladies Hostel", "gender": HostelGender.FEMALE, "total_rooms": 45, "location": "West Campus"},
    {"name": "Annex Ladies Hostel", "gender": HostelGender.FEMALE, "total_rooms": 35, "location": "North Campus"},
    {"name": "Grace Ladies Hostel", "gender": HostelGender.FEMALE, "total_rooms": 30, "location": "South Campus"},
]


def room_numbers(total_rooms: int) -> List[tuple]:
    """(floor, room number) pairs: floor digit, pair letter, two-digit index, e.g. '1A01', '1A02', '1B03'."""
    numbers = []
    for floor in range(1, math.ceil(total_rooms / ROOMS_PER_FLOOR) + 1):
        on_floor = min(ROOMS_PER_FLOOR, total_rooms - (floor - 1) * ROOMS_PER_FLOOR)
        for index in range(1, on_floor + 1):
            letter = chr(64 + math.ceil(index / 2))
            numbers.append((floor, f"{floor}{letter}{index:02d}"))
    return numbers


@log_execution_time()
def seed_hostels(session: Session, hostels: Optional[List[Dict]] = None) -> List[Hostel]:
    """Insert missing hostels with their wardens and rooms; returns the hostels created."""
    repository = HostelRepository(session)
    created = []

    for position, spec in enumerate(hostels or HOSTELS, start=1):
        if repository.find_by_name(spec["name"]) is not None:
            logger.info(f"Hostel {spec['name']} already present, skipping")
            continue

        warden = Staff(name=f"Warden{position}", role="warden")
        session.add(warden)
        session.flush()

        hostel = Hostel(
            name=spec["name"],
            gender_restriction=spec["gender"],
            total_room_count=spec["total_rooms"],
            location=spec["location"],
            warden_ref=warden.id,
        )
        session.add(hostel)
        session.flush()

        for floor, number in room_numbers(spec["total_rooms"]):
            session.add(
                Room(
                    hostel_id=hostel.id,
                    room_number=number,
                    floor=floor,
                    capacity=ROOM_CAPACITY,
                    current_occupancy=0,
                    room_type="double",
                    amenities=ROOM_AMENITIES,
                    status=RoomStatus.AVAILABLE,
                    version=0,
                )
            )
        session.flush()
        created.append(hostel)
        logger.info(
            f"Seeded hostel {hostel.name}",
            extra={"hostel_id": hostel.id, "rooms": spec["total_rooms"]},
        )

    return created


def main() -> None:
    from residence_engine.db.session import SessionLocal

    init_db()
    session = SessionLocal()
    try:
        created = seed_hostels(session)
        session.commit()
        logger.info(f"Seeding finished, {len(created)} hostel(s) created")
    except Exception:
        session.rollback()
        logger.exception("Seeding failed")
        raise
    finally:
        session.close()


if __name__ == "__main__":
    main()
