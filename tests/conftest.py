"""
Pytest configuration and shared fixtures.
"""
import os

# Point the module-level engine at an in-memory database before the app is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from residence_engine.db.init_db import drop_db, init_db
from residence_engine.db.session import build_engine, get_db
from residence_engine.main import app
from residence_engine.models import Hostel, Room, Staff, Student
from residence_engine.models.base import HostelGender, RoomStatus


@pytest.fixture(scope="function")
def db_engine():
    """In-memory database engine with the production SQLite hooks."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    drop_db(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ============== Reference data helpers ==============

def make_hostel(session, name="New Men Dorm", gender=HostelGender.MALE, **kwargs):
    hostel = Hostel(name=name, gender_restriction=gender, total_room_count=kwargs.pop("total_room_count", 10), **kwargs)
    session.add(hostel)
    session.commit()
    return hostel


def make_room(session, hostel, room_number="R1", capacity=2, occupancy=0, status=None):
    """Insert a room directly, with a pre-set occupancy when a test needs one."""
    room = Room(
        hostel_id=hostel.id,
        room_number=room_number,
        floor=1,
        capacity=capacity,
        current_occupancy=occupancy,
        room_type="double" if capacity == 2 else "single",
        status=status or RoomStatus.derive(occupancy, capacity),
        version=0,
    )
    session.add(room)
    session.commit()
    return room


def make_student(session, number, gender="male"):
    student = Student(student_number=number, first_name=number, last_name="Student", gender=gender)
    session.add(student)
    session.commit()
    return student


@pytest.fixture
def men_hostel(db_session):
    return make_hostel(db_session, "New Men Dorm", HostelGender.MALE, location="East Campus")


@pytest.fixture
def ladies_hostel(db_session):
    return make_hostel(db_session, "Box Ladies Hostel", HostelGender.FEMALE, location="West Campus")


@pytest.fixture
def r1(db_session, men_hostel):
    return make_room(db_session, men_hostel, "R1", capacity=2)


@pytest.fixture
def r2(db_session, men_hostel):
    return make_room(db_session, men_hostel, "R2", capacity=1)


@pytest.fixture
def staff(db_session):
    member = Staff(name="Hall Warden", role="warden")
    db_session.add(member)
    db_session.commit()
    return member


@pytest.fixture
def student_a(db_session):
    return make_student(db_session, "S-A", "male")


@pytest.fixture
def student_b(db_session):
    return make_student(db_session, "S-B", "Male")


@pytest.fixture
def student_c(db_session):
    return make_student(db_session, "S-C", "male")


@pytest.fixture
def student_d(db_session):
    return make_student(db_session, "S-D", "female")
