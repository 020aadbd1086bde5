from residence_engine.repositories.base import BaseRepository
from residence_engine.repositories.booking import BookingRequestRepository
from residence_engine.repositories.directory import StaffRepository, StudentRepository
from residence_engine.repositories.hostel import HostelRepository
from residence_engine.repositories.residence import ResidenceRepository
from residence_engine.repositories.room import RoomRepository

__all__ = [
    "BaseRepository",
    "BookingRequestRepository",
    "HostelRepository",
    "ResidenceRepository",
    "RoomRepository",
    "StaffRepository",
    "StudentRepository",
]
