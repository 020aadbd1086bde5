"""
ORM models. Importing this package registers every table on Base.metadata.
"""

from residence_engine.models.base import Base
from residence_engine.models.booking import BookingRequest
from residence_engine.models.directory import Staff, Student
from residence_engine.models.hostel import Hostel
from residence_engine.models.residence import Residence, ResidenceTarget
from residence_engine.models.room import Room

__all__ = [
    "Base",
    "BookingRequest",
    "Hostel",
    "Residence",
    "ResidenceTarget",
    "Room",
    "Staff",
    "Student",
]
