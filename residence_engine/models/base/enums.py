"""
Database enums for the residence engine.

Status values are closed string enums; the transition rules live here so
callers never compare raw status strings.
"""

import enum


class HostelGender(str, enum.Enum):
    """Gender restriction of a hostel."""
    MALE = "male"
    FEMALE = "female"

    def admits(self, gender) -> bool:
        """Case-insensitive eligibility check against a student's declared gender."""
        if gender is None:
            return False
        value = gender.value if isinstance(gender, enum.Enum) else str(gender)
        return value.strip().lower() == self.value


class RoomStatus(str, enum.Enum):
    """Room availability status."""
    AVAILABLE = "available"
    FULL = "full"
    MAINTENANCE = "maintenance"

    @classmethod
    def derive(cls, occupancy: int, capacity: int, current: "RoomStatus" = None) -> "RoomStatus":
        """Status implied by occupancy; the maintenance override is sticky."""
        if current == cls.MAINTENANCE:
            return cls.MAINTENANCE
        return cls.FULL if occupancy >= capacity else cls.AVAILABLE


class ResidenceKind(str, enum.Enum):
    """Where a student lives."""
    ON_CAMPUS = "on-campus"
    OFF_CAMPUS = "off-campus"


class BookingRequestType(str, enum.Enum):
    """Kind of booking request."""
    NEW = "new"
    TRANSFER = "transfer"


class BookingStatus(str, enum.Enum):
    """Booking request lifecycle status."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not BookingStatus.PENDING

    def can_transition_to(self, target: "BookingStatus") -> bool:
        return self is BookingStatus.PENDING and target.is_terminal


__all__ = [
    "HostelGender",
    "RoomStatus",
    "ResidenceKind",
    "BookingRequestType",
    "BookingStatus",
]
