# residence_engine/models/room/room.py
"""
Room model with cached occupancy tracking.

current_occupancy is a denormalized counter of the on-campus residences
pointing at the room. It is only ever written through
RoomRepository.adjust_occupancy.
"""

from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from residence_engine.models.base import BaseModel, RoomStatus, TimestampMixin, enum_type

__all__ = ["Room"]


class Room(BaseModel, TimestampMixin):
    """
    Physical room within a hostel with a fixed bed capacity.
    """

    __tablename__ = "rooms"

    hostel_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("hostels.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    room_number: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        index=True,
    )
    floor: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        index=True,
    )
    capacity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=2,
    )
    current_occupancy: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
    room_type: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )
    amenities: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    status: Mapped[RoomStatus] = mapped_column(
        enum_type(RoomStatus, length=20),
        nullable=False,
        default=RoomStatus.AVAILABLE,
        index=True,
    )
    # Bumped on every occupancy or status write
    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
    )

    hostel = relationship(
        "Hostel",
        back_populates="rooms",
        lazy="joined",
        innerjoin=True,
    )

    __table_args__ = (
        UniqueConstraint(
            "hostel_id",
            "room_number",
            name="uq_hostel_room_number",
        ),
        CheckConstraint("capacity >= 1", name="ck_room_capacity_positive"),
        CheckConstraint(
            "current_occupancy >= 0 AND current_occupancy <= capacity",
            name="ck_room_occupancy_bounds",
        ),
        Index("ix_room_hostel_status", "hostel_id", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<Room(id={self.id}, room_number={self.room_number}, "
            f"occupancy={self.current_occupancy}/{self.capacity}, status={self.status})>"
        )

    @property
    def is_full(self) -> bool:
        return self.current_occupancy >= self.capacity

    @property
    def vacancy_count(self) -> int:
        return max(0, self.capacity - self.current_occupancy)

    @property
    def is_under_maintenance(self) -> bool:
        return self.status == RoomStatus.MAINTENANCE

    @property
    def accepts_residents(self) -> bool:
        """True when the room can take one more resident."""
        return not self.is_under_maintenance and not self.is_full
