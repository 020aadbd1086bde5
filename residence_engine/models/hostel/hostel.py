"""
Hostel model.

A hostel is a gender-restricted dormitory building that owns rooms.
"""

from typing import List, Optional

from sqlalchemy import CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from residence_engine.models.base import BaseModel, HostelGender, TimestampMixin, enum_type

__all__ = ["Hostel"]


class Hostel(BaseModel, TimestampMixin):
    """Dormitory building with a gender restriction."""

    __tablename__ = "hostels"

    name: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        unique=True,
        index=True,
    )
    gender_restriction: Mapped[HostelGender] = mapped_column(
        enum_type(HostelGender, length=10),
        nullable=False,
        index=True,
    )
    total_room_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
    location: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    # Weak reference to a staff record owned by the staff directory
    warden_ref: Mapped[Optional[str]] = mapped_column(
        String(36),
        nullable=True,
    )

    rooms: Mapped[List["Room"]] = relationship(
        "Room",
        back_populates="hostel",
        order_by="Room.room_number",
    )

    __table_args__ = (
        CheckConstraint("total_room_count >= 0", name="ck_hostel_total_room_count"),
    )

    def __repr__(self) -> str:
        return (
            f"<Hostel(id={self.id}, name={self.name}, "
            f"gender={self.gender_restriction})>"
        )
