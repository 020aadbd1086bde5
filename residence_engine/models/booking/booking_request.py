"""
Booking request model.

A student-submitted request for a new residence or a transfer. The status
moves from pending to approved or rejected exactly once.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from residence_engine.models.base import (
    BaseModel,
    BookingRequestType,
    BookingStatus,
    TimestampMixin,
    enum_type,
    utcnow,
)
from residence_engine.models.residence.target import ResidenceTarget

__all__ = ["BookingRequest"]


class BookingRequest(BaseModel, TimestampMixin):
    """Request to obtain or change a residence, subject to staff approval."""

    __tablename__ = "booking_requests"

    student_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        index=True,
    )
    request_type: Mapped[BookingRequestType] = mapped_column(
        enum_type(BookingRequestType, length=20),
        nullable=False,
        default=BookingRequestType.NEW,
    )
    # Room occupied when the request was submitted (audit only)
    current_room_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        nullable=True,
    )

    # On-campus target
    requested_hostel_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    requested_room_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    requested_bed: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Off-campus target
    requested_off_campus_hostel_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    requested_off_campus_room_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    requested_off_campus_area: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)

    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[BookingStatus] = mapped_column(
        enum_type(BookingStatus, length=20),
        nullable=False,
        default=BookingStatus.PENDING,
        index=True,
    )
    requested_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    # Decision
    approved_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    decision_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "(requested_room_id IS NOT NULL AND requested_off_campus_hostel_name IS NULL "
            "AND requested_off_campus_area IS NULL) "
            "OR (requested_room_id IS NULL AND requested_hostel_id IS NULL "
            "AND requested_bed IS NULL AND requested_off_campus_hostel_name IS NOT NULL)",
            name="ck_booking_single_target",
        ),
        Index("ix_booking_student_status", "student_id", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<BookingRequest(id={self.id}, student_id={self.student_id}, "
            f"type={self.request_type}, status={self.status})>"
        )

    @property
    def is_on_campus(self) -> bool:
        return self.requested_room_id is not None

    @property
    def target(self) -> ResidenceTarget:
        if self.is_on_campus:
            return ResidenceTarget.on_campus(
                self.requested_room_id,
                bed_label=self.requested_bed,
                hostel_id=self.requested_hostel_id,
            )
        return ResidenceTarget.off_campus(
            self.requested_off_campus_hostel_name,
            self.requested_off_campus_room_number,
            self.requested_off_campus_area,
        )
