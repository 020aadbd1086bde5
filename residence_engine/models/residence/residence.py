"""
Residence model: the one current housing assignment of a student.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from residence_engine.models.base import BaseModel, ResidenceKind, TimestampMixin, enum_type, utcnow

__all__ = ["Residence"]


class Residence(BaseModel, TimestampMixin):
    """
    Current residence of a student, on campus (hostel/room/bed) or off campus.

    The record is rewritten in place on transfer; all fields of the old kind
    are cleared whenever the kind changes.
    """

    __tablename__ = "residences"

    # Weak reference to the student directory
    student_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        unique=True,
        index=True,
    )
    kind: Mapped[ResidenceKind] = mapped_column(
        enum_type(ResidenceKind, length=20),
        nullable=False,
        index=True,
    )

    # On-campus placement
    hostel_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("hostels.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    room_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("rooms.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    bed_label: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
    )

    # Off-campus placement
    off_campus_hostel_name: Mapped[Optional[str]] = mapped_column(
        String(120),
        nullable=True,
    )
    off_campus_room_number: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )
    off_campus_area: Mapped[Optional[str]] = mapped_column(
        String(120),
        nullable=True,
        index=True,
    )

    allocated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    room = relationship("Room", lazy="select")
    hostel = relationship("Hostel", lazy="select")

    __table_args__ = (
        UniqueConstraint("room_id", "bed_label", name="uq_residence_room_bed"),
        CheckConstraint(
            "(kind = 'on-campus' AND hostel_id IS NOT NULL AND room_id IS NOT NULL "
            "AND bed_label IS NOT NULL AND off_campus_hostel_name IS NULL "
            "AND off_campus_room_number IS NULL AND off_campus_area IS NULL) "
            "OR (kind = 'off-campus' AND hostel_id IS NULL AND room_id IS NULL "
            "AND bed_label IS NULL)",
            name="ck_residence_kind_fields",
        ),
        Index("ix_residence_kind_area", "kind", "off_campus_area"),
    )

    def __repr__(self) -> str:
        return f"<Residence(student_id={self.student_id}, kind={self.kind}, room_id={self.room_id})>"

    @property
    def is_on_campus(self) -> bool:
        return self.kind == ResidenceKind.ON_CAMPUS
