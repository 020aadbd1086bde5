"""
Residence target value object.

Describes where a student should live after an allocation or an approved
booking: either a bed in a room or an off-campus address.
"""

from dataclasses import dataclass
from typing import Optional

from residence_engine.models.base import ResidenceKind

__all__ = ["ResidenceTarget"]


@dataclass(frozen=True)
class ResidenceTarget:
    kind: ResidenceKind
    room_id: Optional[str] = None
    hostel_id: Optional[str] = None
    bed_label: Optional[str] = None
    off_campus_hostel_name: Optional[str] = None
    off_campus_room_number: Optional[str] = None
    off_campus_area: Optional[str] = None

    @classmethod
    def on_campus(cls, room_id: str, bed_label: Optional[str] = None, hostel_id: Optional[str] = None) -> "ResidenceTarget":
        return cls(ResidenceKind.ON_CAMPUS, room_id=room_id, hostel_id=hostel_id, bed_label=bed_label)

    @classmethod
    def off_campus(cls, hostel_name: str, room_number: Optional[str], area: str) -> "ResidenceTarget":
        return cls(
            ResidenceKind.OFF_CAMPUS,
            off_campus_hostel_name=hostel_name,
            off_campus_room_number=room_number,
            off_campus_area=area,
        )

    @property
    def is_on_campus(self) -> bool:
        return self.kind == ResidenceKind.ON_CAMPUS
