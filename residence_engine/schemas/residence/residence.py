"""
Residence schemas: direct allocation requests and residence views.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from residence_engine.models.base import ResidenceKind
from residence_engine.schemas.common import BaseCreateSchema, BaseResponseSchema, BaseSchema

__all__ = [
    "OnCampusAllocationRequest",
    "OffCampusAllocationRequest",
    "ResidenceResponse",
    "RoomOccupant",
    "AreaCount",
]


class OnCampusAllocationRequest(BaseCreateSchema):
    student_id: str = Field(..., description="Student id or student number")
    room_id: str
    hostel_id: Optional[str] = Field(default=None, description="When given, must own the room")
    bed_label: Optional[str] = Field(default=None, max_length=20, examples=["Bed A"])


class OffCampusAllocationRequest(BaseCreateSchema):
    student_id: str = Field(..., description="Student id or student number")
    off_campus_hostel_name: str = Field(..., max_length=120)
    off_campus_room_number: Optional[str] = Field(default=None, max_length=50)
    off_campus_area: str = Field(..., max_length=120)


class ResidenceResponse(BaseResponseSchema):
    student_id: str
    kind: ResidenceKind
    hostel_id: Optional[str] = None
    room_id: Optional[str] = None
    bed_label: Optional[str] = None
    off_campus_hostel_name: Optional[str] = None
    off_campus_room_number: Optional[str] = None
    off_campus_area: Optional[str] = None
    allocated_at: datetime


class RoomOccupant(BaseSchema):
    student_id: str
    bed_label: Optional[str] = None
    allocated_at: datetime


class AreaCount(BaseSchema):
    area: Optional[str] = None
    count: int
