"""
Booking request schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from residence_engine.models.base import BookingRequestType, BookingStatus
from residence_engine.schemas.common import BaseCreateSchema, BaseResponseSchema, BaseSchema

__all__ = ["BookingCreate", "BookingDecision", "BookingResponse"]


class BookingCreate(BaseCreateSchema):
    """
    Booking submission.

    Fill in either the on-campus group (requested_room_id, optionally
    requested_hostel_id and requested_bed) or the off-campus group, not
    both. request_type is a plain string so an unknown value is reported
    as a validation error naming the field.
    """

    student_id: str = Field(..., description="Student id or student number")
    request_type: str = Field(default=BookingRequestType.NEW.value, examples=["new", "transfer"])

    requested_hostel_id: Optional[str] = None
    requested_room_id: Optional[str] = None
    requested_bed: Optional[str] = Field(default=None, max_length=20)

    requested_off_campus_hostel_name: Optional[str] = Field(default=None, max_length=120)
    requested_off_campus_room_number: Optional[str] = Field(default=None, max_length=50)
    requested_off_campus_area: Optional[str] = Field(default=None, max_length=120)

    note: Optional[str] = None


class BookingDecision(BaseSchema):
    decision: str = Field(..., examples=["approved", "rejected"])
    approver_id: str = Field(..., description="Staff id of the deciding staff member")
    note: Optional[str] = None


class BookingResponse(BaseResponseSchema):
    student_id: str
    request_type: BookingRequestType
    current_room_id: Optional[str] = None
    requested_hostel_id: Optional[str] = None
    requested_room_id: Optional[str] = None
    requested_bed: Optional[str] = None
    requested_off_campus_hostel_name: Optional[str] = None
    requested_off_campus_room_number: Optional[str] = None
    requested_off_campus_area: Optional[str] = None
    note: Optional[str] = None
    status: BookingStatus
    requested_at: datetime
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    decision_note: Optional[str] = None
